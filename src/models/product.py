# src/models/product.py

"""Canonical product record produced from a feed row."""

from dataclasses import dataclass


@dataclass
class Product:
    """A normalised feed item, as returned to callers."""

    id: str
    title: str
    price: float
    url: str
    currency: str = "BRL"
    image: str | None = None
    category: str | None = None
    rating: float = 0.0
    sold: float = 0.0
    available: bool = True
    store: str = "Shopee"
    coupon: str | None = None
