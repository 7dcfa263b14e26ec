# src/feed/row_normalizer.py

"""Map raw feed rows onto the canonical Product.

The same feed ships under several header spellings depending on the
affiliate provider, so every canonical field has an ordered list of
candidate columns in :data:`FIELD_SYNONYMS`; the first non-blank cell
wins. Numbers are parsed best-effort: feed data is untrusted, and a
value that cannot be read becomes 0 rather than an error.
"""

import hashlib
import logging
import math
import re
from collections.abc import Mapping

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("feed_search.normalizer")

FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "url": (
        "product_short link",
        "product_short_link",
        "product_link",
        "product_url",
        "url",
        "link",
    ),
    "title": ("title",),
    "price": ("sale_price", "price", "SalePrice", "Price"),
    "rating": ("item_rating", "shop_rating"),
    # "like" is only a weak popularity proxy for feeds without sales
    "sold": ("historical_sold", "sold", "Sold", "like"),
    "image": ("image_link", "image_link_3", "image", "ImageUrl"),
    "category": (
        "global_category3",
        "global_category2",
        "global_category1",
        "Category",
        "category",
    ),
    "id": ("itemid",),
}

ID_PREFIX = "shp_"
ID_HASH_LENGTH = 10

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")


def resolve_field(row: Mapping[str, str | None], field: str) -> str:
    """Return the first non-blank value among the field's synonyms."""
    for column in FIELD_SYNONYMS[field]:
        value = row.get(column)
        if value is not None and value.strip():
            return value.strip()
    return ""


def parse_number(text: str | None) -> float:
    """Parse a possibly locale-formatted number, e.g. ``"1.234,56"``.

    With both ``.`` and ``,`` present the dot groups thousands and the
    comma is the decimal mark. A lone comma is a decimal mark, several
    dots with no comma group thousands, and a single dot is a decimal
    point. Returns 0.0 for anything unreadable, negative or non-finite.
    """
    if not text:
        return 0.0
    cleaned = _WHITESPACE_RE.sub("", text)
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    match = _NUMBER_RE.search(cleaned)
    if not match:
        return 0.0
    value = float(match.group())
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def derive_id(url: str) -> str:
    """Stable short id for rows that carry no item id."""
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()
    return f"{ID_PREFIX}{digest[:ID_HASH_LENGTH]}"


def normalize_row(row: Mapping[str, str | None]) -> Product | None:
    """Build a Product from a raw row, or ``None`` if it lacks url/title."""
    url = resolve_field(row, "url")
    title = resolve_field(row, "title")
    if not url or not title:
        logger.debug(
            "Dropped row without %s", "url" if not url else "title"
        )
        return None

    return Product(
        id=resolve_field(row, "id") or derive_id(url),
        title=title,
        price=parse_number(resolve_field(row, "price")),
        url=url,
        currency=Settings.FEED_CURRENCY,
        image=resolve_field(row, "image") or None,
        category=resolve_field(row, "category") or None,
        rating=parse_number(resolve_field(row, "rating")),
        sold=parse_number(resolve_field(row, "sold")),
        available=True,
        store=Settings.FEED_STORE,
    )
