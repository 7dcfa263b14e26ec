# tests/test_product_model.py

"""Tests for the Product dataclass."""

import unittest
from dataclasses import asdict

from src.models.product import Product


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_defaults(self) -> None:
        """Optional fields default to the feed's constants."""
        product = Product(id="1", title="X", price=1.0, url="http://x")
        self.assertEqual(product.currency, "BRL")
        self.assertIsNone(product.image)
        self.assertIsNone(product.category)
        self.assertEqual(product.rating, 0.0)
        self.assertEqual(product.sold, 0.0)
        self.assertTrue(product.available)
        self.assertEqual(product.store, "Shopee")
        self.assertIsNone(product.coupon)

    def test_equality(self) -> None:
        """Two products with identical fields are equal."""
        a = Product(id="1", title="A", price=10.0, url="http://a")
        b = Product(id="1", title="A", price=10.0, url="http://a")
        self.assertEqual(a, b)

    def test_inequality_different_url(self) -> None:
        """Products with different urls are not equal."""
        a = Product(id="1", title="A", price=10.0, url="http://a")
        b = Product(id="1", title="A", price=10.0, url="http://b")
        self.assertNotEqual(a, b)

    def test_serialises_to_response_keys(self) -> None:
        """asdict exposes every response field."""
        data = asdict(Product(id="1", title="A", price=1.0, url="http://a"))
        self.assertEqual(
            set(data),
            {
                "id", "title", "price", "currency", "url", "image",
                "category", "rating", "sold", "available", "store",
                "coupon",
            },
        )


if __name__ == "__main__":
    unittest.main()
