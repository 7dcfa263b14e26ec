# src/filters/ranker.py

"""Ranking, truncation and identity deduplication of candidates."""

import logging

from src.models.product import Product

logger = logging.getLogger("feed_search.filters")


class ProductRanker:
    """Turn collected candidates into the final ordered result."""

    @staticmethod
    def sort_key(product: Product) -> tuple[float, float, float]:
        """Cheapest first, then best rated, then best selling."""
        return (product.price, -product.rating, -product.sold)

    @staticmethod
    def identity_key(product: Product) -> str:
        return f"{product.id or ''}|{product.url or ''}"

    @staticmethod
    def deduplicate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop later products sharing an ``id|url`` identity.

        Returns the deduplicated list and the count of removed dupes.
        """
        seen: set[str] = set()
        kept: list[Product] = []
        for product in products:
            key = ProductRanker.identity_key(product)
            if key in seen:
                continue
            seen.add(key)
            kept.append(product)

        removed = len(products) - len(kept)
        if removed:
            logger.info(
                "Deduplication removed %d duplicate products", removed
            )
        return kept, removed

    @staticmethod
    def finalize(
        candidates: list[Product],
        limit: int,
    ) -> list[Product]:
        """Sort, truncate to ``limit``, then deduplicate.

        Deduplication runs after truncation, so a result can hold
        fewer than ``limit`` items even if more unique candidates
        existed past the cut.
        """
        ranked = sorted(candidates, key=ProductRanker.sort_key)
        top = ranked[: max(0, limit)]
        kept, _removed = ProductRanker.deduplicate(top)
        return kept
