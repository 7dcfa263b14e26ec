# src/filters/product_filter.py

"""Per-row filter predicate applied while the feed is parsed."""

from src.models.filter_spec import FilterSpec
from src.models.product import Product


class ProductFilter:
    """Match normalised products against a caller's FilterSpec."""

    @staticmethod
    def matches(product: Product, spec: FilterSpec) -> bool:
        """Return True if the product satisfies every supplied filter.

        Filters combine with AND. Empty or zero filter values are
        wildcards, so ``max_price=0`` means "no price ceiling".
        """
        if spec.query and spec.query not in product.title.lower():
            return False
        if spec.category and (
            (product.category or "").lower() != spec.category.lower()
        ):
            return False
        if spec.max_price and product.price > spec.max_price:
            return False
        if spec.min_rating and product.rating < spec.min_rating:
            return False
        return True
