# src/models/filter_spec.py

"""Per-request filter values applied while the feed is parsed."""

from dataclasses import dataclass


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class FilterSpec:
    """Immutable filter set; falsy fields impose no constraint."""

    query: str = ""
    category: str | None = None
    max_price: float | None = None
    min_rating: float = 0.0

    @classmethod
    def build(
        cls,
        query: str | None = None,
        category: str | None = None,
        max_price: float | None = None,
        min_rating: float | None = None,
    ) -> "FilterSpec":
        """Normalise raw caller values into a FilterSpec.

        The query is trimmed and lowercased for substring matching,
        blank strings become ``None`` and a missing rating floor is 0.
        """
        return cls(
            query=(query or "").strip().lower(),
            category=_blank_to_none(category),
            max_price=max_price,
            min_rating=min_rating or 0.0,
        )
