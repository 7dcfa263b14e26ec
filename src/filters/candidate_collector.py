# src/filters/candidate_collector.py

"""Bounded accumulation of matching products during a parse."""

import logging
from enum import Enum

from src.models.product import Product

logger = logging.getLogger("feed_search.collector")


class CollectDecision(Enum):
    """What the parse loop should do after an offer."""

    CONTINUE = "continue"
    STOP = "stop"


class CandidateCollector:
    """Collect up to ``limit * multiplier`` candidates, then say stop.

    Over-collecting gives the ranker enough material for a good top-K
    when filters discard most rows, while bounding memory and the
    number of rows parsed.
    """

    def __init__(self, limit: int, multiplier: int) -> None:
        self.target = max(1, limit) * max(1, multiplier)
        self.candidates: list[Product] = []

    @property
    def full(self) -> bool:
        return len(self.candidates) >= self.target

    def offer(self, product: Product) -> CollectDecision:
        """Add a matching product and report whether to keep parsing."""
        self.candidates.append(product)
        if self.full:
            logger.info(
                "Collected %d candidates, requesting early stop",
                len(self.candidates),
            )
            return CollectDecision.STOP
        return CollectDecision.CONTINUE
