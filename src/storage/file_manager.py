# src/storage/file_manager.py

"""Handles saving feed search results to disk."""

import csv
import json
import logging
import re
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("feed_search.storage")

_CSV_COLUMNS = [
    "id",
    "title",
    "price",
    "currency",
    "rating",
    "sold",
    "category",
    "url",
    "image",
]


_SLUG_UNSAFE_RE = re.compile(r"[^\w-]+")


def _slug(query: str) -> str:
    """Filename-safe form of the query; path separators never survive."""
    return _SLUG_UNSAFE_RE.sub("_", query.strip()).strip("_") or "all"


class FileManager:
    """Handles saving feed search results to disk."""

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    def save_results(self, query: str, products: list[Product]) -> Path:
        """Save products to a timestamped JSON file, in ranked order."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.results_dir / f"feed_{_slug(query)}_{timestamp}.json"

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(
                [asdict(p) for p in products],
                f,
                ensure_ascii=False,
                indent=2,
            )

        logger.info(
            "Saved %d products for query '%s' to %s",
            len(products),
            query,
            filepath,
        )
        return filepath

    def export_csv(self, query: str, products: list[Product]) -> Path:
        """Export products to a CSV file, in ranked order."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.results_dir / f"export_{_slug(query)}_{timestamp}.csv"

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(_CSV_COLUMNS)
            for p in products:
                row = asdict(p)
                writer.writerow(
                    ["" if row[c] is None else row[c] for c in _CSV_COLUMNS]
                )

        logger.info(
            "Exported %d products for query '%s' to %s",
            len(products),
            query,
            filepath,
        )
        return filepath
