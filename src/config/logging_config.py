# src/config/logging_config.py

"""Per-run logging for feed_search.

Stdout belongs to the JSON envelopes the CLI prints (``items``,
``debug`` or ``error``), so nothing from :mod:`logging` may reach it.
Every run writes a DEBUG log file ``logs/run_YYYYMMDD_HHMMSS.log``
and echoes only warnings and errors to stderr unless ``--verbose``
lowers the console level.

The first lines of each log record the settings that decide how much
of the feed a search reads (cache mode, row cap, candidate
multiplier), so a surprising ``earlyStopped`` or ``rowCapReached`` in
a debug envelope can be traced back to the configuration in force.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from urllib.parse import urlsplit

from src.config.settings import Settings

ROOT_LOGGER_NAME = "feed_search"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_STDERR_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _feed_host(url: str) -> str:
    """Host part of the feed URL; affiliate tokens in the query stay out of logs."""
    if not url:
        return "(unset)"
    return urlsplit(url).netloc or "(invalid)"


def _log_run_settings(logger: logging.Logger) -> None:
    if Settings.FEED_CACHE_TTL > 0:
        cache_mode = f"cached, ttl={Settings.FEED_CACHE_TTL:g}s"
    else:
        cache_mode = "streaming, no cache"
    logger.info(
        "Feed host=%s mode=%s row_cap=%s candidate_multiplier=%d "
        "timeout=%gs",
        _feed_host(Settings.FEED_URL),
        cache_mode,
        Settings.FEED_ROW_CAP or "unlimited",
        Settings.CANDIDATE_MULTIPLIER,
        Settings.FEED_TIMEOUT,
    )


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Attach the run's file and stderr handlers to ``feed_search``.

    A repeated call keeps the existing handlers and only applies the
    new ``console_level`` to the stderr handler.

    Returns:
        Path of this run's log file.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    existing = [
        h for h in root_logger.handlers if isinstance(h, logging.FileHandler)
    ]
    if existing:
        for handler in root_logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        return Path(existing[0].baseFilename)

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    # Never stdout: it carries the JSON envelope
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(console_level)
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(stderr_handler)

    root_logger.info("Log file: %s", log_file)
    _log_run_settings(root_logger)
    return log_file
