# src/config/settings.py

"""Central configuration for the feed_search engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int, min_value: int = 0) -> int:
    """Read an integer from the environment, falling back on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(min_value, value)


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Central configuration for the feed_search engine."""

    # --- Feed source ---
    FEED_URL: str = os.getenv("SHOPEE_FEED_URL", "").strip()
    FEED_TIMEOUT: float = _env_float("FEED_TIMEOUT", 30.0)   # Whole-transfer timeout (secs)
    FEED_TEXT_SUFFIX: str = os.getenv("FEED_TEXT_SUFFIX", ".csv")
    FEED_DELIMITER: str = ","
    FEED_CURRENCY: str = "BRL"
    FEED_STORE: str = "Shopee"

    # --- Cache ---
    FEED_CACHE_TTL: float = _env_float("FEED_CACHE_TTL", 120.0)  # <= 0 disables

    # --- Early-stop ---
    FEED_ROW_CAP: int = _env_int("FEED_ROW_CAP", 25000)      # 0 = no cap
    CANDIDATE_MULTIPLIER: int = _env_int(
        "CANDIDATE_MULTIPLIER", 5, min_value=1
    )

    # --- Request limits ---
    DEFAULT_LIMIT: int = 20
    MIN_LIMIT: int = 1
    MAX_LIMIT: int = 50

    # --- Health check ---
    HEALTH_SLOW_MS: float = 5000.0

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/131.0.0.0 Safari/537.36"
        ),
        "Accept": (
            "text/csv,application/zip,"
            "application/octet-stream,*/*"
        ),
        "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"
