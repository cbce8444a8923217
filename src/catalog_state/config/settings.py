# src/catalog_state/config/settings.py

"""Central configuration for the catalog state engine."""

import logging
import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("catalog_state.config")


def _env_positive_int(name: str, default: int) -> int:
    """Read a positive int from the environment, else keep *default*."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            "Ignoring %s=%r (expected a positive integer), using %d",
            name,
            raw,
            default,
        )
        return default
    return value


class Settings:
    """Central configuration for the catalog state engine."""

    # --- Paging & presentation ---
    DEFAULT_PAGE_SIZE: int = _env_positive_int("CATALOG_PAGE_SIZE", 12)
    VIRTUALIZATION_THRESHOLD: int = 24  # Above this, render virtualized
    SEARCH_DEBOUNCE_SECONDS: float = 0.3  # Quiet period before search applies
    CAROUSEL_ITEMS_PER_SLIDE: int = 5
    PLACEHOLDER_CARD_COUNT: int = 8     # Skeleton cards while loading

    # Viewport width breakpoints → items per row (virtualized grid)
    ROW_BREAKPOINTS: list[tuple[int, int]] = [
        (576, 1),
        (768, 2),
        (992, 3),
    ]
    MAX_ITEMS_PER_ROW: int = 4

    # --- Catalog vocabulary ---
    CATEGORIES: tuple[str, ...] = (
        "electronics",
        "clothing",
        "home",
        "food",
        "beauty",
    )
    # Price range scale; a bound on either end of it means "unbounded"
    PRICE_SLIDER_MAX: int = 1000
    # (label, low, high) quick picks; the full scale clears the price filter
    PRICE_PRESETS: list[tuple[str, int, int]] = [
        ("0-100", 0, 100),
        ("100-500", 100, 500),
        ("500-1000", 500, 1000),
        ("any", 0, 1000),
    ]

    # --- Mock source ---
    MOCK_ITEM_COUNT: int = 50
    MOCK_CATALOG_DELAY: float = 0.8         # Simulated network latency (secs)
    MOCK_RECOMMENDATION_DELAY: float = 0.5
    RECOMMENDATION_COUNT: int = 10

    # --- HTTP source ---
    CATALOG_URL: str | None = os.getenv("CATALOG_URL") or None
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    CONSOLE_LOG_LEVEL: str = os.getenv("CATALOG_CONSOLE_LOG_LEVEL", "WARNING").upper()
