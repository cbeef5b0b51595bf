# src/config/settings.py

"""Central configuration for the trendbuy engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the trendbuy engine."""

    # --- Result cache ---
    CACHE_STORAGE_KEY: str = "trendbuy_product_cache"
    CACHE_TTL_SECONDS: float = 24 * 60 * 60    # Entries expire after 24h
    CACHE_MAX_ENTRIES: int = 50                 # Oldest evicted first
    CACHEABLE_CONFIDENCE: float = 0.3           # Admission floor (exclusive)
    RECENT_SEARCHES_LIMIT: int = 5

    # --- Scoring ---
    CONFIRMATION_THRESHOLD: float = 0.7         # Below this, ask the user
    LOW_CONFIDENCE_ADVISORY: float = 0.5        # Link advisory threshold
    FALLBACK_SIMILARITY_THRESHOLD: float = 0.5
    FALLBACK_CONFIDENCE: float = 0.8
    PRIMARY_CONFIDENCE_BONUS: float = 0.1
    MAX_KEYWORDS: int = 5                       # Per interpreted link

    # --- Simulated collaborators ---
    METADATA_DELAY: float = 0.5                 # Seconds
    PRODUCT_SEARCH_DELAY: float = 1.5           # Seconds
    METADATA_TIMEOUT: float = 5.0               # Seconds before fallback
    PRODUCT_SEARCH_TIMEOUT: float = 10.0        # Seconds before giving up

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("TRENDBUY_DATA_DIR", str(BASE_DIR / "data"))
    )
    LOGS_DIR: Path = Path(
        os.getenv("TRENDBUY_LOGS_DIR", str(BASE_DIR / "logs"))
    )
