# src/storage/result_cache.py

"""Bounded, time-expiring result cache persisted as a single JSON blob."""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.config.settings import Settings
from src.models.product import MatchResult
from src.storage.backends import StorageBackend, StorageError

logger = logging.getLogger("trendbuy.cache")


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """A cached match result and the search that produced it."""

    data: MatchResult
    timestamp: int
    url: str | None = None
    keywords: list[str] = field(
        default_factory=lambda: list[str]()
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data.to_dict(),
            "timestamp": self.timestamp,
            "url": self.url,
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CacheEntry":
        return cls(
            data=MatchResult.from_dict(raw["data"]),
            timestamp=int(raw["timestamp"]),
            url=raw.get("url"),
            keywords=[str(k) for k in raw.get("keywords", [])],
        )


@dataclass
class CacheStats:
    """Summary of what the cache currently holds."""

    count: int
    approximate_size_bytes: int
    oldest_timestamp: datetime | None = None

    @property
    def size_label(self) -> str:
        return f"{self.approximate_size_bytes / 1024:.1f} KB"


class ResultCache:
    """Key -> MatchResult store with a TTL and a FIFO size cap.

    All entries live in one serialised mapping under ``storage_key``.
    Each operation loads the mapping, works on a private copy and writes
    it back in one call, so a failed write leaves the previous blob
    untouched.  Storage problems never reach the caller: reads degrade to
    an empty cache and writes become no-ops, with a warning logged.
    """

    def __init__(
        self,
        storage: StorageBackend,
        ttl_seconds: float = Settings.CACHE_TTL_SECONDS,
        max_entries: int = Settings.CACHE_MAX_ENTRIES,
        storage_key: str = Settings.CACHE_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._ttl_ms = int(ttl_seconds * 1000)
        self._max_entries = max_entries
        self._storage_key = storage_key

    # ── Public API ───────────────────────────────────────

    def get(self, key: str) -> MatchResult | None:
        """Return the cached result for *key*, or ``None``.

        An entry older than the TTL is deleted as a side effect.
        """
        entries = self._load()
        entry = entries.get(key)
        if entry is None:
            return None

        age_ms = _now_ms() - entry.timestamp
        if age_ms > self._ttl_ms:
            logger.debug(
                "Cache entry '%s' expired (age %.1fh)",
                key,
                age_ms / 3_600_000,
            )
            del entries[key]
            self._save(entries)
            return None

        logger.info(
            "Cache hit for '%s' (%d products)",
            key,
            len(entry.data.products),
        )
        return entry.data

    def put(
        self,
        key: str,
        result: MatchResult,
        url: str | None = None,
        keywords: list[str] | tuple[str, ...] = (),
    ) -> None:
        """Insert or overwrite *key*, evicting the oldest entries if full."""
        entries = self._load()

        if len(entries) >= self._max_entries:
            by_age = sorted(
                entries.items(), key=lambda item: item[1].timestamp
            )
            overflow = len(by_age) - self._max_entries + 1
            for old_key, _ in by_age[:overflow]:
                del entries[old_key]
            logger.debug("Evicted %d oldest cache entries", overflow)

        entries[key] = CacheEntry(
            data=result,
            timestamp=_now_ms(),
            url=url,
            keywords=list(keywords),
        )
        if self._save(entries):
            logger.info(
                "Cached %d products for '%s' (confidence=%.2f)",
                len(result.products),
                key,
                result.confidence,
            )

    def recent(
        self, limit: int = Settings.RECENT_SEARCHES_LIMIT
    ) -> list[CacheEntry]:
        """Newest-first entries that matched at least one product."""
        entries = [
            e for e in self._load().values() if e.data.products
        ]
        entries.sort(key=lambda e: e.timestamp, reverse=True)
        return entries[:limit]

    @staticmethod
    def should_cache(result: MatchResult) -> bool:
        """Admission policy: keep only non-empty, confident results."""
        return (
            len(result.products) > 0
            and result.confidence > Settings.CACHEABLE_CONFIDENCE
        )

    def clear(self) -> int:
        """Drop every entry.

        Returns the number of entries that were removed.
        """
        count = len(self._load())
        try:
            self._storage.remove_item(self._storage_key)
        except StorageError as exc:
            logger.warning("Cache clear failed: %s", exc)
            return 0
        logger.info("Cache cleared (%d entries removed)", count)
        return count

    def stats(self) -> CacheStats:
        """Entry count, serialised size and oldest entry time."""
        entries = self._load()
        raw = self._read_raw() or ""
        oldest: datetime | None = None
        if entries:
            oldest_ms = min(e.timestamp for e in entries.values())
            try:
                oldest = datetime.fromtimestamp(oldest_ms / 1000)
            except (OverflowError, OSError, ValueError):
                logger.warning(
                    "Cache holds an out-of-range timestamp: %d", oldest_ms
                )
        return CacheStats(
            count=len(entries),
            approximate_size_bytes=len(raw.encode("utf-8")),
            oldest_timestamp=oldest,
        )

    def __len__(self) -> int:
        return len(self._load())

    def __contains__(self, key: object) -> bool:
        return key in self._load()

    # ── Persistence ──────────────────────────────────────

    def _read_raw(self) -> str | None:
        try:
            return self._storage.get_item(self._storage_key)
        except StorageError as exc:
            logger.warning("Cache read error: %s", exc)
            return None

    def _load(self) -> dict[str, CacheEntry]:
        """Deserialise the stored mapping; corrupt data reads as empty."""
        raw = self._read_raw()
        if not raw:
            return {}

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Error parsing cache: %s", exc)
            return {}
        if not isinstance(decoded, dict):
            logger.warning(
                "Error parsing cache: expected an object, got %s",
                type(decoded).__name__,
            )
            return {}

        entries: dict[str, CacheEntry] = {}
        for key, value in decoded.items():
            try:
                entries[key] = CacheEntry.from_dict(value)
            except (
                KeyError, TypeError, ValueError, AttributeError, OverflowError
            ) as exc:
                logger.warning(
                    "Dropping malformed cache entry '%s': %s", key, exc
                )
        return entries

    def _save(self, entries: dict[str, CacheEntry]) -> bool:
        """Write the whole mapping back; returns False on failure."""
        payload = json.dumps(
            {k: e.to_dict() for k, e in entries.items()},
            ensure_ascii=False,
        )
        try:
            self._storage.set_item(self._storage_key, payload)
        except StorageError as exc:
            logger.warning("Cache write error: %s", exc)
            return False
        return True
