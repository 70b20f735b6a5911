# blaze_live/core/cache.py
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from typing_extensions import TypedDict

from blaze_live.core.config import CACHE_TTL_MS

logger = logging.getLogger("blaze_live.cache")


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class CacheEntry(TypedDict):
    key: str
    payload: Any
    fetchedAtEpochMillis: int


class CacheStats(TypedDict):
    entries: int
    hits: int
    misses: int
    hitRate: str


def cache_key(sport: str, team: str, endpoint: str) -> str:
    return f"{sport}_{team}_{endpoint}"


class TTLCache:
    """
    In-memory key -> payload map with a fixed time-to-live.

    Expiry is lazy: an entry older than the TTL is reported as a miss but
    left in place until the next set() for that key overwrites it. There is
    no eviction, so the keyspace must stay small (sport x team x endpoint).

    Only touched from the event loop thread, so no locking.
    """

    def __init__(self, ttl_ms: int = CACHE_TTL_MS, clock: Optional[Callable[[], int]] = None):
        self.ttl_ms = ttl_ms
        self._clock = clock or _epoch_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry["fetchedAtEpochMillis"] < self.ttl_ms:
            self._hits += 1
            return entry["payload"]
        self._misses += 1
        return None

    def set(self, key: str, payload: Any) -> None:
        self._entries[key] = {
            "key": key,
            "payload": payload,
            "fetchedAtEpochMillis": self._clock(),
        }
        logger.debug("cache set %s", key)

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        looked_up = self._hits + self._misses
        rate = (self._hits / looked_up * 100.0) if looked_up else 0.0
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hitRate": f"{rate:.0f}%",
        }
