"""
Small TTL cache for aggregate queries (sport/category distributions, base
filter counts).

Entries are read-check-write without a lock: two concurrent misses both
recompute and the last write wins. The cached data is idempotent so this only
widens the miss window.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedValue:
    data: Any
    computed_at: float


class TTLCache:
    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CachedValue] = {}

    def is_fresh(self, entry: CachedValue) -> bool:
        return self._clock() - entry.computed_at <= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Return cached data for key, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.data

    def put(self, key: str, data: Any) -> CachedValue:
        entry = CachedValue(data=data, computed_at=self._clock())
        self._entries[key] = entry
        return entry

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the fresh cached value or compute, store and return a new one.

        Exceptions from compute propagate and leave the previous entry as is.
        """
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry):
            return entry.data
        logger.info("Refreshing aggregate cache entry %r", key)
        data = compute()
        self.put(key, data)
        return data

    def invalidate(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
