"""In-memory TTL cache for aggregated conditions, keyed by location id."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional

from .const import CONDITIONS_CACHE_TTL

_LOGGER = logging.getLogger(__name__)


class ConditionsCache:
    """Entries are stored as {"fetched_at", "ttl", "data"} and expire lazily on read."""

    def __init__(self, ttl: float = CONDITIONS_CACHE_TTL, clock: Callable[[], float] = time.time) -> None:
        self.ttl = float(ttl)
        self._clock = clock
        self._entries: Dict[Hashable, Dict[str, Any]] = {}

    def _live(self, key: Hashable) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if (self._clock() - entry["fetched_at"]) >= entry["ttl"]:
            del self._entries[key]
            return None
        return entry

    def get(self, key: Hashable) -> Any:
        entry = self._live(key)
        if entry is None:
            _LOGGER.debug("Cache miss: %s", key)
            return None
        _LOGGER.debug("Cache hit: %s", key)
        return entry["data"]

    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = {
            "fetched_at": self._clock(),
            "ttl": float(ttl) if ttl is not None else self.ttl,
            "data": value,
        }
        _LOGGER.debug("Cache set: %s (ttl %ss)", key, self._entries[key]["ttl"])

    def delete(self, key: Hashable) -> bool:
        removed = self._entries.pop(key, None) is not None
        if removed:
            _LOGGER.debug("Cache delete: %s", key)
        return removed

    def clear(self) -> None:
        self._entries.clear()
        _LOGGER.info("Conditions cache cleared")

    def age(self, key: Hashable) -> Optional[int]:
        """Whole seconds since key was stored, or None when absent or expired."""
        entry = self._live(key)
        if entry is None:
            return None
        return int(self._clock() - entry["fetched_at"])

    def __contains__(self, key: Hashable) -> bool:
        return self._live(key) is not None
