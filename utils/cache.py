"""
TTL Cache - Small time-boxed cache for generated content.

Briefings and trending topics are expensive to generate, so each audience
gets one cached result that stays valid for a fixed TTL (24h by default).
There is no background eviction: an expired entry is simply ignored on read
and replaced by the next write.

Usage:
    cache = InMemoryTTLCache(ttl=24 * 60 * 60)
    cache.set("CMO", briefings)

    entry = cache.get("CMO")
    if entry:
        print(entry.value, entry.stored_at)
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from loguru import logger


T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the epoch time it was stored."""
    value: T
    stored_at: float

    @property
    def stored_at_iso(self) -> str:
        return datetime.fromtimestamp(self.stored_at, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class TTLCache(ABC, Generic[T]):
    """Interface for an audience-keyed cache with a fixed time-to-live."""

    ttl: float

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry[T]]:
        """Return the live entry for key, or None when missing or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: T) -> CacheEntry[T]:
        """Store value under key, overwriting any previous entry."""
        pass


class InMemoryTTLCache(TTLCache[T]):
    """
    Process-local TTL cache.

    Args:
        ttl: Time-to-live in seconds
        clock: Callable returning the current epoch time (injectable for tests)
        name: Label used in log messages
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.time,
        name: str = "cache",
    ):
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> Optional[CacheEntry[T]]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"[{self.name}] Cache miss for key: {key}")
            return None

        age = self._clock() - entry.stored_at
        if age >= self.ttl:
            logger.debug(f"[{self.name}] Cache expired for key: {key} (age {age:.0f}s)")
            return None

        return entry

    def set(self, key: str, value: T) -> CacheEntry[T]:
        entry = CacheEntry(value=value, stored_at=self._clock())
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None
