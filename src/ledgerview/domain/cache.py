"""Request cache contract.

Callers memoize snapshots under a key they build themselves (see
``CacheKey``); nothing in the domain constructs keys.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


class RequestCache(ABC):
    """Memoization contract; no TTL is assumed."""

    @abstractmethod
    def fetch_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing and storing it if absent."""
        pass

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """Drop a cached value, if present."""
        pass


class MemoryRequestCache(RequestCache):
    """In-process dict-backed cache."""

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def fetch_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        if key not in self._entries:
            self._entries[key] = compute()
        return self._entries[key]

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
