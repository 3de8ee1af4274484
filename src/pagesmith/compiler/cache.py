"""
Cache interface for compiled metadata and merged page CSS.

Keys are typed ``(domain, site_id)`` pairs so one site's entries can be
invalidated without touching another's.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any, NamedTuple, Protocol, TypeVar

T = TypeVar("T")

CENTRAL_SCOPE = "central"


class CacheDomain(StrEnum):
    PAGE_METADATA = "page_metadata"
    PAGES_CSS = "pages_css"


class CacheKey(NamedTuple):
    domain: CacheDomain
    site_id: str | None

    def __str__(self) -> str:
        return f"{self.domain.value}_{self.site_id if self.site_id is not None else CENTRAL_SCOPE}"


class Cache(Protocol):
    """What the compiler and CSS merger need from a cache."""

    def remember(self, key: CacheKey, ttl: float, producer: Callable[[], T]) -> T: ...

    def forget(self, key: CacheKey) -> None: ...


class InMemoryCache:
    """
    Thread-safe TTL cache.

    The producer runs outside the lock; two threads missing at once may both
    produce, and the later write wins. Each key carries a generation bumped
    by ``forget`` (and all of them by ``clear``): a value produced before the
    bump is returned to its caller but not stored.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}
        self._generations: dict[CacheKey, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def remember(self, key: CacheKey, ttl: float, producer: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] > now:
                return entry[1]
            generation = self._generation(key)

        value = producer()
        with self._lock:
            if self._generation(key) == generation:
                self._entries[key] = (now + ttl, value)
        return value

    def forget(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def _generation(self, key: CacheKey) -> tuple[int, int]:
        return self._epoch, self._generations.get(key, 0)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and entry[0] > self._clock()
