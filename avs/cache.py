"""In-memory result cache with LRU + TTL eviction and request coalescing.

Entries live only in process memory; nothing is persisted or shared
between instances.
"""

import asyncio
import logging
from collections import OrderedDict
from time import monotonic
from typing import Awaitable, Callable, TypeVar

from avs.address_models import ValidationStatus
from avs.address_normalizer import get_cache_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AddressCache:
    """Memoizes verified results by normalized address.

    Only results whose ``status`` is not ``unverifiable`` are stored, since
    a negative answer may succeed on retry. Concurrent ``get_or_fetch``
    calls for the same normalized key share one fetch.
    """

    __slots__ = ("max_size", "ttl", "_entries", "_pending")

    def __init__(self, max_size: int = 1000, ttl: float = 3600.0):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.max_size = max_size
        self.ttl = ttl
        # key -> (value, expires_at); ordered oldest-used first
        self._entries: OrderedDict[str, tuple[object, float]] = OrderedDict()
        self._pending: dict[str, asyncio.Task] = {}

    def get(self, address: str | None):
        key = get_cache_key(address)
        result = self._lookup(key)
        if result is not None:
            logger.debug(f"Cache hit: {address!r} (key={key!r})")
        return result

    def set(self, address: str | None, result) -> None:
        self._store(get_cache_key(address), result)

    async def get_or_fetch(self, address: str | None, fetcher: Callable[[], Awaitable[T]]) -> T:
        """Return the cached result or run ``fetcher`` at most once per key.

        Args:
            address: Raw address; normalized before lookup.
            fetcher: Zero-argument coroutine function producing the result.

        Returns:
            The cached value, the value of an in-flight fetch for the same
            key, or the value of a new fetch.

        Raises:
            Whatever ``fetcher`` raises. The pending entry is removed first,
            so the key can be fetched again straight away.
        """
        key = get_cache_key(address)

        cached = self._lookup(key)
        if cached is not None:
            logger.debug(f"Cache hit: {address!r} (key={key!r})")
            return cached

        # No await between the lookup and the registration below, so two
        # callers can never both start a fetch for the same key.
        task = self._pending.get(key)
        if task is not None:
            logger.debug(f"Request coalescing - joining pending fetch for {key!r}")
        else:
            task = asyncio.ensure_future(self._fetch(key, fetcher))
            self._pending[key] = task

        # A cancelled waiter must not cancel the fetch other callers share
        return await asyncio.shield(task)

    async def _fetch(self, key: str, fetcher: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await fetcher()
            self._store(key, result)
            return result
        finally:
            # clear() may have dropped this task and a newer fetch taken its place
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def clear(self) -> None:
        """Drop all entries and forget in-flight fetches."""
        self._entries.clear()
        self._pending.clear()

    @property
    def size(self) -> int:
        self._purge_expired()
        return len(self._entries)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def stats(self) -> dict:
        return {
            "size": self.size,
            "pending": self.pending_count,
            "max_size": self.max_size,
            "ttl_seconds": self.ttl,
            "backend": "memory",
        }

    def _lookup(self, key: str):
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if monotonic() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def _store(self, key: str, result) -> None:
        if result is None or result.status == ValidationStatus.UNVERIFIABLE:
            return
        self._entries[key] = (result, monotonic() + self.ttl)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache evicted least recently used key {evicted!r}")

    def _purge_expired(self) -> None:
        now = monotonic()
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]
