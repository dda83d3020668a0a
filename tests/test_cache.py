"""Tests for the in-memory address cache.

Tests cover:
- Key normalization on get/set
- Never caching unverifiable results
- Request coalescing in get_or_fetch
- Pending bookkeeping on success and failure
- LRU and TTL eviction
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from avs.address_models import ValidationResult
from avs.cache import AddressCache


@pytest.fixture
def cache():
    return AddressCache(max_size=10, ttl=60)


# ============================================================================
# get / set
# ============================================================================


class TestGetSet:
    def test_get_missing_returns_none(self, cache):
        assert cache.get("123 Main St") is None

    def test_set_then_get_with_equivalent_key(self, cache, valid_result):
        cache.set("1600 Amphitheatre Pkwy,  Mountain View", valid_result)

        assert cache.get("  1600 AMPHITHEATRE pkwy, mountain   view ") is valid_result
        assert cache.size == 1

    def test_set_ignores_unverifiable(self, cache):
        cache.set("nowhere", ValidationResult.unverifiable())

        assert cache.get("nowhere") is None
        assert cache.size == 0

    def test_unverifiable_does_not_replace_existing_entry(self, cache, valid_result):
        cache.set("addr", valid_result)
        cache.set("addr", ValidationResult.unverifiable())

        assert cache.get("addr") is valid_result

    def test_none_address_uses_empty_key(self, cache, valid_result):
        cache.set(None, valid_result)

        assert cache.get("   ") is valid_result

    def test_invalid_limits_rejected(self):
        with pytest.raises(ValueError):
            AddressCache(max_size=0)
        with pytest.raises(ValueError):
            AddressCache(ttl=0)


# ============================================================================
# Eviction
# ============================================================================


class TestEviction:
    def test_lru_evicts_least_recently_used(self, valid_result):
        cache = AddressCache(max_size=2, ttl=60)
        cache.set("a", valid_result)
        cache.set("b", valid_result)

        # Touch "a" so "b" becomes least recently used
        assert cache.get("a") is valid_result
        cache.set("c", valid_result)

        assert cache.get("b") is None
        assert cache.get("a") is valid_result
        assert cache.get("c") is valid_result
        assert cache.size == 2

    def test_entries_expire_after_ttl(self, valid_result):
        clock = [1000.0]
        with patch("avs.cache.monotonic", side_effect=lambda: clock[0]):
            cache = AddressCache(max_size=10, ttl=30)
            cache.set("a", valid_result)

            clock[0] = 1029.0
            assert cache.get("a") is valid_result

            clock[0] = 1030.0
            assert cache.get("a") is None
            assert cache.size == 0

    def test_access_does_not_extend_ttl(self, valid_result):
        clock = [0.0]
        with patch("avs.cache.monotonic", side_effect=lambda: clock[0]):
            cache = AddressCache(max_size=10, ttl=10)
            cache.set("a", valid_result)

            for t in (3.0, 6.0, 9.0):
                clock[0] = t
                assert cache.get("a") is valid_result

            clock[0] = 10.5
            assert cache.get("a") is None

    def test_size_excludes_expired_entries(self, valid_result):
        clock = [0.0]
        with patch("avs.cache.monotonic", side_effect=lambda: clock[0]):
            cache = AddressCache(max_size=10, ttl=5)
            cache.set("a", valid_result)
            clock[0] = 3.0
            cache.set("b", valid_result)

            clock[0] = 6.0
            assert cache.size == 1


# ============================================================================
# get_or_fetch
# ============================================================================


class TestGetOrFetch:
    @pytest.mark.asyncio
    async def test_returns_cached_without_calling_fetcher(self, cache, valid_result):
        cache.set("addr", valid_result)
        fetcher = AsyncMock()

        result = await cache.get_or_fetch("ADDR", fetcher)

        assert result is valid_result
        fetcher.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetches_and_caches_on_miss(self, cache, valid_result):
        fetcher = AsyncMock(return_value=valid_result)

        result = await cache.get_or_fetch("addr", fetcher)

        assert result is valid_result
        assert cache.get("addr") is valid_result
        assert cache.pending_count == 0
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unverifiable_result_returned_but_not_cached(self, cache):
        unverifiable = ValidationResult.unverifiable()
        fetcher = AsyncMock(return_value=unverifiable)

        assert await cache.get_or_fetch("nowhere", fetcher) is unverifiable
        assert await cache.get_or_fetch("nowhere", fetcher) is unverifiable

        assert cache.size == 0
        assert fetcher.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self, cache, valid_result):
        release = asyncio.Event()
        calls = 0

        async def fetcher():
            nonlocal calls
            calls += 1
            await release.wait()
            return valid_result

        keys = ["1600 Amphitheatre", "1600 amphitheatre", "  1600   AMPHITHEATRE "] * 4
        tasks = [asyncio.create_task(cache.get_or_fetch(k, fetcher)) for k in keys]
        await asyncio.sleep(0)

        assert cache.pending_count == 1
        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == 1
        assert all(r is valid_result for r in results)
        assert cache.pending_count == 0

    @pytest.mark.asyncio
    async def test_different_keys_fetch_independently(self, cache, valid_result):
        fetcher = AsyncMock(return_value=valid_result)

        await asyncio.gather(
            cache.get_or_fetch("a", fetcher),
            cache.get_or_fetch("b", fetcher),
        )

        assert fetcher.await_count == 2
        assert cache.size == 2

    @pytest.mark.asyncio
    async def test_failure_propagates_to_all_waiters_and_cleans_up(self, cache, valid_result):
        release = asyncio.Event()
        calls = 0

        async def failing():
            nonlocal calls
            calls += 1
            await release.wait()
            raise ConnectionError("upstream down")

        tasks = [asyncio.create_task(cache.get_or_fetch("addr", failing)) for _ in range(3)]
        await asyncio.sleep(0)
        assert cache.pending_count == 1

        release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert calls == 1
        assert all(isinstance(r, ConnectionError) for r in results)
        assert cache.pending_count == 0
        assert cache.get("addr") is None

        # Key can be fetched again straight away
        fetcher = AsyncMock(return_value=valid_result)
        assert await cache.get_or_fetch("addr", fetcher) is valid_result
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_shared_fetch(self, cache, valid_result):
        release = asyncio.Event()

        async def fetcher():
            await release.wait()
            return valid_result

        first = asyncio.create_task(cache.get_or_fetch("addr", fetcher))
        second = asyncio.create_task(cache.get_or_fetch("addr", fetcher))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first

        release.set()
        assert await second is valid_result
        assert cache.get("addr") is valid_result
        assert cache.pending_count == 0


# ============================================================================
# clear / stats
# ============================================================================


class TestClear:
    @pytest.mark.asyncio
    async def test_clear_empties_entries_and_pending(self, cache, valid_result):
        cache.set("a", valid_result)
        release = asyncio.Event()

        async def fetcher():
            await release.wait()
            return valid_result

        task = asyncio.create_task(cache.get_or_fetch("b", fetcher))
        await asyncio.sleep(0)
        assert cache.pending_count == 1

        cache.clear()

        assert cache.size == 0
        assert cache.pending_count == 0

        release.set()
        assert await task is valid_result
        assert cache.pending_count == 0

    def test_stats(self, cache, valid_result):
        cache.set("a", valid_result)

        stats = cache.stats()

        assert stats["size"] == 1
        assert stats["pending"] == 0
        assert stats["max_size"] == 10
        assert stats["backend"] == "memory"


def test_status_string_is_treated_like_enum(cache):
    # Objects from other layers may carry the plain string status
    class Response:
        status = "unverifiable"

    cache.set("a", Response())

    assert cache.get("a") is None
