"""
Unit tests for the thread cache.
"""

import asyncio

import pytest

from messen.errors import CacheMissError, ThreadNotFoundError
from messen.store.threads import ThreadCache
from messen.types import CurrentUser, Thread


@pytest.fixture
def cache(transport):
    transport.threads = {
        "T1": Thread(id="T1", name="Family", is_group=True),
        "T2": Thread(id="T2", name="Alice"),
    }
    return ThreadCache(transport, transport.handle)


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_populates_cache(self, cache, transport):
        await cache.refresh()
        assert len(cache) == 2
        assert "T1" in cache

    @pytest.mark.asyncio
    async def test_get_after_refresh_does_not_fetch(self, cache, transport):
        await cache.refresh()
        thread = await cache.get_thread("T2")
        assert thread.name == "Alice"
        assert transport.fetch_thread_calls == []

    @pytest.mark.asyncio
    async def test_refresh_replaces_instead_of_merging(self, cache, transport):
        await cache.refresh()
        transport.threads = {"T3": Thread(id="T3", name="Work")}
        await cache.refresh()
        assert [t.id for t in cache.threads] == ["T3"]
        assert "T1" not in cache

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_old_contents(self, cache, transport):
        await cache.refresh()
        transport.fail_thread_list = RuntimeError("network down")
        with pytest.raises(RuntimeError):
            await cache.refresh()
        assert len(cache) == 2


class TestGetThread:
    @pytest.mark.asyncio
    async def test_miss_fetches_and_fills(self, cache, transport):
        thread = await cache.get_thread("T1")
        assert thread.id == "T1"
        assert "T1" in cache
        await cache.get_thread("T1")
        assert transport.fetch_thread_calls == ["T1"]

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_fetch(self, cache, transport):
        transport.thread_gate = asyncio.Event()
        first = asyncio.create_task(cache.get_thread("T1"))
        second = asyncio.create_task(cache.get_thread("T1"))
        await asyncio.sleep(0)
        transport.thread_gate.set()

        a, b = await asyncio.gather(first, second)

        assert a is b
        assert transport.fetch_thread_calls == ["T1"]

    @pytest.mark.asyncio
    async def test_unknown_thread(self, cache, transport):
        with pytest.raises(ThreadNotFoundError):
            await cache.get_thread("nope")
        assert "nope" not in cache

    @pytest.mark.asyncio
    async def test_unknown_thread_is_a_cache_miss(self, cache):
        with pytest.raises(CacheMissError):
            await cache.get_thread("nope")

    @pytest.mark.asyncio
    async def test_concurrent_waiters_share_failure_and_retry_later(self, cache, transport):
        transport.thread_gate = asyncio.Event()
        first = asyncio.create_task(cache.get_thread("T9"))
        second = asyncio.create_task(cache.get_thread("T9"))
        await asyncio.sleep(0)
        transport.thread_gate.set()

        results = await asyncio.gather(first, second, return_exceptions=True)
        assert all(isinstance(r, ThreadNotFoundError) for r in results)
        assert transport.fetch_thread_calls == ["T9"]

        transport.threads["T9"] = Thread(id="T9", name="Late")
        assert (await cache.get_thread("T9")).name == "Late"
        assert transport.fetch_thread_calls == ["T9", "T9"]

    @pytest.mark.asyncio
    async def test_mismatched_thread_is_not_cached(self, cache, transport):
        transport.threads["T1"] = Thread(id="OTHER", name="Wrong")
        with pytest.raises(ThreadNotFoundError):
            await cache.get_thread("T1")
        assert "T1" not in cache
        assert "OTHER" not in cache

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_other_waiters(self, cache, transport):
        transport.thread_gate = asyncio.Event()
        first = asyncio.create_task(cache.get_thread("T1"))
        second = asyncio.create_task(cache.get_thread("T1"))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        transport.thread_gate.set()

        thread = await second
        assert thread.id == "T1"
        assert transport.fetch_thread_calls == ["T1"]

    @pytest.mark.asyncio
    async def test_fetch_completes_after_only_caller_is_cancelled(self, cache, transport):
        transport.thread_gate = asyncio.Event()
        first = asyncio.create_task(cache.get_thread("T1"))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        transport.thread_gate.set()

        thread = await cache.get_thread("T1")
        assert thread.name == "Family"
        assert "T1" in cache
        assert transport.fetch_thread_calls == ["T1"]


class TestUserAndLookup:
    def test_set_user_replaces_wholesale(self, cache):
        cache.set_user(CurrentUser(id="me", name="Me"))
        cache.set_user(CurrentUser(id="me", name="Renamed"))
        assert cache.user.name == "Renamed"
        assert cache.user.friends == []

    @pytest.mark.asyncio
    async def test_find_thread_by_name(self, cache, transport):
        await cache.refresh()
        assert cache.find_thread("family").id == "T1"
        assert cache.find_thread("Unknown") is None
        assert transport.fetch_thread_calls == []
