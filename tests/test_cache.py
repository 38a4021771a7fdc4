"""Tests for feeds.cache and core.tasks modules."""

import asyncio
import json
from unittest.mock import AsyncMock

from conftest import make_article
from core.storage import MemoryStorage, SqliteStorage
from core.tasks import DetachedTasks
from feeds.cache import CACHE_KEY, CACHE_TTL_MS, CachedNewsService, NewsCache


class FakeClock:
    def __init__(self, now: int = 1_710_258_300_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


class FailingStorage(MemoryStorage):
    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


def articles(n: int = 3):
    return [make_article(id=f"batch-{i}", title=f"Story {i}") for i in range(n)]


def make_service(cache: NewsCache, fresh=None, refresh_delay: float = 0.0):
    aggregator = AsyncMock()
    aggregator.fetch_fresh.return_value = fresh if fresh is not None else articles()
    return CachedNewsService(aggregator, cache, tasks=DetachedTasks(), refresh_delay=refresh_delay), aggregator


class TestNewsCache:
    def test_write_then_read_within_ttl(self) -> None:
        clock = FakeClock()
        cache = NewsCache(MemoryStorage(), clock=clock)
        batch = articles()

        cache.write(batch)
        clock.now += CACHE_TTL_MS - 1

        assert cache.read() == batch

    def test_stale_envelope_is_ignored_but_kept(self) -> None:
        clock = FakeClock()
        storage = MemoryStorage()
        cache = NewsCache(storage, clock=clock)
        cache.write(articles())

        clock.now += CACHE_TTL_MS

        assert cache.read() is None
        assert storage.get(CACHE_KEY) is not None

    def test_envelope_shape(self) -> None:
        clock = FakeClock()
        storage = MemoryStorage()
        NewsCache(storage, clock=clock).write([make_article(is_breaking=True)])

        envelope = json.loads(storage.get(CACHE_KEY))
        assert envelope["timestamp"] == clock.now
        assert envelope["articles"][0]["imageUrl"] == "https://images.example.com/markets.jpg"
        assert envelope["articles"][0]["isBreaking"] is True

    def test_empty_envelope_is_a_miss(self) -> None:
        cache = NewsCache(MemoryStorage(), clock=FakeClock())
        cache.write([])
        assert cache.read() is None

    def test_corrupt_envelope_is_a_miss(self) -> None:
        storage = MemoryStorage()
        storage.set(CACHE_KEY, "{not json")
        assert NewsCache(storage, clock=FakeClock()).read() is None

    def test_write_failure_is_swallowed(self) -> None:
        cache = NewsCache(FailingStorage(), clock=FakeClock())
        assert cache.write(articles()) is False
        assert cache.read() is None

    def test_sqlite_storage_round_trip(self, tmp_path) -> None:
        clock = FakeClock()
        batch = articles(2)
        NewsCache(SqliteStorage(str(tmp_path / "cache.db")), clock=clock).write(batch)

        reopened = NewsCache(SqliteStorage(str(tmp_path / "cache.db")), clock=clock)
        assert reopened.read() == batch


class TestCachedNewsService:
    def test_hit_serves_cache_without_fetching(self) -> None:
        clock = FakeClock()
        cache = NewsCache(MemoryStorage(), clock=clock)
        cached = articles(2)
        cache.write(cached)
        service, aggregator = make_service(cache, refresh_delay=60)

        async def _run():
            result = await service.fetch_batch(12)
            awaited = aggregator.fetch_fresh.await_count
            service.tasks.cancel_all()
            return result, awaited

        result, awaited = asyncio.run(_run())
        assert result == cached
        assert awaited == 0

    def test_hit_schedules_background_refresh(self) -> None:
        clock = FakeClock()
        cache = NewsCache(MemoryStorage(), clock=clock)
        cache.write(articles(2))
        fresh = [make_article(id="batch-new", title="Fresh story")]
        service, aggregator = make_service(cache, fresh=fresh)

        async def _run():
            result = await service.fetch_batch(12)
            assert service.tasks.pending == 1
            await service.tasks.drain()
            return result

        result = asyncio.run(_run())
        assert [a.title for a in result] == ["Story 0", "Story 1"]
        aggregator.fetch_fresh.assert_awaited_once_with(12)
        assert [a.title for a in cache.read()] == ["Fresh story"]

    def test_empty_refresh_keeps_previous_envelope(self) -> None:
        cache = NewsCache(MemoryStorage(), clock=FakeClock())
        cache.write(articles(2))
        service, _ = make_service(cache, fresh=[])

        async def _run():
            await service.fetch_batch(12)
            await service.tasks.drain()

        asyncio.run(_run())
        assert len(cache.read()) == 2

    def test_failed_refresh_is_logged_not_raised(self, caplog) -> None:
        cache = NewsCache(MemoryStorage(), clock=FakeClock())
        cache.write(articles(2))
        service, aggregator = make_service(cache)
        aggregator.fetch_fresh.side_effect = RuntimeError("network gone")

        async def _run():
            result = await service.fetch_batch(12)
            await service.tasks.drain()
            return result

        assert len(asyncio.run(_run())) == 2
        assert "news-refresh failed" in caplog.text

    def test_miss_fetches_and_stores(self) -> None:
        clock = FakeClock()
        cache = NewsCache(MemoryStorage(), clock=clock)
        fresh = articles(4)
        service, aggregator = make_service(cache, fresh=fresh)

        result = asyncio.run(service.fetch_batch(4))

        assert result == fresh
        aggregator.fetch_fresh.assert_awaited_once_with(4)
        assert cache.read() == fresh
        assert service.tasks.pending == 0

    def test_expired_cache_refetches(self) -> None:
        clock = FakeClock()
        cache = NewsCache(MemoryStorage(), clock=clock)
        cache.write(articles(2))
        clock.now += CACHE_TTL_MS + 1
        fresh = [make_article(id="batch-x", title="After expiry")]
        service, aggregator = make_service(cache, fresh=fresh)

        result = asyncio.run(service.fetch_batch(12))

        assert result == fresh
        aggregator.fetch_fresh.assert_awaited_once()

    def test_storage_failure_still_returns_articles(self) -> None:
        cache = NewsCache(FailingStorage(), clock=FakeClock())
        fresh = articles(2)
        service, _ = make_service(cache, fresh=fresh)
        assert asyncio.run(service.fetch_batch(2)) == fresh


class TestDetachedTasks:
    def test_delay_and_drain(self) -> None:
        ran = []

        async def job():
            ran.append(True)

        async def _run():
            tasks = DetachedTasks()
            tasks.schedule(job, delay=0.01)
            assert ran == []
            await tasks.drain()
            return tasks.pending

        assert asyncio.run(_run()) == 0
        assert ran == [True]
