"""Tests for feeds.poller module."""

import asyncio
from unittest.mock import AsyncMock

from conftest import make_article
from feeds.poller import IncrementalPoller


class TestTick:
    def test_duplicate_title_is_not_added(self) -> None:
        displayed = [make_article(title="Markets rally")]
        poller = IncrementalPoller(AsyncMock(return_value=make_article(id="rss-2", title="Markets rally")), displayed)

        added = asyncio.run(poller.tick())

        assert added is False
        assert len(displayed) == 1

    def test_new_title_is_prepended(self) -> None:
        displayed = [make_article(title="Markets rally")]
        fresh = make_article(id="rss-2", title="Central bank holds rates")
        poller = IncrementalPoller(AsyncMock(return_value=fresh), displayed)

        assert asyncio.run(poller.tick()) is True
        assert displayed[0] is fresh
        assert len(displayed) == 2

    def test_title_match_is_case_and_whitespace_sensitive(self) -> None:
        displayed = [make_article(title="Markets rally")]
        fetch = AsyncMock(side_effect=[
            make_article(id="rss-2", title="markets rally"),
            make_article(id="rss-3", title="Markets rally "),
        ])
        poller = IncrementalPoller(fetch, displayed)

        async def _run():
            await poller.tick()
            await poller.tick()

        asyncio.run(_run())
        assert [a.title for a in displayed] == ["Markets rally ", "markets rally", "Markets rally"]

    def test_nothing_fetched(self) -> None:
        displayed = []
        poller = IncrementalPoller(AsyncMock(return_value=None), displayed)
        assert asyncio.run(poller.tick()) is False
        assert displayed == []

    def test_fetch_error_is_logged(self, caplog) -> None:
        displayed = []
        poller = IncrementalPoller(AsyncMock(side_effect=RuntimeError("boom")), displayed)
        assert asyncio.run(poller.tick()) is False
        assert "Poll fetch failed" in caplog.text


class TestTimer:
    def test_polls_until_stopped(self) -> None:
        counter = iter(range(1000))

        async def fetch_one():
            return make_article(id=f"rss-{next(counter)}", title=f"Story {next(counter)}")

        displayed = []
        fetch = AsyncMock(side_effect=fetch_one)
        poller = IncrementalPoller(fetch, displayed, interval=0.01)

        async def _run():
            poller.start()
            assert poller.running
            await asyncio.sleep(0.08)
            await poller.stop()
            calls_at_stop = fetch.await_count
            await asyncio.sleep(0.05)
            return calls_at_stop

        calls_at_stop = asyncio.run(_run())
        assert calls_at_stop >= 2
        assert fetch.await_count == calls_at_stop
        assert len(displayed) == calls_at_stop
        assert not poller.running

    def test_stop_is_idempotent(self) -> None:
        poller = IncrementalPoller(AsyncMock(return_value=None), [], interval=0.01)

        async def _run():
            await poller.stop()
            poller.start()
            await poller.stop()
            await poller.stop()

        asyncio.run(_run())
        assert not poller.running
