"""Shared fixtures: article factory and a mocked proxy transport."""

import json
from typing import Callable, Dict, Union

import httpx
import pytest

from core.http_client import HTTPClient
from core.models import Article

ProxyReply = Union[dict, Exception, httpx.Response]


def make_article(**overrides) -> Article:
    data = dict(
        id="batch-1710258300000-abc123xyz",
        title="Markets rally",
        excerpt="Stocks climbed on Tuesday...",
        category="Economy",
        image_url="https://images.example.com/markets.jpg",
        date="5m ago",
        author="BBC Business",
        source="BBC Business",
        source_url="https://www.bbc.co.uk/news/business-1",
        is_breaking=False,
    )
    data.update(overrides)
    return Article(**data)


def proxy_transport(replies: Dict[str, ProxyReply]) -> httpx.MockTransport:
    """
    Routes proxied requests by their decoded rss_url parameter.
    A dict becomes a JSON body, an exception is raised, a Response is returned as is.
    Unknown feeds answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        feed_url = request.url.params.get("rss_url")
        reply = replies.get(feed_url)
        if reply is None:
            return httpx.Response(404)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, content=json.dumps(reply).encode(), headers={"content-type": "application/json"})

    return httpx.MockTransport(handler)


def ok_envelope(*items: dict) -> dict:
    return {"status": "ok", "feed": {}, "items": list(items)}


@pytest.fixture
def article_factory() -> Callable[..., Article]:
    return make_article


@pytest.fixture
def http_client_for():
    """Builds an HTTPClient over a mocked proxy transport."""
    def _build(replies: Dict[str, ProxyReply]) -> HTTPClient:
        return HTTPClient(timeout=1.0, transport=proxy_transport(replies))
    return _build
