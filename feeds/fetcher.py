import logging
import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx

from core.http_client import HTTPClient
from feeds.registry import FeedSource

logger = logging.getLogger(__name__)

DEFAULT_PROXY = "https://api.rss2json.com/v1/api.json"


def proxy_url(feed_url: str, proxy_base: str = DEFAULT_PROXY) -> str:
    return f"{proxy_base}?rss_url={quote(feed_url, safe='')}"


class FeedFetcher:
    """
    Fetches one feed through the RSS-to-JSON proxy.

    Any failure (network, HTTP status, bad JSON, status != "ok") means
    "no items from this source". Nothing is raised and nothing is retried.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        proxy_base: str = DEFAULT_PROXY,
        suppression_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.http_client = http_client
        self.proxy_base = proxy_base
        self.suppression_seconds = suppression_seconds
        self.clock = clock
        self._failed_at: Dict[str, float] = {}

    def _is_suppressed(self, source: FeedSource) -> bool:
        if self.suppression_seconds <= 0:
            return False
        failed_at = self._failed_at.get(source.url)
        if failed_at is None:
            return False
        if self.clock() - failed_at < self.suppression_seconds:
            return True
        del self._failed_at[source.url]
        return False

    def _record_failure(self, source: FeedSource):
        if self.suppression_seconds > 0:
            self._failed_at[source.url] = self.clock()

    async def fetch_items(self, source: FeedSource) -> List[Dict[str, Any]]:
        if self._is_suppressed(source):
            logger.debug(f"Skipping {source.name}: failed recently")
            return []

        try:
            data = await self.http_client.get_json(proxy_url(source.url, self.proxy_base))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Feed {source.name} unavailable: {e}")
            self._record_failure(source)
            return []

        items = self._extract_items(data)
        if items is None:
            logger.warning(f"Feed {source.name} returned no usable envelope")
            self._record_failure(source)
            return []

        logger.debug(f"Feed {source.name}: {len(items)} items")
        return items

    @staticmethod
    def _extract_items(data: Any) -> Optional[List[Dict[str, Any]]]:
        if not isinstance(data, dict) or data.get("status") != "ok":
            return None
        items = data.get("items")
        if not isinstance(items, list):
            return None
        return [item for item in items if isinstance(item, dict)]
