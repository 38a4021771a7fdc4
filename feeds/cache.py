import json
import logging
import time
from typing import Callable, List, Optional

from core.models import Article, CacheEnvelope
from core.storage import KeyValueStorage
from core.tasks import DetachedTasks
from feeds.aggregator import NewsAggregator

logger = logging.getLogger(__name__)

CACHE_KEY = "gp_news_cache_v2"
CACHE_TTL_MS = 5 * 60 * 1000
REFRESH_DELAY_SECONDS = 0.1


def _now_ms() -> int:
    return int(time.time() * 1000)


class NewsCache:
    """
    Time-boxed cache of one aggregated batch, stored as a single envelope.

    Stale envelopes are ignored but left in place. Storage errors are logged
    and behave like a miss.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = CACHE_KEY,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = _now_ms,
    ):
        self.storage = storage
        self.key = key
        self.ttl_ms = ttl_ms
        self.clock = clock

    def _load(self) -> Optional[CacheEnvelope]:
        raw = self.storage.get(self.key)
        if not raw:
            return None
        data = json.loads(raw)
        return CacheEnvelope(
            articles=[Article.from_dict(a) for a in data["articles"]],
            timestamp=int(data["timestamp"]),
        )

    def read(self) -> Optional[List[Article]]:
        try:
            envelope = self._load()
        except Exception as e:
            logger.warning(f"Cache read failed: {e}")
            return None

        if envelope is None or not envelope.articles:
            return None
        if self.clock() - envelope.timestamp >= self.ttl_ms:
            logger.debug("Cache envelope is stale")
            return None
        return envelope.articles

    def write(self, articles: List[Article]) -> bool:
        envelope = CacheEnvelope(articles=list(articles), timestamp=self.clock())
        try:
            payload = json.dumps({
                "articles": [a.to_dict() for a in envelope.articles],
                "timestamp": envelope.timestamp,
            }, ensure_ascii=False)
            self.storage.set(self.key, payload)
            return True
        except Exception as e:
            # Best effort only (quota, locked db, ...)
            logger.warning(f"Cache write failed: {e}")
            return False


class CachedNewsService:
    """Serves the last batch instantly and refreshes it in the background."""

    def __init__(
        self,
        aggregator: NewsAggregator,
        cache: NewsCache,
        tasks: Optional[DetachedTasks] = None,
        refresh_delay: float = REFRESH_DELAY_SECONDS,
    ):
        self.aggregator = aggregator
        self.cache = cache
        self.tasks = tasks or DetachedTasks()
        self.refresh_delay = refresh_delay

    async def fetch_batch(self, count: int = 12) -> List[Article]:
        cached = self.cache.read()
        if cached:
            logger.info(f"Serving {len(cached)} cached articles, refreshing in background")
            self.tasks.schedule(lambda: self.refresh(count), delay=self.refresh_delay, name="news-refresh")
            return cached

        articles = await self.aggregator.fetch_fresh(count)
        self.cache.write(articles)
        return articles

    async def refresh(self, count: int = 12) -> None:
        fresh = await self.aggregator.fetch_fresh(count)
        if fresh:
            self.cache.write(fresh)
            logger.info(f"Background refresh stored {len(fresh)} articles")
        else:
            logger.warning("Background refresh returned nothing, keeping previous envelope")
