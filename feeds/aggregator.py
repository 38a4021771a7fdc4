import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from core.models import Article, BreakingHeadline
from feeds.fetcher import FeedFetcher
from feeds.normalizer import normalize_item, strip_html
from feeds.registry import ALL_FEEDS, BREAKING_FEEDS, FeedSource, feeds_for_category

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def settle_all(jobs: Sequence[Awaitable[T]]) -> List[T]:
    """
    Runs every job concurrently and waits for all of them to finish.
    Failed and empty (None) results are dropped; siblings are never aborted.
    """
    results = await asyncio.gather(*jobs, return_exceptions=True)
    settled = []
    for result in results:
        if isinstance(result, BaseException):
            logger.error(f"Feed job failed: {result}")
            continue
        if result is not None:
            settled.append(result)
    return settled


def dedupe_by_title(articles: List[Article]) -> List[Article]:
    """Exact title match only, first occurrence wins."""
    seen = set()
    unique = []
    for article in articles:
        if article.title in seen:
            continue
        seen.add(article.title)
        unique.append(article)
    return unique


class NewsAggregator:
    def __init__(
        self,
        fetcher: FeedFetcher,
        feeds: Sequence[FeedSource] = ALL_FEEDS,
        breaking_feeds: Sequence[FeedSource] = BREAKING_FEEDS,
        category_feed_limit: int = 8,
        category_items_per_feed: int = 5,
        dedupe_batch_titles: bool = False,
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.fetcher = fetcher
        self.feeds = list(feeds)
        self.breaking_feeds = list(breaking_feeds)
        self.category_feed_limit = category_feed_limit
        self.category_items_per_feed = category_items_per_feed
        self.dedupe_batch_titles = dedupe_batch_titles
        self.rng = rng or random.Random()
        self.now = now

    def _sample(self, feeds: Sequence[FeedSource], count: int) -> List[FeedSource]:
        shuffled = list(feeds)
        self.rng.shuffle(shuffled)
        return shuffled[: max(0, min(count, len(shuffled)))]

    async def _top_article(self, feed: FeedSource) -> Optional[Article]:
        items = await self.fetcher.fetch_items(feed)
        if not items:
            return None
        return normalize_item(
            items[0],
            feed,
            id_prefix="batch",
            excerpt_len=200,
            title_fallback="Latest News",
            excerpt_fallback="Breaking update.",
            is_breaking=self.rng.random() > 0.7,
            now=self.now(),
            rng=self.rng,
        )

    async def fetch_fresh(self, count: int = 12) -> List[Article]:
        """One newest article per sampled feed, shuffled, at most ``count``."""
        sampled = self._sample(self.feeds, count)
        logger.info(f"Aggregating {len(sampled)} feeds")

        articles = await settle_all([self._top_article(feed) for feed in sampled])
        if self.dedupe_batch_titles:
            articles = dedupe_by_title(articles)

        self.rng.shuffle(articles)
        logger.info(f"Aggregated {len(articles)}/{len(sampled)} feeds")
        return articles[:count]

    async def _category_articles(self, feed: FeedSource) -> List[Article]:
        items = await self.fetcher.fetch_items(feed)
        now = self.now()
        return [
            normalize_item(
                item,
                feed,
                id_prefix="cat",
                excerpt_len=180,
                title_fallback="News Update",
                excerpt_fallback="Read more.",
                is_breaking=False,
                now=now,
                rng=self.rng,
            )
            for item in items[: self.category_items_per_feed]
        ]

    async def fetch_by_category(self, category: str) -> List[Article]:
        feeds = feeds_for_category(category, self.feeds)[: self.category_feed_limit]
        if not feeds:
            logger.warning(f"No feeds registered for category {category}")
            return []

        per_feed = await settle_all([self._category_articles(feed) for feed in feeds])
        articles = [article for batch in per_feed for article in batch]
        logger.info(f"Category {category}: {len(articles)} articles from {len(feeds)} feeds")
        return articles

    async def fetch_single(self) -> Optional[Article]:
        """Newest item of one random feed, flagged as breaking."""
        if not self.feeds:
            return None
        feed = self.rng.choice(self.feeds)
        items = await self.fetcher.fetch_items(feed)
        if not items:
            return None
        return normalize_item(
            items[0],
            feed,
            id_prefix="rss",
            excerpt_len=200,
            title_fallback="Breaking News",
            excerpt_fallback="Latest update from trusted sources.",
            is_breaking=True,
            now=self.now(),
            rng=self.rng,
        )

    async def _headlines(self, feed: FeedSource) -> List[BreakingHeadline]:
        items = await self.fetcher.fetch_items(feed)
        headlines = []
        for item in items[:3]:
            title = strip_html(item.get("title") if isinstance(item.get("title"), str) else None) or "Breaking News"
            headlines.append(BreakingHeadline(
                title=f"🔴 {feed.name}: {title}",
                url=item.get("link") or "#",
                source=feed.name,
            ))
        return headlines

    async def fetch_breaking_headlines(self, feed_count: int = 2, limit: int = 5) -> List[BreakingHeadline]:
        sampled = self._sample(self.breaking_feeds, feed_count)
        per_feed = await settle_all([self._headlines(feed) for feed in sampled])
        headlines = [headline for batch in per_feed for headline in batch]
        self.rng.shuffle(headlines)
        return headlines[:limit]
