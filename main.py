import argparse
import asyncio
import json
import logging

from core.ai import GeminiTranslator
from core.bookmarks import SavedArticles
from core.config import settings
from core.db import ArticleStore, make_shareable
from core.http_client import HTTPClient
from core.storage import SqliteStorage
from core.tasks import DetachedTasks
from feeds.aggregator import NewsAggregator
from feeds.cache import CachedNewsService, NewsCache
from feeds.fetcher import FeedFetcher
from feeds.poller import IncrementalPoller

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Global Pulse news aggregator")
    parser.add_argument("--count", type=int, default=settings.BATCH_SIZE)
    parser.add_argument("--category", default=None, help="Fetch one category instead of a mixed batch.")
    parser.add_argument("--breaking", action="store_true", help="Print ticker headlines.")
    parser.add_argument("--poll-seconds", type=float, default=0, help="Keep polling for new articles for N seconds.")
    parser.add_argument("--share", action="store_true", help="Store articles under stable share ids.")
    parser.add_argument("--translate", action="store_true", help="Translate output to Arabic.")
    parser.add_argument("--save", action="store_true", help="Bookmark the printed articles.")
    return parser.parse_args()


def emit(record: dict):
    print(json.dumps(record, ensure_ascii=False))


def bookmark(saved: SavedArticles, articles) -> int:
    """Saves articles that are not bookmarked yet. Returns how many were added."""
    added = 0
    for article in articles:
        if not saved.is_saved(article.id):
            saved.toggle(article)
            added += 1
    return added


async def main():
    args = parse_args()
    logger.info("Starting Global Pulse aggregator...")

    # Initialize components
    http = HTTPClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    fetcher = FeedFetcher(
        http,
        proxy_base=settings.RSS_PROXY_URL,
        suppression_seconds=settings.FAILURE_SUPPRESSION_SECONDS,
    )
    aggregator = NewsAggregator(
        fetcher,
        category_feed_limit=settings.CATEGORY_FEED_LIMIT,
        category_items_per_feed=settings.CATEGORY_ITEMS_PER_FEED,
        dedupe_batch_titles=settings.DEDUPE_BATCH_TITLES,
    )
    tasks = DetachedTasks()
    service = CachedNewsService(
        aggregator,
        NewsCache(SqliteStorage(settings.CACHE_DB_PATH), ttl_ms=settings.cache_ttl_ms),
        tasks=tasks,
    )
    store = ArticleStore(settings.DB_PATH, enabled=settings.ENABLE_DATABASE)
    translator = GeminiTranslator(settings.GEMINI_API_KEY) if args.translate else None
    saved = SavedArticles(SqliteStorage(settings.CACHE_DB_PATH)) if args.save else None

    try:
        if args.breaking:
            for headline in await aggregator.fetch_breaking_headlines():
                emit({"title": headline.title, "url": headline.url, "source": headline.source})

        if args.category:
            articles = await aggregator.fetch_by_category(args.category)
        else:
            articles = await service.fetch_batch(args.count)

        if not articles:
            logger.warning("No articles available right now.")

        if args.share:
            articles = [make_shareable(article) for article in articles]
            for article in articles:
                store.save_article(article)

        if args.poll_seconds > 0:
            poller = IncrementalPoller(aggregator.fetch_single, articles, interval=settings.POLL_INTERVAL_SECONDS)
            poller.start()
            await asyncio.sleep(args.poll_seconds)
            await poller.stop()

        if saved:
            added = bookmark(saved, articles)
            logger.info(f"Bookmarked {added} articles ({saved.count} saved)")

        for article in articles:
            if translator:
                article = await translator.translate_article(article)
            emit(article.to_dict())

        logger.info(f"Done: {len(articles)} articles")
        await tasks.drain()
    finally:
        tasks.cancel_all()
        await http.close()

if __name__ == "__main__":
    asyncio.run(main())
