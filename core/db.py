import sqlite_utils
from sqlite_utils.db import NotFoundError
from core.models import Article
from feeds.ids import share_id
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

class ArticleStore:
    def __init__(self, db_path: str = "news.db", enabled: bool = True):
        """
        Passive article store keyed by article id, used so shared links
        resolve without refetching the feed.

        Args:
            db_path: Path to SQLite database file
            enabled: If False, articles are only kept in memory for this run
        """
        self.enabled = enabled
        self.db_path = db_path

        if self.enabled:
            self.db = sqlite_utils.Database(db_path)
            self.init_db()
            self._memory: Optional[Dict[str, dict]] = None
            logger.info(f"Article store enabled: {db_path}")
        else:
            self.db = None
            self._memory = {}
            logger.info("Article store disabled - keeping articles in memory for this run only")

    def init_db(self):
        """Initialize database schema (only when enabled)"""
        if not self.enabled:
            return

        self.db["articles"].create({
            "id": str,
            "title": str,
            "excerpt": str,
            "content": str,
            "category": str,
            "imageUrl": str,
            "date": str,
            "author": str,
            "source": str,
            "sourceUrl": str,
            "isBreaking": int,  # 0 or 1
            "lastUpdated": str,  # ISO timestamp
        }, pk="id", if_not_exists=True)

    def save_article(self, article: Article) -> bool:
        """
        Upsert the full article. Existing rows are merged, never dropped.
        Failures are logged and reported as False.
        """
        if not article or not article.id:
            return False

        record = article.to_dict()
        record["isBreaking"] = int(article.is_breaking)
        record["lastUpdated"] = datetime.now(timezone.utc).isoformat()

        if not self.enabled:
            self._memory[article.id] = {**self._memory.get(article.id, {}), **record}
            return True

        try:
            self.db["articles"].upsert(record, pk="id")
            logger.info(f"Article {article.id} saved/updated in DB.")
            return True
        except Exception as e:
            logger.error(f"Error saving article {article.title}: {e}")
            return False

    def get_article(self, article_id: str) -> Optional[Article]:
        if not self.enabled:
            record = self._memory.get(article_id)
            return Article.from_dict(record) if record else None

        try:
            record = self.db["articles"].get(article_id)
        except NotFoundError:
            return None
        except Exception as e:
            logger.error(f"Error fetching article {article_id} from DB: {e}")
            return None
        return Article.from_dict(record)

    def article_exists(self, article_id: str) -> bool:
        return self.get_article(article_id) is not None


def make_shareable(article: Article) -> Article:
    """Copy of the article whose id is the stable hash of its title."""
    return replace(article, id=share_id(article.title))
