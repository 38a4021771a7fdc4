import json
import logging
from typing import List

from core.models import Article
from core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

SAVED_ARTICLES_KEY = "global_pulse_saved_articles_v1"


class SavedArticles:
    """Bookmarked articles persisted as one JSON list, newest first."""

    def __init__(self, storage: KeyValueStorage, key: str = SAVED_ARTICLES_KEY):
        self.storage = storage
        self.key = key
        self._articles: List[Article] = self._load()

    def _load(self) -> List[Article]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            return [Article.from_dict(a) for a in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse saved articles: {e}")
            return []

    def _persist(self):
        self.storage.set(self.key, json.dumps([a.to_dict() for a in self._articles], ensure_ascii=False))

    @property
    def articles(self) -> List[Article]:
        return list(self._articles)

    @property
    def count(self) -> int:
        return len(self._articles)

    def is_saved(self, article_id) -> bool:
        return any(str(a.id) == str(article_id) for a in self._articles)

    def toggle(self, article: Article) -> bool:
        """Adds or removes the article. Returns True when it is now saved."""
        if self.is_saved(article.id):
            self._articles = [a for a in self._articles if str(a.id) != str(article.id)]
            saved = False
        else:
            self._articles = [article] + self._articles
            saved = True
        self._persist()
        return saved
