"""
String-keyed storage slots used for the news cache and bookmarks.

Both implementations store opaque strings; callers own serialization.
"""
import logging
from typing import Dict, Optional, Protocol

import sqlite_utils
from sqlite_utils.db import NotFoundError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used in tests and when no cache file is wanted."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteStorage:
    def __init__(self, db_path: str = "cache.db"):
        self.db = sqlite_utils.Database(db_path)
        self.db["kv"].create({"key": str, "value": str}, pk="key", if_not_exists=True)
        logger.info(f"Cache storage: {db_path}")

    def get(self, key: str) -> Optional[str]:
        try:
            return self.db["kv"].get(key)["value"]
        except NotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        # Whole-slot replacement, readers never see a partial envelope
        self.db["kv"].upsert({"key": key, "value": value}, pk="key")
