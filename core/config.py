import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load env
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Runtime configuration read from the environment (and .env)."""

    # Proxy that converts RSS/Atom feeds into a JSON envelope
    RSS_PROXY_URL: str = field(default_factory=lambda: os.getenv("RSS_PROXY_URL", "https://api.rss2json.com/v1/api.json"))
    HTTP_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "15")))

    # Local cache
    CACHE_TTL_SECONDS: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "300")))
    CACHE_DB_PATH: str = field(default_factory=lambda: os.getenv("CACHE_DB_PATH", "cache.db"))

    # Article document store
    ENABLE_DATABASE: bool = field(default_factory=lambda: _env_bool("ENABLE_DATABASE", "true"))
    DB_PATH: str = field(default_factory=lambda: os.getenv("DB_PATH", "news.db"))

    # Aggregation
    BATCH_SIZE: int = field(default_factory=lambda: int(os.getenv("BATCH_SIZE", "12")))
    CATEGORY_FEED_LIMIT: int = field(default_factory=lambda: int(os.getenv("CATEGORY_FEED_LIMIT", "8")))
    CATEGORY_ITEMS_PER_FEED: int = field(default_factory=lambda: int(os.getenv("CATEGORY_ITEMS_PER_FEED", "5")))
    DEDUPE_BATCH_TITLES: bool = field(default_factory=lambda: _env_bool("DEDUPE_BATCH_TITLES", "false"))
    # 0 disables the per-source failure window
    FAILURE_SUPPRESSION_SECONDS: float = field(default_factory=lambda: float(os.getenv("FAILURE_SUPPRESSION_SECONDS", "0")))

    POLL_INTERVAL_SECONDS: float = field(default_factory=lambda: float(os.getenv("POLL_INTERVAL_SECONDS", "10")))

    GEMINI_API_KEY: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def cache_ttl_ms(self) -> int:
        return self.CACHE_TTL_SECONDS * 1000


settings = Settings()
