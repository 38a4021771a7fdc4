"""
Maps raw proxy items onto the Article shape.

Everything here is pure: no I/O, and malformed items degrade to
placeholder values instead of raising.
"""
import random
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from core.models import Article, Category
from feeds.ids import ephemeral_id
from feeds.registry import FeedSource

TAG_RE = re.compile(r"<[^>]*>")
ELLIPSIS = "..."
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

CATEGORY_IMAGES: Dict[str, tuple] = {
    Category.POLITICS.value: (
        "https://images.unsplash.com/photo-1529107386315-e1a2ed48a620?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1541872703-74c5e44368f9?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1555848962-6e79363ec58f?auto=format&fit=crop&q=80",
    ),
    Category.ECONOMY.value: (
        "https://images.unsplash.com/photo-1611974789855-9c2a0a7236a3?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1590283603385-17ffb3a7f29f?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1526304640581-d334cdbbf45e?auto=format&fit=crop&q=80",
    ),
    Category.TECHNOLOGY.value: (
        "https://images.unsplash.com/photo-1518770660439-4636190af475?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1550751827-4bd374c3f58b?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1485827404703-89b55fcc595e?auto=format&fit=crop&q=80",
    ),
    Category.SPORTS.value: (
        "https://images.unsplash.com/photo-1461896836934-ffe607ba8211?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1579952363873-27f3bade9f55?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1574629810360-7efbbe195018?auto=format&fit=crop&q=80",
    ),
    Category.CULTURE.value: (
        "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1514320291840-2e0a9bf2a9ae?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1499364615650-ec38552f4f34?auto=format&fit=crop&q=80",
    ),
    Category.HEALTH.value: (
        "https://images.unsplash.com/photo-1576091160550-2173dba999ef?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1505751172876-fa1923c5c528?auto=format&fit=crop&q=80",
        "https://images.unsplash.com/photo-1559757148-5c350d0d3c56?auto=format&fit=crop&q=80",
    ),
}


def strip_html(text: Optional[str]) -> str:
    """Pattern-based tag removal. Entities are left encoded."""
    if not text:
        return ""
    return TAG_RE.sub("", text)


def make_excerpt(description: Optional[str], max_len: int = 200, fallback: str = "Read more.") -> str:
    text = strip_html(description)
    if not text:
        return fallback
    return text[:max_len] + ELLIPSIS


def is_usable_image(url: Optional[str]) -> bool:
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    lowered = url.lower()
    return "logo" not in lowered and "icon" not in lowered


def resolve_image(category: str, candidate: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    if is_usable_image(candidate):
        return candidate
    pool = CATEGORY_IMAGES.get(category, CATEGORY_IMAGES[Category.TECHNOLOGY.value])
    return (rng or random).choice(pool)


def parse_pub_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parses the proxy's "YYYY-MM-DD HH:MM:SS" (UTC), ISO-8601 or RFC-822 dates.
    Naive values are treated as UTC. Returns None when unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    parsed = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_calendar(dt: datetime) -> str:
    """e.g. "Mar 12, 3:45 PM"."""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{MONTHS[dt.month - 1]} {dt.day}, {hour}:{dt.minute:02d} {meridiem}"


def format_relative_time(pub_date: Optional[str], now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    published = parse_pub_date(pub_date)
    if published is None:
        return "Just now"

    diff_mins = int((now - published).total_seconds() // 60)
    diff_hours = diff_mins // 60

    if diff_mins < 1:
        return "Just now"
    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    return format_calendar(published.astimezone(now.tzinfo or timezone.utc))


def _image_candidate(item: Dict[str, Any]) -> Optional[str]:
    thumbnail = item.get("thumbnail")
    if thumbnail:
        return thumbnail
    enclosure = item.get("enclosure")
    if isinstance(enclosure, dict):
        return enclosure.get("link")
    return None


def normalize_item(
    item: Dict[str, Any],
    source: FeedSource,
    *,
    id_prefix: str = "rss",
    excerpt_len: int = 200,
    title_fallback: str = "Latest News",
    excerpt_fallback: str = "Breaking update.",
    is_breaking: bool = False,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> Article:
    if not isinstance(item, dict):
        item = {}
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()

    title = strip_html(item.get("title") if isinstance(item.get("title"), str) else None)
    description = item.get("description") if isinstance(item.get("description"), str) else None

    return Article(
        id=ephemeral_id(id_prefix, now, rng),
        title=title or title_fallback,
        excerpt=make_excerpt(description, excerpt_len, excerpt_fallback),
        category=source.category,
        image_url=resolve_image(source.category, _image_candidate(item), rng),
        date=format_relative_time(item.get("pubDate"), now),
        author=source.name,
        source=source.name,
        source_url=item.get("link") or "#",
        is_breaking=is_breaking,
    )
