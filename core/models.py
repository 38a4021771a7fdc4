from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Category(str, Enum):
    POLITICS = "Politics"
    ECONOMY = "Economy"
    TECHNOLOGY = "Technology"
    SPORTS = "Sports"
    CULTURE = "Culture"
    HEALTH = "Health"


@dataclass
class Article:
    id: str
    title: str
    excerpt: str
    category: str  # One of Category values
    image_url: str
    date: str  # Relative label ("5m ago") or calendar string
    author: str  # Feed name, bylines are rarely present
    source: str
    source_url: str
    is_breaking: bool = False
    content: Optional[str] = None  # Only for seeded or AI-expanded articles

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase field names stored in caches and the document store."""
        data = {
            "id": self.id,
            "title": self.title,
            "excerpt": self.excerpt,
            "category": self.category,
            "imageUrl": self.image_url,
            "date": self.date,
            "author": self.author,
            "source": self.source,
            "sourceUrl": self.source_url,
            "isBreaking": self.is_breaking,
        }
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            excerpt=data.get("excerpt", ""),
            category=data.get("category", Category.TECHNOLOGY.value),
            image_url=data.get("imageUrl", ""),
            date=data.get("date", ""),
            author=data.get("author", ""),
            source=data.get("source", ""),
            source_url=data.get("sourceUrl", "#"),
            is_breaking=bool(data.get("isBreaking", False)),
            content=data.get("content"),
        )


@dataclass
class BreakingHeadline:
    title: str
    url: str
    source: str


@dataclass
class CacheEnvelope:
    articles: List[Article] = field(default_factory=list)
    timestamp: int = 0  # Epoch milliseconds
