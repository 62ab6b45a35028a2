from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger("gnews")

DEFAULT_TOPIC = "breaking-news"

CATEGORY_TOPICS = {
    "General": DEFAULT_TOPIC,
    "Business": "business",
    "Sports": "sports",
    "Technology": "technology",
}


def topic_for_category(category: Optional[str]) -> str:
    """Map a user-facing category label to the API topic, defaulting to breaking news."""
    return CATEGORY_TOPICS.get(category, DEFAULT_TOPIC) if category else DEFAULT_TOPIC


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


# --- Data models ---
@dataclass
class Source:
    name: str
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional[Source]:
        if not isinstance(data, Mapping):
            return None
        return cls(name=_opt_str(data.get("name")) or "", url=_opt_str(data.get("url")))


@dataclass
class Article:
    title: str
    url: str
    description: Optional[str] = None
    image: Optional[str] = None
    source: Optional[Source] = None
    published_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Article:
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise ValueError("article has no url")
        return cls(
            title=_opt_str(data.get("title")) or "",
            url=url,
            description=_opt_str(data.get("description")),
            image=_opt_str(data.get("image")),
            source=Source.from_dict(data.get("source")),
            published_at=_opt_str(data.get("publishedAt")),
        )

    @property
    def source_name(self) -> Optional[str]:
        return self.source.name if self.source else None

    def to_bookmark(self) -> Bookmark:
        return Bookmark(
            url=self.url,
            title=self.title,
            description=self.description,
            image=self.image,
            source_name=self.source_name,
            published_at=self.published_at,
        )


@dataclass
class FeedPage:
    total_articles: int
    articles: List[Article] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> FeedPage:
        """Build a page from a decoded response body; raises ValueError on a bad shape."""
        if not isinstance(data, Mapping):
            raise ValueError("response body is not a JSON object")
        raw_articles = data.get("articles")
        if not isinstance(raw_articles, list):
            raise ValueError("response has no 'articles' list")
        total = data.get("totalArticles", len(raw_articles))
        if not isinstance(total, int) or isinstance(total, bool):
            raise ValueError("'totalArticles' is not an integer")
        articles = []
        for item in raw_articles:
            if not isinstance(item, Mapping):
                raise ValueError("article entry is not a JSON object")
            if not isinstance(item.get("url"), str) or not item.get("url"):
                logger.warning("Skipping article without url: %r", item.get("title"))
                continue
            articles.append(Article.from_dict(item))
        return cls(total_articles=total, articles=articles)


@dataclass
class Bookmark:
    url: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    source_name: Optional[str] = None
    published_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        # On-disk keys are camelCase.
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "sourceName": self.source_name,
            "publishedAt": self.published_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bookmark:
        url = data.get("url")
        if not isinstance(url, str):
            raise ValueError("bookmark entry has no url")
        return cls(
            url=url,
            title=_opt_str(data.get("title")) or "",
            description=_opt_str(data.get("description")),
            image=_opt_str(data.get("image")),
            source_name=_opt_str(data.get("sourceName")),
            published_at=_opt_str(data.get("publishedAt")),
        )
