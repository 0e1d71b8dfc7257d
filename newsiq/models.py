from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional

from newsiq.categories import CANONICAL_CATEGORIES, to_canonical_category
from newsiq.sentiment import SENTIMENTS, classify
from newsiq.utils import clean_description, parse_iso

Sentiment = Literal["positive", "negative", "neutral"]

SOURCE_TYPE_FEED = "external-feed"
SOURCE_TYPE_INTERNAL = "internal"


@dataclass(frozen=True)
class SourceRef:
    name: str
    id: str = ""


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    description: str
    published_at: str  # ISO-8601
    source: SourceRef
    category: str
    sentiment: Sentiment
    url: str = ""
    image: str = ""
    author: str = ""
    content: str = ""
    source_type: str = SOURCE_TYPE_FEED
    priority: Optional[int] = None  # set by the aggregator only

    def to_dict(self) -> Dict[str, Any]:
        """Front-end shape (camelCase keys)."""
        out: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "publishedAt": self.published_at,
            "source": {"name": self.source.name, "id": self.source.id},
            "category": self.category,
            "sentiment": self.sentiment,
            "url": self.url,
            "image": self.image,
            "author": self.author,
            "content": self.content,
            "sourceType": self.source_type,
        }
        if self.priority is not None:
            out["priority"] = self.priority
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], ordinal: int = 0,
                  source_type: str = SOURCE_TYPE_INTERNAL,
                  now: Optional[datetime] = None) -> "Article":
        """Build an Article from an already-shaped JSON record.

        Missing or malformed fields fall back to the same defaults the feed
        normalizer uses, so this never raises on a dict input.
        """
        now = now or datetime.now(timezone.utc)

        title = str(data.get("title") or "").strip() or "No Title"
        raw_description = str(data.get("description") or "")

        raw_source = data.get("source")
        if isinstance(raw_source, Mapping):
            source = SourceRef(
                name=str(raw_source.get("name") or "Internal"),
                id=str(raw_source.get("id") or ""),
            )
        elif raw_source:
            source = SourceRef(name=str(raw_source))
        else:
            source = SourceRef(name="Internal")

        category = str(data.get("category") or "")
        if category not in CANONICAL_CATEGORIES:
            category = to_canonical_category(category)

        sentiment = data.get("sentiment")
        if sentiment not in SENTIMENTS:
            sentiment = classify(f"{title} {raw_description}")

        raw_published = data.get("publishedAt")
        published = parse_iso(str(raw_published) if raw_published else "", default=now)

        article_id = data.get("id")
        if not article_id:
            article_id = f"{source_type}-{int(now.timestamp() * 1000)}-{ordinal}"

        return cls(
            id=str(article_id),
            title=title,
            description=clean_description(raw_description),
            published_at=published.isoformat(),
            source=source,
            category=category,
            sentiment=sentiment,
            url=str(data.get("url") or ""),
            image=str(data.get("image") or ""),
            author=str(data.get("author") or ""),
            content=str(data.get("content") or ""),
            source_type=source_type,
        )


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fan-out branch: either articles or the failure cause."""
    source: str
    articles: List[Article] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AggregateResult:
    articles: List[Article]
    requested: List[str]
    succeeded: List[str]
    failed: Dict[str, str]  # selector -> error message

    @property
    def count(self) -> int:
        return len(self.articles)
