from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

# Server timestamps come in two shapes; the cache only ever writes the first.
API_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
CACHE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
DISPLAY_DATE_FORMAT = "%b %d, %Y at %H:%M"


def parse_api_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, with or without fractional seconds."""
    if not isinstance(value, str):
        raise TypeError(f"Expected timestamp string, got {type(value).__name__}")
    for fmt in API_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value}")


def parse_cache_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"Expected timestamp string, got {type(value).__name__}")
    return datetime.strptime(value, CACHE_TIMESTAMP_FORMAT)


def format_cache_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(CACHE_TIMESTAMP_FORMAT)


def _field(data: Dict[str, Any], key: str, kind: type, optional: bool = False) -> Any:
    value = data[key] if not optional else data.get(key)
    if value is None and optional:
        return None
    # bool is an int subclass, keep ids and flags apart
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise TypeError(f"Field '{key}' should be {kind.__name__}, got {value!r}")
    return value


# --- Data models ---
@dataclass(frozen=True)
class Article:
    id: int
    title: str
    summary: str
    url: str
    image_url: Optional[str]
    news_site: str
    published_at: datetime
    updated_at: datetime
    featured: bool = False

    @property
    def description_text(self) -> str:
        return self.summary

    @property
    def thumbnail_url(self) -> Optional[str]:
        return self.image_url

    @property
    def formatted_date(self) -> str:
        return self.published_at.astimezone().strftime(DISPLAY_DATE_FORMAT)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        parse_timestamp: Callable[[Any], datetime] = parse_api_timestamp,
    ) -> "Article":
        """Build an article from its wire representation.

        Raises KeyError, TypeError or ValueError on malformed input; callers
        translate those into their own error types.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Article should be an object, got {type(data).__name__}")
        return cls(
            id=_field(data, "id", int),
            title=_field(data, "title", str),
            summary=_field(data, "summary", str),
            url=_field(data, "url", str),
            image_url=_field(data, "image_url", str, optional=True),
            news_site=_field(data, "news_site", str),
            published_at=parse_timestamp(data["published_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
            featured=_field(data, "featured", bool),
        )

    def to_dict(
        self, format_timestamp: Callable[[datetime], str] = format_cache_timestamp
    ) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "image_url": self.image_url,
            "news_site": self.news_site,
            "published_at": format_timestamp(self.published_at),
            "updated_at": format_timestamp(self.updated_at),
            "featured": self.featured,
        }


@dataclass(frozen=True)
class PageEnvelope:
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Article] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageEnvelope":
        if not isinstance(data, dict):
            raise TypeError(f"Envelope should be an object, got {type(data).__name__}")
        results = _field(data, "results", list)
        return cls(
            count=_field(data, "count", int),
            next=_field(data, "next", str, optional=True),
            previous=_field(data, "previous", str, optional=True),
            results=[Article.from_dict(item) for item in results],
        )
