from __future__ import annotations

from typing import Optional


class NewsError(Exception):
    """Base class for every failure the feed can surface."""

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return "Unknown error."


class InvalidURLError(NewsError):
    def __init__(self, url: str):
        self.url = url
        super().__init__()

    @property
    def description(self) -> str:
        return f"Invalid URL: {self.url!r}."


class NetworkError(NewsError):
    @property
    def description(self) -> str:
        return f"Network error: {self.cause}"


class DecodeError(NewsError):
    @property
    def description(self) -> str:
        return f"Failed to decode server response: {self.cause}"


class NoCachedDataError(NewsError):
    @property
    def description(self) -> str:
        return "No offline data available."


class UnknownError(NewsError):
    @property
    def description(self) -> str:
        return f"Unknown error: {self.cause or 'Unknown error'}"


class CacheError(NewsError):
    @property
    def description(self) -> str:
        return f"Offline cache error: {self.cause}"


class BookmarkError(NewsError):
    @property
    def description(self) -> str:
        return f"Could not save bookmarks: {self.cause}"
