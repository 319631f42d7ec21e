from __future__ import annotations

import logging
import os
from typing import FrozenSet, List

from .errors import BookmarkError
from .storage import atomic_write_text

logger = logging.getLogger("spacenews")

# URLs containing this character cannot be bookmarked reliably.
DELIMITER = "|"


def decode_bookmarks(raw: str) -> FrozenSet[str]:
    return frozenset(part for part in raw.split(DELIMITER) if part)


def encode_bookmarks(urls: FrozenSet[str]) -> str:
    return DELIMITER.join(sorted(urls))


class BookmarkSet:
    """Bookmarked article URLs, persisted as one pipe-delimited string."""

    def __init__(self, path: str):
        self.path = path
        self._urls = self._load()

    def _load(self) -> FrozenSet[str]:
        if not os.path.exists(self.path):
            return frozenset()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return decode_bookmarks(f.read().strip())
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read bookmarks from %s: %s", self.path, e)
            return frozenset()

    def is_bookmarked(self, url: str) -> bool:
        return url in self._urls

    def toggle(self, url: str) -> bool:
        """Flip membership of ``url`` and persist. Returns the new membership."""
        if url in self._urls:
            updated = self._urls - {url}
        else:
            updated = self._urls | {url}
        try:
            atomic_write_text(self.path, encode_bookmarks(updated))
        except OSError as e:
            logger.error("Failed to save bookmarks to %s: %s", self.path, e)
            raise BookmarkError(e) from e
        self._urls = updated
        return url in updated

    def urls(self) -> List[str]:
        return sorted(self._urls)
