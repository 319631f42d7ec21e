from __future__ import annotations

import json
import logging
import os
from typing import List, Sequence

from .datamodels import Article, format_cache_timestamp, parse_cache_timestamp
from .errors import CacheError, NoCachedDataError
from .storage import atomic_write_text

logger = logging.getLogger("spacenews")


class ArticleCache:
    """Last successfully fetched page of articles, kept on disk for offline use."""

    def __init__(self, path: str):
        self.path = path

    def save(self, articles: Sequence[Article]) -> None:
        payload = [a.to_dict(format_cache_timestamp) for a in articles]
        try:
            atomic_write_text(self.path, json.dumps(payload))
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(e) from e
        logger.debug("Cached %d articles to %s", len(payload), self.path)

    def load(self) -> List[Article]:
        if not os.path.exists(self.path):
            raise NoCachedDataError()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise TypeError("cached articles should be a JSON array")
            articles = [Article.from_dict(item, parse_cache_timestamp) for item in data]
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.warning("Failed to read cache file %s: %s", self.path, e)
            raise CacheError(e) from e

        logger.debug("Cache hit: %d articles from %s", len(articles), self.path)
        return articles

    def clear(self) -> None:
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Failed to delete cache file %s: %s", self.path, e)
            raise CacheError(e) from e
        logger.info("Cache cleared.")
