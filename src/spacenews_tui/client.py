from __future__ import annotations

import logging
import threading
from typing import List, Optional
from urllib.parse import urlencode

import requests
from requests.adapters import HTTPAdapter

from .config import API_BASE_URL, HTTP_TIMEOUT, PAGE_LIMIT, REQUEST_HEADERS
from .datamodels import PageEnvelope
from .errors import DecodeError, InvalidURLError, NetworkError

logger = logging.getLogger("spacenews")


def build_first_page_url(search_query: str, base_url: str = API_BASE_URL) -> str:
    params = {"limit": PAGE_LIMIT}
    trimmed = search_query.strip()
    if trimmed:
        params["search"] = trimmed
    return f"{base_url}?{urlencode(params)}"


class NewsAPIClient:
    """Single-shot GET against the paginated articles endpoint."""

    def __init__(self, base_url: str = API_BASE_URL, timeout: float = HTTP_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout
        # requests.Session is not thread-safe, and a superseded fetch may still
        # be running on another worker thread, so each thread gets its own
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        s = getattr(self._local, "session", None)
        if s is None:
            s = self._create_session()
            self._local.session = s
            with self._sessions_lock:
                self._sessions.append(s)
        return s

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        # Retrying is the caller's decision, never the transport's
        adapter = HTTPAdapter(max_retries=0)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def first_page_url(self, search_query: str) -> str:
        return build_first_page_url(search_query, self.base_url)

    def fetch(self, search_query: str, page_url: Optional[str] = None) -> PageEnvelope:
        """Fetch one page of articles.

        ``page_url`` is an opaque server cursor and is used verbatim; when it
        is given ``search_query`` plays no part in the request.
        """
        url = page_url if page_url is not None else self.first_page_url(search_query)
        if not url.startswith(("https://", "http://")):
            raise InvalidURLError(url)

        logger.debug("Fetching %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            raise NetworkError(e) from e

        try:
            envelope = PageEnvelope.from_dict(resp.json())
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Could not decode response from %s: %s", url, e)
            raise DecodeError(e) from e

        logger.debug(
            "Fetched %s OK: %d of %d articles", url, len(envelope.results), envelope.count
        )
        return envelope

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for s in sessions:
            s.close()
