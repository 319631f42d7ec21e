from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .bookmarks import BookmarkSet
from .cache import ArticleCache
from .client import NewsAPIClient
from .config import SEARCH_DEBOUNCE_INTERVAL
from .datamodels import Article, PageEnvelope
from .errors import BookmarkError, NewsError, UnknownError

logger = logging.getLogger("spacenews")

OFFLINE_NOTICE = "Showing offline data."


@dataclass
class FeedState:
    search_query: str = ""
    articles: List[Article] = field(default_factory=list)
    is_loading: bool = False
    is_loading_page: bool = False
    is_refreshing: bool = False
    error_message: Optional[str] = None
    next_page_url: Optional[str] = None
    previous_page_url: Optional[str] = None
    # URL that produced ``articles``; refresh() reloads it
    current_page_url: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.is_loading_page


Listener = Callable[[FeedState], None]


class FeedCoordinator:
    """Reconciles live fetches, the offline cache and pagination cursors.

    All methods must be called from the thread running the event loop. The
    blocking HTTP call is pushed to a worker thread, but every state change
    happens back on the loop, so no locking is needed. Listeners registered
    with :meth:`subscribe` are called with the state after each change.
    """

    def __init__(
        self,
        client: NewsAPIClient,
        cache: ArticleCache,
        bookmarks: BookmarkSet,
        debounce_interval: float = SEARCH_DEBOUNCE_INTERVAL,
    ):
        self.client = client
        self.cache = cache
        self.bookmarks = bookmarks
        self.debounce_interval = debounce_interval
        self.state = FeedState()
        self._listeners: List[Listener] = []
        self._search_timer: Optional[asyncio.TimerHandle] = None
        self._last_triggered_query: Optional[str] = None
        self._fetch_task: Optional[asyncio.Task] = None
        self._fetch_is_reset = False
        self._closed = False

    # --- Observation ---
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception as e:
                logger.exception("Feed listener %r failed: %s", listener, e)

    @property
    def can_go_next(self) -> bool:
        return self.state.next_page_url is not None

    @property
    def can_go_previous(self) -> bool:
        return self.state.previous_page_url is not None

    def is_bookmarked(self, article: Article) -> bool:
        return self.bookmarks.is_bookmarked(article.url)

    # --- Caller actions ---
    def set_search_query(self, text: str) -> None:
        self.state.search_query = text
        self._notify()

        old_timer = self._search_timer
        self._search_timer = None
        if old_timer is not None:
            old_timer.cancel()
        if self._closed:
            return
        loop = asyncio.get_running_loop()
        self._search_timer = loop.call_later(self.debounce_interval, self._debounced_search)

    def _debounced_search(self) -> None:
        self._search_timer = None
        trimmed = self.state.search_query.strip()
        if trimmed == self._last_triggered_query:
            logger.debug("Search %r unchanged, not refetching", trimmed)
            return
        self._last_triggered_query = trimmed
        logger.debug("Search settled on %r", trimmed)
        self._fetch(page_url=None, reset=True)

    def initial_load(self, search_query: Optional[str] = None) -> None:
        if search_query is not None:
            self.state.search_query = search_query
        try:
            self.state.articles = self.cache.load()
            logger.info("Pre-populated %d articles from cache", len(self.state.articles))
            self._notify()
        except NewsError as e:
            logger.debug("No cached articles on launch: %s", e.description)

        self._last_triggered_query = self.state.search_query.strip()
        self._fetch(page_url=None, reset=True)

    def refresh(self) -> None:
        self.state.is_refreshing = True
        self._fetch(page_url=self.state.current_page_url, reset=False)

    def go_to_next_page(self) -> None:
        url = self.state.next_page_url
        if url is None or self.state.is_busy:
            return
        self.state.is_loading_page = True
        self._fetch(page_url=url, reset=False)

    def go_to_previous_page(self) -> None:
        url = self.state.previous_page_url
        if url is None or self.state.is_busy:
            return
        self.state.is_loading_page = True
        self._fetch(page_url=url, reset=False)

    def toggle_bookmark(self, article: Article) -> None:
        self.toggle_bookmark_url(article.url)

    def toggle_bookmark_url(self, url: str) -> None:
        try:
            self.bookmarks.toggle(url)
        except BookmarkError as e:
            self.state.error_message = e.description
        self._notify()

    # --- Fetching ---
    def _fetch(self, page_url: Optional[str], reset: bool) -> None:
        if self._closed:
            return
        in_flight = self._fetch_task is not None and not self._fetch_task.done()
        # Taking over from a reset keeps its cache fallback on failure
        if in_flight and self._fetch_is_reset:
            reset = True

        self.state.error_message = None
        if reset:
            self.state.is_loading = True
            self.state.next_page_url = None
            self.state.previous_page_url = None
            self.state.current_page_url = None

        # A newer request supersedes whatever is still in flight
        if in_flight:
            self._fetch_task.cancel()

        search_query = self.state.search_query
        self._fetch_is_reset = reset
        self._fetch_task = asyncio.get_running_loop().create_task(
            self._run_fetch(search_query, page_url, reset)
        )
        self._notify()

    async def _run_fetch(
        self, search_query: str, page_url: Optional[str], reset: bool
    ) -> None:
        try:
            envelope = await asyncio.to_thread(self.client.fetch, search_query, page_url)
        except NewsError as e:
            self._apply_failure(e, reset)
        except Exception as e:
            logger.exception("Unexpected failure fetching articles")
            self._apply_failure(UnknownError(e), reset)
        else:
            self._apply_success(envelope, search_query, page_url)

        # Cancellation skips this, so a superseded fetch leaves the flags alone
        self.state.is_loading = False
        self.state.is_loading_page = False
        self.state.is_refreshing = False
        self._notify()

    def _apply_success(
        self, envelope: PageEnvelope, search_query: str, page_url: Optional[str]
    ) -> None:
        self.state.articles = list(envelope.results)
        try:
            self.cache.save(self.state.articles)
        except NewsError as e:
            logger.warning("Could not update offline cache: %s", e.description)

        self.state.next_page_url = envelope.next
        self.state.previous_page_url = envelope.previous
        if page_url is not None:
            self.state.current_page_url = page_url
        else:
            self.state.current_page_url = self.client.first_page_url(search_query)

    def _apply_failure(self, error: NewsError, reset: bool) -> None:
        logger.error("Fetch failed: %s", error.description)
        self.state.error_message = error.description
        if not reset:
            return
        try:
            cached = self.cache.load()
        except NewsError as e:
            logger.debug("No offline fallback: %s", e.description)
            return
        self.state.articles = cached
        self.state.error_message = f"{OFFLINE_NOTICE}\n{error.description}"

    async def wait_for_fetch(self) -> None:
        """Wait until the tracked fetch, if any, has settled."""
        while self._fetch_task is not None and not self._fetch_task.done():
            task = self._fetch_task
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    def close(self) -> None:
        self._closed = True
        if self._search_timer is not None:
            self._search_timer.cancel()
            self._search_timer = None
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._listeners.clear()
