from __future__ import annotations

from typing import Any, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Header, Input, ListView, Static

from .bookmarks import BookmarkSet
from .cache import ArticleCache
from .client import NewsAPIClient
from .config import logger
from .coordinator import FeedCoordinator, FeedState
from .screens import ArticleViewScreen, BookmarksScreen
from .widgets import ArticleItem, ErrorMessage, StatusBar


def build_coordinator(config: dict[str, Any]) -> FeedCoordinator:
    """Wire the feed coordinator from a loaded config dict."""
    client = NewsAPIClient(
        base_url=config["api_base_url"], timeout=float(config["http_timeout"])
    )
    return FeedCoordinator(
        client=client,
        cache=ArticleCache(config["cache_file"]),
        bookmarks=BookmarkSet(config["bookmarks_file"]),
        debounce_interval=float(config["search_debounce_interval"]),
    )


class NewsApp(App):
    TITLE = "Spaceflight News"
    SUB_TITLE = "Latest from the launch pad"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("n", "next_page", "Next page"),
        Binding("p", "previous_page", "Previous page"),
        Binding("b", "bookmark", "Bookmark"),
        Binding("B", "show_bookmarks", "Show Bookmarks"),
        Binding("/", "focus_search", "Search"),
        Binding("escape", "focus_list", "Back to list", show=False),
    ]

    def __init__(
        self,
        coordinator: FeedCoordinator,
        theme: Optional[str] = None,
        initial_search: str = "",
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.coordinator = coordinator
        self._theme_name = theme
        self._initial_search = initial_search
        self._unsubscribe = None
        self._main_screen = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            yield Input(
                value=self._initial_search,
                placeholder="Search articles...",
                id="search",
            )
            yield ErrorMessage("", id="error-message")
            yield ListView(id="articles-list")
            yield Static("", id="empty-message")
        yield StatusBar()

    def on_mount(self) -> None:
        self._main_screen = self.screen
        if self._theme_name:
            try:
                self.theme = self._theme_name
            except Exception as e:
                logger.warning("Unknown theme '%s': %s", self._theme_name, e)

        self.query_one(StatusBar).set_keybindings(
            "[b]/[/] search, [b]r[/] refresh, [b]b[/] bookmark, [b]B[/] bookmarks"
        )
        self.query_one("#articles-list", ListView).focus()

        self._unsubscribe = self.coordinator.subscribe(self._render_state)
        self.coordinator.initial_load(self._initial_search)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self.coordinator.close()
        self.coordinator.client.close()

    def _render_state(self, state: FeedState) -> None:
        """Mirror the coordinator state onto the widgets."""
        # Pushed screens sit on top; the feed widgets live on the first one
        screen = self._main_screen
        screen.query_one(StatusBar).show_state(state)

        error = screen.query_one("#error-message", ErrorMessage)
        error.set_message(state.error_message or "")
        error.display = bool(state.error_message)

        articles_list = screen.query_one("#articles-list", ListView)
        articles_list.clear()
        for article in state.articles:
            articles_list.append(
                ArticleItem(article, bookmarked=self.coordinator.is_bookmarked(article))
            )

        empty = screen.query_one("#empty-message", Static)
        empty.display = not state.articles and not state.is_busy
        empty.update("No articles found." if empty.display else "")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search":
            self.coordinator.set_search_query(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self.action_focus_list()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ArticleItem):
            self.push_screen(ArticleViewScreen(event.item.article, self.coordinator))

    def _highlighted_article(self) -> Optional[ArticleItem]:
        item = self.query_one("#articles-list", ListView).highlighted_child
        return item if isinstance(item, ArticleItem) else None

    def action_refresh(self) -> None:
        self.coordinator.refresh()

    def action_next_page(self) -> None:
        self.coordinator.go_to_next_page()

    def action_previous_page(self) -> None:
        self.coordinator.go_to_previous_page()

    def action_bookmark(self) -> None:
        item = self._highlighted_article()
        if item is None:
            return
        self.coordinator.toggle_bookmark(item.article)

    def action_show_bookmarks(self) -> None:
        self.push_screen(BookmarksScreen(self.coordinator))

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_focus_list(self) -> None:
        self.query_one("#articles-list", ListView).focus()
