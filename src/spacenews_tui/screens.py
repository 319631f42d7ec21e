from __future__ import annotations

import webbrowser

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Markdown

from .coordinator import FeedCoordinator
from .datamodels import Article
from .widgets import StatusBar


class ArticleViewScreen(Screen):
    BINDINGS = [
        Binding("escape,q,left", "app.pop_screen", "Back"),
        Binding("o", "open_in_browser", "Open in browser"),
        Binding("b", "bookmark", "Bookmark"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, article: Article, coordinator: FeedCoordinator):
        super().__init__()
        self.article = article
        self.coordinator = coordinator

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(
            Markdown(self._render_markdown(), id="article-markdown"),
            id="article-scroll",
        )
        yield StatusBar()

    def _render_markdown(self) -> str:
        a = self.article
        marker = " ★" if self.coordinator.is_bookmarked(a) else ""
        parts = [
            f"# {a.title}{marker}",
            f"*{a.news_site}* · {a.formatted_date}",
            a.description_text,
            f"[Read the full article]({a.url})",
        ]
        return "\n\n".join(parts)

    def on_mount(self) -> None:
        self.title = self.article.news_site
        self.sub_title = self.article.formatted_date
        self.query_one("#article-scroll").focus()
        self.query_one(StatusBar).set_keybindings(
            "[b]o[/] to open, [b]b[/] to bookmark, [b]esc[/] to go back"
        )

    def action_open_in_browser(self) -> None:
        webbrowser.open(self.article.url)

    def action_bookmark(self) -> None:
        self.coordinator.toggle_bookmark(self.article)
        self.query_one("#article-markdown", Markdown).update(self._render_markdown())

    def action_scroll_down(self) -> None:
        self.query_one("#article-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#article-scroll").scroll_up()


class BookmarksScreen(Screen):
    BINDINGS = [
        Binding("escape,q,left", "app.pop_screen", "Back"),
        Binding("d", "delete_bookmark", "Delete"),
        Binding("o", "open_in_browser", "Open in browser"),
    ]

    def __init__(self, coordinator: FeedCoordinator):
        super().__init__()
        self.coordinator = coordinator

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()
        yield DataTable(id="bookmarks-table")

    def on_mount(self) -> None:
        self.title = "Bookmarks"
        titles = {a.url: a.title for a in self.coordinator.state.articles}
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.add_column("Title", key="title")
        table.add_column("URL", key="url")
        for url in self.coordinator.bookmarks.urls():
            table.add_row(titles.get(url, ""), url, key=url)

    def _selected_url(self) -> str | None:
        table = self.query_one(DataTable)
        if not table.is_valid_row_index(table.cursor_row):
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return str(row_key.value)

    def action_open_in_browser(self) -> None:
        url = self._selected_url()
        if url:
            webbrowser.open(url)

    def action_delete_bookmark(self) -> None:
        """Delete the selected bookmark."""
        url = self._selected_url()
        if url is None:
            return
        self.coordinator.toggle_bookmark_url(url)
        if self.coordinator.bookmarks.is_bookmarked(url):
            self.app.notify("Could not delete bookmark.", severity="error")
            return
        self.query_one(DataTable).remove_row(url)
        self.app.notify("Bookmark deleted.")
