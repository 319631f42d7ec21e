from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .coordinator import FeedState
from .datamodels import Article


# --- UI Widgets ---
class ArticleItem(ListItem):
    def __init__(self, article: Article, bookmarked: bool = False):
        super().__init__()
        self.article = article
        self.bookmarked = bookmarked

    def compose(self) -> ComposeResult:
        with Horizontal(classes="headline-container"):
            yield Static("★" if self.bookmarked else " ", classes="headline-flag")
            yield Static(self.article.news_site, classes="headline-section")
            yield Static(self.article.title, classes="headline-title")


class StatusBar(Static):
    loading_status = reactive("")
    page_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def show_state(self, state: FeedState) -> None:
        if state.is_refreshing:
            self.loading_status = "Refreshing..."
        elif state.is_loading_page:
            self.loading_status = "Loading page..."
        elif state.is_loading:
            self.loading_status = "Loading articles..."
        else:
            self.loading_status = ""

        arrows = []
        if state.previous_page_url is not None:
            arrows.append("[b]p[/] prev")
        if state.next_page_url is not None:
            arrows.append("[b]n[/] next")
        self.page_status = " ".join(arrows)

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = [
            item
            for item in (self.loading_status, self.page_status, self.keybinding_hint)
            if item
        ]
        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_page_status(self, page_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class ErrorMessage(Static):
    def __init__(self, message: str, **kwargs):
        super().__init__(Text(message, style="bold red"), **kwargs)

    def set_message(self, message: str) -> None:
        self.update(Text(message, style="bold red"))
