from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .datamodels import Article

BOOKMARKED_MARK = "★"
UNBOOKMARKED_MARK = "☆"


# --- UI Widgets ---
class CategoryListItem(ListItem):
    def __init__(self, category: str):
        super().__init__()
        self.category = category

    def compose(self) -> ComposeResult:
        yield Static(self.category)


class ArticleItem(ListItem):
    bookmarked = reactive(False)

    def __init__(self, article: Article, bookmarked: bool = False):
        super().__init__()
        self.article = article
        self.set_reactive(ArticleItem.bookmarked, bookmarked)

    def compose(self) -> ComposeResult:
        with Horizontal(classes="headline-container"):
            yield Static(self._mark(), classes="headline-mark")
            with Vertical(classes="headline-body"):
                yield Static(self.article.title or self.article.url, classes="headline-title")
                if self.article.description:
                    yield Static(self.article.description, classes="headline-description")
                meta = article_meta(self.article.source_name, self.article.published_at)
                if meta:
                    yield Static(meta, classes="headline-meta")

    def on_mount(self) -> None:
        self.set_class(self.bookmarked, "bookmarked")

    def _mark(self) -> str:
        return BOOKMARKED_MARK if self.bookmarked else UNBOOKMARKED_MARK

    def watch_bookmarked(self, bookmarked: bool) -> None:
        self.set_class(bookmarked, "bookmarked")
        try:
            self.query_one(".headline-mark", Static).update(self._mark())
        except Exception:
            pass  # not composed yet


def article_meta(source_name: str | None, published_at: str | None) -> str:
    """Source and date line; dates are shown as their first ten characters."""
    parts = []
    if source_name:
        parts.append(f"Source: {source_name}")
    if published_at:
        parts.append(published_at[:10])
    return "  ".join(parts)


class StatusBar(Static):
    loading_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class ErrorMessage(Static):
    def __init__(self, message: str, **kwargs):
        super().__init__(Text(message, style="bold red"), **kwargs)

    def set_message(self, message: str | None) -> None:
        self.update(Text(message or "", style="bold red"))
        self.display = bool(message)
