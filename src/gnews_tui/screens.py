from __future__ import annotations

import logging
import webbrowser

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Label,
    Markdown,
)

from .bookmarks import BookmarkStore
from .datamodels import Bookmark
from .errors import StorageDecodeFailed
from .messages import BookmarksChanged
from .widgets import article_meta

logger = logging.getLogger("gnews")


class ErrorScreen(Screen):
    BINDINGS = [Binding("q", "app.quit", "Quit")]

    def __init__(self, title: str, message: str):
        super().__init__()
        self.title = title
        self.message = message

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label(self.title, classes="error-title")
        yield Markdown(self.message)
        yield Footer()


class BookmarksScreen(Screen):
    BINDINGS = [
        Binding("escape,q,B,left", "app.pop_screen", "Back"),
        Binding("d", "delete_bookmark", "Delete"),
        Binding("o", "open_in_browser", "Open in browser"),
    ]

    def __init__(self, store: BookmarkStore):
        super().__init__()
        self.store = store
        self.bookmarks: list[Bookmark] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()
        yield DataTable(id="bookmarks-table")

    def on_mount(self) -> None:
        self.title = "Bookmarks"
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.add_column("Title", key="title")
        table.add_column("Source", key="source")
        try:
            self.bookmarks = self.store.load_all()
        except StorageDecodeFailed as e:
            self.app.push_screen(ErrorScreen("Bookmarks unavailable", e.message))
            return
        for bookmark in self.bookmarks:
            table.add_row(
                bookmark.title or bookmark.url,
                article_meta(bookmark.source_name, bookmark.published_at),
                key=bookmark.url,
            )
        if not self.bookmarks:
            self.sub_title = "No bookmarks yet"

    def _selected(self) -> Bookmark | None:
        table = self.query_one(DataTable)
        if not table.is_valid_row_index(table.cursor_row):
            return None
        url = str(table.get_row_key(table.cursor_row).value)
        return next((b for b in self.bookmarks if b.url == url), None)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_open_in_browser()

    def action_open_in_browser(self) -> None:
        bookmark = self._selected()
        if bookmark:
            webbrowser.open(bookmark.url)

    def action_delete_bookmark(self) -> None:
        """Delete the selected bookmark."""
        bookmark = self._selected()
        if bookmark is None:
            return
        table = self.query_one(DataTable)
        try:
            self.store.remove(bookmark)
        except StorageDecodeFailed as e:
            logger.error("Could not delete bookmark %s: %s", bookmark.url, e)
            self.app.notify(e.message, severity="error")
            return
        self.bookmarks = [b for b in self.bookmarks if b.url != bookmark.url]
        table.remove_row(bookmark.url)
        self.app.post_message(BookmarksChanged(bookmark.url))
        self.app.notify("Bookmark deleted.")
