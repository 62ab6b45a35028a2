from __future__ import annotations

import logging
import webbrowser
from typing import Any, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.worker import Worker, WorkerState
from textual.widgets import (
    Header,
    Input,
    ListView,
    Static,
    LoadingIndicator,
    Rule,
)

from .bookmarks import BookmarkStore
from .client import ArticleFeedClient
from .config import CATEGORIES, CONFIG_PATH, DEFAULT_THEME, UI_DEFAULTS
from .datamodels import FeedPage
from .errors import FetchFailed, StorageDecodeFailed
from .feed import SEARCH, FeedRequest, FeedSession, PageTicket
from .messages import BookmarksChanged
from .screens import BookmarksScreen, ErrorScreen
from .widgets import ArticleItem, CategoryListItem, ErrorMessage, StatusBar

logger = logging.getLogger("gnews")

SEARCH_ENTRY = "Search"


class NewsApp(App):
    TITLE = "GNews"
    SUB_TITLE = "Headlines and search"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("m", "load_more", "More"),
        Binding("b", "bookmark", "Bookmark"),
        Binding("B", "show_bookmarks", "Show Bookmarks"),
        Binding("o", "open_in_browser", "Open"),
        Binding("left", "nav_left", "Navigate Left"),
        Binding("right", "nav_right", "Navigate Right"),
        Binding("ctrl+l", "toggle_left_pane", "Toggle Categories"),
        Binding("/", "focus_search", "Search"),
    ]

    def __init__(
        self,
        client: Optional[ArticleFeedClient],
        store: BookmarkStore,
        theme: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        advance_on_error: bool = True,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.client = client
        self.store = store
        self.config = config or {}
        self._theme_name = theme or DEFAULT_THEME
        self.session = FeedSession(
            FeedRequest.headlines(CATEGORIES[0]), advance_on_error=advance_on_error
        )
        self.bookmarked_urls: set[str] = set()
        self._pending: Dict[Worker, PageTicket] = {}

    def compose(self) -> ComposeResult:
        yield Header()
        # left = categories, right = headlines
        with Horizontal(id="main"):
            with Vertical(id="left"):
                yield Static("Categories", classes="pane-title")
                yield ListView(id="categories-list")
            yield Rule(orientation="vertical")
            with Vertical(id="right"):
                yield Static("Headlines", classes="pane-title", id="feed-title")
                yield Input(placeholder="Search news...", id="search-input")
                yield ErrorMessage("", id="feed-error")
                yield ListView(id="headlines-list")
        yield StatusBar()

    def on_mount(self) -> None:
        self.theme = self._theme_name
        self.query_one("#feed-error", ErrorMessage).display = False
        self.query_one("#search-input", Input).display = False

        view = self.query_one("#categories-list", ListView)
        for category in CATEGORIES + [SEARCH_ENTRY]:
            view.append(CategoryListItem(category))

        keybindings_text = self.config.get("ui", {}).get(
            "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
        )
        self.query_one(StatusBar).set_keybindings(keybindings_text.format(color="$accent"))

        try:
            self.bookmarked_urls = self.store.urls()
        except StorageDecodeFailed as e:
            self.push_screen(ErrorScreen("Bookmarks unavailable", e.message))
            return

        if self.client is None:
            self.push_screen(
                ErrorScreen(
                    "No GNews API key configured",
                    "Set `api_key` in "
                    f"`{CONFIG_PATH}`, export `GNEWS_API_KEY` or pass `--api-key`.",
                )
            )
            return

        view.focus()
        self.start_feed(self.session.request)

    # --- Feed loading ---
    def start_feed(self, request: FeedRequest) -> None:
        """Replace the current feed; any page still in flight is discarded."""
        self.session.reset(request)
        self.workers.cancel_group(self, "feed")
        self.query_one("#feed-title", Static).update(request.label)
        self.query_one("#feed-error", ErrorMessage).set_message(None)
        self.query_one("#headlines-list", ListView).clear()
        if request.kind == SEARCH and not request.value.strip():
            self.query_one(StatusBar).loading_status = ""
            return
        self.load_next_page()

    def load_next_page(self) -> None:
        if self.client is None or self.session.loading:
            return
        request = self.session.request
        if request.kind == SEARCH and not request.value.strip():
            return
        ticket = self.session.begin()
        self.query_one(StatusBar).loading_status = f"Loading {request.label} (page {ticket.page})..."
        headlines_list = self.query_one("#headlines-list", ListView)
        headlines_list.mount(LoadingIndicator())
        worker = self.run_worker(
            lambda: request.fetch(self.client, ticket.page),
            name="headlines_loader",
            group="feed",
            thread=True,
            exclusive=True,
            exit_on_error=False,
        )
        self._pending[worker] = ticket

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker.name != "headlines_loader":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING):
            return
        ticket = self._pending.pop(event.worker, None)
        if ticket is None or not self.session.is_current(ticket):
            return
        self._remove_loading_indicator()
        if event.state is WorkerState.SUCCESS:
            self._handle_page_loaded(ticket, event.worker.result)
        elif event.state is WorkerState.ERROR:
            self._handle_page_error(ticket, event.worker.error)
        else:
            # cancelled while still current
            self.session.fail(ticket, FetchFailed("request cancelled"))
            self.query_one(StatusBar).loading_status = ""

    def _remove_loading_indicator(self) -> None:
        headlines_list = self.query_one("#headlines-list", ListView)
        for indicator in headlines_list.query(LoadingIndicator):
            indicator.remove()

    def _handle_page_loaded(self, ticket: PageTicket, result: FeedPage) -> None:
        if not self.session.complete(ticket, result):
            return
        self.query_one(StatusBar).loading_status = (
            f"{len(self.session.articles)} of {self.session.total_articles} articles"
        )
        self.query_one("#feed-error", ErrorMessage).set_message(None)
        headlines_list = self.query_one("#headlines-list", ListView)
        for article in result.articles:
            headlines_list.append(ArticleItem(article, article.url in self.bookmarked_urls))

    def _handle_page_error(self, ticket: PageTicket, error: Optional[BaseException]) -> None:
        if not isinstance(error, Exception):
            error = FetchFailed("unknown error")
        if not isinstance(error, FetchFailed):
            logger.error("Headlines worker failed: %s", error)
        if not self.session.fail(ticket, error):
            return
        self.query_one(StatusBar).loading_status = "Error loading headlines."
        self.query_one("#feed-error", ErrorMessage).set_message(self.session.error)

    # --- Events ---
    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id == "categories-list":
            if isinstance(event.item, CategoryListItem):
                if event.item.category == SEARCH_ENTRY:
                    self.action_focus_search()
                else:
                    self.start_feed(FeedRequest.headlines(event.item.category))
        elif event.list_view.id == "headlines-list":
            if isinstance(event.item, ArticleItem):
                webbrowser.open(event.item.article.url)

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        if event.list_view.id != "headlines-list" or not isinstance(event.item, ArticleItem):
            return
        articles = self.session.articles
        if articles and event.item.article is articles[-1] and not self.session.exhausted:
            self.load_next_page()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search-input":
            return
        query = event.value.strip()
        self.start_feed(FeedRequest.for_search(query))
        if not query:
            event.input.display = False
        self.query_one("#headlines-list", ListView).focus()

    def on_bookmarks_changed(self, message: BookmarksChanged) -> None:
        self.bookmarked_urls.discard(message.removed_url)
        for item in self._article_items():
            if item.article.url == message.removed_url:
                item.bookmarked = False

    def _article_items(self) -> List[ArticleItem]:
        return list(self.query_one("#headlines-list", ListView).query(ArticleItem))

    def _highlighted_article(self) -> Optional[ArticleItem]:
        headlines_list = self.query_one("#headlines-list", ListView)
        item = headlines_list.highlighted_child
        return item if isinstance(item, ArticleItem) else None

    # --- Actions ---
    def action_refresh(self) -> None:
        if self.client is not None:
            self.start_feed(self.session.request)

    def action_load_more(self) -> None:
        self.load_next_page()

    def action_bookmark(self) -> None:
        item = self._highlighted_article()
        if item is None:
            return
        try:
            bookmarked = self.store.toggle(item.article.to_bookmark())
        except StorageDecodeFailed as e:
            logger.error("Bookmark toggle failed for %s: %s", item.article.url, e)
            self.notify(e.message, severity="error")
            return
        if bookmarked:
            self.bookmarked_urls.add(item.article.url)
        else:
            self.bookmarked_urls.discard(item.article.url)
        item.bookmarked = bookmarked

    def action_show_bookmarks(self) -> None:
        self.push_screen(BookmarksScreen(self.store))

    def action_open_in_browser(self) -> None:
        item = self._highlighted_article()
        if item is not None:
            webbrowser.open(item.article.url)

    def action_nav_left(self) -> None:
        if self.query_one("#headlines-list").has_focus:
            self.query_one("#categories-list").focus()

    def action_nav_right(self) -> None:
        if self.query_one("#categories-list").has_focus:
            self.query_one("#headlines-list").focus()

    def action_toggle_left_pane(self) -> None:
        """Toggle the left pane."""
        left_pane = self.query_one("#left")
        left_pane.display = not left_pane.display

    def action_focus_search(self) -> None:
        """Show and focus the search input."""
        search_input = self.query_one("#search-input", Input)
        search_input.display = True
        search_input.focus()
