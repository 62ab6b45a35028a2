from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .client import ArticleFeedClient
from .datamodels import Article, FeedPage
from .errors import FetchFailed

logger = logging.getLogger("gnews")

HEADLINES = "headlines"
SEARCH = "search"


@dataclass(frozen=True)
class FeedRequest:
    """What a feed shows: a headline category or a search query."""

    kind: str
    value: str

    @classmethod
    def headlines(cls, category: str) -> FeedRequest:
        return cls(HEADLINES, category)

    @classmethod
    def for_search(cls, query: str) -> FeedRequest:
        return cls(SEARCH, query)

    @property
    def label(self) -> str:
        return f"Search: {self.value}" if self.kind == SEARCH else self.value

    @property
    def error_prefix(self) -> str:
        if self.kind == SEARCH:
            return "Error fetching search results"
        return "Error fetching news"

    def fetch(self, client: ArticleFeedClient, page: int) -> FeedPage:
        if self.kind == SEARCH:
            return client.search(self.value, page=page)
        return client.fetch_top_headlines(self.value, page=page)


@dataclass(frozen=True)
class PageTicket:
    """Identifies one in-flight page request of a session."""

    generation: int
    page: int


class FeedSession:
    """Accumulates the pages of one feed for the lifetime of a view.

    Pages are requested one at a time starting at 1. A failed page keeps
    the rows loaded so far and, when ``advance_on_error`` is set, still moves
    the counter on, so the next request asks for the following page. Pass
    ``advance_on_error=False`` for the fixed behaviour that retries the
    failed page instead.
    """

    def __init__(self, request: FeedRequest, advance_on_error: bool = True):
        self.request = request
        self.advance_on_error = advance_on_error
        self.articles: List[Article] = []
        self.page = 1
        self.total_articles = 0
        self.error: Optional[str] = None
        self.exhausted = False
        self.loading = False
        self.generation = 0

    def reset(self, request: Optional[FeedRequest] = None) -> None:
        """Start over from page 1; responses for earlier tickets are dropped."""
        if request is not None:
            self.request = request
        self.articles = []
        self.page = 1
        self.total_articles = 0
        self.error = None
        self.exhausted = False
        self.loading = False
        self.generation += 1

    def begin(self) -> PageTicket:
        if self.loading:
            raise RuntimeError(f"page {self.page} of {self.request.label} is already loading")
        self.loading = True
        return PageTicket(self.generation, self.page)

    def is_current(self, ticket: PageTicket) -> bool:
        return ticket.generation == self.generation and ticket.page == self.page

    def complete(self, ticket: PageTicket, result: FeedPage) -> bool:
        if not self.is_current(ticket):
            logger.debug("Dropping stale page %d for %s", ticket.page, self.request.label)
            return False
        self.articles.extend(result.articles)
        self.total_articles = result.total_articles
        self.exhausted = not result.articles or len(self.articles) >= result.total_articles
        self.error = None
        self.page += 1
        self.loading = False
        return True

    def fail(self, ticket: PageTicket, error: Exception) -> bool:
        if not self.is_current(ticket):
            logger.debug("Dropping stale failure for %s: %s", self.request.label, error)
            return False
        message = error.message if isinstance(error, FetchFailed) else str(error)
        self.error = f"{self.request.error_prefix}: {message}"
        if self.advance_on_error:
            self.page += 1
        self.loading = False
        return True

    def load_next(self, client: ArticleFeedClient) -> Optional[FeedPage]:
        """Fetch the next page synchronously; returns None when it failed."""
        ticket = self.begin()
        try:
            result = self.request.fetch(client, ticket.page)
        except FetchFailed as e:
            self.fail(ticket, e)
            return None
        except Exception:
            self.loading = False
            raise
        self.complete(ticket, result)
        return result
