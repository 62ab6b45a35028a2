from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import (
    DEFAULT_LANGUAGE,
    DEFAULT_PAGE_SIZE,
    GNEWS_BASE_URL,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
)
from .datamodels import FeedPage, topic_for_category
from .errors import FetchFailed

logger = logging.getLogger("gnews")


class ArticleFeedClient:
    """Client for the GNews top-headlines and search endpoints.

    Each call issues exactly one GET and returns one FeedPage. The client
    keeps no pagination state; any failure surfaces as FetchFailed.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = GNEWS_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        language: str = DEFAULT_LANGUAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.language = language
        self.page_size = page_size
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def fetch_top_headlines(
        self,
        category: Optional[str],
        page: int = 1,
        page_size: Optional[int] = None,
        language: Optional[str] = None,
    ) -> FeedPage:
        params = {"topic": topic_for_category(category)}
        return self._get_page("top-headlines", params, page, page_size, language)

    def search(
        self,
        query: str,
        page: int = 1,
        page_size: Optional[int] = None,
        language: Optional[str] = None,
    ) -> FeedPage:
        return self._get_page("search", {"q": query}, page, page_size, language)

    def _get_page(
        self,
        endpoint: str,
        params: Dict[str, Any],
        page: int,
        page_size: Optional[int],
        language: Optional[str],
    ) -> FeedPage:
        page_size = self.page_size if page_size is None else page_size
        if page < 1:
            raise ValueError(f"page must be a positive integer, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size}")

        url = f"{self.base_url}/{endpoint}"
        query = dict(params)
        query.update(
            {
                "lang": language or self.language,
                "max": page_size,
                "page": page,
            }
        )
        logger.debug("Fetching %s %s", url, query)
        try:
            resp = self.session.get(
                url, params={**query, "token": self.api_key}, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            message = _describe_http_error(e)
            logger.warning("Request to %s failed: %s", url, message)
            raise FetchFailed(message) from e
        except requests.RequestException as e:
            message = _describe_transport_error(e)
            logger.warning("Request to %s failed: %s", url, message)
            raise FetchFailed(message) from e

        try:
            result = FeedPage.from_dict(resp.json())
        except ValueError as e:
            logger.warning("Unexpected response shape from %s: %s", url, e)
            raise FetchFailed(f"Malformed response: {e}") from e
        logger.debug(
            "Fetched %d articles (total %d) from %s page %d",
            len(result.articles),
            result.total_articles,
            endpoint,
            page,
        )
        return result

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> ArticleFeedClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _describe_http_error(error: requests.HTTPError) -> str:
    resp = error.response
    if resp is None:
        return "HTTP error"
    detail = ""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("errors"):
        errors = body["errors"]
        if isinstance(errors, dict):
            errors = list(errors.values())
        if isinstance(errors, list):
            detail = "; ".join(str(e) for e in errors)
        else:
            detail = str(errors)
    text = f"HTTP {resp.status_code}"
    if resp.reason:
        text += f" {resp.reason}"
    return f"{text}: {detail}" if detail else text


def _describe_transport_error(error: requests.RequestException) -> str:
    # Messages of some exceptions embed the full URL, including the token.
    if isinstance(error, requests.Timeout):
        return "Request timed out"
    if isinstance(error, requests.ConnectionError):
        return "Could not connect to the news service"
    return error.__class__.__name__
