from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from gnews_tui.client import ArticleFeedClient
from gnews_tui.errors import FetchFailed


def _response(payload=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


def _payload(count, start=0, total=100):
    return {
        "totalArticles": total,
        "articles": [
            {
                "title": f"Story {i}",
                "description": f"Summary {i}",
                "url": f"https://news.example/{i}",
                "image": None,
                "source": {"name": "Example", "url": "https://news.example"},
                "publishedAt": "2024-05-01T10:00:00Z",
            }
            for i in range(start, start + count)
        ],
    }


@pytest.fixture
def session():
    s = MagicMock()
    s.get.return_value = _response(_payload(2))
    return s


@pytest.fixture
def client(session):
    return ArticleFeedClient("secret", base_url="https://gnews.example/api/v4/", session=session)


def test_top_headlines_request(client, session):
    page = client.fetch_top_headlines("Business", page=3, page_size=5, language="fr")

    url = session.get.call_args.args[0]
    params = session.get.call_args.kwargs["params"]
    assert url == "https://gnews.example/api/v4/top-headlines"
    assert params == {"topic": "business", "lang": "fr", "max": 5, "page": 3, "token": "secret"}
    assert session.get.call_args.kwargs["timeout"] == client.timeout

    assert page.total_articles == 100
    assert [a.title for a in page.articles] == ["Story 0", "Story 1"]
    assert page.articles[0].source.name == "Example"


def test_search_request_uses_defaults(client, session):
    client.search("climate", page=1)

    url = session.get.call_args.args[0]
    params = session.get.call_args.kwargs["params"]
    assert url == "https://gnews.example/api/v4/search"
    assert params == {"q": "climate", "lang": "en", "max": 10, "page": 1, "token": "secret"}


def test_search_does_not_validate_blank_query(client, session):
    client.search("   ")
    assert session.get.call_args.kwargs["params"]["q"] == "   "


@pytest.mark.parametrize("category", ["General", "Weather", "", None, "business"])
def test_unknown_categories_fall_back_to_breaking_news(client, session, category):
    client.fetch_top_headlines(category)
    assert session.get.call_args.kwargs["params"]["topic"] == "breaking-news"


def test_http_error_becomes_fetch_failed(client, session):
    resp = _response({"errors": ["You have reached your request limit for today"]}, 403)
    resp.reason = "Forbidden"
    resp.raise_for_status.side_effect = requests.HTTPError("403", response=resp)
    session.get.return_value = resp

    with pytest.raises(FetchFailed) as exc_info:
        client.fetch_top_headlines("General")

    assert exc_info.value.message == (
        "HTTP 403 Forbidden: You have reached your request limit for today"
    )


def test_timeout_becomes_fetch_failed_without_token(client, session):
    session.get.side_effect = requests.Timeout(
        "https://gnews.example/api/v4/search?token=secret timed out"
    )

    with pytest.raises(FetchFailed) as exc_info:
        client.search("climate")

    assert exc_info.value.message == "Request timed out"
    assert "secret" not in str(exc_info.value)


def test_connection_error_becomes_fetch_failed(client, session):
    session.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(FetchFailed):
        client.fetch_top_headlines("Sports")


def test_non_json_body_becomes_fetch_failed(client, session):
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    session.get.return_value = resp

    with pytest.raises(FetchFailed) as exc_info:
        client.search("climate")
    assert exc_info.value.message.startswith("Malformed response")


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"totalArticles": 3},
        {"totalArticles": "many", "articles": []},
        {"totalArticles": 1, "articles": ["not an object"]},
    ],
)
def test_wrong_shape_becomes_fetch_failed(client, session, payload):
    session.get.return_value = _response(payload)
    with pytest.raises(FetchFailed):
        client.fetch_top_headlines("General")


def test_nullable_fields(client, session):
    session.get.return_value = _response(
        {
            "totalArticles": 1,
            "articles": [{"title": "Bare", "url": "https://news.example/bare", "source": None}],
        }
    )
    article = client.search("bare").articles[0]
    assert article.description is None
    assert article.image is None
    assert article.source is None
    assert article.published_at is None
    assert article.to_bookmark().source_name is None


@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 5)])
def test_non_positive_paging_is_rejected(client, session, page, page_size):
    with pytest.raises(ValueError):
        client.search("climate", page=page, page_size=page_size)
    session.get.assert_not_called()


def test_client_applies_no_filtering(client, session):
    payload = _payload(2)
    payload["articles"].append(dict(payload["articles"][0]))
    session.get.return_value = _response(payload)

    page = client.fetch_top_headlines("Technology")
    assert len(page.articles) == 3


def test_close_closes_session(session):
    with ArticleFeedClient("secret", session=session):
        pass
    session.close.assert_called_once()


def test_article_without_url_is_skipped(client, session):
    payload = _payload(2)
    payload["articles"].insert(1, {"title": "Dangling", "url": None})
    session.get.return_value = _response(payload)

    page = client.fetch_top_headlines("General")

    assert [a.url for a in page.articles] == ["https://news.example/0", "https://news.example/1"]
    assert page.total_articles == 100
