from __future__ import annotations

import pytest

from gnews_tui.datamodels import (
    Article,
    Bookmark,
    FeedPage,
    Source,
    topic_for_category,
)


@pytest.mark.parametrize(
    "category,topic",
    [
        ("General", "breaking-news"),
        ("Business", "business"),
        ("Sports", "sports"),
        ("Technology", "technology"),
        ("Health", "breaking-news"),
        ("sports", "breaking-news"),
        (None, "breaking-news"),
    ],
)
def test_topic_for_category(category, topic):
    assert topic_for_category(category) == topic


def test_article_to_bookmark_projects_source_name():
    source = Source(name="Example Times", url="https://news.example")
    article = Article(
        title="Headline",
        url="https://news.example/a",
        description="Desc",
        image="https://img.example/a.png",
        source=source,
        published_at="2024-05-01T10:00:00Z",
    )

    bookmark = article.to_bookmark()

    assert bookmark == Bookmark(
        url="https://news.example/a",
        title="Headline",
        description="Desc",
        image="https://img.example/a.png",
        source_name="Example Times",
        published_at="2024-05-01T10:00:00Z",
    )
    source.name = "Renamed"
    assert bookmark.source_name == "Example Times"


def test_bookmark_dict_round_trip():
    bookmarks = [
        Bookmark(url="https://x/1", title="T"),
        Bookmark(url="https://x/2", title="U", description="d", image="i", source_name="s", published_at="p"),
    ]
    assert [Bookmark.from_dict(b.to_dict()) for b in bookmarks] == bookmarks


def test_bookmark_from_dict_tolerates_missing_optionals():
    assert Bookmark.from_dict({"url": "https://x/1", "title": "T"}) == Bookmark(url="https://x/1", title="T")


def test_article_missing_title_is_empty():
    assert Article.from_dict({"url": "https://x/1"}).title == ""


def test_article_without_url_is_rejected():
    with pytest.raises(ValueError):
        Article.from_dict({"title": "T"})


def test_feed_page_total_defaults_to_article_count():
    page = FeedPage.from_dict({"articles": [{"title": "T", "url": "https://x/1"}]})
    assert page.total_articles == 1


def test_feed_page_skips_entries_without_url():
    page = FeedPage.from_dict(
        {
            "totalArticles": 2,
            "articles": [{"title": "No link"}, {"title": "T", "url": "https://x/1"}],
        }
    )
    assert [a.url for a in page.articles] == ["https://x/1"]
