"""Tests for Bing News payload normalization."""

from news_relay.core.normalize import bing_article, normalize_bing_news


def test_bing_article_missing_nested_fields_resolve_to_none():
    article = bing_article({"name": "Only a title", "provider": [], "image": {"thumbnail": None}})

    assert article.title == "Only a title"
    assert article.image_url is None
    assert article.source_name is None
    assert article.published_at is None
    assert article.to_dict()["source"] == {"name": None}


def test_normalize_bing_news_handles_malformed_answers():
    assert normalize_bing_news(None) == {"totalArticles": 0, "articles": []}
    assert normalize_bing_news({"value": "oops"}) == {"totalArticles": 0, "articles": []}
    assert normalize_bing_news({"value": [None, "x"]}) == {"totalArticles": 0, "articles": []}


def test_normalize_bing_news_uses_estimated_total_when_present():
    data = {
        "totalEstimatedMatches": 42,
        "value": [
            {"name": "First", "provider": [{"name": "Wire"}, {"name": "Second Wire"}]},
            {"name": "Second", "url": "https://example.com/2"},
        ],
    }

    result = normalize_bing_news(data)

    assert result["totalArticles"] == 42
    assert [a["title"] for a in result["articles"]] == ["First", "Second"]
    assert result["articles"][0]["source"]["name"] == "Wire"
    assert result["articles"][1]["url"] == "https://example.com/2"
