"""Tests for per-provider parameter mapping and response classification."""

from __future__ import annotations

import asyncio
import json

import httpx

from news_relay.core.types import (
    CanonicalQuery,
    Failed,
    FailoverPolicy,
    FailureKind,
    ProviderSettings,
    Usable,
)
from news_relay.providers.bing import BingNewsProvider
from news_relay.providers.gnews import GNewsProvider
from news_relay.providers.newsapi import NewsAPIProvider


def _settings(name: str, **overrides) -> ProviderSettings:
    values = {"name": name, "api_key": "test-key-123", "available": True}
    values.update(overrides)
    return ProviderSettings(**values)


def _recording_client(handler):
    calls: list[httpx.Request] = []

    def _handle(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_handle)), calls


def _attempt(provider, query: CanonicalQuery, handler):
    client, calls = _recording_client(handler)

    async def _run():
        async with client:
            outcome = await provider.attempt(query, client)
            body = await outcome.read() if isinstance(outcome, Usable) else None
            return outcome, body

    outcome, body = asyncio.run(_run())
    return outcome, body, calls


# GNews


def test_gnews_free_text_uses_search_without_topic():
    request = GNewsProvider(_settings("gnews")).build_request(
        CanonicalQuery.from_params(query="bitcoin", topic="business")
    )

    assert request.url == "https://gnews.io/api/v4/search"
    assert request.params["q"] == "bitcoin"
    assert "topic" not in request.params
    assert request.params["sortby"] == "publishedAt"
    assert request.params["token"] == "test-key-123"


def test_gnews_category_uses_top_headlines_without_q():
    request = GNewsProvider(_settings("gnews")).build_request(
        CanonicalQuery.from_params(topic="technology", country="us")
    )

    assert request.url == "https://gnews.io/api/v4/top-headlines"
    assert request.params["topic"] == "technology"
    assert request.params["country"] == "us"
    assert "q" not in request.params


def test_gnews_general_headlines_send_neither_topic_nor_q():
    request = GNewsProvider(_settings("gnews")).build_request(CanonicalQuery())

    assert request.url == "https://gnews.io/api/v4/top-headlines"
    assert set(request.params) == {"sortby", "token"}


def test_gnews_crypto_topic_becomes_search_expression():
    request = GNewsProvider(_settings("gnews")).build_request(CanonicalQuery.from_params(topic="crypto"))

    assert request.url == "https://gnews.io/api/v4/search"
    assert request.params["q"] == "cryptocurrency OR bitcoin"
    assert "topic" not in request.params


def test_gnews_drops_country_for_chinese_topic_requests_but_keeps_language():
    request = GNewsProvider(_settings("gnews")).build_request(
        CanonicalQuery.from_params(topic="business", country="cn")
    )

    assert "country" not in request.params
    assert request.params["lang"] == "zh"
    assert request.params["topic"] == "business"


def test_gnews_keeps_chinese_country_without_topic():
    request = GNewsProvider(_settings("gnews")).build_request(CanonicalQuery.from_params(country="hk"))

    assert request.params["country"] == "hk"
    assert request.params["lang"] == "zh"


def test_gnews_success_is_usable_and_passed_through_verbatim():
    raw = b'{"totalArticles": 1, "articles": [{"title": "A"}]}'
    outcome, body, calls = _attempt(
        GNewsProvider(_settings("gnews")),
        CanonicalQuery.from_params(query="bitcoin"),
        lambda request: httpx.Response(200, content=raw, headers={"Content-Type": "application/json"}),
    )

    assert isinstance(outcome, Usable)
    assert outcome.status_code == 200
    assert body == raw
    assert len(calls) == 1
    assert calls[0].url.path == "/api/v4/search"
    assert calls[0].url.params["q"] == "bitcoin"
    assert calls[0].headers["User-Agent"] == "news-aggregator-app-v1"


def test_gnews_quota_error_fails_over():
    outcome, _, _ = _attempt(
        GNewsProvider(_settings("gnews")),
        CanonicalQuery(),
        lambda request: httpx.Response(429, json={"errors": ["Too many requests"]}),
    )

    assert isinstance(outcome, Failed)
    assert outcome.status_code == 429
    assert outcome.kind is FailureKind.REJECTION
    assert outcome.message == "GNews error (429): Too many requests"


def test_gnews_legacy_policy_relays_business_errors():
    provider = GNewsProvider(_settings("gnews", failover_policy=FailoverPolicy.QUOTA_OR_AUTH))

    not_found, body, _ = _attempt(provider, CanonicalQuery(), lambda request: httpx.Response(404, json={}))
    forbidden, _, _ = _attempt(provider, CanonicalQuery(), lambda request: httpx.Response(403, json={}))

    assert isinstance(not_found, Usable)
    assert not_found.status_code == 404
    assert body == b"{}"
    assert isinstance(forbidden, Failed)
    assert forbidden.message == "GNews error (403)"


def test_gnews_strict_policy_fails_over_on_any_error_status():
    outcome, _, _ = _attempt(
        GNewsProvider(_settings("gnews")),
        CanonicalQuery(),
        lambda request: httpx.Response(404, text="not json"),
    )

    assert isinstance(outcome, Failed)
    assert outcome.message == "GNews error (404)"


def test_missing_credential_fails_without_network_call():
    provider = GNewsProvider(_settings("gnews", api_key=None, available=False))

    outcome, _, calls = _attempt(provider, CanonicalQuery(), lambda request: httpx.Response(200))

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.CONFIGURATION
    assert outcome.status_code == 500
    assert "API key is not configured" in outcome.message
    assert calls == []


def test_transport_error_becomes_503_failure():
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns lookup failed", request=request)

    outcome, _, calls = _attempt(NewsAPIProvider(_settings("newsapi")), CanonicalQuery(), _boom)

    assert isinstance(outcome, Failed)
    assert outcome.kind is FailureKind.TRANSPORT
    assert outcome.status_code == 503
    assert outcome.message == "NewsAPI network failure (ConnectError)"
    assert len(calls) == 1


# NewsAPI


def test_newsapi_free_text_uses_everything_without_category():
    request = NewsAPIProvider(_settings("newsapi")).build_request(
        CanonicalQuery.from_params(query="bitcoin", country="us")
    )

    assert request.url == "https://newsapi.org/v2/everything"
    assert request.params["q"] == "bitcoin"
    assert "category" not in request.params
    assert "country" not in request.params
    assert request.params["sortBy"] == "publishedAt"
    assert request.params["apiKey"] == "test-key-123"
    assert request.headers["User-Agent"] == "news-aggregator-app-v1"


def test_newsapi_category_uses_top_headlines_without_q():
    request = NewsAPIProvider(_settings("newsapi")).build_request(
        CanonicalQuery.from_params(topic="technology", country="us")
    )

    assert request.url == "https://newsapi.org/v2/top-headlines"
    assert request.params["category"] == "technology"
    assert request.params["country"] == "us"
    assert "q" not in request.params


def test_newsapi_unfiltered_request_asks_for_general_headlines():
    provider = NewsAPIProvider(_settings("newsapi"))

    bare = provider.build_request(CanonicalQuery())
    country_only = provider.build_request(CanonicalQuery.from_params(country="gb"))

    assert bare.url == "https://newsapi.org/v2/top-headlines"
    assert bare.params["category"] == "general"
    assert "country" not in bare.params
    assert country_only.params["country"] == "gb"
    assert "category" not in country_only.params


def test_newsapi_crypto_topic_maps_to_or_expression_with_chinese_language():
    request = NewsAPIProvider(_settings("newsapi")).build_request(
        CanonicalQuery.from_params(topic="crypto", country="cn")
    )

    assert request.url == "https://newsapi.org/v2/everything"
    assert request.params["q"] == "cryptocurrency OR bitcoin"
    assert request.params["language"] == "zh"
    assert "country" not in request.params
    assert "category" not in request.params


def test_newsapi_query_and_topic_are_combined():
    provider = NewsAPIProvider(_settings("newsapi"))

    with_category = provider.build_request(CanonicalQuery.from_params(query="apple", topic="business"))
    with_expression = provider.build_request(CanonicalQuery.from_params(query="etf", topic="crypto"))

    assert with_category.params["q"] == "apple AND business"
    assert with_expression.params["q"] == "etf AND (cryptocurrency OR bitcoin)"


def test_newsapi_rejection_includes_provider_code_and_message():
    outcome, _, _ = _attempt(
        NewsAPIProvider(_settings("newsapi")),
        CanonicalQuery(),
        lambda request: httpx.Response(
            426,
            json={"status": "error", "code": "corsNotAllowed", "message": "Requests from the browser are not allowed"},
        ),
    )

    assert isinstance(outcome, Failed)
    assert outcome.message == "NewsAPI error (426): [corsNotAllowed] Requests from the browser are not allowed"


# Bing News


def test_bing_category_uses_news_endpoint_with_mapped_category():
    request = BingNewsProvider(_settings("bing")).build_request(
        CanonicalQuery.from_params(topic="technology", country="us")
    )

    assert request.url == "https://api.bing.microsoft.com/v7.0/news"
    assert request.params["category"] == "ScienceAndTechnology"
    assert request.params["mkt"] == "en-US"
    assert request.params["sortBy"] == "Date"
    assert "q" not in request.params
    assert request.headers["Ocp-Apim-Subscription-Key"] == "test-key-123"


def test_bing_free_text_uses_search_endpoint_without_category():
    request = BingNewsProvider(_settings("bing")).build_request(
        CanonicalQuery.from_params(query="bitcoin", topic="technology")
    )

    assert request.url == "https://api.bing.microsoft.com/v7.0/news/search"
    assert request.params["q"] == "bitcoin"
    assert "category" not in request.params


def test_bing_market_mapping_and_category_conflicts():
    provider = BingNewsProvider(_settings("bing"))

    chinese = provider.build_request(CanonicalQuery.from_params(query="ai", country="hk"))
    japan_category = provider.build_request(CanonicalQuery.from_params(topic="sports", country="jp"))
    unmapped = provider.build_request(CanonicalQuery.from_params(query="ai", country="br"))

    assert chinese.params["mkt"] == "zh-HK"
    assert japan_category.params["category"] == "Sports"
    assert "mkt" not in japan_category.params
    assert unmapped.params["cc"] == "br"


def test_bing_response_is_normalized():
    native = {
        "_type": "News",
        "value": [
            {
                "name": "Headline",
                "url": "https://example.com/a",
                "description": "Lede",
                "datePublished": "2024-05-01T10:00:00.0000000Z",
                "provider": [{"_type": "Organization", "name": "Example Times"}],
                "image": {"thumbnail": {"contentUrl": "https://example.com/a.jpg"}},
            }
        ],
    }
    outcome, body, _ = _attempt(
        BingNewsProvider(_settings("bing")),
        CanonicalQuery.from_params(query="ai"),
        lambda request: httpx.Response(200, json=native),
    )

    assert isinstance(outcome, Usable)
    assert outcome.headers["content-type"] == "application/json; charset=utf-8"
    assert json.loads(body) == {
        "totalArticles": 1,
        "articles": [
            {
                "title": "Headline",
                "description": "Lede",
                "url": "https://example.com/a",
                "image": "https://example.com/a.jpg",
                "publishedAt": "2024-05-01T10:00:00.0000000Z",
                "source": {"name": "Example Times"},
            }
        ],
    }


def test_bing_unreadable_payload_fails_over():
    outcome, _, _ = _attempt(
        BingNewsProvider(_settings("bing")),
        CanonicalQuery(),
        lambda request: httpx.Response(200, text="<html>maintenance</html>"),
    )

    assert isinstance(outcome, Failed)
    assert outcome.status_code == 502
    assert outcome.message.startswith("Bing News returned an unreadable payload")


def test_bing_rejection_reads_error_array():
    outcome, _, _ = _attempt(
        BingNewsProvider(_settings("bing")),
        CanonicalQuery(),
        lambda request: httpx.Response(
            401,
            json={"_type": "ErrorResponse", "errors": [{"code": "InvalidAuthorization", "message": "Access denied"}]},
        ),
    )

    assert isinstance(outcome, Failed)
    assert outcome.message == "Bing News error (401): [InvalidAuthorization] Access denied"


def test_bing_legacy_policy_relays_error_bodies_unchanged():
    provider = BingNewsProvider(_settings("bing", failover_policy=FailoverPolicy.QUOTA_OR_AUTH))
    error_body = {"_type": "ErrorResponse", "errors": [{"code": "InvalidRequest", "message": "Bad market"}]}

    json_error, json_body, _ = _attempt(
        provider, CanonicalQuery(), lambda request: httpx.Response(400, json=error_body)
    )
    text_error, text_body, _ = _attempt(
        provider, CanonicalQuery(), lambda request: httpx.Response(500, text="upstream down")
    )

    assert isinstance(json_error, Usable)
    assert json_error.status_code == 400
    assert json.loads(json_body) == error_body
    assert isinstance(text_error, Usable)
    assert text_error.status_code == 500
    assert text_body == b"upstream down"


def test_base_url_override_is_used():
    provider = GNewsProvider(_settings("gnews", base_url="http://localhost:9000/v4/"))

    request = provider.build_request(CanonicalQuery.from_params(query="x"))

    assert request.url == "http://localhost:9000/v4/search"
