from datetime import datetime, UTC

import httpx
import pytest

from counsel.models.search import WebResult
from counsel.services.web_search_service import (
    LEGAL_QUERY_SUFFIX,
    WebSearchService,
    curated_legal_results,
    format_web_results,
    parse_age,
    shift_months,
)

NOW = datetime(2025, 3, 31, 12, 0, tzinfo=UTC)


def brave_transport(payload=None, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload if payload is not None else {})
    return httpx.MockTransport(handler)


@pytest.mark.parametrize(
    "age, expected",
    [
        ("3 days ago", datetime(2025, 3, 28, 12, 0, tzinfo=UTC)),
        ("1 week ago", datetime(2025, 3, 24, 12, 0, tzinfo=UTC)),
        ("2 hours ago", datetime(2025, 3, 31, 10, 0, tzinfo=UTC)),
        ("1 month ago", datetime(2025, 2, 28, 12, 0, tzinfo=UTC)),
        ("2 years ago", datetime(2023, 3, 31, 12, 0, tzinfo=UTC)),
    ],
)
def test_parse_age(age, expected):
    assert parse_age(age, now=NOW) == expected


@pytest.mark.parametrize("age", [None, "", "yesterday", "March 3, 2024"])
def test_parse_age_unrecognised(age):
    assert parse_age(age, now=NOW) is None


def test_shift_months_clamps_day():
    assert shift_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert shift_months(datetime(2024, 12, 15), 1) == datetime(2025, 1, 15)


def test_format_web_results_empty():
    assert format_web_results([]) == "No web search results found."


def test_curated_results_for_contract_queries():
    results = curated_legal_results("breach of contract and force majeure", limit=5)

    assert [r.source for r in results] == ["Cornell LII", "Justia", "FindLaw", "ABA"]


def test_curated_results_respect_limit():
    results = curated_legal_results("breach of contract", limit=2)

    assert [r.source for r in results] == ["Cornell LII", "Justia"]


def test_curated_results_generic_query():
    results = curated_legal_results("adverse possession")

    assert len(results) == 1
    assert results[0].source == "ABA"


@pytest.mark.asyncio
async def test_brave_search_parses_results_and_sends_token():
    seen = []
    payload = {
        "web": {
            "results": [
                {"title": "Case A", "description": "Held that...", "url": "https://a.example", "age": "2 days ago"},
                {"title": "Case B", "description": "Dissent", "url": "https://b.example"},
            ]
        }
    }
    service = WebSearchService(
        api_key="secret", url="https://search.test/web", max_results=5,
        transport=brave_transport(payload, seen=seen),
    )

    results = await service.brave_search("adverse possession")

    assert [r.title for r in results] == ["Case A", "Case B"]
    assert all(r.source == "Brave Search" for r in results)
    assert results[0].published_date is not None
    assert results[1].published_date is None

    request = seen[0]
    assert request.headers["X-Subscription-Token"] == "secret"
    assert request.url.params["q"] == f"adverse possession {LEGAL_QUERY_SUFFIX}"
    assert request.url.params["count"] == "5"


@pytest.mark.asyncio
async def test_brave_search_without_key_is_skipped():
    seen = []
    service = WebSearchService(api_key="", transport=brave_transport(seen=seen))

    assert await service.brave_search("q") == []
    assert seen == []


@pytest.mark.asyncio
async def test_brave_search_http_error_returns_empty():
    service = WebSearchService(api_key="k", transport=brave_transport({"error": "quota"}, status_code=429))

    assert await service.brave_search("q") == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"web": ["x"]}, {"web": 5}, {"web": {"results": "none"}}, ["web"]],
)
async def test_brave_search_malformed_body_returns_empty(payload):
    service = WebSearchService(api_key="k", transport=brave_transport(payload))

    assert await service.brave_search("contract") == []


@pytest.mark.asyncio
async def test_search_falls_back_to_curated_sources():
    service = WebSearchService(api_key="k", transport=brave_transport({"web": {"results": []}}))

    results = await service.search("breach of contract")

    assert results[0].source == "Cornell LII"


@pytest.mark.asyncio
async def test_search_without_fallback_returns_empty():
    service = WebSearchService(api_key="", transport=brave_transport())

    assert await service.search("breach of contract", allow_fallback=False) == []


def test_format_web_results_block():
    text = format_web_results([
        WebResult(title="T", description="D", url="https://u", published_date=datetime(2025, 1, 9), source="S")
    ])

    assert text.splitlines()[:5] == [
        "## Web Search Results", "### T", "**Source:** S", "**Published:** January 9, 2025", "**URL:** https://u",
    ]
