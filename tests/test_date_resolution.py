from datetime import datetime

import httpx
import pytest

from counsel.services.date_resolution_service import (
    DateResolutionService,
    extract_date,
    extract_time,
    resolve_common_date,
)
from counsel.services.web_search_service import WebSearchService

# A Wednesday
REFERENCE = datetime(2025, 3, 12, 15, 45)


def service_with(payload=None, api_key="k", error=None, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        if error:
            raise error
        return httpx.Response(200, json=payload or {})
    web = WebSearchService(api_key=api_key, transport=httpx.MockTransport(handler))
    return DateResolutionService(web_search=web)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", datetime(2025, 3, 12)),
        ("tomorrow", datetime(2025, 3, 13)),
        ("next week", datetime(2025, 3, 19)),
        ("next month", datetime(2025, 4, 12)),
        ("friday", datetime(2025, 3, 14)),
        ("next Monday", datetime(2025, 3, 17)),
        ("wednesday", datetime(2025, 3, 19)),
        ("2025-06-01", datetime(2025, 6, 1)),
        ("6/15/2025", datetime(2025, 6, 15)),
        ("July 4, 2025", datetime(2025, 7, 4)),
        ("Sept 3rd 2025", datetime(2025, 9, 3)),
        ("Friday, March 21, 2025", datetime(2025, 3, 21)),
    ],
)
def test_resolve_common_date(text, expected):
    assert resolve_common_date(text, REFERENCE) == expected


def test_resolve_common_date_unknown():
    assert resolve_common_date("after the hearing", REFERENCE) is None


def test_next_month_clamps_to_month_end():
    assert resolve_common_date("next month", datetime(2025, 1, 31, 9, 0)) == datetime(2025, 2, 28)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2:30 PM", (14, 30)),
        ("10 AM", (10, 0)),
        ("12 am", (0, 0)),
        ("12:15 p.m.", (12, 15)),
        ("at 17:05", (17, 5)),
        ("noon", (12, 0)),
        ("midnight", (0, 0)),
        ("sometime", None),
    ],
)
def test_extract_time(text, expected):
    assert extract_time(text) == expected


def test_extract_date_skips_impossible_dates():
    assert extract_date("on 2025-02-30 or 2025-03-01") == datetime(2025, 3, 1)


@pytest.mark.asyncio
async def test_resolve_applies_time_to_relative_date():
    service = service_with(api_key="")

    resolved = await service.resolve_relative_date("tomorrow 2:30 PM", REFERENCE)

    assert resolved == datetime(2025, 3, 13, 14, 30)


@pytest.mark.asyncio
async def test_resolve_uses_search_descriptions():
    seen = []
    payload = {"web": {"results": [
        {"title": "x", "description": "No dates here"},
        {"title": "y", "description": "Easter falls on <strong>April 20, 2025</strong> this year"},
    ]}}
    service = service_with(payload, seen=seen)

    resolved = await service.resolve_relative_date("Easter Sunday 10 am", REFERENCE)

    # "sunday" is a weekday name, so local rules win
    assert resolved == datetime(2025, 3, 16, 10, 0)
    assert seen == []

    resolved = await service.resolve_relative_date("Easter 10 am", REFERENCE)

    assert resolved == datetime(2025, 4, 20, 10, 0)
    assert "What date is Easter 10 am relative to 2025-03-12?" in seen[0].url.params["q"]


@pytest.mark.asyncio
async def test_resolve_falls_back_to_reference_date():
    service = service_with({"web": {"results": []}})

    assert await service.resolve_relative_date("after the hearing", REFERENCE) == REFERENCE
    assert await service.resolve_relative_date("after the hearing at 9 am", REFERENCE) == (
        datetime(2025, 3, 12, 9, 0)
    )


@pytest.mark.asyncio
async def test_resolve_search_failure_falls_back():
    service = service_with(error=httpx.ConnectError("offline"))

    assert await service.resolve_relative_date("the deposition", REFERENCE) == REFERENCE


@pytest.mark.asyncio
async def test_resolve_malformed_search_body_falls_back():
    service = service_with({"web": ["x"]})

    assert await service.resolve_relative_date("the deposition", REFERENCE) == REFERENCE
