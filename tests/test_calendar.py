import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from icalendar import Calendar

from counsel.dependencies import get_calendar_service
from counsel.main import app
from counsel.services.calendar_service import CalendarService, EventExtractionError
from counsel.services.date_resolution_service import DateResolutionService
from counsel.services.web_search_service import WebSearchService

from conftest import FakeLLM

NOW = datetime(2025, 3, 12, 8, 0, tzinfo=timezone.utc)


def make_service(reply):
    resolver = DateResolutionService(web_search=WebSearchService(api_key=""))
    return CalendarService(llm=FakeLLM(reply), date_resolver=resolver)


@pytest.mark.asyncio
async def test_generate_event_builds_ics():
    service = make_service(
        '```json\n{"Title": "Deposition of J. Smith", "DateText": "tomorrow", '
        '"TimeText": "2:30 PM", "Description": "Room 4B", "DurationMinutes": 90}\n```'
    )

    response = await service.generate_event("Deposition of J. Smith tomorrow at 2:30 PM for 90 minutes", now=NOW)

    details = response.event_details
    assert details.title == "Deposition of J. Smith"
    assert details.start_date_time == datetime(2025, 3, 13, 14, 30, tzinfo=timezone.utc)
    assert details.end_date_time - details.start_date_time == timedelta(minutes=90)
    assert details.description == "Room 4B"
    assert response.file_name == "event_20250312080000.ics"

    calendar = Calendar.from_ical(response.ics_content)
    events = calendar.walk("VEVENT")
    assert len(events) == 1
    assert str(events[0]["summary"]) == "Deposition of J. Smith"
    assert events[0]["dtstart"].dt == datetime(2025, 3, 13, 14, 30, tzinfo=timezone.utc)
    assert events[0]["uid"]


@pytest.mark.asyncio
@pytest.mark.parametrize("duration", [None, 0, -15, "soon"])
async def test_generate_event_default_duration(duration):
    reply = {"title": "Call", "dateText": "today", "timeText": "noon"}
    if duration is not None:
        reply["durationMinutes"] = duration
    service = make_service(json.dumps(reply))

    response = await service.generate_event("call at noon", now=NOW)

    details = response.event_details
    assert details.start_date_time == datetime(2025, 3, 12, 12, 0, tzinfo=timezone.utc)
    assert details.end_date_time - details.start_date_time == timedelta(minutes=60)
    assert details.description is None


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["no json here", '["list"]', '{"dateText": "today"}', '{"title": ""}'])
async def test_generate_event_rejects_unusable_replies(reply):
    service = make_service(reply)

    with pytest.raises(EventExtractionError):
        await service.generate_event("something", now=NOW)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_calendar_route_returns_camel_case(client):
    app.dependency_overrides[get_calendar_service] = lambda: make_service(
        '{"title": "Hearing", "dateText": "2025-04-02", "timeText": "9 am"}'
    )

    r = client.post("/api/calendar/generate", json={"query": "Hearing on April 2 at 9am"})

    assert r.status_code == 200
    data = r.json()
    assert data["fileName"].startswith("event_") and data["fileName"].endswith(".ics")
    assert data["eventDetails"]["title"] == "Hearing"
    assert data["eventDetails"]["startDateTime"].startswith("2025-04-02T09:00")
    assert "BEGIN:VEVENT" in data["icsContent"]


@pytest.mark.parametrize("query", ["  ", None])
def test_calendar_route_blank_query(client, query):
    r = client.post("/api/calendar/generate", json={"query": query})

    assert r.status_code == 400
    assert r.json()["detail"] == "Query cannot be null or empty."


def test_calendar_route_extraction_failure(client):
    app.dependency_overrides[get_calendar_service] = lambda: make_service("not json")

    r = client.post("/api/calendar/generate", json={"query": "lunch"})

    assert r.status_code == 400
    assert r.json()["detail"] == "Could not extract valid event details from the query."


def test_calendar_route_llm_failure(client):
    resolver = DateResolutionService(web_search=WebSearchService(api_key=""))
    app.dependency_overrides[get_calendar_service] = lambda: CalendarService(
        llm=FakeLLM(error=RuntimeError("Gemini API Error: 500")), date_resolver=resolver
    )

    r = client.post("/api/calendar/generate", json={"query": "lunch"})

    assert r.status_code == 500
    assert r.json()["detail"] == "An error occurred while generating the calendar event."
