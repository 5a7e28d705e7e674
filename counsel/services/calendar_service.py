"""
Calendar service: turns a natural-language request into an ICS event.
"""

import logging
import uuid
from datetime import datetime, timedelta, UTC
from typing import Awaitable, Callable, Optional

from icalendar import Calendar, Event

from counsel.prompts import CALENDAR_EVENT_PROMPT, render
from counsel.schemas.calendar import CalendarEventResponse, EventDetails
from counsel.services import gemini_service
from counsel.services.date_resolution_service import (
    DateResolutionService,
    date_resolution_service,
)
from counsel.utils.text_helpers import parse_json_reply

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


class EventExtractionError(Exception):
    """The LLM reply did not describe a usable event"""


def _duration(value) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return DEFAULT_DURATION_MINUTES
    return minutes if minutes > 0 else DEFAULT_DURATION_MINUTES


def build_ics(title: str, start: datetime, end: datetime, description: str = "") -> str:
    """Serialize a single-event calendar with UTC times."""
    calendar = Calendar()
    calendar.add("prodid", "-//Counsel Backend//Calendar//EN")
    calendar.add("version", "2.0")

    event = Event()
    event.add("uid", str(uuid.uuid4()))
    event.add("dtstamp", datetime.now(UTC))
    event.add("summary", title)
    event.add("dtstart", start.astimezone(UTC))
    event.add("dtend", end.astimezone(UTC))
    event.add("description", description or "")
    calendar.add_component(event)

    return calendar.to_ical().decode("utf-8")


class CalendarService:
    def __init__(
        self,
        llm: Optional[Callable[[str], Awaitable[str]]] = None,
        date_resolver: Optional[DateResolutionService] = None,
    ):
        self._llm = llm or gemini_service.generate_text
        self.date_resolver = date_resolver or date_resolution_service

    async def extract_event(self, query: str) -> dict:
        """
        Ask the LLM for the event fields.

        Keys are returned lower-cased. Raises EventExtractionError when the
        reply is not a JSON object or has no title.
        """
        reply = await self._llm(render(CALENDAR_EVENT_PROMPT, query=query))
        try:
            data = parse_json_reply(reply)
        except ValueError as e:
            raise EventExtractionError(f"Invalid event JSON: {e}") from e

        if not isinstance(data, dict):
            raise EventExtractionError("Event details must be a JSON object")

        details = {str(key).lower(): value for key, value in data.items()}
        if not details.get("title"):
            raise EventExtractionError("Event title is missing")
        return details

    async def generate_event(self, query: str, now: Optional[datetime] = None) -> CalendarEventResponse:
        logger.info("Processing calendar event query: %s", query)
        now = now or datetime.now()

        details = await self.extract_event(query)
        date_time_text = f"{details.get('datetext') or ''} {details.get('timetext') or ''}".strip()

        start = await self.date_resolver.resolve_relative_date(date_time_text, now)
        end = start + timedelta(minutes=_duration(details.get("durationminutes")))
        logger.info(
            "Resolved date/time: Start=%s, End=%s",
            start.strftime("%Y-%m-%d %H:%M:%S"), end.strftime("%Y-%m-%d %H:%M:%S"),
        )

        description = details.get("description") or None
        ics_content = build_ics(details["title"], start, end, description or "")

        return CalendarEventResponse(
            ics_content=ics_content,
            file_name=f"event_{now.astimezone(UTC):%Y%m%d%H%M%S}.ics",
            event_details=EventDetails(
                title=details["title"],
                start_date_time=start,
                end_date_time=end,
                description=description,
            ),
        )


calendar_service = CalendarService()
