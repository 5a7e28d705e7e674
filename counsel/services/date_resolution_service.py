"""
Date resolution for natural-language event times ("next Friday 2:30 PM").

Local rules are tried first, then Brave Search result descriptions are
scanned for a date, and finally the reference date is used.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

import httpx

from counsel.services.web_search_service import (
    WebSearchService,
    shift_months,
    web_search_service,
)

logger = logging.getLogger(__name__)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_US_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_NAMED_DATE = re.compile(
    r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+"
    r"(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b",
    re.IGNORECASE,
)

_TIME_12H_MINUTES = re.compile(r"\b(\d{1,2}):(\d{2})\s*([ap])\.?\s*m\b\.?", re.IGNORECASE)
_TIME_12H = re.compile(r"\b(\d{1,2})\s*([ap])\.?\s*m\b\.?", re.IGNORECASE)
_TIME_24H = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b")


def _at_midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _to_24h(hour: int, meridiem: str) -> Optional[int]:
    if not 1 <= hour <= 12:
        return None
    hour = hour % 12
    return hour + 12 if meridiem.lower() == "p" else hour


def extract_time(text: str) -> Optional[tuple]:
    """Return (hour, minute) for the first time of day found in `text`."""
    if not text:
        return None

    match = _TIME_12H_MINUTES.search(text)
    if match:
        hour = _to_24h(int(match.group(1)), match.group(3))
        minute = int(match.group(2))
        if hour is not None and minute < 60:
            return hour, minute

    match = _TIME_12H.search(text)
    if match:
        hour = _to_24h(int(match.group(1)), match.group(2))
        if hour is not None:
            return hour, 0

    match = _TIME_24H.search(text)
    if match:
        return int(match.group(1)), int(match.group(2))

    lowered = text.lower()
    if "noon" in lowered:
        return 12, 0
    if "midnight" in lowered:
        return 0, 0
    return None


def apply_time(base: datetime, text: str) -> datetime:
    """Set the time of day from `text` on `base`; unchanged when none is found."""
    found = extract_time(text)
    if not found:
        return base
    hour, minute = found
    return base.replace(hour=hour, minute=minute, second=0, microsecond=0)


def extract_date(text: str, tzinfo=None) -> Optional[datetime]:
    """Find an explicit calendar date (ISO, US or month-name form) in `text`."""
    if not text:
        return None

    candidates = []
    for match in _ISO_DATE.finditer(text):
        candidates.append((match.start(), int(match.group(1)), int(match.group(2)), int(match.group(3))))
    for match in _US_DATE.finditer(text):
        candidates.append((match.start(), int(match.group(3)), int(match.group(1)), int(match.group(2))))
    for match in _NAMED_DATE.finditer(text):
        month = MONTHS[match.group(1).lower()[:3]]
        candidates.append((match.start(), int(match.group(3)), month, int(match.group(2))))

    for _, year, month, day in sorted(candidates):
        try:
            return datetime(year, month, day, tzinfo=tzinfo)
        except ValueError:
            continue
    return None


def resolve_common_date(text: str, reference: datetime) -> Optional[datetime]:
    """Resolve relative phrases and explicit dates without any network call."""
    lowered = (text or "").strip().lower()
    today = _at_midnight(reference)

    if "today" in lowered:
        return today
    if "tomorrow" in lowered:
        return today + timedelta(days=1)
    if "next week" in lowered:
        return today + timedelta(days=7)
    if "next month" in lowered:
        return shift_months(today, 1)

    explicit = extract_date(lowered, tzinfo=reference.tzinfo)
    if explicit:
        return explicit

    for index, name in enumerate(WEEKDAYS):
        if name in lowered:
            days_ahead = (index - reference.weekday() + 7) % 7
            # the named day is never today
            return today + timedelta(days=days_ahead or 7)

    return None


class DateResolutionService:
    """Turns free-form date/time phrases into concrete datetimes."""

    def __init__(self, web_search: Optional[WebSearchService] = None):
        self.web_search = web_search or web_search_service

    async def resolve_with_search(self, text: str, reference: datetime) -> Optional[datetime]:
        query = f"What date is {text} relative to {reference:%Y-%m-%d}?"
        results = await self.web_search.raw_search(query)
        for result in results:
            found = extract_date(result.get("description") or "", tzinfo=reference.tzinfo)
            if found:
                return found
        return None

    async def resolve_relative_date(self, text: str, reference: datetime) -> datetime:
        """
        Resolve `text` against `reference`.

        Falls back to the reference date when neither the local rules nor
        web search produce a date. A time of day in `text` is always applied.
        """
        resolved = resolve_common_date(text, reference)

        if resolved is None and self.web_search.enabled:
            try:
                resolved = await self.resolve_with_search(text, reference)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(
                    "Failed to resolve date with Brave Search. Falling back to local resolution: %s", e
                )

        if resolved is None:
            logger.info("Could not resolve date from '%s', using reference date", text)
            resolved = reference

        return apply_time(resolved, text)


date_resolution_service = DateResolutionService()
