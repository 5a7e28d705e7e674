"""
Calendar endpoint: natural-language event requests to downloadable ICS.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from counsel.dependencies import get_calendar_service
from counsel.schemas.calendar import CalendarEventRequest, CalendarEventResponse
from counsel.services.calendar_service import CalendarService, EventExtractionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


@router.post("/generate", response_model=CalendarEventResponse)
async def generate(
    request: CalendarEventRequest,
    calendar: CalendarService = Depends(get_calendar_service),
):
    if not request.query or not request.query.strip():
        logger.warning("Invalid calendar event request received.")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query cannot be null or empty.",
        )

    try:
        response = await calendar.generate_event(request.query)
    except EventExtractionError as e:
        logger.warning("Failed to extract valid event details from query: %s (%s)", request.query, e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not extract valid event details from the query.",
        )
    except Exception:
        logger.exception("Error generating calendar event for query: %s", request.query)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while generating the calendar event.",
        )

    logger.info("Calendar event generated successfully for query: %s", request.query)
    return response
