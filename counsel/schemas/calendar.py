from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class CalendarEventRequest(BaseModel):
    query: Optional[str] = ""


class EventDetails(BaseModel):
    title: str
    start_date_time: datetime = Field(..., alias="startDateTime")
    end_date_time: datetime = Field(..., alias="endDateTime")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CalendarEventResponse(BaseModel):
    ics_content: str = Field(..., alias="icsContent")
    file_name: str = Field(..., alias="fileName")
    event_details: EventDetails = Field(..., alias="eventDetails")

    model_config = ConfigDict(populate_by_name=True)
