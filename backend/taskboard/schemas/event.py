"""
Calendar event schemas. Visibility requested by non-admins is overridden server-side.
"""
from datetime import date, datetime, time
from typing import Literal

from pydantic import Field, model_validator

from taskboard.schemas.common import CamelModel, Envelope

Visibility = Literal["public", "private"]


class EventCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    description: str = ""
    start_date: date
    end_date: date
    start_time: time | None = None
    end_time: time | None = None
    visibility: Visibility | None = None
    color: str | None = Field(None, max_length=20)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must be on or after startDate")
        return self


class EventUpdateRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    visibility: Visibility | None = None
    color: str | None = Field(None, max_length=20)


class EventResponse(CamelModel):
    id: str
    title: str
    description: str
    start_date: date
    end_date: date
    start_time: time | None
    end_time: time | None
    created_by: str
    created_by_name: str
    visibility: str
    color: str
    created_at: datetime


class EventEnvelope(Envelope):
    event: EventResponse


class EventListResponse(Envelope):
    events: list[EventResponse]
