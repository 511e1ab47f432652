"""
Events API (calendar). Admins see every event; others see public events plus their own private ones.
GET supports ?start=YYYY-MM-DD&end=YYYY-MM-DD (events overlapping the window, inclusive).
Only admins may create public events; everyone else's events are forced private.
"""
import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import settings
from taskboard.models.event import Event
from taskboard.models.user import User
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.event import (
    EventCreateRequest,
    EventEnvelope,
    EventListResponse,
    EventResponse,
    EventUpdateRequest,
)
from taskboard.services import permissions
from taskboard.services.store import Store
from taskboard.api.deps import get_current_user, get_store, bad_request, forbidden, not_found, server_error

router = APIRouter(prefix="/api/events", tags=["events"])
logger = logging.getLogger(__name__)

# Explicit null clears these; for other fields null means "unchanged"
_NULLABLE_FIELDS = ("start_time", "end_time")


def _event_to_response(e: Event) -> EventResponse:
    return EventResponse(
        id=str(e.id),
        title=e.title,
        description=e.description,
        start_date=e.start_date,
        end_date=e.end_date,
        start_time=e.start_time,
        end_time=e.end_time,
        created_by=str(e.created_by),
        created_by_name=e.created_by_name,
        visibility=e.visibility,
        color=e.color,
        created_at=e.created_at,
    )


@router.get("", response_model=EventListResponse)
def list_events(
    start: date | None = None,
    end: date | None = None,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Visible events, soonest first. start and end must be given together."""
    if (start is None) != (end is None):
        raise bad_request("start and end must be provided together")
    if start is not None and end < start:
        raise bad_request("end must be on or after start")
    events = store.events.visible_to(current_user, start=start, end=end)
    return EventListResponse(events=[_event_to_response(e) for e in events])


@router.post("", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
def create_event(
    data: EventCreateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    visibility = permissions.event_visibility_for(current_user, data.visibility)
    try:
        event = store.events.create(
            title=data.title.strip(),
            description=data.description or "",
            start_date=data.start_date,
            end_date=data.end_date,
            start_time=data.start_time,
            end_time=data.end_time,
            created_by=current_user.id,
            created_by_name=current_user.name or "User",
            visibility=visibility,
            color=data.color or settings.default_event_color,
        )
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Event create failed: %s", e)
        raise server_error("Event creation", e)
    return EventEnvelope(event=_event_to_response(event))


@router.get("/{event_id}", response_model=EventEnvelope)
def get_event(
    event_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    event = store.events.find_by_id(event_id)
    if not event:
        raise not_found("Event")
    if not permissions.can_see_event(current_user, event):
        raise forbidden()
    return EventEnvelope(event=_event_to_response(event))


@router.put("/{event_id}", response_model=EventEnvelope)
def update_event(
    event_id: uuid.UUID,
    data: EventUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Creator or admin. A non-admin cannot make an event public."""
    event = store.events.find_by_id(event_id)
    if not event:
        raise not_found("Event")
    if not permissions.can_mutate_event(current_user, event):
        raise forbidden()
    fields = {
        k: v
        for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE_FIELDS
    }
    if not fields:
        raise bad_request("No fields to update")
    if "visibility" in fields:
        fields["visibility"] = permissions.event_visibility_for(current_user, fields["visibility"])
    start_date = fields.get("start_date", event.start_date)
    end_date = fields.get("end_date", event.end_date)
    if end_date < start_date:
        raise bad_request("endDate must be on or after startDate")
    try:
        event = store.events.update(event.id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Event update failed: %s", e)
        raise server_error("Event update", e)
    if event is None:
        raise not_found("Event")
    return EventEnvelope(event=_event_to_response(event))


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    event = store.events.find_by_id(event_id)
    if not event:
        raise not_found("Event")
    if not permissions.can_mutate_event(current_user, event):
        raise forbidden()
    try:
        deleted = store.events.delete(event.id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Event delete failed: %s", e)
        raise server_error("Event deletion", e)
    if not deleted:
        raise not_found("Event")
    return MessageResponse(message="Event deleted")
