"""
Announcements API: any authenticated user reads (newest first); only admins create, edit and delete.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from taskboard.models.announcement import Announcement
from taskboard.models.user import User
from taskboard.schemas.announcement import (
    AnnouncementCreateRequest,
    AnnouncementEnvelope,
    AnnouncementListResponse,
    AnnouncementResponse,
    AnnouncementUpdateRequest,
)
from taskboard.schemas.common import MessageResponse
from taskboard.services import permissions
from taskboard.services.store import Store
from taskboard.api.deps import get_current_user, get_store, bad_request, forbidden, not_found, server_error

router = APIRouter(prefix="/api/announcements", tags=["announcements"])
logger = logging.getLogger(__name__)

ADMIN_ONLY = "Access denied - admin only"


def _announcement_to_response(a: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=str(a.id),
        title=a.title,
        content=a.content,
        author_id=str(a.author_id) if a.author_id else None,
        author_name=a.author_name,
        priority=a.priority,
        created_at=a.created_at,
    )


@router.get("", response_model=AnnouncementListResponse)
def list_announcements(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    items = store.announcements.list_all()
    return AnnouncementListResponse(announcements=[_announcement_to_response(a) for a in items])


@router.post("", response_model=AnnouncementEnvelope, status_code=status.HTTP_201_CREATED)
def create_announcement(
    data: AnnouncementCreateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    if not permissions.can_manage_announcements(current_user):
        raise forbidden(ADMIN_ONLY)
    try:
        announcement = store.announcements.create(
            title=data.title.strip(),
            content=data.content,
            priority=data.priority,
            author_id=current_user.id,
            author_name=current_user.name or "Administrator",
        )
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Announcement create failed: %s", e)
        raise server_error("Announcement creation", e)
    return AnnouncementEnvelope(announcement=_announcement_to_response(announcement))


@router.put("/{announcement_id}", response_model=AnnouncementEnvelope)
def update_announcement(
    announcement_id: uuid.UUID,
    data: AnnouncementUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Admin only, regardless of which admin wrote it."""
    if not permissions.can_manage_announcements(current_user):
        raise forbidden(ADMIN_ONLY)
    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not fields:
        raise bad_request("No fields to update")
    try:
        announcement = store.announcements.update(announcement_id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Announcement update failed: %s", e)
        raise server_error("Announcement update", e)
    if announcement is None:
        raise not_found("Announcement")
    return AnnouncementEnvelope(announcement=_announcement_to_response(announcement))


@router.delete("/{announcement_id}", response_model=MessageResponse)
def delete_announcement(
    announcement_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    if not permissions.can_manage_announcements(current_user):
        raise forbidden(ADMIN_ONLY)
    try:
        deleted = store.announcements.delete(announcement_id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Announcement delete failed: %s", e)
        raise server_error("Announcement deletion", e)
    if not deleted:
        raise not_found("Announcement")
    logger.info("Announcement %s deleted by user_id=%s", announcement_id, current_user.id)
    return MessageResponse(message="Announcement deleted")
