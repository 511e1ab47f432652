"""
Announcement schemas.
"""
from datetime import datetime

from pydantic import Field

from taskboard.schemas.common import CamelModel, Envelope
from taskboard.schemas.task import Priority


class AnnouncementCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    content: str = Field(min_length=1)
    priority: Priority = "medium"


class AnnouncementUpdateRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    content: str | None = Field(None, min_length=1)
    priority: Priority | None = None


class AnnouncementResponse(CamelModel):
    id: str
    title: str
    content: str
    author_id: str | None
    author_name: str
    priority: str
    created_at: datetime


class AnnouncementEnvelope(Envelope):
    announcement: AnnouncementResponse


class AnnouncementListResponse(Envelope):
    announcements: list[AnnouncementResponse]
