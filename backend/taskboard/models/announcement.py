"""
Announcement: written by an admin, read by every authenticated user. Listed newest first.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime, CheckConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.database import Base
from taskboard.models.types import UuidType, PRIORITIES, DEFAULT_PRIORITY, in_check
from taskboard.models.user import utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)  # kept if the author is removed
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default=DEFAULT_PRIORITY)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(in_check("priority", PRIORITIES), name="announcements_priority_check"),
    )
