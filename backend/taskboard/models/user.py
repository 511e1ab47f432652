"""
User model: auth (email + password), display name, role (student | teacher | admin).
Tasks, announcements, events and classes reference users by id.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.database import Base
from taskboard.models.types import UuidType, ROLES, STUDENT, in_check


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=STUDENT, index=True)
    # Set in Python (microsecond precision) so list ordering is stable on SQLite too
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (CheckConstraint(in_check("role", ROLES), name="users_role_check"),)
