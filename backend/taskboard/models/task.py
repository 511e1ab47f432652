"""
Task: owned by one student (student_id), created by a student, teacher or admin (created_by_id).
sharedWith is the task_shares table; its composite primary key makes it a set.
"""
import uuid
from datetime import date, datetime
from sqlalchemy import String, Text, Boolean, Date, DateTime, CheckConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base
from taskboard.models.types import UuidType, PRIORITIES, ROLES, DEFAULT_PRIORITY, in_check
from taskboard.models.user import utcnow


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    student_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by_role: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default=DEFAULT_PRIORITY)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(in_check("priority", PRIORITIES), name="tasks_priority_check"),
        CheckConstraint(in_check("created_by_role", ROLES), name="tasks_created_by_role_check"),
    )

    shares = relationship(
        "TaskShare",
        back_populates="task",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TaskShare.created_at",
    )
    progress = relationship("Progress", back_populates="task", cascade="all, delete-orphan")

    @property
    def shared_with(self) -> list[uuid.UUID]:
        return [s.student_id for s in self.shares]


class TaskShare(Base):
    __tablename__ = "task_shares"

    task_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    task = relationship("Task", back_populates="shares")
