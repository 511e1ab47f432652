"""
Per-student progress on a task (user_tasks): status, submission link, grade out of 20.
One row per (task, student); the student is the owner or a shared-with student.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, Text, Float, DateTime, CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base
from taskboard.models.types import UuidType, PROGRESS_STATUSES, GRADE_MIN, GRADE_MAX, in_check
from taskboard.models.user import utcnow


class Progress(Base):
    __tablename__ = "user_tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="todo")
    submission_link: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    grade: Mapped[float | None] = mapped_column(Float, nullable=True)
    teacher_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="user_tasks_task_user_key"),
        CheckConstraint(in_check("status", PROGRESS_STATUSES), name="user_tasks_status_check"),
        CheckConstraint(f"grade IS NULL OR (grade >= {GRADE_MIN} AND grade <= {GRADE_MAX})", name="user_tasks_grade_check"),
    )

    task = relationship("Task", back_populates="progress")
