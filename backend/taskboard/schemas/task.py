"""
Task, sharing and progress schemas.
"""
from datetime import date, datetime
from typing import Literal

from pydantic import Field

from taskboard.schemas.common import CamelModel, Envelope

Priority = Literal["low", "medium", "high"]
ProgressStatus = Literal["todo", "doing", "done"]

# studentId value that targets every current student
ALL_STUDENTS = "all"


class TaskCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    description: str = Field(min_length=1)
    due_date: date
    priority: Priority = "medium"
    # Teachers/admins: a student id or "all". Ignored for students (always themselves).
    student_id: str | None = None
    # Teachers/admins: create one task per member of this class.
    class_id: str | None = None


class TaskUpdateRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    description: str | None = Field(None, min_length=1)
    due_date: date | None = None
    completed: bool | None = None
    priority: Priority | None = None


class ShareRequest(CamelModel):
    student_ids: list[str]


class UnshareRequest(CamelModel):
    student_id: str = Field(min_length=1)


class TaskResponse(CamelModel):
    id: str
    title: str
    description: str
    due_date: date
    completed: bool
    student_id: str
    created_by_id: str | None
    created_by_role: str
    priority: str
    shared_with: list[str]
    created_at: datetime


class TaskEnvelope(Envelope):
    task: TaskResponse


class TaskListResponse(Envelope):
    tasks: list[TaskResponse]


class BroadcastResponse(Envelope):
    """Result of a studentId="all" or classId creation: one task per student."""
    tasks: list[TaskResponse]
    count: int


class ProgressUpdateRequest(CamelModel):
    status: ProgressStatus | None = None
    submission_link: str | None = Field(None, max_length=1024)


class GradeRequest(CamelModel):
    student_id: str = Field(min_length=1)
    grade: float = Field(ge=0, le=20)
    teacher_comment: str | None = None


class ProgressResponse(CamelModel):
    id: str
    task_id: str
    user_id: str
    status: str
    submission_link: str | None
    grade: float | None
    teacher_comment: str | None
    updated_at: datetime


class ProgressEnvelope(Envelope):
    progress: ProgressResponse


class ProgressListResponse(Envelope):
    progress: list[ProgressResponse]
