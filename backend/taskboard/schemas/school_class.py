"""
Class schemas.
"""
from datetime import datetime

from pydantic import Field

from taskboard.schemas.common import CamelModel, Envelope


class ClassCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    # Admins may assign the class to a teacher; teachers always own what they create.
    teacher_id: str | None = None
    student_ids: list[str] = []


class ClassUpdateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class ClassMembersRequest(CamelModel):
    student_ids: list[str]


class ClassMemberRemoveRequest(CamelModel):
    student_id: str = Field(min_length=1)


class ClassResponse(CamelModel):
    id: str
    name: str
    teacher_id: str
    student_ids: list[str]
    created_at: datetime


class ClassEnvelope(Envelope):
    school_class: ClassResponse = Field(alias="class")


class ClassListResponse(Envelope):
    classes: list[ClassResponse]
