"""
Classes API: teachers manage their own classes, admins all of them, students read the classes they belong to.
A class is a broadcast target for task creation (POST /api/tasks with classId).
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from taskboard.models.school_class import SchoolClass
from taskboard.models.types import TEACHER
from taskboard.models.user import User
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.school_class import (
    ClassCreateRequest,
    ClassEnvelope,
    ClassListResponse,
    ClassMemberRemoveRequest,
    ClassMembersRequest,
    ClassResponse,
    ClassUpdateRequest,
)
from taskboard.services import permissions
from taskboard.services.store import Store, parse_id
from taskboard.api.deps import get_current_user, get_store, bad_request, forbidden, not_found, server_error

router = APIRouter(prefix="/api/classes", tags=["classes"])
logger = logging.getLogger(__name__)


def _class_to_response(c: SchoolClass) -> ClassResponse:
    return ClassResponse(
        id=str(c.id),
        name=c.name,
        teacher_id=str(c.teacher_id),
        student_ids=[str(sid) for sid in c.student_ids],
        created_at=c.created_at,
    )


def _get_managed_class(store: Store, class_id: uuid.UUID, current_user: User) -> SchoolClass:
    school_class = store.classes.find_by_id(class_id)
    if not school_class:
        raise not_found("Class")
    if not permissions.can_manage_class(current_user, school_class):
        raise forbidden("You can only manage your own classes")
    return school_class


@router.get("", response_model=ClassListResponse)
def list_classes(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    classes = store.classes.visible_to(current_user)
    return ClassListResponse(classes=[_class_to_response(c) for c in classes])


@router.post("", response_model=ClassEnvelope, status_code=status.HTTP_201_CREATED)
def create_class(
    data: ClassCreateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    if not permissions.can_create_class(current_user):
        raise forbidden("Only teachers and admins can create classes")
    teacher_id = current_user.id
    if permissions.is_admin(current_user) and data.teacher_id:
        teacher = store.users.find_by_id(data.teacher_id)
        if not teacher or teacher.role != TEACHER:
            raise bad_request("teacherId does not match an existing teacher")
        teacher_id = teacher.id
    invalid = store.users.invalid_student_ids(data.student_ids)
    if invalid:
        raise bad_request("Some ids do not match existing students: " + ", ".join(invalid))
    try:
        school_class = store.classes.create(name=data.name.strip(), teacher_id=teacher_id)
        if data.student_ids:
            school_class = store.classes.add_students(school_class, data.student_ids)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Class create failed: %s", e)
        raise server_error("Class creation", e)
    return ClassEnvelope(school_class=_class_to_response(school_class))


@router.get("/{class_id}", response_model=ClassEnvelope)
def get_class(
    class_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    school_class = store.classes.find_by_id(class_id)
    if not school_class:
        raise not_found("Class")
    if not permissions.can_read_class(current_user, school_class):
        raise forbidden()
    return ClassEnvelope(school_class=_class_to_response(school_class))


@router.put("/{class_id}", response_model=ClassEnvelope)
def rename_class(
    class_id: uuid.UUID,
    data: ClassUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    school_class = _get_managed_class(store, class_id, current_user)
    try:
        school_class = store.classes.update(school_class.id, {"name": data.name.strip()})
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Class update failed: %s", e)
        raise server_error("Class update", e)
    if school_class is None:
        raise not_found("Class")
    return ClassEnvelope(school_class=_class_to_response(school_class))


@router.delete("/{class_id}", response_model=MessageResponse)
def delete_class(
    class_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Delete the class and its membership; tasks already created from it are kept."""
    school_class = _get_managed_class(store, class_id, current_user)
    try:
        deleted = store.classes.delete(school_class.id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Class delete failed: %s", e)
        raise server_error("Class deletion", e)
    if not deleted:
        raise not_found("Class")
    return MessageResponse(message="Class deleted")


@router.post("/{class_id}/students", response_model=ClassEnvelope)
def add_class_students(
    class_id: uuid.UUID,
    data: ClassMembersRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Add students; all ids must be students or nothing is applied."""
    school_class = _get_managed_class(store, class_id, current_user)
    invalid = store.users.invalid_student_ids(data.student_ids)
    if invalid:
        raise bad_request("Some ids do not match existing students: " + ", ".join(invalid))
    try:
        school_class = store.classes.add_students(school_class, data.student_ids)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Class membership update failed: %s", e)
        raise server_error("Class membership update", e)
    return ClassEnvelope(school_class=_class_to_response(school_class))


@router.delete("/{class_id}/students", response_model=ClassEnvelope)
def remove_class_student(
    class_id: uuid.UUID,
    data: ClassMemberRemoveRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    school_class = _get_managed_class(store, class_id, current_user)
    if parse_id(data.student_id) is None:
        raise bad_request("studentId is not a valid id")
    try:
        school_class = store.classes.remove_student(school_class, data.student_id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Class membership update failed: %s", e)
        raise server_error("Class membership update", e)
    return ClassEnvelope(school_class=_class_to_response(school_class))
