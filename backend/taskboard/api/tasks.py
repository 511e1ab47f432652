"""
Tasks API: list (role-filtered), create (self, one student, "all" students or a class), get, update, delete,
share/unshare with students, per-student progress and grading.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from taskboard.models.task import Task
from taskboard.models.progress import Progress
from taskboard.models.user import User
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.task import (
    ALL_STUDENTS,
    BroadcastResponse,
    GradeRequest,
    ProgressEnvelope,
    ProgressListResponse,
    ProgressResponse,
    ProgressUpdateRequest,
    ShareRequest,
    TaskCreateRequest,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
    UnshareRequest,
)
from taskboard.services import permissions
from taskboard.services.store import Store, parse_id
from taskboard.api.deps import get_current_user, get_store, bad_request, forbidden, not_found, server_error

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


def task_to_response(t: Task) -> TaskResponse:
    return TaskResponse(
        id=str(t.id),
        title=t.title,
        description=t.description,
        due_date=t.due_date,
        completed=t.completed,
        student_id=str(t.student_id),
        created_by_id=str(t.created_by_id) if t.created_by_id else None,
        created_by_role=t.created_by_role,
        priority=t.priority,
        shared_with=[str(sid) for sid in t.shared_with],
        created_at=t.created_at,
    )


def _progress_to_response(p: Progress) -> ProgressResponse:
    return ProgressResponse(
        id=str(p.id),
        task_id=str(p.task_id),
        user_id=str(p.user_id),
        status=p.status,
        submission_link=p.submission_link,
        grade=p.grade,
        teacher_comment=p.teacher_comment,
        updated_at=p.updated_at,
    )


def _get_task_or_404(store: Store, task_id: uuid.UUID) -> Task:
    task = store.tasks.find_by_id(task_id)
    if not task:
        raise not_found("Task")
    return task


def _create_for(store: Store, fields: dict, student_id: uuid.UUID) -> Task:
    try:
        return store.tasks.create(student_id=student_id, **fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Task create failed: %s", e)
        raise server_error("Task creation", e)


def _broadcast(store: Store, fields: dict, student_ids: list, actor: User) -> BroadcastResponse:
    """
    One independent task per student. Not atomic: each creation commits on its own,
    failures are counted and reported as one 500; tasks already created remain.
    """
    if not student_ids:
        raise bad_request("No students to assign the task to")
    created: list[Task] = []
    failed = 0
    for sid in student_ids:
        try:
            created.append(store.tasks.create(student_id=sid, **fields))
        except SQLAlchemyError as e:
            store.rollback()
            failed += 1
            logger.warning("Broadcast task create failed for student_id=%s: %s", sid, e)
    if failed:
        logger.error("Broadcast by user_id=%s: %s of %s task creations failed", actor.id, failed, len(student_ids))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Created {len(created)} of {len(student_ids)} tasks; {failed} failed",
        )
    logger.info("Broadcast by user_id=%s: created %s tasks", actor.id, len(created))
    return BroadcastResponse(tasks=[task_to_response(t) for t in created], count=len(created))


@router.get("", response_model=TaskListResponse)
def list_tasks(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Admin: all tasks. Teacher: tasks they created. Student: own tasks plus tasks shared with them."""
    tasks = store.tasks.visible_to(current_user)
    return TaskListResponse(tasks=[task_to_response(t) for t in tasks])


@router.post("", response_model=TaskEnvelope | BroadcastResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Students create tasks for themselves (studentId ignored).
    Teachers/admins target one student, studentId="all" (every current student) or classId (every class member).
    """
    fields = {
        "title": data.title.strip(),
        "description": data.description,
        "due_date": data.due_date,
        "priority": data.priority,
        "completed": False,
        "created_by_id": current_user.id,
        "created_by_role": current_user.role,
    }
    if not permissions.can_assign_tasks(current_user):
        if data.class_id:
            raise forbidden("Only teachers and admins can assign tasks to a class")
        task = _create_for(store, fields, current_user.id)
        return TaskEnvelope(task=task_to_response(task))

    if data.class_id:
        school_class = store.classes.find_by_id(data.class_id)
        if not school_class:
            raise not_found("Class")
        if not permissions.can_manage_class(current_user, school_class):
            raise forbidden("You can only assign tasks to your own classes")
        return _broadcast(store, fields, school_class.student_ids, current_user)

    target = (data.student_id or "").strip()
    if not target:
        raise bad_request('studentId is required (a student id or "all")')
    if target == ALL_STUDENTS:
        return _broadcast(store, fields, [s.id for s in store.users.students()], current_user)
    if store.users.invalid_student_ids([target]):
        raise bad_request("studentId does not match an existing student")
    task = _create_for(store, fields, parse_id(target))
    return TaskEnvelope(task=task_to_response(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    task = _get_task_or_404(store, task_id)
    if not permissions.can_read_task(current_user, task):
        raise forbidden()
    return TaskEnvelope(task=task_to_response(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: uuid.UUID,
    data: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Edit fields or toggle completion. Owner, creator or admin; shared-with students record progress instead."""
    task = _get_task_or_404(store, task_id)
    actions = permissions.task_actions(current_user, task)
    if permissions.UPDATE not in actions:
        if permissions.SUBMIT in actions:
            raise forbidden("Shared tasks are read-only; record your own status via /progress")
        raise forbidden()
    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not fields:
        raise bad_request("No fields to update")
    try:
        task = store.tasks.update(task.id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Task update failed: %s", e)
        raise server_error("Task update", e)
    if task is None:
        raise not_found("Task")
    return TaskEnvelope(task=task_to_response(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    task = _get_task_or_404(store, task_id)
    if not permissions.can_mutate_task(current_user, task):
        raise forbidden()
    try:
        deleted = store.tasks.delete(task.id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Task delete failed: %s", e)
        raise server_error("Task deletion", e)
    if not deleted:
        raise not_found("Task")
    logger.info("Task %s deleted by user_id=%s", task_id, current_user.id)
    return MessageResponse(message="Task deleted")


def _require_share_rights(current_user: User, task: Task) -> None:
    if not permissions.is_staff(current_user):
        raise forbidden("Only teachers and admins can share tasks")
    if not permissions.can_share_task(current_user, task):
        raise forbidden("You can only share tasks you created")


@router.post("/{task_id}/share", response_model=TaskEnvelope)
def share_task(
    task_id: uuid.UUID,
    data: ShareRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Add students to sharedWith. All ids must be students or nothing is applied; repeats are no-ops."""
    task = _get_task_or_404(store, task_id)
    _require_share_rights(current_user, task)
    invalid = store.users.invalid_student_ids(data.student_ids)
    if invalid:
        raise bad_request("Some ids do not match existing students: " + ", ".join(invalid))
    try:
        task = store.tasks.share(task, data.student_ids)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Task share failed: %s", e)
        raise server_error("Task sharing", e)
    logger.info("Task %s shared by user_id=%s with %s student(s)", task.id, current_user.id, len(data.student_ids))
    return TaskEnvelope(task=task_to_response(task))


@router.delete("/{task_id}/share", response_model=TaskEnvelope)
def unshare_task(
    task_id: uuid.UUID,
    data: UnshareRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Remove one student from sharedWith; removing an id that is not shared is a no-op."""
    task = _get_task_or_404(store, task_id)
    _require_share_rights(current_user, task)
    try:
        task = store.tasks.unshare(task, data.student_id)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Task unshare failed: %s", e)
        raise server_error("Task unsharing", e)
    return TaskEnvelope(task=task_to_response(task))


@router.get("/{task_id}/progress", response_model=ProgressListResponse)
def list_progress(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Creator/admin: every student's record. Students: their own record only."""
    task = _get_task_or_404(store, task_id)
    if not permissions.can_read_task(current_user, task):
        raise forbidden()
    records = store.progress.for_task(task.id)
    if not permissions.can_grade_task(current_user, task):
        records = [r for r in records if r.user_id == current_user.id]
    return ProgressListResponse(progress=[_progress_to_response(r) for r in records])


@router.put("/{task_id}/progress", response_model=ProgressEnvelope)
def update_progress(
    task_id: uuid.UUID,
    data: ProgressUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Student records status/submission on a task they own or that is shared with them."""
    task = _get_task_or_404(store, task_id)
    if not permissions.can_submit_task(current_user, task):
        raise forbidden()
    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not fields:
        raise bad_request("No fields to update")
    try:
        record = store.progress.upsert(task.id, current_user.id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Progress update failed: %s", e)
        raise server_error("Progress update", e)
    return ProgressEnvelope(progress=_progress_to_response(record))


@router.put("/{task_id}/grade", response_model=ProgressEnvelope)
def grade_task(
    task_id: uuid.UUID,
    data: GradeRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Creator teacher or admin grades (0-20) the owner or a shared-with student."""
    task = _get_task_or_404(store, task_id)
    if not permissions.can_grade_task(current_user, task):
        raise forbidden()
    student_id = parse_id(data.student_id)
    if student_id is None or (student_id != task.student_id and student_id not in task.shared_with):
        raise bad_request("studentId is not assigned to this task")
    fields = {"grade": data.grade}
    if data.teacher_comment is not None:
        fields["teacher_comment"] = data.teacher_comment
    try:
        record = store.progress.upsert(task.id, student_id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Grading failed: %s", e)
        raise server_error("Grading", e)
    logger.info("Task %s graded for student_id=%s by user_id=%s", task.id, student_id, current_user.id)
    return ProgressEnvelope(progress=_progress_to_response(record))
