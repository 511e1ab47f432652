"""
Authorization rules: pure predicates over (actor, resource).
actor is anything with .id and .role (a User row or a test double); resources are model rows.
Store queries (TaskStore.visible_to, EventStore.visible_to, ClassStore.visible_to) are the SQL form of the read rules here.
"""
from datetime import date

from taskboard.models.types import ADMIN, TEACHER, STUDENT, PRIVATE, PUBLIC

# Actions reported by task_actions
READ = "read"
UPDATE = "update"
DELETE = "delete"
SHARE = "share"
GRADE = "grade"
SUBMIT = "submit"


def is_admin(actor) -> bool:
    return actor.role == ADMIN


def is_staff(actor) -> bool:
    """Teachers and admins."""
    return actor.role in (TEACHER, ADMIN)


# --- Tasks ---

def can_read_task(actor, task) -> bool:
    """Admin: all. Teacher: tasks they created. Student: tasks they own or that are shared with them."""
    if is_admin(actor):
        return True
    if actor.role == TEACHER:
        return task.created_by_id == actor.id
    return task.student_id == actor.id or actor.id in task.shared_with


def can_mutate_task(actor, task) -> bool:
    """Update/delete. Shared-with students are not included."""
    if is_admin(actor):
        return True
    if actor.role == TEACHER:
        return task.created_by_id == actor.id
    return task.student_id == actor.id or task.created_by_id == actor.id


def can_share_task(actor, task) -> bool:
    return is_staff(actor) and (is_admin(actor) or task.created_by_id == actor.id)


def can_grade_task(actor, task) -> bool:
    return is_staff(actor) and can_mutate_task(actor, task)


def can_submit_task(actor, task) -> bool:
    """A student records their own progress on a task they can read (owned or shared)."""
    return actor.role == STUDENT and can_read_task(actor, task)


def task_actions(actor, task) -> frozenset[str]:
    """Allowed action set for actor on task."""
    actions = set()
    if can_read_task(actor, task):
        actions.add(READ)
    if can_mutate_task(actor, task):
        actions.update((UPDATE, DELETE))
    if can_share_task(actor, task):
        actions.add(SHARE)
    if can_grade_task(actor, task):
        actions.add(GRADE)
    if can_submit_task(actor, task):
        actions.add(SUBMIT)
    return frozenset(actions)


def can_assign_tasks(actor) -> bool:
    """Create tasks for another student, for everyone ("all") or for a class."""
    return is_staff(actor)


# --- Events ---

def event_visibility_for(actor, requested: str | None) -> str:
    """Admins choose (default public); students and teachers always get private."""
    if is_admin(actor):
        return requested or PUBLIC
    return PRIVATE


def can_mutate_event(actor, event) -> bool:
    return is_admin(actor) or event.created_by == actor.id


def can_see_event(actor, event) -> bool:
    return is_admin(actor) or event.visibility == PUBLIC or event.created_by == actor.id


def event_overlaps(event, start: date, end: date) -> bool:
    """[start_date, end_date] intersects [start, end], both ends inclusive."""
    return event.start_date <= end and event.end_date >= start


# --- Announcements / users ---

def can_manage_announcements(actor) -> bool:
    """Create, edit and delete: admin only, whoever wrote the announcement."""
    return is_admin(actor)


def can_list_users(actor) -> bool:
    return is_staff(actor)


def can_manage_users(actor) -> bool:
    return is_admin(actor)


# --- Classes ---

def can_create_class(actor) -> bool:
    return is_staff(actor)


def can_manage_class(actor, school_class) -> bool:
    return is_admin(actor) or (actor.role == TEACHER and school_class.teacher_id == actor.id)


def can_read_class(actor, school_class) -> bool:
    return can_manage_class(actor, school_class) or actor.id in school_class.student_ids
