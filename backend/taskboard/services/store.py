"""
Record store: one repository per entity over a SQLAlchemy Session.
Built per request by api.deps.get_store. update/delete on an unknown id return None/False; handlers map that to 404.
Each write commits; callers roll back on SQLAlchemyError.
"""
import logging
import uuid
from datetime import date
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from taskboard.models.announcement import Announcement
from taskboard.models.event import Event
from taskboard.models.progress import Progress
from taskboard.models.school_class import SchoolClass, ClassStudent
from taskboard.models.task import Task, TaskShare
from taskboard.models.types import ADMIN, TEACHER, STUDENT, PUBLIC
from taskboard.models.user import User

logger = logging.getLogger(__name__)


def parse_id(value) -> uuid.UUID | None:
    """UUID from a path/body value; None when it is not a valid id."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


class _Repository:
    model = None

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, entity_id):
        pk = parse_id(entity_id)
        if pk is None:
            return None
        return self.db.get(self.model, pk)

    def create(self, **fields):
        row = self.model(**fields)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, entity_id, fields: dict):
        row = self.find_by_id(entity_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, entity_id) -> bool:
        row = self.find_by_id(entity_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True


class UserStore(_Repository):
    model = User

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == (email or "").strip().lower()).first()

    def find_all(self, role: str | None = None) -> list[User]:
        q = self.db.query(User)
        if role:
            q = q.filter(User.role == role)
        return q.order_by(User.created_at).all()

    def students(self) -> list[User]:
        return self.find_all(role=STUDENT)

    def invalid_student_ids(self, ids: Iterable) -> list:
        """Ids (as given) that do not resolve to an existing student."""
        ids = list(ids)
        parsed = {raw: parse_id(raw) for raw in ids}
        wanted = {pk for pk in parsed.values() if pk is not None}
        found = set()
        if wanted:
            found = {
                row.id
                for row in self.db.query(User.id).filter(User.id.in_(wanted), User.role == STUDENT).all()
            }
        return [raw for raw, pk in parsed.items() if pk is None or pk not in found]

    def has_student_records(self, user_id) -> bool:
        """True when tasks, shares or class memberships reference this user as a student."""
        pk = parse_id(user_id)
        return (
            self.db.query(Task.id).filter(Task.student_id == pk).first() is not None
            or self.db.query(TaskShare.task_id).filter(TaskShare.student_id == pk).first() is not None
            or self.db.query(ClassStudent.class_id).filter(ClassStudent.student_id == pk).first() is not None
        )


class TaskStore(_Repository):
    model = Task

    def list_all(self) -> list[Task]:
        return self.db.query(Task).order_by(Task.due_date, Task.created_at).all()

    def find_by_student(self, student_id) -> list[Task]:
        return self.db.query(Task).filter(Task.student_id == parse_id(student_id)).order_by(Task.due_date).all()

    def find_by_creator(self, user_id) -> list[Task]:
        return self.db.query(Task).filter(Task.created_by_id == parse_id(user_id)).order_by(Task.due_date).all()

    def visible_to(self, actor) -> list[Task]:
        """Query form of permissions.can_read_task."""
        q = self.db.query(Task)
        if actor.role == ADMIN:
            pass
        elif actor.role == TEACHER:
            q = q.filter(Task.created_by_id == actor.id)
        else:
            q = q.filter(or_(Task.student_id == actor.id, Task.shares.any(TaskShare.student_id == actor.id)))
        return q.order_by(Task.due_date, Task.created_at).all()

    def share(self, task: Task, student_ids: Iterable) -> Task:
        """Add student ids to sharedWith; ids already present (or repeated) are skipped."""
        present = set(task.shared_with)
        for raw in student_ids:
            pk = parse_id(raw)
            if pk is None or pk in present:
                continue
            task.shares.append(TaskShare(student_id=pk))
            present.add(pk)
        self.db.commit()
        self.db.refresh(task)
        return task

    def unshare(self, task: Task, student_id) -> Task:
        """Remove one student id from sharedWith; absent ids are a no-op."""
        pk = parse_id(student_id)
        for share in list(task.shares):
            if share.student_id == pk:
                task.shares.remove(share)
        self.db.commit()
        self.db.refresh(task)
        return task


class AnnouncementStore(_Repository):
    model = Announcement

    def list_all(self) -> list[Announcement]:
        """Newest first."""
        return self.db.query(Announcement).order_by(Announcement.created_at.desc()).all()


class EventStore(_Repository):
    model = Event

    def _ordered(self, q):
        # Soonest first; untimed (all-day) events sort before timed ones on the same day
        return q.order_by(Event.start_date, Event.start_time.is_not(None), Event.start_time, Event.created_at)

    def list_all(self) -> list[Event]:
        return self._ordered(self.db.query(Event)).all()

    def find_by_creator(self, user_id) -> list[Event]:
        return self._ordered(self.db.query(Event).filter(Event.created_by == parse_id(user_id))).all()

    def visible_to(self, actor, start: date | None = None, end: date | None = None) -> list[Event]:
        """Query form of permissions.can_see_event, optionally limited to events overlapping [start, end]."""
        q = self.db.query(Event)
        if actor.role != ADMIN:
            q = q.filter(or_(Event.visibility == PUBLIC, Event.created_by == actor.id))
        if start is not None and end is not None:
            q = q.filter(Event.start_date <= end, Event.end_date >= start)
        return self._ordered(q).all()


class ClassStore(_Repository):
    model = SchoolClass

    def list_all(self) -> list[SchoolClass]:
        return self.db.query(SchoolClass).order_by(SchoolClass.created_at.desc()).all()

    def visible_to(self, actor) -> list[SchoolClass]:
        q = self.db.query(SchoolClass)
        if actor.role == TEACHER:
            q = q.filter(SchoolClass.teacher_id == actor.id)
        elif actor.role == STUDENT:
            q = q.filter(SchoolClass.members.any(ClassStudent.student_id == actor.id))
        return q.order_by(SchoolClass.created_at.desc()).all()

    def add_students(self, school_class: SchoolClass, student_ids: Iterable) -> SchoolClass:
        present = set(school_class.student_ids)
        for raw in student_ids:
            pk = parse_id(raw)
            if pk is None or pk in present:
                continue
            school_class.members.append(ClassStudent(student_id=pk))
            present.add(pk)
        self.db.commit()
        self.db.refresh(school_class)
        return school_class

    def remove_student(self, school_class: SchoolClass, student_id) -> SchoolClass:
        pk = parse_id(student_id)
        for member in list(school_class.members):
            if member.student_id == pk:
                school_class.members.remove(member)
        self.db.commit()
        self.db.refresh(school_class)
        return school_class


class ProgressStore(_Repository):
    model = Progress

    def for_task(self, task_id) -> list[Progress]:
        return self.db.query(Progress).filter(Progress.task_id == parse_id(task_id)).order_by(Progress.created_at).all()

    def find(self, task_id, user_id) -> Progress | None:
        return (
            self.db.query(Progress)
            .filter(Progress.task_id == parse_id(task_id), Progress.user_id == parse_id(user_id))
            .first()
        )

    def upsert(self, task_id, user_id, fields: dict) -> Progress:
        row = self.find(task_id, user_id)
        if row is None:
            row = Progress(task_id=parse_id(task_id), user_id=parse_id(user_id))
            self.db.add(row)
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row


class Store:
    """All repositories over one session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserStore(db)
        self.tasks = TaskStore(db)
        self.announcements = AnnouncementStore(db)
        self.events = EventStore(db)
        self.classes = ClassStore(db)
        self.progress = ProgressStore(db)

    def rollback(self):
        self.db.rollback()
