"""
SQLAlchemy models. Import here so Alembic and app can use them.
"""
from taskboard.models.user import User
from taskboard.models.task import Task, TaskShare
from taskboard.models.announcement import Announcement
from taskboard.models.event import Event
from taskboard.models.school_class import SchoolClass, ClassStudent
from taskboard.models.progress import Progress

__all__ = ["User", "Task", "TaskShare", "Announcement", "Event", "SchoolClass", "ClassStudent", "Progress"]
