"""
DB types and enum values shared by models, schemas and permission rules.
UuidType works on both SQLite (local use and tests) and PostgreSQL.
"""
import uuid
from sqlalchemy import String, TypeDecorator

# Roles form one closed set; other spellings (e.g. "enseignant") are rejected at the API boundary.
STUDENT = "student"
TEACHER = "teacher"
ADMIN = "admin"
ROLES = (STUDENT, TEACHER, ADMIN)

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"

PUBLIC = "public"
PRIVATE = "private"
VISIBILITIES = (PUBLIC, PRIVATE)

PROGRESS_STATUSES = ("todo", "doing", "done")
GRADE_MIN = 0
GRADE_MAX = 20


def in_check(column: str, values: tuple[str, ...]) -> str:
    """SQL text for a CHECK constraint restricting column to values."""
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class UuidType(TypeDecorator):
    """UUID that stores as string(36) so it works on SQLite and PostgreSQL."""
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)
