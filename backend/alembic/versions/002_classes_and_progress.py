"""Add classes, class_students and user_tasks (per-student status, submission, grade 0-20).

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ID = sa.String(36)


def upgrade() -> None:
    op.create_table(
        "classes",
        sa.Column("id", _ID, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("teacher_id", _ID, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_classes_teacher_id", "classes", ["teacher_id"], unique=False)

    op.create_table(
        "class_students",
        sa.Column("class_id", _ID, nullable=False),
        sa.Column("student_id", _ID, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("class_id", "student_id"),
    )
    op.create_index("ix_class_students_student_id", "class_students", ["student_id"], unique=False)

    op.create_table(
        "user_tasks",
        sa.Column("id", _ID, nullable=False),
        sa.Column("task_id", _ID, nullable=False),
        sa.Column("user_id", _ID, nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="todo"),
        sa.Column("submission_link", sa.String(1024), nullable=True),
        sa.Column("grade", sa.Float(), nullable=True),
        sa.Column("teacher_comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("task_id", "user_id", name="user_tasks_task_user_key"),
        sa.CheckConstraint("status IN ('todo', 'doing', 'done')", name="user_tasks_status_check"),
        sa.CheckConstraint("grade IS NULL OR (grade >= 0 AND grade <= 20)", name="user_tasks_grade_check"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_tasks_task_id", "user_tasks", ["task_id"], unique=False)
    op.create_index("ix_user_tasks_user_id", "user_tasks", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_tasks_user_id", table_name="user_tasks")
    op.drop_index("ix_user_tasks_task_id", table_name="user_tasks")
    op.drop_table("user_tasks")
    op.drop_index("ix_class_students_student_id", table_name="class_students")
    op.drop_table("class_students")
    op.drop_index("ix_classes_teacher_id", table_name="classes")
    op.drop_table("classes")
