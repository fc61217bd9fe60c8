"""
Notebench Backend — Task SQLAlchemy Model
===========================================

What:  ORM model representing the `tasks` table.
Why:   Tasks hang off a project and carry no owner of their own; access is
       decided by the parent project's owner.
How:   `project_id` is a non-null foreign key with ON DELETE CASCADE.
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebench.database import Base
from notebench.models.mixins import IdentifiedMixin, TimestampMixin

TASK_STATUSES = ("todo", "in_progress", "done")


class Task(IdentifiedMixin, TimestampMixin, Base):
    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default="",
    )

    # One of TASK_STATUSES; validated by the API schema
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="todo",
        server_default="todo",
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_tasks_project_created", "project_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, project_id={self.project_id}, status='{self.status}')>"
