"""
Notebench Backend — ORM Models
================================

Importing this package registers every table on `Base.metadata`, which both
Alembic autogenerate and `Database.create_all()` rely on.
"""

from notebench.models.user import User
from notebench.models.note import Note
from notebench.models.project import Project
from notebench.models.task import Task, TASK_STATUSES

__all__ = ["User", "Note", "Project", "Task", "TASK_STATUSES"]
