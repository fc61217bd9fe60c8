"""
Notebench Backend — Project SQLAlchemy Model
==============================================

What:  ORM model representing the `projects` table.
Why:   Projects are directly owned and act as the ownership root for tasks.
How:   Same ownership shape as Note; tasks reference projects with
       ON DELETE CASCADE so removing a project never leaves orphaned tasks.
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebench.database import Base
from notebench.models.mixins import IdentifiedMixin, TimestampMixin


class Project(IdentifiedMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default="",
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_projects_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, owner_id={self.owner_id}, name='{self.name}')>"
