"""
Notebench Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Why:   Notes are the simplest directly-owned resource: a title, a body, an owner.
How:   `owner_id` is a non-null foreign key to users; the service layer stamps it
       from the authenticated caller and never lets a payload change it.

Query Patterns:
    - List mine:  SELECT ... WHERE owner_id = :user ORDER BY created_at, id
      → Uses idx_notes_owner_created
    - Get one:    SELECT ... WHERE id = :uuid (primary key)
    - Write:      UPDATE/DELETE ... WHERE id = :uuid AND owner_id = :user
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebench.database import Base
from notebench.models.mixins import IdentifiedMixin, TimestampMixin


class Note(IdentifiedMixin, TimestampMixin, Base):
    """
    A free-form note owned by exactly one user.

    Lifecycle:
        1. Created with owner_id = caller
        2. Updated in place (title/content only)
        3. Deleted by id; no soft delete
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Trimmed, non-empty title",
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Immutable after creation; deleting the user removes their notes
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_notes_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id}, title='{self.title}')>"
