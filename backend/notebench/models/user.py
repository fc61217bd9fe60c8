"""
Notebench Backend — User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table.
Why:   Users are the owners every Note and Project points at.
How:   Usernames and emails are unique; only a password hash is stored.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notebench.database import Base
from notebench.models.mixins import IdentifiedMixin, TimestampMixin


class User(IdentifiedMixin, TimestampMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Public handle, unique across the service",
    )

    # Stored lowercased by the service layer so uniqueness is case-insensitive
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # passlib-encoded hash (algorithm, rounds and salt are embedded in the string)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
