"""
Notebench Backend — Note Schemas
==================================

Request bodies never accept an owner: unknown fields are ignored, so a client
posting `{"owner": "..."}` cannot forge ownership. The owner is always taken
from the authenticated caller.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from notebench.schemas.common import TrimmedTitle


class NoteCreate(BaseModel):
    title: TrimmedTitle
    content: str = Field(min_length=1, max_length=100_000)


class NoteUpdate(BaseModel):
    """Partial update: only the fields present in the body are replaced."""
    title: Optional[TrimmedTitle] = None
    content: Optional[str] = Field(default=None, min_length=1, max_length=100_000)

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


class NoteResponse(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    owner: uuid.UUID = Field(validation_alias="owner_id", description="Owning user id")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
