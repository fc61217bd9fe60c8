"""Notebench Backend — Project Schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from notebench.schemas.common import TrimmedTitle


class ProjectCreate(BaseModel):
    name: TrimmedTitle
    description: str = Field(default="", max_length=10_000)


class ProjectUpdate(BaseModel):
    name: Optional[TrimmedTitle] = None
    description: Optional[str] = Field(default=None, max_length=10_000)

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


class ProjectResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    owner: uuid.UUID = Field(validation_alias="owner_id", description="Owning user id")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
