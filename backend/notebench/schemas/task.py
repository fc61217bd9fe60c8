"""
Notebench Backend — Task Schemas
==================================

Tasks carry a `project` reference instead of an owner. The project id comes
from the URL, never from the body.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from notebench.models.task import TASK_STATUSES
from notebench.schemas.common import TrimmedTitle


def _check_status(v: str) -> str:
    if v not in TASK_STATUSES:
        raise ValueError(f"Invalid status '{v}'. Must be one of: {', '.join(TASK_STATUSES)}")
    return v


class TaskCreate(BaseModel):
    title: TrimmedTitle
    description: str = Field(default="", max_length=10_000)
    status: str = Field(default="todo", description="todo, in_progress or done")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _check_status(v)


class TaskUpdate(BaseModel):
    title: Optional[TrimmedTitle] = None
    description: Optional[str] = Field(default=None, max_length=10_000)
    status: Optional[str] = None

    @field_validator("title", "description", "status")
    @classmethod
    def reject_null(cls, v: Optional[str], info: ValidationInfo) -> str:
        if v is None:
            raise ValueError("may not be null")
        if info.field_name == "status":
            return _check_status(v)
        return v


class TaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    status: str
    project: uuid.UUID = Field(validation_alias="project_id", description="Parent project id")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
