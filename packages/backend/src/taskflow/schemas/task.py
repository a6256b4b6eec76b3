"""Pydantic schemas for tasks.

Learn: Separate schemas for create/replace/update/read keeps the API clean.
- TaskCreate: what you POST (and PUT — a replace is a create-shaped body)
- TaskUpdate: what you PATCH (all optional, at least one field)
- TaskRead: what the API returns, including owner_id

None of the input schemas has an owner_id field. Unknown keys in the
body are ignored, so sending one has no effect.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

STATUS_PATTERN = r"^(pending|in_progress|completed)$"
PRIORITY_PATTERN = r"^(low|medium|high)$"


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Title is required and must be a non-empty string.")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    status: str = Field(default="pending", pattern=STATUS_PATTERN)
    priority: str = Field(default="medium", pattern=PRIORITY_PATTERN)
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)

    @field_validator("description")
    @classmethod
    def clean_description(cls, value):
        return _clean_description(value)


class TaskUpdate(BaseModel):
    """Partial update — only fields present in the body are applied."""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)

    @field_validator("description")
    @classmethod
    def clean_description(cls, value):
        return _clean_description(value)

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError(
                "At least one field (title, description, status, priority, due_date) "
                "must be provided."
            )
        for field in ("title", "status", "priority"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null.")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskRead(BaseModel):
    id: int
    owner_id: uuid.UUID
    title: str
    description: Optional[str]
    status: str
    priority: str
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskEnvelope(BaseModel):
    message: Optional[str] = None
    task: TaskRead


class TaskList(BaseModel):
    tasks: list[TaskRead]
    count: int
