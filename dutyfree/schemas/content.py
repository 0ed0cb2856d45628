# dutyfree/schemas/content.py
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Plain pydantic models: SQLModel reserves the `metadata` attribute
class ContentCreate(BaseModel):
    """
    New content block. `metadata` is free-form JSON (e.g. alt text,
    link targets) stored as-is.
    """

    model_config = ConfigDict(extra="forbid")

    section: str = Field(max_length=100)
    title: str | None = None
    content: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("section")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("section cannot be empty")
        return v


class ContentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    section: str | None = Field(default=None, max_length=100)
    title: str | None = None
    content: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("section")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("section cannot be empty")
        return v


class ContentRead(BaseModel):
    id: uuid.UUID
    section: str
    title: str | None
    content: str | None
    image_url: str | None
    metadata: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime
