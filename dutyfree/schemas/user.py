# dutyfree/schemas/user.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: str | None
    full_name: str | None
    is_admin: bool = False
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Email is owned by Supabase Auth; only `full_name` is editable here.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=200)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v
