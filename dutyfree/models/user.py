# dutyfree/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Persistent profile for a signed-in shopper.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Supabase Auth stores credentials in its own schema; this table only
    mirrors identity and display name. Guests have no row.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str | None = Field(
        default=None,
        index=True,
        description="Email from Supabase auth.users",
    )

    full_name: str | None = Field(
        default=None,
        max_length=200,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class UserRole(SQLModel, table=True):
    """
    Application role grant (not a Supabase RLS role).

    A profile is an admin when it has a row with role == "admin".
    """

    __tablename__ = "user_roles"

    id: int | None = Field(default=None, primary_key=True)

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    role: str = Field(
        index=True,
        description="Application role: admin | user",
    )
