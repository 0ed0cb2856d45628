# dutyfree/models/content.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class WebsiteContent(SQLModel, table=True):
    """
    Editable content block of the public site (hero images, banners, copy).

    `section` is the lookup key used by pages, e.g. "hero_image_desktop".
    """

    __tablename__ = "website_content"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    section: str = Field(index=True)
    title: str | None = None
    content: str | None = None
    image_url: str | None = None

    # "metadata" is reserved on declarative models; keep the column name
    meta: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column("metadata", JSON),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
