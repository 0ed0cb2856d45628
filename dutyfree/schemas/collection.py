# dutyfree/schemas/collection.py
import uuid
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class MoveRequest(SQLModel):
    """
    Move one item a slot up or down in its collection.
    """

    model_config = ConfigDict(extra="forbid")

    direction: Literal["up", "down"]


class ToggleRequest(SQLModel):
    """
    Flip the active/visible flag. `current_active` is the value the
    operator saw; the new value is its negation.
    """

    model_config = ConfigDict(extra="forbid")

    current_active: bool


class CollectionProductCreate(SQLModel):
    """
    Add a catalog product to the featured / duty-free collection.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID


class CollectionProductRead(SQLModel):
    id: uuid.UUID
    name: str
    category: str
    image_url: str | None
    in_stock: bool | None


class CollectionEntryRead(SQLModel):
    """
    Featured / duty-free entry joined with its product.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    display_order: int | None
    is_active: bool | None
    products: CollectionProductRead | None


class BrandLogoCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    image_url: str
    display_order: int | None = None
    is_active: bool = True

    @field_validator("name", "image_url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class BrandLogoUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    image_url: str | None = None
    display_order: int | None = None
    is_active: bool | None = None


class BrandLogoRead(SQLModel):
    id: uuid.UUID
    name: str
    image_url: str
    display_order: int | None
    is_active: bool | None
