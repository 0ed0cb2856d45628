# dutyfree/schemas/product.py
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

ProductSort = Literal["name", "rating", "newest"]


class ProductBase(SQLModel):
    """
    Shared editable fields of a catalog product.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    description: str | None = None
    insight: str | None = None
    category: str = Field(max_length=100)
    image_url: str | None = None
    rating: float | None = Field(default=0, ge=0, le=5)
    reviews_count: int | None = Field(default=0, ge=0)
    in_stock: bool | None = True
    is_visible: bool | None = True
    specifications: dict[str, Any] | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductCreate(ProductBase):
    """
    Payload for creating a product.

    - display_order is optional: if omitted, the product is appended
      at the end of its category.
    """

    display_order: int | None = None


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    insight: str | None = None
    category: str | None = Field(default=None, max_length=100)
    image_url: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    reviews_count: int | None = Field(default=None, ge=0)
    in_stock: bool | None = None
    is_visible: bool | None = None
    display_order: int | None = None
    specifications: dict[str, Any] | None = None

    @field_validator("name", "category")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None
    insight: str | None
    category: str
    image_url: str | None
    rating: float | None
    reviews_count: int | None
    in_stock: bool | None
    is_visible: bool | None
    display_order: int | None
    specifications: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class ProductImageCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    image_url: str
    is_primary: bool = False

    @field_validator("image_url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("image_url cannot be empty")
        return v


class ProductImageRead(SQLModel):
    """
    Read model for gallery images.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    image_url: str
    is_primary: bool | None
    display_order: int | None


class ProductDetail(ProductRead):
    """
    Product page payload: product plus its gallery.
    """

    images: list[ProductImageRead]


class CategoryPage(SQLModel):
    """
    Category listing resolved from a URL slug.
    """

    slug: str
    name: str
    description: str
    products: list[ProductRead]
    total_count: int
