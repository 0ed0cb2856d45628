# dutyfree/models/product.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry for the duty-free storefront.

    Matches the `products` table:
      - id, name, description, insight, category, image_url,
        rating, reviews_count, in_stock, is_visible, display_order,
        specifications, created_at, updated_at

    `display_order` orders products within their category;
    `is_visible` hides a product from the public site without deleting it.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    insight: str | None = Field(
        default=None,
        description="Short editorial note shown on the product page",
    )

    category: str = Field(
        index=True,
        description="Category display name, e.g. 'Fragrance'",
    )

    image_url: str | None = Field(
        default=None,
        description="Main image public URL",
    )

    rating: float | None = Field(default=0, ge=0, le=5)
    reviews_count: int | None = Field(default=0, ge=0)

    in_stock: bool | None = Field(default=True)

    is_visible: bool | None = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    display_order: int | None = Field(
        default=0,
        description="Sort position within its category",
    )

    specifications: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductImage(SQLModel, table=True):
    """
    Additional gallery images for a product.

    Matches the `product_images` table:
      - id, product_id, image_url, is_primary, display_order
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_url: str = Field(
        description="Public URL stored in Supabase Storage",
    )

    is_primary: bool | None = Field(default=False)

    display_order: int | None = Field(
        default=0,
        description="Ordering index within the gallery",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
