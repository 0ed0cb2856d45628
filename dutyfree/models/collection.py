# dutyfree/models/collection.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class FeaturedProduct(SQLModel, table=True):
    """
    Home page "featured" slot referencing a catalog product.
    """

    __tablename__ = "featured_products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    display_order: int | None = Field(default=0)
    is_active: bool | None = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class DutyFreeProduct(SQLModel, table=True):
    """
    Entry of the curated duty-free collection page.
    """

    __tablename__ = "duty_free_products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    display_order: int | None = Field(default=0)
    is_active: bool | None = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class BrandLogo(SQLModel, table=True):
    """
    Brand logo shown in the home page scroller.
    """

    __tablename__ = "brand_logos"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str
    image_url: str = Field(description="Public URL of the logo image")

    display_order: int | None = Field(default=0)
    is_active: bool | None = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
