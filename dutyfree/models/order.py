# dutyfree/models/order.py
import uuid
from datetime import datetime, date, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Duty-free order, collected by the traveller on arrival.

    Matches the `orders` table:
      - id, user_id, guest_email, customer_email, surname, other_names,
        passport_number, contact_number, arrival_flight_number,
        arrival_date, arrival_time, status, subtotal, total,
        created_at, updated_at
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Null for guest checkouts; guests are matched by guest_email instead
    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="profiles.id",
        index=True,
    )
    guest_email: str | None = Field(default=None, index=True)
    customer_email: str = Field(description="Where the confirmation goes")

    surname: str
    other_names: str
    passport_number: str
    contact_number: str

    arrival_flight_number: str
    arrival_date: date
    arrival_time: str = Field(description="Scheduled arrival time, HH:MM")

    # pending | confirmed | processing | completed | cancelled | collected
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    subtotal: float = Field(default=0)
    total: float = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    Product fields are snapshotted so later catalog edits do not
    rewrite order history.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    product_name: str
    product_category: str
    product_description: str | None = None
    product_image_url: str | None = None
    product_price: float | None = None
    product_rating: float | None = None
    product_reviews_count: int | None = None
    product_in_stock: bool | None = None
    product_specifications: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
