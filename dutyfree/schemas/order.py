# dutyfree/schemas/order.py
import math
import re
import uuid
from datetime import date, datetime
from typing import Any, Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel

OrderStatus = Literal[
    "pending",
    "confirmed",
    "processing",
    "completed",
    "cancelled",
    "collected",
]

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class OrderCreate(SQLModel):
    """
    Checkout payload: traveller details for collection on arrival.

    Backend derives:
      - user_id / guest_email from the session
      - status = 'pending'
      - subtotal / total from the cart
      - items from the cart
    """

    model_config = ConfigDict(extra="forbid")

    surname: str
    other_names: str
    passport_number: str
    contact_number: str
    customer_email: EmailStr
    arrival_flight_number: str
    arrival_date: date
    arrival_time: str

    @field_validator(
        "surname",
        "other_names",
        "passport_number",
        "contact_number",
        "arrival_flight_number",
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("passport_number", "arrival_flight_number")
    @classmethod
    def upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("arrival_time")
    @classmethod
    def valid_time(cls, v: str) -> str:
        v = v.strip()
        if not _TIME_RE.match(v):
            raise ValueError("arrival_time must be HH:MM (24h)")
        return v


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product_name: str
    product_category: str
    product_description: str | None
    product_image_url: str | None
    product_price: float | None
    product_rating: float | None
    product_reviews_count: int | None
    product_in_stock: bool | None
    product_specifications: dict[str, Any] | None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID | None
    guest_email: str | None
    customer_email: str
    surname: str
    other_names: str
    passport_number: str
    contact_number: str
    arrival_flight_number: str
    arrival_date: date
    arrival_time: str
    status: OrderStatus
    subtotal: float
    total: float
    created_at: datetime
    updated_at: datetime


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class OrderTotalUpdate(SQLModel):
    """
    Admin payload to correct an order total.

    Any finite, non-negative number is accepted.
    """

    model_config = ConfigDict(extra="forbid")

    total: float

    @field_validator("total")
    @classmethod
    def valid_total(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v) or v < 0:
            raise ValueError("total must be a valid non-negative number")
        return round(v, 2)
