# dutyfree/schemas/cart.py
import uuid

from sqlmodel import SQLModel, Field


class ProductForCart(SQLModel):
    """
    Cart-relevant snapshot of a product.

    Guest lines store this snapshot as captured at add time; signed-in
    lines get it joined from the live product row on read.
    """

    id: str
    name: str
    description: str = ""
    category: str
    image_url: str | None = None
    rating: float | None = None
    reviews_count: int | None = None
    in_stock: bool | None = None


class CartLine(SQLModel):
    """
    One line of the conceptual cart.

    - guest lines: id = "guest-<product id>"
    - signed-in lines: id = cart_items row id
    """

    id: str
    quantity: int = Field(gt=0)
    products: ProductForCart | None = None


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart line.

    Not bounded here: guests may send 0 or less to drop the line.
    """

    quantity: int


class CartSummary(SQLModel):
    """
    Full cart response model.
    """

    items: list[CartLine]
    total_quantity: int
    is_guest: bool
