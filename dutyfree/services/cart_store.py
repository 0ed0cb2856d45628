# dutyfree/services/cart_store.py
"""
One conceptual cart over two backing stores.

  - GuestCart: anonymous shoppers. The whole cart is a JSON list under a
    single device-local storage key; lines are keyed by "guest-<product id>".
  - AccountCart: signed-in shoppers. Rows in `cart_items`, product data
    joined on read.

CartStore picks one backend per request from the injected identity
(user id or None) and never touches both.
"""
import logging
import uuid
from typing import Callable

from fastapi import HTTPException, status
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from dutyfree.core.exceptions import (
    CartLineNotFound,
    DataStoreUnavailable,
    InvalidQuantity,
    ProductNotFound,
)
from dutyfree.core.local_storage import LocalStorage, QuotaExceededError
from dutyfree.models.cart import CartItem
from dutyfree.models.product import Product
from dutyfree.repositories.cart_repo import CartRepository
from dutyfree.repositories.product_repo import ProductRepository
from dutyfree.schemas.cart import CartLine, CartSummary, ProductForCart

logger = logging.getLogger(__name__)

GUEST_CART_KEY = "guest_cart"
GUEST_LINE_PREFIX = "guest-"

CartListener = Callable[[list[CartLine]], None]

_lines_adapter = TypeAdapter(list[CartLine])


def guest_line_id(product_id: str | uuid.UUID) -> str:
    return f"{GUEST_LINE_PREFIX}{product_id}"


def snapshot_product(product: Product) -> ProductForCart:
    """Capture the cart-relevant fields of a catalog product."""
    return ProductForCart(
        id=str(product.id),
        name=product.name,
        description=product.description or "",
        category=product.category,
        image_url=product.image_url,
        rating=product.rating,
        reviews_count=product.reviews_count,
        in_stock=product.in_stock,
    )


def parse_guest_cart(raw: str | None) -> list[CartLine]:
    """
    Decode a stored guest cart.

    Absent, non-JSON or malformed content means an empty cart.
    """
    if not raw:
        return []
    try:
        return _lines_adapter.validate_json(raw)
    except ValidationError as exc:
        logger.error("Discarding unreadable guest cart: %s", exc.errors()[:1])
        return []


def serialize_guest_cart(lines: list[CartLine]) -> str:
    return _lines_adapter.dump_json(lines).decode("utf-8")


class GuestCart:
    """Anonymous cart persisted in device-local storage."""

    is_guest = True

    def __init__(
        self,
        storage: LocalStorage,
        key: str = GUEST_CART_KEY,
        on_change: CartListener | None = None,
    ):
        self.storage = storage
        self.key = key
        self.on_change = on_change

    def list_lines(self) -> list[CartLine]:
        return parse_guest_cart(self.storage.get_item(self.key))

    def add(self, product: ProductForCart, quantity: int) -> None:
        lines = self.list_lines()
        line_id = guest_line_id(product.id)
        for line in lines:
            if line.id == line_id:
                line.quantity += quantity
                break
        else:
            lines.append(CartLine(id=line_id, quantity=quantity, products=product))
        self._save(lines)

    def update_quantity(self, line_id: str, new_quantity: int) -> None:
        lines = [
            line.model_copy(update={"quantity": new_quantity})
            if line.id == line_id
            else line
            for line in self.list_lines()
        ]
        self._save([line for line in lines if line.quantity > 0])

    def remove(self, line_id: str) -> None:
        self._save([line for line in self.list_lines() if line.id != line_id])

    def clear(self) -> None:
        self.storage.remove_item(self.key)
        self._notify([])

    def _save(self, lines: list[CartLine]) -> None:
        try:
            self.storage.set_item(self.key, serialize_guest_cart(lines))
        except QuotaExceededError as exc:
            # Best-effort persistence; the previous value stays in place
            logger.warning("Guest cart not persisted: %s", exc)
        self._notify(lines)

    def _notify(self, lines: list[CartLine]) -> None:
        if self.on_change is not None:
            self.on_change(lines)


class AccountCart:
    """Signed-in cart stored as `cart_items` rows owned by one user."""

    is_guest = False

    def __init__(
        self,
        session: Session,
        user_id: uuid.UUID,
        cart_repo: CartRepository,
    ):
        self.session = session
        self.user_id = user_id
        self.cart_repo = cart_repo

    def _fail(self, action: str, exc: SQLAlchemyError) -> DataStoreUnavailable:
        self.session.rollback()
        logger.error("%s for user %s: %s", action, self.user_id, exc)
        return DataStoreUnavailable(action)

    def _get_line(self, line_id: str) -> CartItem:
        try:
            item_id = uuid.UUID(line_id)
        except ValueError:
            raise CartLineNotFound()
        try:
            item = self.cart_repo.get_for_user(self.session, self.user_id, item_id)
        except SQLAlchemyError as exc:
            raise self._fail("Error loading cart", exc)
        if item is None:
            raise CartLineNotFound()
        return item

    def list_lines(self) -> list[CartLine]:
        try:
            rows = self.cart_repo.list_for_user(self.session, self.user_id)
        except SQLAlchemyError as exc:
            raise self._fail("Error loading cart", exc)

        return [
            CartLine(
                id=str(item.id),
                quantity=item.quantity,
                products=snapshot_product(product) if product is not None else None,
            )
            for item, product in rows
        ]

    def add(self, product: ProductForCart, quantity: int) -> None:
        product_id = uuid.UUID(product.id)
        try:
            existing = self.cart_repo.get_item(self.session, self.user_id, product_id)
            if existing:
                existing.quantity += quantity
                self.cart_repo.update(self.session, existing)
            else:
                self.cart_repo.create(
                    self.session,
                    CartItem(
                        user_id=self.user_id,
                        product_id=product_id,
                        quantity=quantity,
                    ),
                )
        except SQLAlchemyError as exc:
            raise self._fail("Error adding to cart", exc)

    def update_quantity(self, line_id: str, new_quantity: int) -> None:
        if new_quantity < 1:
            raise InvalidQuantity()
        item = self._get_line(line_id)
        item.quantity = new_quantity
        try:
            self.cart_repo.update(self.session, item)
        except SQLAlchemyError as exc:
            raise self._fail("Error updating cart", exc)

    def remove(self, line_id: str) -> None:
        item = self._get_line(line_id)
        try:
            self.cart_repo.delete(self.session, item)
        except SQLAlchemyError as exc:
            raise self._fail("Error removing item", exc)

    def clear(self) -> None:
        try:
            self.cart_repo.clear_user_cart(self.session, self.user_id)
        except SQLAlchemyError as exc:
            raise self._fail("Error clearing cart", exc)


class CartStore:
    """
    Add / update / remove / list over whichever backend fits the shopper.

    Responsibilities:
      - select the backend from the explicit identity (no global auth state)
      - validate the product before it reaches either backend
      - fan out "cart changed" notifications from the guest backend
    """

    def __init__(
        self,
        session: Session,
        user_id: uuid.UUID | None,
        storage: LocalStorage,
        *,
        cart_repo: CartRepository | None = None,
        product_repo: ProductRepository | None = None,
        storage_key: str = GUEST_CART_KEY,
    ):
        self.session = session
        self.product_repo = product_repo or ProductRepository()
        self._listeners: list[CartListener] = []

        if user_id is not None:
            self.backend: GuestCart | AccountCart = AccountCart(
                session, user_id, cart_repo or CartRepository()
            )
        else:
            self.backend = GuestCart(storage, storage_key, on_change=self._emit)

    @property
    def is_guest(self) -> bool:
        return self.backend.is_guest

    # ---- notifications ----

    def add_listener(self, listener: CartListener) -> None:
        self._listeners.append(listener)

    def _emit(self, lines: list[CartLine]) -> None:
        for listener in self._listeners:
            listener(lines)

    # ---- internal helpers ----

    def _get_valid_product(self, product_id: uuid.UUID) -> Product:
        try:
            product = self.product_repo.get_by_id(self.session, product_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Product lookup failed for %s: %s", product_id, exc)
            raise DataStoreUnavailable("Error loading product")
        if product is None or not product.is_visible:
            raise ProductNotFound()
        if product.in_stock is False:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is out of stock",
            )
        return product

    # ---- public operations ----

    def get_cart(self) -> list[CartLine]:
        return self.backend.list_lines()

    def count(self) -> int:
        return sum(line.quantity for line in self.get_cart())

    def summary(self) -> CartSummary:
        lines = self.get_cart()
        return CartSummary(
            items=lines,
            total_quantity=sum(line.quantity for line in lines),
            is_guest=self.is_guest,
        )

    def add_to_cart(self, product_id: uuid.UUID, quantity: int = 1) -> None:
        if quantity < 1:
            raise InvalidQuantity()
        product = self._get_valid_product(product_id)
        self.backend.add(snapshot_product(product), quantity)
        logger.info(
            "Added %s x %s to %s cart",
            quantity,
            product_id,
            "guest" if self.is_guest else "account",
        )

    def update_quantity(self, line_id: str, new_quantity: int) -> None:
        self.backend.update_quantity(line_id, new_quantity)

    def remove_line(self, line_id: str) -> None:
        self.backend.remove(line_id)

    def clear(self) -> None:
        self.backend.clear()
