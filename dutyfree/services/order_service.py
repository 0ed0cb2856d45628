# dutyfree/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from dutyfree.core.config import get_settings
from dutyfree.core.exceptions import DataStoreUnavailable, ItemNotFound
from dutyfree.models.order import Order, OrderItem
from dutyfree.models.user import Profile
from dutyfree.repositories.order_repo import OrderRepository
from dutyfree.repositories.product_repo import ProductRepository
from dutyfree.schemas.cart import CartLine
from dutyfree.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderTotalUpdate,
    OrderWithItemsRead,
)
from dutyfree.services.cart_store import CartStore

logger = logging.getLogger(__name__)

# Statuses from which a customer may still cancel
CANCELLABLE_STATUSES = {"pending", "confirmed"}


def compute_totals(lines: list[CartLine]) -> tuple[float, float, float]:
    """
    (subtotal, tax, total) for a cart.

    Prices are a flat placeholder per unit until the catalog carries
    real prices; shipping is free.
    """
    settings = get_settings()
    subtotal = round(
        sum(line.quantity for line in lines) * settings.CHECKOUT_UNIT_PRICE, 2
    )
    tax = round(subtotal * settings.CHECKOUT_TAX_RATE, 2)
    total = round(subtotal + tax + settings.CHECKOUT_SHIPPING, 2)
    return subtotal, tax, total


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from the shopper's cart (guest or signed in)
      - Snapshot product fields onto order items
      - Clear cart after success
      - Customer order history and cancellation
      - Admin listing, status and total edits
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo

    def _fail(self, session: Session, action: str, exc: SQLAlchemyError) -> DataStoreUnavailable:
        session.rollback()
        logger.error("%s: %s", action, exc)
        return DataStoreUnavailable(action)

    # -------- Checkout --------

    def checkout(
        self,
        session: Session,
        cart: CartStore,
        user: Profile | None,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the current cart into an Order.

        Steps:
          1. Load cart lines; error if empty.
          2. Drop lines whose product no longer exists.
          3. Compute subtotal / total.
          4. Create Order row (status='pending') and snapshot items.
          5. Commit, then clear the cart.
        """
        lines = cart.get_cart()
        if not lines:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        missing = [line.id for line in lines if line.products is None]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Some cart items are no longer available", "items": missing},
            )

        subtotal, _tax, total = compute_totals(lines)

        order = Order(
            user_id=user.id if user else None,
            guest_email=None if user else payload.customer_email,
            customer_email=payload.customer_email,
            surname=payload.surname,
            other_names=payload.other_names,
            passport_number=payload.passport_number,
            contact_number=payload.contact_number,
            arrival_flight_number=payload.arrival_flight_number,
            arrival_date=payload.arrival_date,
            arrival_time=payload.arrival_time,
            status="pending",
            subtotal=subtotal,
            total=total,
        )

        try:
            order = self.order_repo.create_order(session, order)
            items = self.order_repo.create_items(
                session,
                [self._snapshot_item(session, order.id, line) for line in lines],
            )
            session.commit()
            session.refresh(order)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error placing order", exc)

        cart.clear()
        logger.info(
            "Order %s placed (%s lines, total %.2f, %s)",
            order.id,
            len(items),
            total,
            "account" if user else "guest",
        )
        return self._build_order_with_items_dto(order, items)

    def _snapshot_item(self, session: Session, order_id: uuid.UUID, line: CartLine) -> OrderItem:
        snap = line.products
        product_id = uuid.UUID(snap.id)
        # Specifications are not carried on the cart line; read them live
        product = self.product_repo.get_by_id(session, product_id)
        return OrderItem(
            order_id=order_id,
            product_id=product_id,
            quantity=line.quantity,
            product_name=snap.name,
            product_category=snap.category,
            product_description=snap.description or None,
            product_image_url=snap.image_url,
            product_price=get_settings().CHECKOUT_UNIT_PRICE,
            product_rating=snap.rating,
            product_reviews_count=snap.reviews_count,
            product_in_stock=snap.in_stock,
            product_specifications=product.specifications if product else None,
        )

    # -------- Customer operations --------

    def list_user_orders(self, session: Session, user: Profile) -> list[OrderWithItemsRead]:
        """
        Orders for the signed-in user, newest first. Guest orders placed
        with the same email are included.
        """
        try:
            orders = self.order_repo.list_for_customer(session, user.id, user.email)
            grouped = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading orders", exc)
        return [self._build_order_with_items_dto(o, grouped[o.id]) for o in orders]

    def cancel_order(self, session: Session, user: Profile, order_id: uuid.UUID) -> OrderWithItemsRead:
        order = self._get_order(session, order_id)
        owns = order.user_id == user.id or (
            user.email is not None and order.guest_email == user.email
        )
        if not owns:
            raise ItemNotFound("Order")
        if order.status not in CANCELLABLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Order cannot be cancelled once {order.status}",
            )
        order.status = "cancelled"
        order = self._save(session, order, "Error cancelling order")
        logger.info("Order %s cancelled by %s", order.id, user.id)
        return self._with_items(session, order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[OrderWithItemsRead]:
        try:
            orders = self.order_repo.list_all(session, status_filter, skip, limit)
            grouped = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading orders", exc)
        return [self._build_order_with_items_dto(o, grouped[o.id]) for o in orders]

    def get_order_admin(self, session: Session, order_id: uuid.UUID) -> OrderWithItemsRead:
        return self._with_items(session, self._get_order(session, order_id))

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderWithItemsRead:
        """
        Admin status change. Operators may move an order to any status.
        """
        order = self._get_order(session, order_id)
        if order.status == payload.status:
            return self._with_items(session, order)
        previous = order.status
        order.status = payload.status
        order = self._save(session, order, "Error updating order")
        logger.info("Order %s status %s -> %s", order.id, previous, order.status)
        return self._with_items(session, order)

    def update_total(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderTotalUpdate,
    ) -> OrderWithItemsRead:
        order = self._get_order(session, order_id)
        order.total = payload.total
        order = self._save(session, order, "Error updating order total")
        logger.info("Order %s total set to %.2f", order.id, order.total)
        return self._with_items(session, order)

    # -------- Helpers --------

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        try:
            order = self.order_repo.get_by_id(session, order_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading order", exc)
        if not order:
            raise ItemNotFound("Order")
        return order

    def _save(self, session: Session, order: Order, action: str) -> Order:
        try:
            order = self.order_repo.update_order(session, order)
            session.commit()
            session.refresh(order)
        except SQLAlchemyError as exc:
            raise self._fail(session, action, exc)
        return order

    def _with_items(self, session: Session, order: Order) -> OrderWithItemsRead:
        try:
            grouped = self.order_repo.list_items_for_orders(session, [order.id])
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading order", exc)
        return self._build_order_with_items_dto(order, grouped[order.id])

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        data = order.model_dump()
        return OrderWithItemsRead(
            **data,
            items=[OrderItemRead.model_validate(it, from_attributes=True) for it in items],
        )
