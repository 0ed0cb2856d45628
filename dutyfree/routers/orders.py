# dutyfree/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from dutyfree.core.auth import get_current_user, require_admin, require_auth
from dutyfree.database import get_session
from dutyfree.models.user import Profile
from dutyfree.repositories.order_repo import OrderRepository
from dutyfree.repositories.product_repo import ProductRepository
from dutyfree.routers.cart import get_cart_store
from dutyfree.schemas.order import (
    OrderCreate,
    OrderStatus,
    OrderStatusUpdate,
    OrderTotalUpdate,
    OrderWithItemsRead,
)
from dutyfree.services.cart_store import CartStore
from dutyfree.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, product_repo)


# -------- User-facing endpoints --------


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_current_user),
    cart: CartStore = Depends(get_cart_store),
):
    """
    Place an order from the caller's cart (payment is simulated).

    Auth:
      - Optional. Guests check out from their cookie cart and the order
        is recorded against their email.
    """
    return service.checkout(session, cart, current_user, payload)


@router.get(
    "/me",
    response_model=list[OrderWithItemsRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    List the authenticated user's orders with items, newest first.
    """
    return service.list_user_orders(session, current_user)


@router.post(
    "/me/{order_id}/cancel",
    response_model=OrderWithItemsRead,
)
def cancel_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Cancel one of the user's orders while it is pending or confirmed.
    """
    return service.cancel_order(session, current_user, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderWithItemsRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    List all orders (admin only), optionally filtered by status.
    """
    return service.list_all_orders(session, status_filter, skip, limit)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).
    """
    return service.update_status(session, order_id, payload)


@router.patch(
    "/{order_id}/total",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def update_order_total(
    order_id: uuid.UUID,
    payload: OrderTotalUpdate,
    session: Session = Depends(get_session),
):
    """
    Correct an order total (admin only).
    """
    return service.update_total(session, order_id, payload)
