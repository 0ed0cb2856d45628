# dutyfree/routers/cart.py
from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel import Session

from dutyfree.core.auth import get_current_user
from dutyfree.core.config import get_settings
from dutyfree.core.local_storage import CookieStorage
from dutyfree.database import get_session
from dutyfree.models.user import Profile
from dutyfree.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from dutyfree.services.cart_store import CartStore

router = APIRouter(prefix="/cart", tags=["Cart"])

settings = get_settings()

CART_COUNT_HEADER = "X-Cart-Count"


def get_cart_store(
    request: Request,
    response: Response,
    session: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_current_user),
) -> CartStore:
    """
    Cart for the caller: account cart with a token, cookie cart without.

    Guest changes publish the new item count in the `X-Cart-Count`
    response header so open views can refresh their badge.
    """
    storage = CookieStorage(
        request,
        response,
        max_bytes=settings.GUEST_CART_MAX_BYTES,
        max_age=settings.GUEST_CART_MAX_AGE,
    )
    store = CartStore(
        session,
        current_user.id if current_user else None,
        storage,
        storage_key=settings.GUEST_CART_COOKIE,
    )

    def publish_count(lines):
        response.headers[CART_COUNT_HEADER] = str(sum(line.quantity for line in lines))

    store.add_listener(publish_count)
    return store


@router.get("", response_model=CartSummary)
def get_my_cart(store: CartStore = Depends(get_cart_store)):
    """
    Get the caller's cart.

    Auth:
      - Optional. Without a token the guest cookie cart is returned.
    """
    return store.summary()


@router.get("/count")
def get_cart_count(store: CartStore = Depends(get_cart_store)):
    """Total quantity across all lines (header badge)."""
    return {"count": store.count()}


@router.post("", response_model=CartSummary, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    store: CartStore = Depends(get_cart_store),
):
    """
    Add a product; an existing line for the same product is incremented.

    Returns the updated cart summary.
    """
    store.add_to_cart(payload.product_id, payload.quantity)
    return store.summary()


@router.patch("/{line_id}", response_model=CartSummary)
def update_cart_line(
    line_id: str,
    payload: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
):
    """
    Set the quantity of a cart line.

    Guests may send 0 or less to drop the line; signed-in shoppers get 400.
    """
    store.update_quantity(line_id, payload.quantity)
    return store.summary()


@router.delete("/{line_id}", response_model=CartSummary)
def remove_cart_line(
    line_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """
    Remove one line from the cart.

    Returns the updated cart summary.
    """
    store.remove_line(line_id)
    return store.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    store.clear()
    return store.summary()
