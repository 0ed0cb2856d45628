# dutyfree/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from dutyfree.core.auth import require_admin
from dutyfree.database import get_session
from dutyfree.repositories.product_repo import ProductRepository
from dutyfree.schemas.collection import MoveRequest, ToggleRequest
from dutyfree.schemas.product import (
    CategoryPage,
    ProductCreate,
    ProductDetail,
    ProductImageCreate,
    ProductImageRead,
    ProductRead,
    ProductSort,
    ProductUpdate,
)
from dutyfree.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    search: str | None = Query(default=None, max_length=100),
    sort: ProductSort = "name",
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    List visible products.

    - Public endpoint.
    - `search` matches name, description or category (case-insensitive).
    """
    return service.list_products(
        session,
        category=category,
        search=search,
        sort=sort,
        skip=skip,
        limit=limit,
    )


@router.get("/categories")
def list_categories(session: Session = Depends(get_session)):
    """Distinct categories of visible products, with their URL slugs."""
    return service.list_categories(session)


@router.get("/category/{slug}", response_model=CategoryPage)
def get_category_page(
    slug: str,
    sort: ProductSort = "name",
    session: Session = Depends(get_session),
):
    """
    Category page resolved from its slug, e.g. "electronics-appliances".
    """
    return service.category_page(session, slug, sort)


# -------- Admin endpoints --------


@router.get(
    "/manage",
    response_model=list[ProductRead],
    dependencies=[Depends(require_admin)],
)
def list_products_admin(
    category: str | None = None,
    session: Session = Depends(get_session),
):
    """
    All products, hidden ones included, in display order (admin only).

    With `category`, the list is that category's ordering as moved by
    the move endpoint.
    """
    return service.editor.list_items(session, group=category)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product and its images (admin only).
    """
    service.delete_product(session, product_id)
    return None


@router.post(
    "/{product_id}/move",
    dependencies=[Depends(require_admin)],
)
def move_product(
    product_id: uuid.UUID,
    payload: MoveRequest,
    session: Session = Depends(get_session),
):
    """
    Move a product one slot up or down within its category (admin only).
    """
    moved = service.editor.move_item(session, product_id, payload.direction)
    return {"moved": moved}


@router.post(
    "/{product_id}/toggle",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def toggle_product_visibility(
    product_id: uuid.UUID,
    payload: ToggleRequest,
    session: Session = Depends(get_session),
):
    """
    Show or hide a product on the storefront (admin only).
    """
    return service.editor.toggle_active(session, product_id, payload.current_active)


@router.post(
    "/{product_id}/images",
    response_model=ProductImageRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def add_product_image(
    product_id: uuid.UUID,
    payload: ProductImageCreate,
    session: Session = Depends(get_session),
):
    """
    Attach an uploaded image URL to the product gallery (admin only).
    """
    return service.add_image(session, product_id, payload)


@router.delete(
    "/{product_id}/images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a single gallery image row (admin only).
    """
    service.remove_image(session, product_id, image_id)
    return None


# -------- Public detail (declared last so fixed paths win) --------


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Product page: a visible product with its gallery images.

    - Public endpoint.
    """
    return service.get_product_detail(session, product_id)


@router.get(
    "/{product_id}/images",
    response_model=list[ProductImageRead],
)
def list_product_images(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    List gallery images for a product (public).
    """
    return service.list_images(session, product_id)
