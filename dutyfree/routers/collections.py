# dutyfree/routers/collections.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from dutyfree.core.auth import require_admin
from dutyfree.database import get_session
from dutyfree.models.product import Product
from dutyfree.schemas.collection import (
    BrandLogoCreate,
    BrandLogoRead,
    BrandLogoUpdate,
    CollectionEntryRead,
    CollectionProductCreate,
    CollectionProductRead,
    MoveRequest,
    ToggleRequest,
)
from dutyfree.services.ordered_collection import (
    BRAND_LOGOS,
    DUTY_FREE,
    FEATURED,
    OrderedCollectionEditor,
)

router = APIRouter(prefix="/collections", tags=["Collections"])

featured = OrderedCollectionEditor(FEATURED)
duty_free = OrderedCollectionEditor(DUTY_FREE)
brand_logos = OrderedCollectionEditor(BRAND_LOGOS)


def _entry(item, product) -> CollectionEntryRead:
    return CollectionEntryRead(
        id=item.id,
        product_id=item.product_id,
        display_order=item.display_order,
        is_active=item.is_active,
        products=(
            CollectionProductRead.model_validate(product, from_attributes=True)
            if product is not None
            else None
        ),
    )


def _entries(
    editor: OrderedCollectionEditor,
    session: Session,
    only_active: bool,
) -> list[CollectionEntryRead]:
    entries = []
    for item, product in editor.list_with_products(session, only_active=only_active):
        # Storefront feeds skip rows whose product is gone or hidden
        if only_active and (product is None or not product.is_visible):
            continue
        entries.append(_entry(item, product))
    return entries


def _product_collection_routes(path: str, editor: OrderedCollectionEditor) -> None:
    """Public feed plus CMS endpoints for a product-referencing collection."""

    @router.get(f"/{path}", response_model=list[CollectionEntryRead], name=f"{path}_feed")
    def public_feed(session: Session = Depends(get_session)):
        return _entries(editor, session, only_active=True)

    @router.get(
        f"/{path}/manage",
        response_model=list[CollectionEntryRead],
        dependencies=[Depends(require_admin)],
        name=f"{path}_manage",
    )
    def manage_list(session: Session = Depends(get_session)):
        return _entries(editor, session, only_active=False)

    @router.post(
        f"/{path}",
        response_model=CollectionEntryRead,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_admin)],
        name=f"{path}_add",
    )
    def add(payload: CollectionProductCreate, session: Session = Depends(get_session)):
        item = editor.add_item(session, product_id=payload.product_id)
        return _entry(item, session.get(Product, item.product_id))

    @router.delete(
        f"/{path}/{{item_id}}",
        status_code=status.HTTP_204_NO_CONTENT,
        dependencies=[Depends(require_admin)],
        name=f"{path}_remove",
    )
    def remove(item_id: uuid.UUID, session: Session = Depends(get_session)):
        editor.remove_item(session, item_id)
        return None

    @router.post(
        f"/{path}/{{item_id}}/move",
        dependencies=[Depends(require_admin)],
        name=f"{path}_move",
    )
    def move(item_id: uuid.UUID, payload: MoveRequest, session: Session = Depends(get_session)):
        return {"moved": editor.move_item(session, item_id, payload.direction)}

    @router.post(
        f"/{path}/{{item_id}}/toggle",
        dependencies=[Depends(require_admin)],
        name=f"{path}_toggle",
    )
    def toggle(item_id: uuid.UUID, payload: ToggleRequest, session: Session = Depends(get_session)):
        item = editor.toggle_active(session, item_id, payload.current_active)
        return {"id": item.id, "is_active": item.is_active}


_product_collection_routes("featured", featured)
_product_collection_routes("duty-free", duty_free)


# -------- Brand logos --------


@router.get("/brand-logos", response_model=list[BrandLogoRead])
def list_brand_logos(session: Session = Depends(get_session)):
    """Active brand logos for the home page strip (public)."""
    return brand_logos.list_items(session, only_active=True)


@router.get(
    "/brand-logos/manage",
    response_model=list[BrandLogoRead],
    dependencies=[Depends(require_admin)],
)
def list_brand_logos_admin(session: Session = Depends(get_session)):
    return brand_logos.list_items(session)


@router.post(
    "/brand-logos",
    response_model=BrandLogoRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_brand_logo(payload: BrandLogoCreate, session: Session = Depends(get_session)):
    """
    Add a brand logo; appended at the end unless display_order is given.
    """
    return brand_logos.add_item(session, **payload.model_dump())


@router.patch(
    "/brand-logos/{logo_id}",
    response_model=BrandLogoRead,
    dependencies=[Depends(require_admin)],
)
def update_brand_logo(
    logo_id: uuid.UUID,
    payload: BrandLogoUpdate,
    session: Session = Depends(get_session),
):
    return brand_logos.update_item(session, logo_id, **payload.model_dump(exclude_unset=True))


@router.delete(
    "/brand-logos/{logo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_brand_logo(logo_id: uuid.UUID, session: Session = Depends(get_session)):
    brand_logos.remove_item(session, logo_id)
    return None


@router.post("/brand-logos/{logo_id}/move", dependencies=[Depends(require_admin)])
def move_brand_logo(
    logo_id: uuid.UUID,
    payload: MoveRequest,
    session: Session = Depends(get_session),
):
    return {"moved": brand_logos.move_item(session, logo_id, payload.direction)}


@router.post(
    "/brand-logos/{logo_id}/toggle",
    response_model=BrandLogoRead,
    dependencies=[Depends(require_admin)],
)
def toggle_brand_logo(
    logo_id: uuid.UUID,
    payload: ToggleRequest,
    session: Session = Depends(get_session),
):
    return brand_logos.toggle_active(session, logo_id, payload.current_active)
