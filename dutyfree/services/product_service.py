# dutyfree/services/product_service.py
import logging
import re
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from dutyfree.core.exceptions import DataStoreUnavailable, ItemNotFound, ProductNotFound
from dutyfree.models.cart import CartItem
from dutyfree.models.collection import DutyFreeProduct, FeaturedProduct
from dutyfree.models.product import Product, ProductImage
from dutyfree.repositories.product_repo import ProductRepository
from dutyfree.schemas.product import (
    CategoryPage,
    ProductCreate,
    ProductDetail,
    ProductImageCreate,
    ProductImageRead,
    ProductRead,
    ProductUpdate,
)
from dutyfree.services.ordered_collection import (
    CATALOG,
    OrderedCollectionEditor,
    next_display_order,
)

logger = logging.getLogger(__name__)

# Storefront categories whose display name is not the title-cased slug
KNOWN_CATEGORY_SLUGS: dict[str, str] = {
    "tvs": "TVs",
    "accessories": "Electronic Household Accessories",
}


def slug_to_category_name(slug: str) -> str:
    """
    "electronics-appliances" -> "Electronics Appliances".

    Known storefront slugs map to their exact category names.
    """
    slug = slug.strip().lower()
    if slug in KNOWN_CATEGORY_SLUGS:
        return KNOWN_CATEGORY_SLUGS[slug]
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


def category_to_slug(name: str) -> str:
    """
    Inverse of slug_to_category_name for building category links.
    """
    for slug, known in KNOWN_CATEGORY_SLUGS.items():
        if known == name:
            return slug
    value = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return value.strip("-")


class ProductService:
    """
    Catalog reads for the storefront and catalog edits for the CMS.

    Responsibilities:
      - visible-only listing, category pages, substring search
      - product create/update/delete (ordering delegated to the catalog
        ordered-collection editor)
      - gallery images referenced by URL
    """

    def __init__(self, repo: ProductRepository, editor: OrderedCollectionEditor | None = None):
        self.repo = repo
        self.editor = editor or OrderedCollectionEditor(CATALOG)

    def _fail(self, session: Session, action: str, exc: SQLAlchemyError) -> DataStoreUnavailable:
        session.rollback()
        logger.error("%s: %s", action, exc)
        return DataStoreUnavailable(action)

    # ----- Storefront -----

    def list_products(
        self,
        session: Session,
        *,
        category: str | None = None,
        search: str | None = None,
        sort: str = "name",
        only_visible: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Product]:
        try:
            return self.repo.list_products(
                session,
                category=category,
                search=search.strip() if search else None,
                only_visible=only_visible,
                sort=sort,
                skip=skip,
                limit=limit,
            )
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading products", exc)

    def list_categories(self, session: Session) -> list[dict[str, str]]:
        try:
            names = self.repo.list_categories(session)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading categories", exc)
        return [{"name": name, "slug": category_to_slug(name)} for name in names]

    def category_page(self, session: Session, slug: str, sort: str = "name") -> CategoryPage:
        name = slug_to_category_name(slug)
        products = self.list_products(session, category=name, sort=sort)
        return CategoryPage(
            slug=slug,
            name=name,
            description=(
                f"Browse our selection of {name} products at "
                "Metro International Duty Free."
            ),
            products=[ProductRead.model_validate(p, from_attributes=True) for p in products],
            total_count=len(products),
        )

    def get_product(self, session: Session, product_id: uuid.UUID, only_visible: bool = False) -> Product:
        try:
            product = self.repo.get_by_id(session, product_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading product", exc)
        if not product or (only_visible and not product.is_visible):
            raise ProductNotFound()
        return product

    def get_product_detail(self, session: Session, product_id: uuid.UUID) -> ProductDetail:
        product = self.get_product(session, product_id, only_visible=True)
        images = self.list_images(session, product_id)
        data = ProductRead.model_validate(product, from_attributes=True).model_dump()
        return ProductDetail(
            **data,
            images=[ProductImageRead.model_validate(i, from_attributes=True) for i in images],
        )

    # ----- CMS -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        """
        Create a product; without an explicit display_order it is
        appended at the end of its category.
        """
        return self.editor.add_item(session, **payload.model_dump())

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        product = self.get_product(session, product_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        try:
            return self.repo.update(session, product)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error updating product", exc)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product with its gallery and every collection / cart
        row that references it.
        """
        product = self.get_product(session, product_id)
        name = product.name
        try:
            for model in (ProductImage, FeaturedProduct, DutyFreeProduct, CartItem):
                rows = session.exec(select(model).where(model.product_id == product_id)).all()
                for row in rows:
                    session.delete(row)
            self.repo.delete(session, product)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error deleting product", exc)
        logger.info("Deleted product %s (%s)", product_id, name)

    # ----- Gallery images -----

    def list_images(self, session: Session, product_id: uuid.UUID) -> list[ProductImage]:
        try:
            return self.repo.list_images_for_product(session, product_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading images", exc)

    def add_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductImageCreate,
    ) -> ProductImage:
        """
        Attach an already-uploaded image URL to the product gallery,
        appended after the existing images.
        """
        self.get_product(session, product_id)
        existing = self.list_images(session, product_id)
        if any(img.image_url == payload.image_url for img in existing):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Image already attached to this product",
            )
        image = ProductImage(
            product_id=product_id,
            image_url=payload.image_url,
            is_primary=payload.is_primary,
            display_order=next_display_order(existing),
        )
        try:
            return self.repo.create_image(session, image)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error adding image", exc)

    def remove_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        image_id: uuid.UUID,
    ) -> None:
        """
        Detach a gallery image. The Storage object itself is kept; it may
        be reused by other content.
        """
        try:
            image = self.repo.get_image_by_id(session, image_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading images", exc)
        if not image or image.product_id != product_id:
            raise ItemNotFound("Image")
        try:
            self.repo.delete_image(session, image)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error removing image", exc)
