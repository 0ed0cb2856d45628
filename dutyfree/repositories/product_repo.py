# dutyfree/repositories/product_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlmodel import Session, select, col

from dutyfree.models.product import Product, ProductImage


# Public sort options -> ORDER BY clauses
SORT_CLAUSES = {
    "name": (col(Product.name),),
    "rating": (col(Product.rating).desc(), col(Product.name)),
    "newest": (col(Product.created_at).desc(),),
}


class ProductRepository:
    """
    Data access layer for Product & ProductImage.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        *,
        category: str | None = None,
        search: str | None = None,
        only_visible: bool = True,
        sort: str = "name",
        skip: int = 0,
        limit: int = 100,
    ) -> list[Product]:
        stmt = select(Product)
        if only_visible:
            stmt = stmt.where(Product.is_visible == True)  # noqa: E712
        if category is not None:
            stmt = stmt.where(Product.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                    col(Product.category).ilike(pattern),
                )
            )
        stmt = stmt.order_by(*SORT_CLAUSES.get(sort, SORT_CLAUSES["name"]))
        stmt = stmt.offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_categories(self, session: Session, only_visible: bool = True) -> list[str]:
        stmt = select(Product.category).distinct()
        if only_visible:
            stmt = stmt.where(Product.is_visible == True)  # noqa: E712
        return sorted(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = datetime.now(timezone.utc)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    # ----- Product images -----

    def list_images_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.display_order, ProductImage.id)
        )
        return list(session.exec(stmt).all())

    def get_image_by_id(
        self,
        session: Session,
        image_id: uuid.UUID,
    ) -> ProductImage | None:
        return session.get(ProductImage, image_id)

    def create_image(
        self,
        session: Session,
        image: ProductImage,
    ) -> ProductImage:
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    def delete_image(
        self,
        session: Session,
        image: ProductImage,
    ) -> None:
        session.delete(image)
        session.commit()
