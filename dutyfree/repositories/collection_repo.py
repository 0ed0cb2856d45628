# dutyfree/repositories/collection_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session, SQLModel, col, select

from dutyfree.models.product import Product


class OrderedCollectionRepository:
    """
    Data access for any table with `id` + `display_order` columns
    (featured_products, duty_free_products, products, brand_logos).

    - Pure DB operations; ordering rules live in the service.
    - `commit=False` lets the service group several writes in one transaction.
    """

    def __init__(self, model: type[SQLModel]):
        self.model = model

    def list_rows(
        self,
        session: Session,
        *,
        filters: dict[str, Any] | None = None,
    ) -> list[Any]:
        stmt = select(self.model)
        for field, value in (filters or {}).items():
            stmt = stmt.where(getattr(self.model, field) == value)
        stmt = stmt.order_by(self.model.display_order, self.model.id)
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, item_id: uuid.UUID) -> Any | None:
        return session.get(self.model, item_id)

    def find_by_product(self, session: Session, product_id: uuid.UUID) -> Any | None:
        stmt = select(self.model).where(self.model.product_id == product_id)
        return session.exec(stmt).first()

    def products_by_id(
        self, session: Session, product_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(col(Product.id).in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def update_fields(
        self,
        session: Session,
        item: Any,
        values: dict[str, Any],
        *,
        commit: bool = True,
    ) -> Any:
        for field, value in values.items():
            setattr(item, field, value)
        if hasattr(item, "updated_at"):
            item.updated_at = datetime.now(timezone.utc)
        session.add(item)
        if commit:
            session.commit()
            session.refresh(item)
        else:
            session.flush()
        return item

    def create(self, session: Session, item: Any) -> Any:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: Any) -> None:
        session.delete(item)
        session.commit()
