# dutyfree/services/ordered_collection.py
"""
Ordered collection editing shared by every CMS list with a display order.

A collection is a table whose rows carry an integer `display_order`.
Rendering order is `display_order` ascending (null counts as 0), ties
broken by id. Operators move one item a slot up or down by swapping its
order value with its neighbour's.

Each CMS screen is just a CollectionConfig:

    FEATURED = CollectionConfig(FeaturedProduct, label="featured",
                                references_product=True)
    CATALOG = CollectionConfig(Product, label="catalog",
                               active_field="is_visible", group_field="category")
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from dutyfree.core.exceptions import (
    DataStoreUnavailable,
    DuplicateCollectionItem,
    ItemNotFound,
    ProductNotFound,
)
from dutyfree.models.collection import BrandLogo, DutyFreeProduct, FeaturedProduct
from dutyfree.models.product import Product
from dutyfree.repositories.collection_repo import OrderedCollectionRepository

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]


@dataclass(frozen=True)
class CollectionConfig:
    model: type[SQLModel]
    label: str
    active_field: str = "is_active"
    group_field: str | None = None
    references_product: bool = False


FEATURED = CollectionConfig(FeaturedProduct, label="featured", references_product=True)
DUTY_FREE = CollectionConfig(DutyFreeProduct, label="duty free", references_product=True)
BRAND_LOGOS = CollectionConfig(BrandLogo, label="brand logo")
CATALOG = CollectionConfig(
    Product,
    label="catalog",
    active_field="is_visible",
    group_field="category",
)


def order_key(item: Any) -> tuple[int, str]:
    return (item.display_order or 0, str(item.id))


def rendering_order(items: list[Any]) -> list[Any]:
    """Sort rows the way the public site renders them."""
    return sorted(items, key=order_key)


def next_display_order(items: list[Any]) -> int:
    """max(existing orders, -1) + 1, so an empty collection starts at 0."""
    return max([item.display_order or 0 for item in items] + [-1]) + 1


class OrderedCollectionEditor:
    """
    Move / toggle / add / remove for one ordered collection.

    Every mutation is followed by a full re-read on the caller's side;
    nothing here patches a cached list.
    """

    def __init__(
        self,
        config: CollectionConfig,
        repo: OrderedCollectionRepository | None = None,
    ):
        self.config = config
        self.repo = repo or OrderedCollectionRepository(config.model)

    # ----- helpers -----

    def _fail(self, session: Session, action: str, exc: SQLAlchemyError) -> DataStoreUnavailable:
        session.rollback()
        logger.error("%s (%s): %s", action, self.config.label, exc)
        return DataStoreUnavailable(action)

    def _group_filter(self, group: str | None) -> dict[str, Any]:
        if self.config.group_field is None or group is None:
            return {}
        return {self.config.group_field: group}

    def get_item(self, session: Session, item_id: uuid.UUID) -> Any:
        try:
            item = self.repo.get_by_id(session, item_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, f"Error loading {self.config.label} items", exc)
        if item is None:
            raise ItemNotFound(self.config.label.capitalize() + " item")
        return item

    # ----- reads -----

    def list_items(
        self,
        session: Session,
        group: str | None = None,
        only_active: bool = False,
    ) -> list[Any]:
        filters = self._group_filter(group)
        if only_active:
            filters[self.config.active_field] = True
        try:
            rows = self.repo.list_rows(session, filters=filters)
        except SQLAlchemyError as exc:
            raise self._fail(session, f"Error loading {self.config.label} items", exc)
        return rendering_order(rows)

    def list_with_products(
        self,
        session: Session,
        only_active: bool = False,
    ) -> list[tuple[Any, Product | None]]:
        """Rows of a product-referencing collection, each with its product."""
        items = self.list_items(session, only_active=only_active)
        try:
            products = self.repo.products_by_id(
                session, [item.product_id for item in items]
            )
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading products", exc)
        return [(item, products.get(item.product_id)) for item in items]

    # ----- mutations -----

    def move_item(
        self,
        session: Session,
        item_id: uuid.UUID,
        direction: Direction,
    ) -> bool:
        """
        Swap the item's display order with its neighbour in rendering order.

        Grouped collections only look at the item's own group. Moving the
        first item up or the last item down is a no-op.

        Returns:
            True if a swap happened, False on a boundary no-op or when the
            neighbour shares the item's display order.
        """
        item = self.get_item(session, item_id)
        group = getattr(item, self.config.group_field) if self.config.group_field else None
        ordered = self.list_items(session, group=group)

        index = next(i for i, row in enumerate(ordered) if row.id == item.id)
        if direction == "up" and index == 0:
            return False
        if direction == "down" and index == len(ordered) - 1:
            return False

        target_index = index - 1 if direction == "up" else index + 1
        current, target = ordered[index], ordered[target_index]
        current_order, target_order = current.display_order, target.display_order
        if (current_order or 0) == (target_order or 0):
            # Equal orders: exchanging them would not change rendering order
            logger.info(
                "Not moving %s item %s %s: neighbour shares order %s",
                self.config.label,
                item_id,
                direction,
                current_order,
            )
            return False

        # Two updates, committed together; a failure leaves both rows untouched
        try:
            self.repo.update_fields(
                session, current, {"display_order": target_order}, commit=False
            )
            self.repo.update_fields(
                session, target, {"display_order": current_order}, commit=False
            )
            session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error updating order", exc)

        logger.info(
            "Moved %s item %s %s (order %s <-> %s)",
            self.config.label,
            item_id,
            direction,
            current_order,
            target_order,
        )
        return True

    def toggle_active(
        self,
        session: Session,
        item_id: uuid.UUID,
        current_active: bool,
    ) -> Any:
        item = self.get_item(session, item_id)
        try:
            return self.repo.update_fields(
                session, item, {self.config.active_field: not current_active}
            )
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error updating status", exc)

    def add_item(self, session: Session, **fields: Any) -> Any:
        """
        Append a new item at the end of its collection (or group).

        Product-referencing collections reject a product that is already
        present. An explicit `display_order` in `fields` is kept as given.
        """
        if self.config.references_product:
            product_id = fields["product_id"]
            try:
                product = session.get(Product, product_id)
                existing = self.repo.find_by_product(session, product_id)
            except SQLAlchemyError as exc:
                raise self._fail(session, f"Error adding {self.config.label} item", exc)
            if product is None:
                raise ProductNotFound()
            if existing is not None:
                raise DuplicateCollectionItem(self.config.label)

        if fields.get("display_order") is None:
            group = fields.get(self.config.group_field) if self.config.group_field else None
            fields["display_order"] = next_display_order(
                self.list_items(session, group=group)
            )
        fields.setdefault(self.config.active_field, True)

        try:
            item = self.repo.create(session, self.config.model(**fields))
        except SQLAlchemyError as exc:
            raise self._fail(session, f"Error adding {self.config.label} item", exc)

        logger.info(
            "Added %s item %s at order %s", self.config.label, item.id, item.display_order
        )
        return item

    def update_item(self, session: Session, item_id: uuid.UUID, **fields: Any) -> Any:
        item = self.get_item(session, item_id)
        try:
            return self.repo.update_fields(session, item, fields)
        except SQLAlchemyError as exc:
            raise self._fail(session, f"Error updating {self.config.label} item", exc)

    def remove_item(self, session: Session, item_id: uuid.UUID) -> None:
        item = self.get_item(session, item_id)
        try:
            self.repo.delete(session, item)
        except SQLAlchemyError as exc:
            raise self._fail(session, f"Error removing {self.config.label} item", exc)
