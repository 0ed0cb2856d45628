import uuid

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from conftest import create_product
from dutyfree.models.collection import BrandLogo, FeaturedProduct
from dutyfree.services.ordered_collection import (
    BRAND_LOGOS,
    CATALOG,
    FEATURED,
    OrderedCollectionEditor,
    next_display_order,
)


def _logo(db: Session, name: str, order: int | None, logo_id: str | None = None) -> BrandLogo:
    logo = BrandLogo(
        id=uuid.UUID(logo_id) if logo_id else uuid.uuid4(),
        name=name,
        image_url=f"https://cdn.example.com/{name}.png",
        display_order=order,
    )
    db.add(logo)
    db.commit()
    db.refresh(logo)
    return logo


def _names(editor: OrderedCollectionEditor, db: Session, **kwargs) -> list[str]:
    return [item.name for item in editor.list_items(db, **kwargs)]


def test_move_up_swaps_with_previous_neighbour(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    a = _logo(db_session, "a", 0)
    b = _logo(db_session, "b", 1)
    c = _logo(db_session, "c", 2)

    assert editor.move_item(db_session, b.id, "up") is True

    assert _names(editor, db_session) == ["b", "a", "c"]
    orders = {l.id: l.display_order for l in editor.list_items(db_session)}
    assert orders == {a.id: 1, b.id: 0, c.id: 2}


def test_move_down_then_up_restores_order(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    a = _logo(db_session, "a", 0)
    _logo(db_session, "b", 5)
    _logo(db_session, "c", 9)

    editor.move_item(db_session, a.id, "down")
    assert _names(editor, db_session) == ["b", "a", "c"]

    editor.move_item(db_session, a.id, "up")
    assert _names(editor, db_session) == ["a", "b", "c"]
    assert [l.display_order for l in editor.list_items(db_session)] == [0, 5, 9]


def test_boundary_moves_are_noops(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    a = _logo(db_session, "a", 0)
    b = _logo(db_session, "b", 1)

    assert editor.move_item(db_session, a.id, "up") is False
    assert editor.move_item(db_session, b.id, "down") is False
    assert _names(editor, db_session) == ["a", "b"]


def test_null_order_counts_as_zero_and_ties_break_by_id(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    _logo(db_session, "second", 0, "00000000-0000-4000-8000-000000000002")
    _logo(db_session, "first", None, "00000000-0000-4000-8000-000000000001")
    _logo(db_session, "last", 1)

    assert _names(editor, db_session) == ["first", "second", "last"]


def test_failed_swap_leaves_both_rows_untouched(db_session: Session, monkeypatch):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    _logo(db_session, "a", 0)
    b = _logo(db_session, "b", 1)

    real_update = editor.repo.update_fields
    calls = []

    def flaky_update(session, item, values, *, commit=True):
        calls.append(item.id)
        if len(calls) == 2:
            raise OperationalError("UPDATE brand_logos", {}, Exception("connection lost"))
        return real_update(session, item, values, commit=commit)

    monkeypatch.setattr(editor.repo, "update_fields", flaky_update)

    with pytest.raises(HTTPException) as exc:
        editor.move_item(db_session, b.id, "up")

    assert exc.value.status_code == 503
    assert exc.value.detail == "Error updating order"
    monkeypatch.undo()
    assert [(l.name, l.display_order) for l in editor.list_items(db_session)] == [
        ("a", 0),
        ("b", 1),
    ]


def test_catalog_moves_stay_within_category(db_session: Session):
    editor = OrderedCollectionEditor(CATALOG)
    tv1 = create_product(db_session, name="TV 1", category="TVs", display_order=0)
    create_product(db_session, name="Kettle", category="Kitchen", display_order=1)
    create_product(db_session, name="TV 2", category="TVs", display_order=2)

    assert editor.move_item(db_session, tv1.id, "down") is True

    assert [p.name for p in editor.list_items(db_session, group="TVs")] == ["TV 2", "TV 1"]
    kitchen = editor.list_items(db_session, group="Kitchen")
    assert [(p.name, p.display_order) for p in kitchen] == [("Kettle", 1)]


def test_add_appends_after_current_maximum(db_session: Session):
    editor = OrderedCollectionEditor(FEATURED)
    first = create_product(db_session, name="First")
    second = create_product(db_session, name="Second")

    a = editor.add_item(db_session, product_id=first.id)
    b = editor.add_item(db_session, product_id=second.id)

    assert (a.display_order, b.display_order) == (0, 1)
    assert a.is_active is True


def test_add_keeps_explicit_display_order(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    logo = editor.add_item(
        db_session, name="Sony", image_url="https://cdn.example.com/sony.png", display_order=7
    )
    assert logo.display_order == 7


def test_add_duplicate_product_conflicts(db_session: Session):
    editor = OrderedCollectionEditor(FEATURED)
    product = create_product(db_session, name="Dup")
    other = create_product(db_session, name="Other")
    editor.add_item(db_session, product_id=product.id)
    editor.add_item(db_session, product_id=other.id)
    before = [(i.id, i.display_order) for i in editor.list_items(db_session)]

    with pytest.raises(HTTPException) as exc:
        editor.add_item(db_session, product_id=product.id)

    assert exc.value.status_code == 409
    assert [(i.id, i.display_order) for i in editor.list_items(db_session)] == before


def test_move_between_equal_orders_is_a_noop(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    _logo(db_session, "a", 3, "00000000-0000-4000-8000-000000000001")
    b = _logo(db_session, "b", 3, "00000000-0000-4000-8000-000000000002")

    assert editor.move_item(db_session, b.id, "up") is False

    assert [(l.name, l.display_order) for l in editor.list_items(db_session)] == [
        ("a", 3),
        ("b", 3),
    ]


def test_add_unknown_product_is_not_found(db_session: Session):
    editor = OrderedCollectionEditor(FEATURED)

    with pytest.raises(HTTPException) as exc:
        editor.add_item(db_session, product_id=uuid.uuid4())

    assert exc.value.status_code == 404


def test_toggle_negates_the_flag_seen_by_the_operator(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    logo = _logo(db_session, "a", 0)

    assert editor.toggle_active(db_session, logo.id, True).is_active is False
    assert editor.list_items(db_session, only_active=True) == []
    assert editor.toggle_active(db_session, logo.id, False).is_active is True


def test_remove_and_missing_item(db_session: Session):
    editor = OrderedCollectionEditor(BRAND_LOGOS)
    logo = _logo(db_session, "a", 0)

    editor.remove_item(db_session, logo.id)

    assert editor.list_items(db_session) == []
    with pytest.raises(HTTPException) as exc:
        editor.move_item(db_session, logo.id, "up")
    assert exc.value.status_code == 404


def test_next_display_order_on_empty_collection():
    assert next_display_order([]) == 0
    assert next_display_order([FeaturedProduct(product_id=uuid.uuid4(), display_order=None)]) == 1
