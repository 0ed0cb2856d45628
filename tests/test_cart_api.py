import uuid

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from conftest import API, USER_ID, create_product
from dutyfree.models.cart import CartItem


def test_guest_cart_lives_in_a_cookie(client: TestClient, product):
    res = client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 2})
    assert res.status_code == 201
    body = res.json()
    assert body["is_guest"] is True
    assert body["total_quantity"] == 2
    assert body["items"][0]["id"] == f"guest-{product.id}"
    assert res.headers["X-Cart-Count"] == "2"
    assert "guest_cart" in client.cookies

    res = client.get(f"{API}/cart/count")
    assert res.json() == {"count": 2}


def test_guest_update_to_zero_removes_line(client: TestClient, product):
    client.post(f"{API}/cart", json={"product_id": str(product.id)})

    res = client.patch(f"{API}/cart/guest-{product.id}", json={"quantity": 0})

    assert res.status_code == 200
    assert res.json()["items"] == []
    assert res.headers["X-Cart-Count"] == "0"


def test_guest_clear_drops_cookie(client: TestClient, product):
    client.post(f"{API}/cart", json={"product_id": str(product.id)})

    res = client.delete(f"{API}/cart")

    assert res.status_code == 200
    assert res.json()["total_quantity"] == 0
    assert client.get(f"{API}/cart").json()["items"] == []


def test_unreadable_guest_cookie_is_empty_cart(client: TestClient):
    client.cookies.set("guest_cart", "garbage!!")

    res = client.get(f"{API}/cart")

    assert res.status_code == 200
    assert res.json()["items"] == []


def test_account_cart_uses_rows_not_cookie(
    client: TestClient, db_session: Session, product, user_headers
):
    res = client.post(
        f"{API}/cart",
        json={"product_id": str(product.id), "quantity": 1},
        headers=user_headers,
    )
    assert res.status_code == 201
    client.post(f"{API}/cart", json={"product_id": str(product.id)}, headers=user_headers)

    rows = db_session.exec(select(CartItem)).all()
    assert len(rows) == 1
    assert rows[0].quantity == 2
    assert str(rows[0].user_id) == USER_ID
    assert "guest_cart" not in client.cookies

    body = client.get(f"{API}/cart", headers=user_headers).json()
    assert body["is_guest"] is False
    assert body["items"][0]["id"] == str(rows[0].id)
    assert body["items"][0]["products"]["name"] == product.name


def test_account_cart_rejects_quantity_below_one(client: TestClient, product, user_headers):
    line_id = client.post(
        f"{API}/cart", json={"product_id": str(product.id)}, headers=user_headers
    ).json()["items"][0]["id"]

    res = client.patch(f"{API}/cart/{line_id}", json={"quantity": 0}, headers=user_headers)

    assert res.status_code == 400
    assert res.json()["detail"] == "Quantity must be at least 1"


def test_account_cart_update_and_remove(client: TestClient, product, user_headers):
    line_id = client.post(
        f"{API}/cart", json={"product_id": str(product.id)}, headers=user_headers
    ).json()["items"][0]["id"]

    res = client.patch(f"{API}/cart/{line_id}", json={"quantity": 4}, headers=user_headers)
    assert res.json()["total_quantity"] == 4

    res = client.delete(f"{API}/cart/{line_id}", headers=user_headers)
    assert res.json()["items"] == []


def test_account_cart_unknown_line_is_404(client: TestClient, user_headers):
    res = client.delete(f"{API}/cart/{uuid.uuid4()}", headers=user_headers)
    assert res.status_code == 404

    res = client.patch(f"{API}/cart/not-a-uuid", json={"quantity": 2}, headers=user_headers)
    assert res.status_code == 404


def test_account_lines_cannot_touch_other_users_rows(
    client: TestClient, db_session: Session, product, user_headers
):
    other = CartItem(user_id=uuid.uuid4(), product_id=product.id, quantity=1)
    db_session.add(other)
    db_session.commit()

    res = client.delete(f"{API}/cart/{other.id}", headers=user_headers)

    assert res.status_code == 404
    assert db_session.get(CartItem, other.id) is not None


def test_account_line_for_deleted_product_has_no_product(
    client: TestClient, db_session: Session, user_headers
):
    gone = create_product(db_session, name="Discontinued")
    client.post(f"{API}/cart", json={"product_id": str(gone.id)}, headers=user_headers)
    db_session.delete(gone)
    db_session.commit()

    items = client.get(f"{API}/cart", headers=user_headers).json()["items"]

    assert len(items) == 1
    assert items[0]["products"] is None


def test_add_rejects_non_positive_quantity(client: TestClient, product):
    res = client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 0})
    assert res.status_code == 422


def test_add_out_of_stock_product(client: TestClient, db_session: Session):
    product = create_product(db_session, in_stock=False)

    res = client.post(f"{API}/cart", json={"product_id": str(product.id)})

    assert res.status_code == 400
    assert res.json()["detail"] == "Product is out of stock"
