import uuid

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from conftest import API, USER_ID, auth_headers
from dutyfree.models.cart import CartItem
from dutyfree.models.order import Order

CHECKOUT = {
    "surname": "Mensah",
    "other_names": "Ama Serwaa",
    "passport_number": "g1234567",
    "contact_number": "+233201234567",
    "customer_email": "ama@example.com",
    "arrival_flight_number": "kq512",
    "arrival_date": "2026-12-20",
    "arrival_time": "14:35",
}


def _place_guest_order(client: TestClient, product, quantity: int = 2) -> dict:
    client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": quantity})
    res = client.post(f"{API}/orders/checkout", json=CHECKOUT)
    assert res.status_code == 201, res.text
    return res.json()


def test_guest_checkout_snapshots_items_and_clears_cart(client: TestClient, product):
    order = _place_guest_order(client, product, quantity=2)

    assert order["status"] == "pending"
    assert order["user_id"] is None
    assert order["guest_email"] == "ama@example.com"
    assert order["passport_number"] == "G1234567"
    assert order["arrival_flight_number"] == "KQ512"
    assert order["subtotal"] == 200.0
    assert order["total"] == 230.0
    item = order["items"][0]
    assert item["quantity"] == 2
    assert item["product_name"] == product.name
    assert item["product_category"] == product.category

    assert client.get(f"{API}/cart").json()["items"] == []


def test_checkout_with_empty_cart_is_rejected(client: TestClient):
    res = client.post(f"{API}/orders/checkout", json=CHECKOUT)

    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"


def test_checkout_validates_traveller_details(client: TestClient, product):
    client.post(f"{API}/cart", json={"product_id": str(product.id)})

    bad_time = dict(CHECKOUT, arrival_time="25:00")
    assert client.post(f"{API}/orders/checkout", json=bad_time).status_code == 422

    blank = dict(CHECKOUT, surname="   ")
    assert client.post(f"{API}/orders/checkout", json=blank).status_code == 422


def test_account_checkout_clears_rows(
    client: TestClient, db_session: Session, product, user_headers
):
    client.post(
        f"{API}/cart", json={"product_id": str(product.id), "quantity": 3}, headers=user_headers
    )

    res = client.post(f"{API}/orders/checkout", json=CHECKOUT, headers=user_headers)

    assert res.status_code == 201
    assert res.json()["user_id"] == USER_ID
    assert res.json()["guest_email"] is None
    assert res.json()["subtotal"] == 300.0
    assert db_session.exec(select(CartItem)).all() == []


def test_my_orders_include_guest_orders_with_same_email(client: TestClient, product):
    guest_order = _place_guest_order(client, product)
    client.cookies.clear()

    res = client.get(
        f"{API}/orders/me", headers=auth_headers(USER_ID, "ama@example.com")
    )

    assert [o["id"] for o in res.json()] == [guest_order["id"]]
    assert len(res.json()[0]["items"]) == 1


def test_cancel_pending_order(client: TestClient, product, user_headers):
    client.post(f"{API}/cart", json={"product_id": str(product.id)}, headers=user_headers)
    order = client.post(f"{API}/orders/checkout", json=CHECKOUT, headers=user_headers).json()

    res = client.post(f"{API}/orders/me/{order['id']}/cancel", headers=user_headers)

    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"


def test_cannot_cancel_once_processing(
    client: TestClient, db_session: Session, product, user_headers
):
    client.post(f"{API}/cart", json={"product_id": str(product.id)}, headers=user_headers)
    order = client.post(f"{API}/orders/checkout", json=CHECKOUT, headers=user_headers).json()
    row = db_session.get(Order, uuid.UUID(order["id"]))
    row.status = "processing"
    db_session.add(row)
    db_session.commit()

    res = client.post(f"{API}/orders/me/{order['id']}/cancel", headers=user_headers)

    assert res.status_code == 400


def test_cannot_cancel_someone_elses_order(client: TestClient, product, user_headers):
    order = _place_guest_order(client, product)

    res = client.post(f"{API}/orders/me/{order['id']}/cancel", headers=user_headers)

    assert res.status_code == 404


def test_admin_lists_and_filters_orders(client: TestClient, product, admin_headers):
    order = _place_guest_order(client, product)

    all_orders = client.get(f"{API}/orders", headers=admin_headers).json()
    pending = client.get(f"{API}/orders", params={"status": "pending"}, headers=admin_headers)
    collected = client.get(f"{API}/orders", params={"status": "collected"}, headers=admin_headers)

    assert [o["id"] for o in all_orders] == [order["id"]]
    assert len(pending.json()) == 1
    assert collected.json() == []


def test_admin_updates_status_and_total(client: TestClient, product, admin_headers):
    order = _place_guest_order(client, product)
    url = f"{API}/orders/{order['id']}"

    res = client.patch(f"{url}/status", json={"status": "collected"}, headers=admin_headers)
    assert res.json()["status"] == "collected"

    res = client.patch(f"{url}/total", json={"total": 199.999}, headers=admin_headers)
    assert res.json()["total"] == 200.0

    assert client.patch(f"{url}/total", json={"total": -1}, headers=admin_headers).status_code == 422
    assert client.patch(f"{url}/status", json={"status": "shipped"}, headers=admin_headers).status_code == 422


def test_order_admin_requires_admin(client: TestClient, user_headers):
    assert client.get(f"{API}/orders", headers=user_headers).status_code == 403
    assert client.get(f"{API}/orders/me").status_code == 401
