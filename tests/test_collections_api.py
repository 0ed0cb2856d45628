from fastapi.testclient import TestClient
from sqlmodel import Session

from conftest import API, create_product


def test_featured_feed_shows_active_entries_in_order(
    client: TestClient, db_session: Session, admin_headers
):
    first = create_product(db_session, name="First")
    second = create_product(db_session, name="Second")
    hidden = create_product(db_session, name="Hidden", is_visible=False)

    ids = [
        client.post(
            f"{API}/collections/featured", json={"product_id": str(p.id)}, headers=admin_headers
        ).json()["id"]
        for p in (first, second, hidden)
    ]

    client.post(
        f"{API}/collections/featured/{ids[1]}/move", json={"direction": "up"}, headers=admin_headers
    )
    feed = client.get(f"{API}/collections/featured").json()
    assert [e["products"]["name"] for e in feed] == ["Second", "First"]

    client.post(
        f"{API}/collections/featured/{ids[0]}/toggle",
        json={"current_active": True},
        headers=admin_headers,
    )
    feed = client.get(f"{API}/collections/featured").json()
    assert [e["products"]["name"] for e in feed] == ["Second"]

    managed = client.get(f"{API}/collections/featured/manage", headers=admin_headers).json()
    assert len(managed) == 3


def test_duty_free_duplicate_is_conflict(client: TestClient, product, admin_headers):
    url = f"{API}/collections/duty-free"
    assert client.post(url, json={"product_id": str(product.id)}, headers=admin_headers).status_code == 201

    res = client.post(url, json={"product_id": str(product.id)}, headers=admin_headers)

    assert res.status_code == 409
    assert res.json()["detail"] == "This product is already in the duty free collection"


def test_remove_from_collection(client: TestClient, product, admin_headers):
    url = f"{API}/collections/duty-free"
    entry = client.post(url, json={"product_id": str(product.id)}, headers=admin_headers).json()

    assert client.delete(f"{url}/{entry['id']}", headers=admin_headers).status_code == 204
    assert client.get(url).json() == []


def test_brand_logos_crud(client: TestClient, admin_headers):
    url = f"{API}/collections/brand-logos"
    sony = client.post(
        url, json={"name": "Sony", "image_url": "https://x/sony.png"}, headers=admin_headers
    ).json()
    lg = client.post(
        url, json={"name": "LG", "image_url": "https://x/lg.png"}, headers=admin_headers
    ).json()
    assert (sony["display_order"], lg["display_order"]) == (0, 1)

    res = client.patch(f"{url}/{lg['id']}", json={"name": "LG Electronics"}, headers=admin_headers)
    assert res.json()["name"] == "LG Electronics"

    client.post(f"{url}/{lg['id']}/move", json={"direction": "up"}, headers=admin_headers)
    assert [b["name"] for b in client.get(url).json()] == ["LG Electronics", "Sony"]

    client.post(f"{url}/{sony['id']}/toggle", json={"current_active": True}, headers=admin_headers)
    assert [b["name"] for b in client.get(url).json()] == ["LG Electronics"]

    assert client.delete(f"{url}/{sony['id']}", headers=admin_headers).status_code == 204
    assert len(client.get(f"{url}/manage", headers=admin_headers).json()) == 1


def test_collection_admin_requires_admin(client: TestClient, product, user_headers):
    res = client.post(
        f"{API}/collections/featured", json={"product_id": str(product.id)}, headers=user_headers
    )
    assert res.status_code == 403
