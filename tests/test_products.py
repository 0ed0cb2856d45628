from fastapi.testclient import TestClient
from sqlmodel import Session, select

from conftest import API, create_product
from dutyfree.models.cart import CartItem
from dutyfree.models.collection import FeaturedProduct
from dutyfree.models.product import ProductImage
from dutyfree.services.product_service import category_to_slug, slug_to_category_name


def test_slug_to_category_name():
    assert slug_to_category_name("electronics-appliances") == "Electronics Appliances"
    assert slug_to_category_name("tvs") == "TVs"
    assert slug_to_category_name("accessories") == "Electronic Household Accessories"
    assert category_to_slug("Electronics Appliances") == "electronics-appliances"
    assert category_to_slug("TVs") == "tvs"


def test_public_list_hides_invisible_products(client: TestClient, db_session: Session):
    create_product(db_session, name="Shown")
    create_product(db_session, name="Hidden", is_visible=False)

    names = [p["name"] for p in client.get(f"{API}/products").json()]

    assert names == ["Shown"]


def test_search_matches_name_description_and_category(client: TestClient, db_session: Session):
    create_product(db_session, name="OLED panel", description="", category="TVs")
    create_product(db_session, name="Kettle", description="Boils water fast", category="Kitchen")
    create_product(db_session, name="Blender", description="", category="Kitchen Helpers")

    def search(term):
        res = client.get(f"{API}/products", params={"search": term})
        return sorted(p["name"] for p in res.json())

    assert search("oled") == ["OLED panel"]
    assert search("WATER") == ["Kettle"]
    assert search("kitchen") == ["Blender", "Kettle"]


def test_sort_by_rating(client: TestClient, db_session: Session):
    create_product(db_session, name="Low", rating=2.0)
    create_product(db_session, name="High", rating=4.9)

    res = client.get(f"{API}/products", params={"sort": "rating"})

    assert [p["name"] for p in res.json()] == ["High", "Low"]


def test_category_page_resolves_slug(client: TestClient, db_session: Session):
    create_product(db_session, name="Fridge", category="Electronics Appliances")
    create_product(db_session, name="TV", category="TVs")

    body = client.get(f"{API}/products/category/electronics-appliances").json()

    assert body["name"] == "Electronics Appliances"
    assert body["total_count"] == 1
    assert body["products"][0]["name"] == "Fridge"


def test_categories_listing(client: TestClient, db_session: Session):
    create_product(db_session, category="TVs")
    create_product(db_session, category="Electronics Appliances")

    res = client.get(f"{API}/products/categories")

    assert res.json() == [
        {"name": "Electronics Appliances", "slug": "electronics-appliances"},
        {"name": "TVs", "slug": "tvs"},
    ]


def test_product_detail_includes_gallery_in_order(
    client: TestClient, db_session: Session, product
):
    db_session.add(ProductImage(product_id=product.id, image_url="https://x/2.png", display_order=1))
    db_session.add(ProductImage(product_id=product.id, image_url="https://x/1.png", display_order=0))
    db_session.commit()

    body = client.get(f"{API}/products/{product.id}").json()

    assert body["name"] == product.name
    assert [i["image_url"] for i in body["images"]] == ["https://x/1.png", "https://x/2.png"]


def test_hidden_product_detail_is_404(client: TestClient, db_session: Session):
    product = create_product(db_session, is_visible=False)
    assert client.get(f"{API}/products/{product.id}").status_code == 404


def test_admin_endpoints_require_admin(client: TestClient, user_headers):
    res = client.post(f"{API}/products", json={"name": "X", "category": "TVs"})
    assert res.status_code == 401

    res = client.post(
        f"{API}/products", json={"name": "X", "category": "TVs"}, headers=user_headers
    )
    assert res.status_code == 403


def test_admin_create_appends_within_category(client: TestClient, db_session: Session, admin_headers):
    create_product(db_session, name="TV A", category="TVs", display_order=3)
    create_product(db_session, name="Kettle", category="Kitchen", display_order=10)

    res = client.post(
        f"{API}/products",
        json={"name": "TV B", "category": "TVs", "specifications": {"size": "55in"}},
        headers=admin_headers,
    )

    assert res.status_code == 201
    body = res.json()
    assert body["display_order"] == 4
    assert body["is_visible"] is True
    assert body["specifications"] == {"size": "55in"}


def test_admin_move_and_toggle(client: TestClient, db_session: Session, admin_headers):
    a = create_product(db_session, name="A", category="TVs", display_order=0)
    create_product(db_session, name="B", category="TVs", display_order=1)

    res = client.post(
        f"{API}/products/{a.id}/move", json={"direction": "down"}, headers=admin_headers
    )
    assert res.json() == {"moved": True}

    listed = client.get(
        f"{API}/products/manage", params={"category": "TVs"}, headers=admin_headers
    ).json()
    assert [p["name"] for p in listed] == ["B", "A"]

    res = client.post(
        f"{API}/products/{a.id}/toggle", json={"current_active": True}, headers=admin_headers
    )
    assert res.json()["is_visible"] is False
    assert [p["name"] for p in client.get(f"{API}/products").json()] == ["B"]


def test_admin_update_product(client: TestClient, product, admin_headers):
    res = client.patch(
        f"{API}/products/{product.id}",
        json={"in_stock": False, "insight": "Best seller"},
        headers=admin_headers,
    )

    assert res.status_code == 200
    assert res.json()["in_stock"] is False
    assert res.json()["insight"] == "Best seller"
    assert res.json()["name"] == product.name


def test_admin_delete_removes_references(
    client: TestClient, db_session: Session, product, admin_headers
):
    db_session.add(ProductImage(product_id=product.id, image_url="https://x/1.png"))
    db_session.add(FeaturedProduct(product_id=product.id))
    db_session.commit()
    client.post(f"{API}/cart", json={"product_id": str(product.id)}, headers=admin_headers)

    res = client.delete(f"{API}/products/{product.id}", headers=admin_headers)

    assert res.status_code == 204
    for model in (ProductImage, FeaturedProduct, CartItem):
        assert db_session.exec(select(model)).all() == []


def test_admin_gallery_add_and_remove(client: TestClient, product, admin_headers):
    url = f"{API}/products/{product.id}/images"
    first = client.post(url, json={"image_url": "https://x/a.png"}, headers=admin_headers)
    second = client.post(url, json={"image_url": "https://x/b.png"}, headers=admin_headers)
    dup = client.post(url, json={"image_url": "https://x/a.png"}, headers=admin_headers)

    assert first.json()["display_order"] == 0
    assert second.json()["display_order"] == 1
    assert dup.status_code == 409

    res = client.delete(f"{url}/{first.json()['id']}", headers=admin_headers)
    assert res.status_code == 204
    assert [i["image_url"] for i in client.get(url).json()] == ["https://x/b.png"]
