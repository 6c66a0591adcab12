from decimal import Decimal


def _create_category(client, headers, slug="shirts", **extra):
    resp = client.post("/api/admin/categories", json={"name": slug.title(), "slug": slug, **extra}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_product(client, headers, category_id, slug="tee", price="1500.00", **extra):
    payload = {"name": slug.title(), "slug": slug, "category_id": category_id, "base_price": price, **extra}
    return client.post("/api/admin/products", json=payload, headers=headers)


def test_create_product_with_images(client, admin_headers):
    category = _create_category(client, admin_headers)

    resp = _create_product(
        client,
        admin_headers,
        category["id"],
        image_url="https://cdn.example.com/tee.jpg",
        images=[{"image_url": "https://cdn.example.com/tee-back.jpg"}],
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["images_created"] == 2
    images = body["product"]["images"]
    assert images[0]["is_primary"] is True
    assert images[0]["display_order"] == 1
    assert images[1]["display_order"] == 2

    public = client.get(f"/api/products/{body['product']['id']}/images").json()
    assert public["total"] == 2


def test_duplicate_slug_is_a_conflict(client, admin_headers):
    category = _create_category(client, admin_headers)
    assert _create_product(client, admin_headers, category["id"]).status_code == 201

    resp = _create_product(client, admin_headers, category["id"])

    assert resp.status_code == 409
    assert client.post(
        "/api/admin/categories", json={"name": "Again", "slug": "shirts"}, headers=admin_headers
    ).status_code == 409


def test_product_validation(client, admin_headers):
    category = _create_category(client, admin_headers)

    assert _create_product(client, admin_headers, category["id"], price="0").status_code == 422
    assert _create_product(client, admin_headers, 999).status_code == 404


def test_partial_update(client, admin_headers):
    category = _create_category(client, admin_headers)
    product = _create_product(client, admin_headers, category["id"]).json()["product"]

    resp = client.put(f"/api/admin/products/{product['id']}", json={"base_price": "1200.50"}, headers=admin_headers)

    assert resp.status_code == 200
    assert Decimal(resp.json()["base_price"]) == Decimal("1200.50")
    assert resp.json()["name"] == product["name"]

    resp = client.put(f"/api/admin/products/{product['id']}", json={}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "no fields to update"}

    assert client.put("/api/admin/products/999", json={"name": "x"}, headers=admin_headers).status_code == 404


def test_public_catalog_shows_active_only(client, admin_headers):
    category = _create_category(client, admin_headers)
    shown = _create_product(client, admin_headers, category["id"], slug="shown", is_featured=True).json()["product"]
    hidden = _create_product(client, admin_headers, category["id"], slug="hidden", is_active=False).json()["product"]
    _create_category(client, admin_headers, slug="archived", is_active=False)

    products = client.get("/api/products").json()
    assert [p["id"] for p in products["products"]] == [shown["id"]]
    assert client.get(f"/api/products/{hidden['id']}").status_code == 404
    assert client.get("/api/products", params={"featured": "true"}).json()["total"] == 1
    assert client.get("/api/products", params={"category_id": 999}).json()["total"] == 0

    assert client.get("/api/admin/products", headers=admin_headers).json()["total"] == 2
    assert client.get("/api/categories").json()["total"] == 1
    assert client.get("/api/admin/categories", headers=admin_headers).json()["total"] == 2


def test_category_with_product_cannot_be_deleted(client, admin_headers):
    category = _create_category(client, admin_headers)
    _create_product(client, admin_headers, category["id"])

    resp = client.delete(f"/api/admin/categories/{category['id']}", headers=admin_headers)

    assert resp.status_code == 409
    assert "products are using this category" in resp.json()["detail"]
    assert client.get("/api/admin/categories", headers=admin_headers).json()["total"] == 1


def test_category_with_children_cannot_be_deleted(client, admin_headers):
    parent = _create_category(client, admin_headers, slug="parent")
    child = _create_category(client, admin_headers, slug="child", parent_id=parent["id"])

    assert client.delete(f"/api/admin/categories/{parent['id']}", headers=admin_headers).status_code == 409
    assert client.delete(f"/api/admin/categories/{child['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/categories/{parent['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/categories/{parent['id']}", headers=admin_headers).status_code == 404


def test_update_category(client, admin_headers):
    category = _create_category(client, admin_headers)

    resp = client.put(
        f"/api/admin/categories/{category['id']}", json={"name": "Tees", "sort_order": 3}, headers=admin_headers
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "Tees"
    assert resp.json()["slug"] == "shirts"
    assert resp.json()["sort_order"] == 3


def test_ordered_product_cannot_be_deleted(client, admin_headers):
    category = _create_category(client, admin_headers)
    product = _create_product(client, admin_headers, category["id"]).json()["product"]
    guest = {"X-Session-ID": "buyer"}
    client.post("/api/cart", json={"product_id": product["id"]}, headers=guest)
    client.post("/api/orders", json={}, headers=guest)

    resp = client.delete(f"/api/admin/products/{product['id']}", headers=admin_headers)

    assert resp.status_code == 409
    assert client.get("/api/admin/products", headers=admin_headers).json()["total"] == 1


def test_unused_product_delete_takes_cart_rows_along(client, admin_headers):
    category = _create_category(client, admin_headers)
    product = _create_product(client, admin_headers, category["id"], image_url="https://cdn/x.jpg").json()["product"]
    guest = {"X-Session-ID": "browser"}
    client.post("/api/cart", json={"product_id": product["id"]}, headers=guest)

    assert client.delete(f"/api/admin/products/{product['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/cart", headers=guest).json()["items"] == []
    assert client.delete(f"/api/admin/products/{product['id']}", headers=admin_headers).status_code == 404


def test_image_management(client, admin_headers):
    category = _create_category(client, admin_headers)
    product = _create_product(client, admin_headers, category["id"], image_url="https://cdn/a.jpg").json()["product"]
    first_id = product["images"][0]["id"]

    resp = client.post(
        f"/api/admin/products/{product['id']}/images",
        json={"image_url": "https://cdn/b.jpg", "is_primary": True},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    second_id = resp.json()["id"]

    images = client.get(f"/api/products/{product['id']}/images").json()["images"]
    assert [(i["id"], i["is_primary"]) for i in images] == [(second_id, True), (first_id, False)]

    resp = client.put(f"/api/admin/images/{first_id}", json={"alt_text": "front"}, headers=admin_headers)
    assert resp.json()["alt_text"] == "front"

    assert client.delete(f"/api/admin/images/{second_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/images/{second_id}", headers=admin_headers).status_code == 404
