"""Tests for the admin API."""
from bakery.models.size_option import ProductSizeOption


def test_admin_requires_token(client):
    assert client.get("/admin/sizes").status_code == 403
    resp = client.get("/admin/sizes", headers={"X-Admin-Token": "wrong"})
    assert resp.status_code == 403
    assert resp.get_json() == {"data": None, "error": "Forbidden"}


def test_create_and_list_sizes(client, admin_headers):
    resp = client.post(
        "/admin/sizes",
        json={"name": "Medium", "person_capacity": 15, "additional_price": "25"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    size = resp.get_json()["data"]
    assert size["additional_price"] == "25.00"

    sizes = client.get("/admin/sizes", headers=admin_headers).get_json()["data"]
    assert [s["name"] for s in sizes] == ["Medium"]
    assert sizes[0]["product_count"] == 0


def test_create_size_validation_error(client, admin_headers):
    resp = client.post("/admin/sizes", json={"name": "Tiny"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json() == {"data": None, "error": "Name and person capacity are required."}


def test_attach_and_duplicate(client, admin_headers, make_product, make_size):
    p = make_product()
    s = make_size()
    url = f"/admin/products/{p.id}/sizes"

    resp = client.post(url, json={"size_id": s.id, "is_default": True}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["is_default"] is True

    resp = client.post(url, json={"size_id": s.id}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "This size is already assigned to the product."


def test_attach_requires_size_id(client, admin_headers, make_product):
    p = make_product()
    resp = client.post(f"/admin/products/{p.id}/sizes", json={}, headers=admin_headers)
    assert resp.status_code == 400


def test_attach_to_missing_product(client, admin_headers, make_size):
    s = make_size()
    resp = client.post("/admin/products/9999/sizes", json={"size_id": s.id}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Product not found."


def test_set_default_route(client, admin_headers, make_product, make_size):
    p = make_product()
    a, b = make_size(name="A"), make_size(name="B")
    client.post(f"/admin/products/{p.id}/sizes", json={"size_id": a.id, "is_default": True}, headers=admin_headers)
    client.post(f"/admin/products/{p.id}/sizes", json={"size_id": b.id}, headers=admin_headers)

    resp = client.post(f"/admin/products/{p.id}/sizes/{b.id}/default", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["size_id"] == b.id
    listed = client.get(f"/admin/products/{p.id}/sizes", headers=admin_headers).get_json()["data"]
    assert [(o["size_id"], o["is_default"]) for o in listed] == [(b.id, True), (a.id, False)]


def test_set_default_for_unassigned_size(client, admin_headers, make_product, make_size):
    p = make_product()
    s = make_size()
    resp = client.post(f"/admin/products/{p.id}/sizes/{s.id}/default", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "This size is not assigned to the product."


def test_replace_sizes(client, admin_headers, make_product, make_size):
    p = make_product()
    a, b = make_size(name="A"), make_size(name="B")

    resp = client.put(
        f"/admin/products/{p.id}/sizes",
        json={"size_ids": [a.id, b.id], "default_size_id": b.id},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert {o["size_id"]: o["is_default"] for o in data} == {a.id: False, b.id: True}


def test_replace_rejects_default_outside_selection(client, admin_headers, make_product, make_size):
    p = make_product()
    a, b = make_size(name="A"), make_size(name="B")

    resp = client.put(
        f"/admin/products/{p.id}/sizes",
        json={"size_ids": [a.id], "default_size_id": b.id},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert ProductSizeOption.query.filter_by(product_id=p.id).count() == 0


def test_replace_rejects_bad_ids(client, admin_headers, make_product):
    p = make_product()
    resp = client.put(
        f"/admin/products/{p.id}/sizes",
        json={"size_ids": ["x"]},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_detach_route(client, admin_headers, make_product, make_size):
    p = make_product()
    s = make_size()
    client.post(f"/admin/products/{p.id}/sizes", json={"size_id": s.id}, headers=admin_headers)

    resp = client.delete(f"/admin/products/{p.id}/sizes/{s.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert client.delete(f"/admin/products/{p.id}/sizes/{s.id}", headers=admin_headers).status_code == 404


def test_delete_size_in_use(client, admin_headers, make_product, make_size):
    p = make_product()
    s = make_size()
    client.post(f"/admin/products/{p.id}/sizes", json={"size_id": s.id}, headers=admin_headers)

    resp = client.delete(f"/admin/sizes/{s.id}", headers=admin_headers)
    assert resp.status_code == 409


def test_create_and_update_product(client, admin_headers):
    resp = client.post(
        "/admin/products",
        json={"name": "Torta de Chocolate", "price": "55.5"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    product = resp.get_json()["data"]
    assert product["slug"] == "torta-de-chocolate"
    assert product["price"] == "55.50"

    resp = client.patch(
        f"/admin/products/{product['id']}",
        json={"is_offer": True, "offer_price": "44.40"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["discount_percent"] == 20


def test_offer_without_offer_price_is_rejected(client, admin_headers):
    resp = client.post(
        "/admin/products",
        json={"name": "Alfajor", "price": "5", "is_offer": True},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "An offer needs an offer price."


def test_duplicate_names_get_distinct_slugs(client, admin_headers):
    first = client.post("/admin/products", json={"name": "Pie", "price": "10"}, headers=admin_headers)
    second = client.post("/admin/products", json={"name": "Pie", "price": "12"}, headers=admin_headers)
    assert first.get_json()["data"]["slug"] == "pie"
    assert second.get_json()["data"]["slug"] == "pie-2"


def test_stats(client, admin_headers, make_product):
    make_product()
    make_product(is_active=False)
    data = client.get("/admin/stats", headers=admin_headers).get_json()["data"]
    assert data["total"] == 2
    assert data["active"] == 1
    assert data["inactive"] == 1


def test_replace_rejects_non_list_size_ids(client, admin_headers, make_product, make_size):
    p = make_product()
    make_size(name="A")

    resp = client.put(
        f"/admin/products/{p.id}/sizes",
        json={"size_ids": "12", "default_size_id": 1},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "size_ids must be a list of numbers."
    assert ProductSizeOption.query.filter_by(product_id=p.id).count() == 0
