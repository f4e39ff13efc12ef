"""Tests for the shopping cart."""
from decimal import Decimal

from bakery.services import cart_service, size_option_service
from bakery.services.errors import (
    CartItemNotFoundError,
    ProductNotFoundError,
    SelectionNotFoundError,
    ValidationError,
)


def test_add_uses_default_size_price(db, make_product, make_size):
    p = make_product(price="50.00", offer_price="40.00", is_offer=True)
    a = make_size(name="Small", additional_price="0.00")
    b = make_size(name="Large", additional_price="15.00")
    size_option_service.replace_all_sizes(p.id, [a.id, b.id], b.id)

    result = cart_service.add_to_cart("cart-1", p.id)

    assert result.ok
    assert result.data.size_id == b.id
    assert result.data.unit_price == Decimal("55.00")


def test_add_with_chosen_size(db, make_product, make_size):
    p = make_product(price="50.00")
    a = make_size(name="Small", additional_price="0.00")
    b = make_size(name="Large", additional_price="15.00")
    size_option_service.replace_all_sizes(p.id, [a.id, b.id], b.id)

    result = cart_service.add_to_cart("cart-1", p.id, quantity=2, size_id=a.id)

    assert result.data.size_id == a.id
    assert result.data.unit_price == Decimal("50.00")
    assert result.data.line_total == Decimal("100.00")


def test_same_product_and_size_merge(db, make_product, make_size):
    p = make_product(price="30.00")
    s = make_size(additional_price="5.00")
    size_option_service.attach_size(p.id, s.id, is_default=True)

    cart_service.add_to_cart("cart-1", p.id, quantity=1)
    result = cart_service.add_to_cart("cart-1", p.id, quantity=2, size_id=s.id)

    assert result.data.quantity == 3
    cart = cart_service.get_cart("cart-1").data
    assert len(cart.items) == 1
    assert cart.total == Decimal("105.00")


def test_product_without_sizes(db, make_product):
    p = make_product(price="12.50")

    result = cart_service.add_to_cart("cart-1", p.id)

    assert result.data.size_id is None
    assert result.data.unit_price == Decimal("12.50")


def test_size_not_offered_is_rejected(db, make_product, make_size):
    p = make_product()
    s = make_size()

    result = cart_service.add_to_cart("cart-1", p.id, size_id=s.id)

    assert isinstance(result.error, SelectionNotFoundError)
    assert cart_service.get_cart("cart-1").data is None


def test_inactive_product_cannot_be_added(db, make_product):
    p = make_product(is_active=False)
    result = cart_service.add_to_cart("cart-1", p.id)
    assert isinstance(result.error, ProductNotFoundError)


def test_invalid_quantity(db, make_product):
    p = make_product()
    assert isinstance(cart_service.add_to_cart("cart-1", p.id, quantity=0).error, ValidationError)
    assert isinstance(cart_service.add_to_cart("cart-1", p.id, quantity="two").error, ValidationError)


def test_update_quantity_and_remove(db, make_product):
    p = make_product(price="10.00")
    item = cart_service.add_to_cart("cart-1", p.id).data
    item_id = item.id

    updated = cart_service.update_quantity("cart-1", item_id, 4)
    assert updated.data.quantity == 4

    removed = cart_service.update_quantity("cart-1", item_id, 0)
    assert removed.ok
    assert removed.data is None
    assert cart_service.get_cart("cart-1").data.items == []


def test_items_are_scoped_to_their_cart(db, make_product):
    p = make_product()
    item = cart_service.add_to_cart("cart-1", p.id).data

    result = cart_service.remove_item("cart-2", item.id)
    assert isinstance(result.error, CartItemNotFoundError)


def test_cart_routes(client, make_product, make_size):
    p = make_product(name="Carrot Cake", price="50.00")
    s = make_size(name="Medium", person_capacity=12, additional_price="10.00")
    size_option_service.attach_size(p.id, s.id, is_default=True)

    resp = client.post("/cart/items", json={"product_id": p.id, "quantity": 2})
    assert resp.status_code == 201
    item = resp.get_json()["data"]
    assert item["size_label"] == "Medium – 12 people"
    assert item["line_total"] == "120.00"

    cart = client.get("/cart").get_json()["data"]
    assert cart["total"] == "120.00"
    assert cart["display_total"] == "S/ 120.00"

    resp = client.patch(f"/cart/items/{item['id']}", json={"quantity": 1})
    assert resp.get_json()["data"]["quantity"] == 1

    resp = client.delete(f"/cart/items/{item['id']}")
    assert resp.status_code == 200
    assert client.get("/cart").get_json()["data"]["items"] == []


def test_cart_route_rejects_unknown_size(client, make_product):
    p = make_product()
    resp = client.post("/cart/items", json={"product_id": p.id, "size_id": 9999})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "That size is not available for this product."


def test_empty_cart(client):
    data = client.get("/cart").get_json()["data"]
    assert data["items"] == []
    assert data["total"] == "0.00"
