from decimal import Decimal

import pytest

from app.data.models import CartModel
from app.domain.errors import ConflictError
from app.services.cart_service import CartService


def test_create_cart_returns_empty_cart(client, customer, customer_headers):
    r = client.post("/cart/createCart", headers=customer_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["user_id"] == customer.id
    assert body["items"] == []
    assert Decimal(body["total"]) == Decimal("0")


def test_create_cart_twice_conflicts(client, customer_headers):
    assert client.post("/cart/createCart", headers=customer_headers).status_code == 201
    r = client.post("/cart/createCart", headers=customer_headers)
    assert r.status_code == 409


def test_get_cart_without_cart_is_404(client, customer_headers):
    r = client.get("/cart/", headers=customer_headers)
    assert r.status_code == 404


def test_add_remove_clear_keeps_total_in_sync(client, customer_headers, make_product):
    a = make_product(name="A", price="10.00")
    b = make_product(name="B", price="5.00")
    client.post("/cart/createCart", headers=customer_headers)

    client.post("/cart/add", json={"product_id": a.id, "quantity": 2}, headers=customer_headers)
    r = client.post("/cart/add", json={"product_id": b.id, "quantity": 1}, headers=customer_headers)
    assert r.status_code == 200
    assert Decimal(r.json()["total"]) == Decimal("25.00")
    assert len(r.json()["items"]) == 2

    r = client.delete(f"/cart/remove/{a.id}", headers=customer_headers)
    assert r.status_code == 200
    assert Decimal(r.json()["total"]) == Decimal("5.00")
    assert [i["product_id"] for i in r.json()["items"]] == [b.id]

    r = client.delete("/cart/clear", headers=customer_headers)
    assert r.status_code == 200
    assert r.json()["items"] == []
    assert Decimal(r.json()["total"]) == Decimal("0")


def test_adding_same_product_twice_merges_lines(client, customer_headers, make_product):
    p = make_product(price="2.50")
    client.post("/cart/createCart", headers=customer_headers)

    client.post("/cart/add", json={"product_id": p.id, "quantity": 1}, headers=customer_headers)
    r = client.post("/cart/add", json={"product_id": p.id, "quantity": 3}, headers=customer_headers)

    items = r.json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 4
    assert Decimal(r.json()["total"]) == Decimal("10.00")


def test_update_quantity(client, customer_headers, make_product):
    p = make_product(price="3.00")
    client.post("/cart/createCart", headers=customer_headers)
    client.post("/cart/add", json={"product_id": p.id, "quantity": 1}, headers=customer_headers)

    r = client.put("/cart/update", json={"product_id": p.id, "quantity": 5}, headers=customer_headers)

    assert r.status_code == 200
    assert r.json()["items"][0]["quantity"] == 5
    assert Decimal(r.json()["total"]) == Decimal("15.00")


def test_update_product_not_in_cart_is_404(client, customer_headers, make_product):
    p = make_product()
    client.post("/cart/createCart", headers=customer_headers)

    r = client.put("/cart/update", json={"product_id": p.id, "quantity": 2}, headers=customer_headers)

    assert r.status_code == 404


def test_remove_product_not_in_cart_is_404(client, customer_headers, make_product):
    p = make_product()
    client.post("/cart/createCart", headers=customer_headers)

    r = client.delete(f"/cart/remove/{p.id}", headers=customer_headers)

    assert r.status_code == 404


def test_add_requires_positive_quantity(client, customer_headers, make_product):
    p = make_product()
    client.post("/cart/createCart", headers=customer_headers)

    r = client.post("/cart/add", json={"product_id": p.id, "quantity": 0}, headers=customer_headers)

    assert r.status_code == 422


def test_add_unknown_or_inactive_product_is_404(client, customer_headers, make_product):
    hidden = make_product(is_active=False)
    client.post("/cart/createCart", headers=customer_headers)

    assert client.post("/cart/add", json={"product_id": 999, "quantity": 1}, headers=customer_headers).status_code == 404
    assert client.post("/cart/add", json={"product_id": hidden.id, "quantity": 1}, headers=customer_headers).status_code == 404


def test_add_without_cart_is_404(client, customer_headers, make_product):
    p = make_product()
    r = client.post("/cart/add", json={"product_id": p.id, "quantity": 1}, headers=customer_headers)
    assert r.status_code == 404


def test_cart_line_keeps_price_after_catalog_change(client, db, customer_headers, make_product):
    p = make_product(price="4.00")
    client.post("/cart/createCart", headers=customer_headers)
    client.post("/cart/add", json={"product_id": p.id, "quantity": 1}, headers=customer_headers)

    p.price = Decimal("6.00")
    db.commit()

    r = client.get("/cart/", headers=customer_headers)
    assert Decimal(r.json()["items"][0]["price"]) == Decimal("4.00")
    assert Decimal(r.json()["total"]) == Decimal("4.00")


def test_cart_requires_token(client):
    assert client.get("/cart/").status_code == 401


def test_stale_version_is_rejected(db, customer, make_cart):
    cart = make_cart(customer)
    svc = CartService(db)

    # ktos inny podbil wersje w miedzyczasie
    stale = cart.version
    db.query(CartModel).filter(CartModel.id == cart.id).update({"version": stale + 1})
    db.commit()

    cart.version = stale
    with pytest.raises(ConflictError):
        svc._commit_with_version(cart)
