import os
from decimal import Decimal

import pytest

from app.data.models import CategoryModel, ProductModel
from app.domain.errors import ConfigurationError, DomainRuleError
from app.services.category_service import CategoryService


# =====================================================
# categories
# =====================================================
def test_add_category(client, admin_headers, default_category):
    r = client.post("/category/addCategory", json={"name": "Books", "description": "Paper"}, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["name"] == "Books"
    assert r.json()["is_active"] is True


def test_duplicate_category_name_conflicts(client, admin_headers, category):
    r = client.post("/category/addCategory", json={"name": "Electronics", "description": "x"}, headers=admin_headers)
    assert r.status_code == 409


def test_add_category_is_admin_only(client, customer_headers):
    r = client.post("/category/addCategory", json={"name": "Books", "description": "Paper"}, headers=customer_headers)
    assert r.status_code == 403


def test_rename_to_existing_name_conflicts(client, admin_headers, category):
    r = client.put(f"/category/updateCategory/{category.id}", json={"name": "Default"}, headers=admin_headers)
    assert r.status_code == 409

    r = client.put(f"/category/updateCategory/{category.id}", json={"description": "New"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Electronics"
    assert r.json()["description"] == "New"


def test_deactivation_moves_products_to_default(client, db, admin_headers, category, default_category, make_product):
    p = make_product(category_id=category.id)

    r = client.delete(f"/category/deleteCategory/{category.id}", headers=admin_headers)

    assert r.status_code == 200
    assert r.json()["is_active"] is False
    db.expire_all()
    assert db.get(ProductModel, p.id).category_id == default_category.id

    listed = client.get("/category/", headers=admin_headers).json()
    assert [c["id"] for c in listed] == [default_category.id]
    assert client.get(f"/category/getCategoryById/{category.id}", headers=admin_headers).status_code == 404


def test_default_category_cannot_be_deactivated(client, admin_headers, default_category):
    r = client.delete(f"/category/deleteCategory/{default_category.id}", headers=admin_headers)
    assert r.status_code == 400


def test_missing_default_category_is_server_error_but_deactivation_sticks(
    client, db, admin_headers, category, make_product, monkeypatch
):
    monkeypatch.setattr("app.services.category_service.DEFAULT_CATEGORY_ID", 999)
    p = make_product(category_id=category.id)

    r = client.delete(f"/category/deleteCategory/{category.id}", headers=admin_headers)

    assert r.status_code == 500
    db.expire_all()
    assert db.get(CategoryModel, category.id).is_active is False
    assert db.get(ProductModel, p.id).category_id == category.id


def test_deactivate_service_rules(db, category, default_category):
    with pytest.raises(DomainRuleError):
        CategoryService(db).deactivate_category(default_category.id)

    with pytest.raises(ConfigurationError):
        CategoryService(db, fallback_category_id=42).deactivate_category(category.id)


def test_activate_category(client, admin_headers, category):
    client.delete(f"/category/deleteCategory/{category.id}", headers=admin_headers)

    r = client.patch(f"/category/activateCategory/{category.id}", headers=admin_headers)

    assert r.status_code == 200
    assert r.json()["is_active"] is True
    assert client.patch("/category/activateCategory/999", headers=admin_headers).status_code == 404


# =====================================================
# products
# =====================================================
def test_add_product_with_image(client, admin_headers, category, tmp_path):
    r = client.post(
        "/product/addProduct",
        data={"name": "Phone", "description": "Smart", "price": "199.99", "stock": "3", "category_id": str(category.id)},
        files={"image": ("photo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=admin_headers,
    )

    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Phone"
    assert body["stock"] == 3
    assert body["sold"] == 0
    assert body["category"]["id"] == category.id
    assert body["image"].endswith(".png")
    assert os.path.exists(body["image"])
    assert body["image"].startswith(str(tmp_path).replace("\\", "/"))


def test_add_product_rejects_bad_image_and_inactive_category(client, admin_headers, category):
    form = {"name": "Phone", "description": "Smart", "price": "1.00", "stock": "1", "category_id": str(category.id)}

    r = client.post(
        "/product/addProduct",
        data=form,
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )
    assert r.status_code == 400

    client.delete(f"/category/deleteCategory/{category.id}", headers=admin_headers)
    r = client.post("/product/addProduct", data=form, headers=admin_headers)
    assert r.status_code == 404


def test_partial_update_keeps_other_fields(client, admin_headers, make_product):
    p = make_product(name="Lamp", price="20.00", stock=7)

    r = client.put(f"/product/updateProduct/{p.id}", data={"stock": "0"}, headers=admin_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["stock"] == 0
    assert body["name"] == "Lamp"
    assert Decimal(body["price"]) == Decimal("20.00")


def test_update_unknown_product_is_404(client, admin_headers, category):
    r = client.put("/product/updateProduct/999", data={"name": "X"}, headers=admin_headers)
    assert r.status_code == 404


def test_search_is_case_insensitive_substring(client, customer_headers, make_product):
    make_product(name="Red Apple")
    make_product(name="apple pie")
    make_product(name="Banana")

    r = client.get("/product/search", params={"query": "APPLE"}, headers=customer_headers)

    assert r.status_code == 200
    assert sorted(p["name"] for p in r.json()) == ["Red Apple", "apple pie"]


def test_search_treats_wildcards_literally(client, customer_headers, make_product):
    make_product(name="100% cotton")
    make_product(name="1000 threads")

    r = client.get("/product/search", params={"query": "0%"}, headers=customer_headers)

    assert [p["name"] for p in r.json()] == ["100% cotton"]


def test_search_requires_query(client, customer_headers):
    assert client.get("/product/search", headers=customer_headers).status_code == 400
    assert client.get("/product/search", params={"query": "   "}, headers=customer_headers).status_code == 400


def test_top_selling_orders_by_sold_then_insertion(client, customer_headers, make_product):
    sold = [5, 9, 9, 1, 0, 3]
    ids = [make_product(name=f"P{i}", sold=s).id for i, s in enumerate(sold)]

    r = client.get("/product/top-selling", headers=customer_headers)

    assert [p["id"] for p in r.json()] == [ids[1], ids[2], ids[0], ids[5], ids[3]]


def test_get_product_by_id(client, customer_headers, make_product):
    p = make_product(name="Desk")
    r = client.get(f"/product/search/{p.id}", headers=customer_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Desk"
    assert client.get("/product/search/999", headers=customer_headers).status_code == 404


def test_set_product_status(client, admin_headers, make_product):
    p = make_product()

    r = client.patch(f"/product/deleteProduct/{p.id}", json={"is_active": False}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["is_active"] is False

    r = client.patch(f"/product/deleteProduct/{p.id}", json={"is_active": True}, headers=admin_headers)
    assert r.json()["is_active"] is True


def test_replacing_image_removes_previous_file(client, admin_headers, category):
    form = {"name": "Mug", "description": "Ceramic", "price": "5.00", "stock": "2", "category_id": str(category.id)}
    r = client.post(
        "/product/addProduct",
        data=form,
        files={"image": ("one.png", b"\x89PNG\r\n\x1a\none", "image/png")},
        headers=admin_headers,
    )
    product_id = r.json()["id"]
    old_path = r.json()["image"]

    r = client.put(
        f"/product/updateProduct/{product_id}",
        files={"image": ("two.jpg", b"\xff\xd8\xfftwo", "image/jpeg")},
        headers=admin_headers,
    )

    assert r.status_code == 200
    new_path = r.json()["image"]
    assert new_path.endswith(".jpg")
    assert os.path.exists(new_path)
    assert not os.path.exists(old_path)

    # bez pliku obrazek zostaje
    r = client.put(f"/product/updateProduct/{product_id}", data={"stock": "9"}, headers=admin_headers)
    assert r.json()["image"] == new_path
    assert os.path.exists(new_path)
