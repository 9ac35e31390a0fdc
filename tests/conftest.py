"""Shared pytest fixtures: in-memory SQLite, eager Celery, fake checkout lock."""

import os

# przed importem aplikacji - settings czyta env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["DEFAULT_CATEGORY_ID"] = "1"

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.deps import get_lock_service
from app.data.database import Base, SessionLocal, engine
from app.data.models import CategoryModel, ProductModel, UserModel, CartModel
from app.domain.enums import Role
from app.services.auth_service import create_access_token, hash_password


class FakeLockService:
    """In-process replacement for the Redis checkout lock."""

    def __init__(self):
        self.held = {}
        self.acquired = 0

    def acquire_checkout_lock(self, user_id, ttl):
        if user_id in self.held:
            return None
        token = uuid.uuid4().hex
        self.held[user_id] = token
        self.acquired += 1
        return token

    def release_checkout_lock(self, user_id, token):
        if self.held.get(user_id) == token:
            del self.held[user_id]
            return True
        return False


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def client(lock_service, tmp_path, monkeypatch):
    monkeypatch.setattr("app.utils.upload.UPLOAD_DIR", str(tmp_path / "uploads"))
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=Role.CLIENT, is_active=True, password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        user = UserModel(
            name=f"User {n}",
            username=f"user{n}",
            email=f"user{n}@example.com",
            password_hash=hash_password(password),
            role=role.value,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def default_category(db):
    """Fallback category, id 1 on a fresh database."""
    category = CategoryModel(name="Default", description="Fallback")
    db.add(category)
    db.commit()
    db.refresh(category)
    assert category.id == 1
    return category


@pytest.fixture
def category(db, default_category):
    category = CategoryModel(name="Electronics", description="Gadgets")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    def _make(name="Product", price="10.00", stock=10, category_id=None, sold=0, is_active=True):
        product = ProductModel(
            name=name,
            description=f"{name} description",
            price=Decimal(price),
            stock=stock,
            category_id=category_id or category.id,
            sold=sold,
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user):
        cart = CartModel(user_id=user.id, total=Decimal("0.00"), version=1)
        db.add(cart)
        db.commit()
        db.refresh(cart)
        return cart

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(role=Role.ADMIN)


@pytest.fixture
def customer(make_user):
    return make_user(role=Role.CLIENT)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def headers_for():
    return auth_headers
