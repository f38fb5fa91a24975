import os

os.environ.setdefault("JWT_SECRET", "storefront-test-secret-0123456789abcdef")

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from auth_helper import hash_password, issue_token
from main import app
from schemas import Category, Product, User
from utils import ensure_object_id, slugify


@pytest.fixture
def mongo_db(monkeypatch):
    db = mongomock.MongoClient()["storefront_test"]
    monkeypatch.setattr(database, "db", db)
    return db


@pytest.fixture
def client(mongo_db):
    return TestClient(app)


def make_user(name="Normal User", email="user@gmail.com", password="user123", role=0, answer="mock_answer"):
    user = User(
        name=name,
        email=email,
        password=hash_password(password),
        phone="12345678",
        address="User Street",
        answer=answer,
        role=role,
    )
    return database.create_document("user", user)


def make_category(name="Electronics"):
    return database.create_document("category", Category(name=name, slug=slugify(name)))


def make_product(category_id, name="iPhone 14", description="Latest iPhone", price=999, quantity=10, photo=None):
    product = Product(
        name=name,
        slug=slugify(name),
        description=description,
        price=price,
        quantity=quantity,
        category=ensure_object_id(category_id),
        photo=photo,
    )
    return database.create_document("product", product.model_dump(exclude_none=True))


@pytest.fixture
def user_id(mongo_db):
    return make_user()


@pytest.fixture
def admin_id(mongo_db):
    return make_user(name="Admin User", email="admin@gmail.com", password="admin123", role=1)


@pytest.fixture
def user_headers(user_id):
    return {"Authorization": issue_token(user_id)}


@pytest.fixture
def admin_headers(admin_id):
    return {"Authorization": issue_token(admin_id)}
