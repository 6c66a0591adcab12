import os

# has to happen before anything from storefront is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["JWT_SECRET"] = "test-secret"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Database
from storefront.data.models import CategoryModel, ProductModel, UserModel
from storefront.main import create_app
from storefront.services.user_service import issue_token
from storefront.utils.security import hash_password


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'storefront-test.db'}")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def client(database):
    app = create_app(database, init_db=False)
    return TestClient(app)


@pytest.fixture
def make_category(session):
    counter = {"n": 0}

    def _make(name=None, parent_id=None, is_active=True):
        counter["n"] += 1
        n = counter["n"]
        category = CategoryModel(
            name=name or f"Category {n}",
            slug=f"category-{n}",
            parent_id=parent_id,
            is_active=is_active,
        )
        session.add(category)
        session.commit()
        return category

    return _make


@pytest.fixture
def make_product(session, make_category):
    counter = {"n": 0}

    def _make(price="100.00", name=None, category=None, is_active=True):
        counter["n"] += 1
        n = counter["n"]
        category = category or make_category()
        product = ProductModel(
            name=name or f"Product {n}",
            slug=f"product-{n}",
            category_id=category.id,
            base_price=Decimal(price),
            is_active=is_active,
        )
        session.add(product)
        session.commit()
        return product

    return _make


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make(role="customer", password="secret123", wallet_balance="0"):
        counter["n"] += 1
        n = counter["n"]
        user = UserModel(
            username=f"user{n}",
            email=f"user{n}@example.com",
            password_hash=hash_password(password),
            role=role,
            wallet_balance=Decimal(wallet_balance),
        )
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers


@pytest.fixture
def admin_headers(make_user, auth_headers):
    return auth_headers(make_user(role="admin"))
