import os

# Settings are read at import time; keep tests off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["AUTO_CREATE_TABLES"] = "0"
os.environ["LOG_CONFIG_FILE"] = ""

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from storefront.database.core import Base, get_db, enable_sqlite_foreign_keys
from storefront.database.models import Category, Product
from storefront.auth.models import TokenData
from storefront.auth.service import create_access_token
from storefront.main import app

# Use an in-memory SQLite database for testing
TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """
    Creates a new, isolated in-memory database session for each test.

    StaticPool keeps a single connection so the TestClient's worker thread
    sees the same database as the test.
    """
    engine = create_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Creates a TestClient for the app with the database dependency overridden.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def customer():
    return TokenData(user_id="user-1", email="ada@example.com", full_name="Ada Customer")


@pytest.fixture
def other_customer():
    return TokenData(user_id="user-2", email="bob@example.com", full_name="Bob Customer")


@pytest.fixture
def admin():
    return TokenData(user_id="admin-1", email="admin@example.com", roles=["Admin"], is_admin=True)


def _headers(identity: TokenData) -> dict:
    token = create_access_token(
        identity.user_id,
        email=identity.email,
        roles=identity.roles,
        full_name=identity.full_name,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(customer):
    return _headers(customer)


@pytest.fixture
def other_auth_headers(other_customer):
    return _headers(other_customer)


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


@pytest.fixture
def category(db_session):
    category = Category(name="Microcontrollers", description="Development boards")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_product(db_session, category):
    """Factory for products in the default category."""
    def _make(name="Arduino Uno", price="10.00", stock=10):
        product = Product(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            category_id=category.id,
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture
def product_a(make_product):
    return make_product("Arduino Uno", "10.00", 10)


@pytest.fixture
def product_b(make_product):
    return make_product("ESP32 DevKit", "25.50", 5)


@pytest.fixture
def stock_of(db_session):
    """Stock straight from the database, bypassing the identity map."""
    def _stock(product_id) -> int:
        return db_session.query(Product.stock_quantity).filter(Product.id == product_id).scalar()
    return _stock
