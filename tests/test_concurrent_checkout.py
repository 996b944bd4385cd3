"""Checkouts racing from separate threads, each with its own session and connection."""

import threading
import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.auth.models import TokenData
from storefront.cart.service import CartService
from storefront.catalogue.models import Category, Product
from storefront.database.core import Base, enable_sqlite_foreign_keys
from storefront.database.unit_of_work import UnitOfWork
from storefront.orders.checkout import CheckoutCoordinator
from storefront.orders.models import Order
from storefront.core.exceptions import InsufficientStockError

BUYERS = 6


@pytest.fixture
def file_sessionmaker(tmp_path):
    """File-backed SQLite so every thread gets a real, separate connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield SessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _seed(SessionLocal, stock):
    """One product with ``stock`` units, carted once by every buyer."""
    buyers = [TokenData(user_id=f"buyer-{n}", email=f"buyer{n}@example.com") for n in range(BUYERS)]
    db = SessionLocal()
    try:
        category = Category(name="Single board computers")
        db.add(category)
        db.flush()
        product = Product(name="Raspberry Pi 5", price=Decimal("80.00"), stock_quantity=stock, category_id=category.id)
        db.add(product)
        db.commit()
        product_id = product.id
        for buyer in buyers:
            CartService.add_item(db, buyer, product_id, 1)
    finally:
        db.close()
    return product_id, buyers


def _race(SessionLocal, buyers):
    barrier = threading.Barrier(len(buyers))
    outcomes = []

    def checkout(buyer):
        db = SessionLocal()
        try:
            barrier.wait(timeout=10)
            CheckoutCoordinator(UnitOfWork(db)).place_order(buyer.user_id, "12 Nile Street, Cairo")
            outcomes.append("ok")
        except InsufficientStockError:
            outcomes.append("insufficient")
        except Exception as e:
            outcomes.append(repr(e))
        finally:
            db.close()

    threads = [threading.Thread(target=checkout, args=(buyer,)) for buyer in buyers]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


def _stock_and_orders(SessionLocal, product_id):
    db = SessionLocal()
    try:
        stock = db.query(Product.stock_quantity).filter(Product.id == product_id).scalar()
        return stock, db.query(Order).count()
    finally:
        db.close()


def test_last_unit_is_sold_once(file_sessionmaker):
    product_id, buyers = _seed(file_sessionmaker, stock=1)

    outcomes = _race(file_sessionmaker, buyers)

    assert sorted(outcomes) == ["insufficient"] * (BUYERS - 1) + ["ok"]
    assert _stock_and_orders(file_sessionmaker, product_id) == (0, 1)


def test_parallel_checkouts_never_oversell(file_sessionmaker):
    product_id, buyers = _seed(file_sessionmaker, stock=3)

    outcomes = _race(file_sessionmaker, buyers)

    assert outcomes.count("ok") == 3
    assert outcomes.count("insufficient") == BUYERS - 3
    assert _stock_and_orders(file_sessionmaker, product_id) == (0, 3)
