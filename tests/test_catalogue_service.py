import pytest
from decimal import Decimal

from storefront.cart.service import CartService
from storefront.catalogue.service import CatalogueService
from storefront.catalogue.models import Category, Product
from storefront.database.unit_of_work import UnitOfWork
from storefront.orders.checkout import CheckoutCoordinator
from storefront.core.exceptions import (
    NotFoundError,
    CategoryExistsError,
    CategoryInUseError,
    ProductInUseError,
    InsufficientStockError,
)


def test_create_and_list_categories(db_session):
    CatalogueService.create_category(db_session, "Sensors", "Temperature, humidity")
    CatalogueService.create_category(db_session, "Actuators")

    names = [category.name for category in CatalogueService.list_categories(db_session)]
    assert names == ["Actuators", "Sensors"]


def test_duplicate_category_name(db_session, category):
    with pytest.raises(CategoryExistsError):
        CatalogueService.create_category(db_session, category.name)


def test_delete_category_in_use(db_session, category, product_a):
    with pytest.raises(CategoryInUseError):
        CatalogueService.delete_category(db_session, category.id)


def test_delete_empty_category(db_session):
    category = CatalogueService.create_category(db_session, "Cables")
    CatalogueService.delete_category(db_session, category.id)
    assert db_session.query(Category).filter(Category.name == "Cables").count() == 0


def test_delete_missing_category(db_session):
    with pytest.raises(NotFoundError):
        CatalogueService.delete_category(db_session, 123)


def test_create_product_requires_category(db_session):
    with pytest.raises(NotFoundError):
        CatalogueService.create_product(db_session, "Orphan", Decimal("1.00"), 1, category_id=999)


def test_create_and_filter_products(db_session, category):
    other = CatalogueService.create_category(db_session, "Tools")
    board = CatalogueService.create_product(db_session, "STM32 Nucleo", Decimal("19.99"), 7, category.id)
    CatalogueService.create_product(db_session, "Soldering Iron", Decimal("30.00"), 2, other.id)

    assert board.stock_quantity == 7
    assert [p.id for p in CatalogueService.list_products(db_session, category.id)] == [board.id]
    assert len(CatalogueService.list_products(db_session)) == 2


def test_get_missing_product(db_session):
    with pytest.raises(NotFoundError):
        CatalogueService.get_product(db_session, 5)


def test_update_price(db_session, product_a):
    product = CatalogueService.update_price(db_session, product_a.id, Decimal("11.25"))
    assert product.price == Decimal("11.25")


def test_adjust_stock(db_session, product_a):
    assert CatalogueService.adjust_stock(db_session, product_a.id, 5).stock_quantity == 15
    assert CatalogueService.adjust_stock(db_session, product_a.id, -15).stock_quantity == 0
    with pytest.raises(InsufficientStockError):
        CatalogueService.adjust_stock(db_session, product_a.id, -1)


def test_delete_product_in_cart(db_session, customer, product_a):
    CartService.add_item(db_session, customer, product_a.id, 1)
    with pytest.raises(ProductInUseError):
        CatalogueService.delete_product(db_session, product_a.id)


def test_delete_product_in_order(db_session, customer, product_a):
    CartService.add_item(db_session, customer, product_a.id, 1)
    CheckoutCoordinator(UnitOfWork(db_session)).place_order(customer.user_id, "12 Nile Street, Cairo")
    with pytest.raises(ProductInUseError):
        CatalogueService.delete_product(db_session, product_a.id)


def test_delete_unreferenced_product(db_session, product_a):
    product_id = product_a.id
    CatalogueService.delete_product(db_session, product_id)
    assert db_session.get(Product, product_id) is None
