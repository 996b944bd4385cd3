from sqlalchemy.orm import Session
from typing import List, Optional
from decimal import Decimal
import logging

from .models import Category, Product
from ..cart.models import CartLine
from ..orders.models import OrderLine
from ..database.unit_of_work import UnitOfWork
from ..inventory.ledger import InventoryLedger
from ..core.exceptions import (
    NotFoundError,
    CategoryExistsError,
    CategoryInUseError,
    ProductInUseError,
)

logger = logging.getLogger(__name__)


class CatalogueService:

    # --- Categories ---

    @staticmethod
    def list_categories(db: Session) -> List[Category]:
        return db.query(Category).order_by(Category.name).all()

    @staticmethod
    def create_category(db: Session, name: str, description: str = "") -> Category:
        """Create a category; names are unique."""
        with UnitOfWork(db):
            if db.query(Category.id).filter(Category.name == name).first():
                raise CategoryExistsError(name)
            category = Category(name=name, description=description or "")
            db.add(category)
        db.refresh(category)
        logger.info(f"Created category {category.id} '{name}'")
        return category

    @staticmethod
    def delete_category(db: Session, category_id: int) -> None:
        """Delete a category that no product references."""
        with UnitOfWork(db):
            category = db.get(Category, category_id)
            if not category:
                raise NotFoundError("Category", category_id)
            product_count = db.query(Product).filter(Product.category_id == category_id).count()
            if product_count:
                raise CategoryInUseError(category_id, product_count)
            db.delete(category)
        logger.info(f"Deleted category {category_id}")

    # --- Products ---

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    def list_products(db: Session, category_id: Optional[int] = None) -> List[Product]:
        query = db.query(Product)
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        return query.order_by(Product.id).all()

    @staticmethod
    def create_product(
        db: Session,
        name: str,
        price: Decimal,
        stock_quantity: int,
        category_id: int,
        description: str = "",
        image_url: str = "",
    ) -> Product:
        with UnitOfWork(db):
            if not db.get(Category, category_id):
                raise NotFoundError("Category", category_id)
            product = Product(
                name=name,
                description=description or "",
                image_url=image_url or "",
                price=price,
                stock_quantity=stock_quantity,
                category_id=category_id,
            )
            db.add(product)
        db.refresh(product)
        logger.info(f"Created product {product.id} '{name}' with stock {stock_quantity}")
        return product

    @staticmethod
    def update_price(db: Session, product_id: int, price: Decimal) -> Product:
        """Change the live price. Existing order lines keep their snapshot price."""
        with UnitOfWork(db):
            product = CatalogueService.get_product(db, product_id)
            product.price = price
        db.refresh(product)
        return product

    @staticmethod
    def adjust_stock(db: Session, product_id: int, delta: int) -> Product:
        with UnitOfWork(db):
            InventoryLedger(db).adjust(product_id, delta)
        return CatalogueService.get_product(db, product_id)

    @staticmethod
    def delete_product(db: Session, product_id: int) -> None:
        """Delete a product no cart or order line references."""
        with UnitOfWork(db):
            product = CatalogueService.get_product(db, product_id)
            referenced = (
                db.query(CartLine.id).filter(CartLine.product_id == product_id).first()
                or db.query(OrderLine.id).filter(OrderLine.product_id == product_id).first()
            )
            if referenced:
                raise ProductInUseError(product_id)
            db.delete(product)
        logger.info(f"Deleted product {product_id}")
