"""
Inventory ledger: the only code allowed to change ``products.stock_quantity``.

Every method works inside the caller's session and transaction. Nothing here
commits; the surrounding unit of work decides whether the stock movement
persists together with the order, cancellation or adjustment it belongs to.
"""

import logging
from typing import Dict, Iterable
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..catalogue.models import Product
from ..core.exceptions import ProductNotFoundError, InsufficientStockError, InvalidQuantityError

logger = logging.getLogger(__name__)

_products = Product.__table__


class InventoryLedger:

    def __init__(self, session: Session):
        self.session = session

    def available(self, product_id: int) -> int:
        """Current available stock for a product."""
        stock = self.session.query(Product.stock_quantity).filter(Product.id == product_id).scalar()
        if stock is None:
            raise ProductNotFoundError(product_id)
        return stock

    def lock(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Load products with a row lock, always in ascending id order.

        Fixed lock order keeps two checkouts over overlapping products from
        deadlocking. Backends without row locks (SQLite) ignore FOR UPDATE.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        products = (
            self.session.query(Product)
            .filter(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
            .populate_existing()
            .all()
        )
        return {product.id: product for product in products}

    def reserve(self, product_id: int, quantity: int) -> None:
        """Decrement stock by ``quantity`` if, and only if, enough is available.

        Check and decrement are a single conditional UPDATE, so two
        transactions can never both take the last units.
        """
        if quantity < 1:
            raise InvalidQuantityError(quantity)

        result = self.session.execute(
            update(_products)
            .where(_products.c.id == product_id)
            .where(_products.c.stock_quantity >= quantity)
            .values(stock_quantity=_products.c.stock_quantity - quantity)
        )
        if result.rowcount != 1:
            available = self.session.query(Product.stock_quantity).filter(Product.id == product_id).scalar()
            if available is None:
                raise ProductNotFoundError(product_id)
            logger.warning(
                f"Reservation refused for product {product_id}: requested {quantity}, available {available}"
            )
            raise InsufficientStockError(product_id, quantity, available)

        self._expire(product_id)

    def release(self, product_id: int, quantity: int) -> None:
        """Return ``quantity`` units to stock."""
        self.session.execute(
            update(_products)
            .where(_products.c.id == product_id)
            .values(stock_quantity=_products.c.stock_quantity + quantity)
        )
        self._expire(product_id)

    def adjust(self, product_id: int, delta: int) -> int:
        """Administrative stock correction; returns the new stock level."""
        if delta < 0:
            self.reserve(product_id, -delta)
        elif delta > 0:
            if self.session.get(Product, product_id) is None:
                raise ProductNotFoundError(product_id)
            self.release(product_id, delta)
        new_stock = self.available(product_id)
        logger.info(f"Stock for product {product_id} adjusted by {delta} to {new_stock}")
        return new_stock

    def _expire(self, product_id: int) -> None:
        # The UPDATE bypasses the ORM; drop any cached stock value
        product = self.session.get(Product, product_id)
        if product is not None:
            self.session.expire(product, ["stock_quantity"])
