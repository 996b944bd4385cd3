"""
Checkout: turn a user's cart into an order in a single transaction.

The coordinator receives an explicit unit of work instead of reaching for a
shared session, so one request's checkout can never leak state into another.
Either everything below persists (order, order lines, stock decrements, empty
cart) or nothing does.
"""

import logging
from decimal import Decimal
from datetime import datetime, timezone
from typing import Optional

from .models import Order, OrderLine, OrderStatus
from ..cart.models import Cart
from ..database.unit_of_work import UnitOfWork
from ..inventory.ledger import InventoryLedger
from ..core.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    ProductNotFoundError,
    NotFoundError,
    ForbiddenError,
    InvalidStateError,
)

logger = logging.getLogger(__name__)


class CheckoutCoordinator:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.session = uow.session
        self.ledger = InventoryLedger(self.session)

    def place_order(
        self,
        user_id: str,
        shipping_address: str,
        phone_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Validate the cart against live stock, snapshot it into an order and reserve the stock."""
        with self.uow:
            cart = (
                self.session.query(Cart)
                .filter(Cart.user_id == user_id)
                .with_for_update()
                .first()
            )
            if cart is None or not cart.lines:
                logger.warning(f"Checkout refused for user {user_id}: cart is empty")
                raise EmptyCartError(user_id)

            lines = sorted(cart.lines, key=lambda line: line.product_id)

            # Authoritative stock check; the add-to-cart check was advisory
            products = self.ledger.lock(line.product_id for line in lines)
            for line in lines:
                product = products.get(line.product_id)
                if product is None:
                    raise ProductNotFoundError(line.product_id)
                if product.stock_quantity < line.quantity:
                    logger.warning(
                        f"Checkout refused for user {user_id}: product {product.id} "
                        f"has {product.stock_quantity}, cart wants {line.quantity}"
                    )
                    raise InsufficientStockError(product.id, line.quantity, product.stock_quantity)

            total_amount = sum(
                (products[line.product_id].price * line.quantity for line in lines),
                Decimal("0.00"),
            )

            now = datetime.now(timezone.utc)
            order = Order(
                user_id=user_id,
                status=OrderStatus.PENDING,
                total_amount=total_amount,
                shipping_address=shipping_address,
                phone_number=phone_number,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
            for line in lines:
                product = products[line.product_id]
                order.lines.append(OrderLine(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    unit_price=product.price,
                ))
            self.session.add(order)
            self.session.flush()

            # A concurrent checkout may still have won the race since the check above
            for line in lines:
                self.ledger.reserve(line.product_id, line.quantity)

            cart.lines.clear()
            cart.updated_at = now

        logger.info(f"Order {order.id} placed by user {user_id} for {total_amount}")
        return order

    def cancel_order(self, order_id: int, caller_user_id: str, is_admin: bool = False) -> Order:
        """Cancel a pending order and return its stock."""
        with self.uow:
            order = (
                self.session.query(Order)
                .filter(Order.id == order_id)
                .with_for_update()
                .first()
            )
            if order is None:
                raise NotFoundError("Order", order_id)
            if order.user_id != caller_user_id and not is_admin:
                raise ForbiddenError("You can only cancel your own orders")
            if order.status != OrderStatus.PENDING:
                raise InvalidStateError(
                    f"Only pending orders can be cancelled; order {order_id} is {OrderStatus(order.status).value}",
                    context={"orderId": order_id, "status": OrderStatus(order.status).value},
                )

            self.restock(order)
            order.transition_to(OrderStatus.CANCELLED)

        logger.info(f"Order {order_id} cancelled by user {caller_user_id}")
        return order

    def restock(self, order: Order) -> None:
        """Give every line of ``order`` back to the inventory (same transaction)."""
        for line in sorted(order.lines, key=lambda line: line.product_id):
            self.ledger.release(line.product_id, line.quantity)
