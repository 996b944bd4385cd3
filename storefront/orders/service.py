from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
import logging

from .models import Order, OrderStatus
from .checkout import CheckoutCoordinator
from ..database.unit_of_work import UnitOfWork
from ..core.exceptions import NotFoundError, ForbiddenError

logger = logging.getLogger(__name__)


class OrderService:

    @staticmethod
    def get_order(db: Session, order_id: int, caller_user_id: str, is_admin: bool = False) -> Order:
        """Get a specific order; customers only see their own orders."""
        order = db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        if order.user_id != caller_user_id and not is_admin:
            raise ForbiddenError("You can only view your own orders")
        return order

    @staticmethod
    def list_orders(
        db: Session,
        caller_user_id: str,
        is_admin: bool = False,
        skip: int = 0,
        limit: int = 10,
        status: Optional[OrderStatus] = None,
    ) -> Tuple[List[Order], int]:
        """Orders newest first, with the total count. Admins see every user's orders."""
        query = db.query(Order)
        if not is_admin:
            query = query.filter(Order.user_id == caller_user_id)
        if status:
            query = query.filter(Order.status == status)

        total = query.count()
        orders = query.order_by(Order.created_at.desc(), Order.id.desc()).offset(skip).limit(limit).all()
        return orders, total

    @staticmethod
    def update_status(db: Session, order_id: int, new_status: OrderStatus, is_admin: bool = False) -> Order:
        """Administrative status change along the order state machine."""
        if not is_admin:
            raise ForbiddenError("Administrator role required")

        uow = UnitOfWork(db)
        with uow:
            order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
            if order is None:
                raise NotFoundError("Order", order_id)

            previous = OrderStatus(order.status)
            order.transition_to(new_status)
            if new_status == OrderStatus.CANCELLED:
                # Cancelling a confirmed order frees its stock like a customer cancel
                CheckoutCoordinator(uow).restock(order)

        logger.info(f"Order {order_id} moved from {previous.value} to {OrderStatus(new_status).value}")
        return order
