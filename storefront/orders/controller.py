from fastapi import APIRouter, Query, status
from typing import Optional

from ..database.core import DbSession
from ..database.unit_of_work import UnitOfWork
from ..auth.service import CurrentUser
from ..schemas.orders import (
    CreateOrderRequest, OrderResponse, OrderListResponse, OrderStatusUpdate
)
from .models import OrderStatus
from .checkout import CheckoutCoordinator
from .service import OrderService

router = APIRouter(prefix="/orders")

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(order_data: CreateOrderRequest, current_user: CurrentUser, db: DbSession):
    """Check out the authenticated user's cart"""
    coordinator = CheckoutCoordinator(UnitOfWork(db))
    order = coordinator.place_order(
        current_user.user_id,
        shipping_address=order_data.shipping_address,
        phone_number=order_data.phone_number,
        notes=order_data.notes,
    )
    return OrderResponse.model_validate(order)

@router.get("", response_model=OrderListResponse)
def list_orders(
    current_user: CurrentUser,
    db: DbSession,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
):
    """Orders of the authenticated user, newest first (admins see all orders)"""
    orders, total = OrderService.list_orders(
        db, current_user.user_id, current_user.is_admin, skip, limit, status_filter
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in orders],
        total_count=total,
        skip=skip,
        limit=limit,
    )

@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, current_user: CurrentUser, db: DbSession):
    """Get a specific order (customers can only see their own orders)"""
    order = OrderService.get_order(db, order_id, current_user.user_id, current_user.is_admin)
    return OrderResponse.model_validate(order)

@router.delete("/{order_id}", response_model=OrderResponse)
def cancel_order(order_id: int, current_user: CurrentUser, db: DbSession):
    """Cancel a pending order and restore its stock"""
    coordinator = CheckoutCoordinator(UnitOfWork(db))
    order = coordinator.cancel_order(order_id, current_user.user_id, current_user.is_admin)
    return OrderResponse.model_validate(order)

@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, status_update: OrderStatusUpdate, current_user: CurrentUser, db: DbSession):
    """Move an order along its status workflow (admin only)"""
    order = OrderService.update_status(db, order_id, status_update.status, current_user.is_admin)
    return OrderResponse.model_validate(order)
