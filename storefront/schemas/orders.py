from pydantic import Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from .base import ApiModel
from ..orders.models import OrderStatus


class CreateOrderRequest(ApiModel):
    shipping_address: str = Field(..., min_length=5, max_length=500)
    phone_number: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = Field(None, max_length=1000)


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


class OrderLineResponse(ApiModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(ApiModel):
    id: int
    user_id: str
    status: OrderStatus
    total_amount: Decimal
    shipping_address: str
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderLineResponse] = Field(default_factory=list, validation_alias="lines")
    total_items: int


class OrderListResponse(ApiModel):
    orders: List[OrderResponse]
    total_count: int
    skip: int
    limit: int
