from pydantic import Field
from typing import List
from decimal import Decimal

from .base import ApiModel


class AddToCartRequest(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(ApiModel):
    quantity: int = Field(..., ge=1)


class CartLineResponse(ApiModel):
    id: int
    product_id: int
    product_name: str
    product_image_url: str = ""
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    available_stock: int


class CartResponse(ApiModel):
    id: int
    items: List[CartLineResponse] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")
    total_items: int = 0
