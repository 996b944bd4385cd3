from pydantic import Field
from decimal import Decimal

from .base import ApiModel


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)


class CategoryResponse(ApiModel):
    id: int
    name: str
    description: str


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=1000)
    image_url: str = Field("", max_length=500)
    price: Decimal = Field(..., ge=Decimal("0.01"), max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    category_id: int


class PriceUpdate(ApiModel):
    price: Decimal = Field(..., ge=Decimal("0.01"), max_digits=10, decimal_places=2)


class StockAdjustment(ApiModel):
    delta: int


class ProductResponse(ApiModel):
    id: int
    name: str
    description: str
    image_url: str
    price: Decimal
    stock_quantity: int
    category_id: int
