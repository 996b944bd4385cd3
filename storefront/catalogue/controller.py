from fastapi import APIRouter, Query, Response, status
from typing import List, Optional

from ..database.core import DbSession
from ..auth.service import AdminUser
from ..schemas.catalogue import (
    CategoryCreate, CategoryResponse, ProductCreate, ProductResponse, PriceUpdate, StockAdjustment
)
from .service import CatalogueService

router = APIRouter()

@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(db: DbSession):
    return CatalogueService.list_categories(db)

@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, admin: AdminUser, db: DbSession):
    return CatalogueService.create_category(db, category.name, category.description)

@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, admin: AdminUser, db: DbSession):
    CatalogueService.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/products", response_model=List[ProductResponse])
def list_products(db: DbSession, category_id: Optional[int] = Query(None, alias="categoryId")):
    return CatalogueService.list_products(db, category_id)

@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: DbSession):
    return CatalogueService.get_product(db, product_id)

@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, admin: AdminUser, db: DbSession):
    return CatalogueService.create_product(
        db,
        name=product.name,
        price=product.price,
        stock_quantity=product.stock_quantity,
        category_id=product.category_id,
        description=product.description,
        image_url=product.image_url,
    )

@router.patch("/products/{product_id}/price", response_model=ProductResponse)
def update_price(product_id: int, update: PriceUpdate, admin: AdminUser, db: DbSession):
    """Change the live price; placed orders keep their snapshot price"""
    return CatalogueService.update_price(db, product_id, update.price)

@router.post("/products/{product_id}/stock", response_model=ProductResponse)
def adjust_stock(product_id: int, adjustment: StockAdjustment, admin: AdminUser, db: DbSession):
    """Administrative stock correction (positive or negative delta)"""
    return CatalogueService.adjust_stock(db, product_id, adjustment.delta)

@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, admin: AdminUser, db: DbSession):
    CatalogueService.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
