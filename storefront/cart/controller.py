from fastapi import APIRouter

from ..database.core import DbSession
from ..auth.service import CurrentUser
from ..schemas.cart import AddToCartRequest, UpdateCartItemRequest, CartResponse
from .service import CartService

router = APIRouter(prefix="/cart")

# Handlers are plain functions: FastAPI runs them in its threadpool, one
# request-scoped session each.

@router.get("", response_model=CartResponse)
def get_cart(current_user: CurrentUser, db: DbSession):
    """Get the user's cart, creating it on first access"""
    return CartService.get_cart(db, current_user)

@router.post("/add", response_model=CartResponse)
def add_to_cart(request: AddToCartRequest, current_user: CurrentUser, db: DbSession):
    """Add a product to the cart (merges with an existing line)"""
    return CartService.add_item(db, current_user, request.product_id, request.quantity)

@router.put("/items/{item_id}", response_model=CartResponse)
def update_cart_item(item_id: int, request: UpdateCartItemRequest, current_user: CurrentUser, db: DbSession):
    """Change the quantity of a cart line"""
    return CartService.update_item(db, current_user, item_id, request.quantity)

@router.delete("/items/{item_id}", response_model=CartResponse)
def remove_cart_item(item_id: int, current_user: CurrentUser, db: DbSession):
    """Remove a line from the cart"""
    return CartService.remove_item(db, current_user, item_id)

@router.delete("/clear", response_model=CartResponse)
def clear_cart(current_user: CurrentUser, db: DbSession):
    """Remove every line from the cart"""
    return CartService.clear(db, current_user)
