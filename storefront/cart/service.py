from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal
from datetime import datetime, timezone
import logging

from .models import Cart, CartLine
from ..catalogue.models import Product
from ..auth.models import TokenData
from ..users.service import UserService
from ..inventory.ledger import InventoryLedger
from ..database.unit_of_work import UnitOfWork
from ..schemas.cart import CartResponse, CartLineResponse
from ..core.exceptions import (
    ProductNotFoundError,
    InsufficientStockError,
    InvalidQuantityError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class CartService:
    """Per-user staging area before checkout.

    Stock checks here are advisory: the cart never reserves inventory, so
    checkout validates every line again against live stock.
    """

    @staticmethod
    def load_cart(db: Session, user_id: str, lock: bool = False) -> Optional[Cart]:
        query = db.query(Cart).filter(Cart.user_id == user_id)
        if lock:
            # Serializes concurrent edits of the same cart
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def _get_or_create_cart(db: Session, user: TokenData, lock: bool = False) -> Cart:
        cart = CartService.load_cart(db, user.user_id, lock=lock)
        if cart is None:
            UserService.ensure_user(db, user)
            cart = Cart(user_id=user.user_id)
            db.add(cart)
            db.flush()
            logger.info(f"Created cart {cart.id} for user {user.user_id}")
        return cart

    @staticmethod
    def _owned_line(db: Session, user_id: str, line_id: int) -> CartLine:
        line = (
            db.query(CartLine)
            .join(Cart, CartLine.cart_id == Cart.id)
            .filter(CartLine.id == line_id, Cart.user_id == user_id)
            .with_for_update()
            .first()
        )
        if line is None:
            raise NotFoundError("Cart item", line_id)
        return line

    @staticmethod
    def view(db: Session, cart: Cart) -> CartResponse:
        """Cart lines priced at the current product price."""
        lines = list(cart.lines)
        product_ids = [line.product_id for line in lines]
        products = {}
        if product_ids:
            products = {
                product.id: product
                for product in db.query(Product).filter(Product.id.in_(product_ids)).all()
            }

        items = []
        for line in lines:
            product = products[line.product_id]
            items.append(CartLineResponse(
                id=line.id,
                product_id=product.id,
                product_name=product.name,
                product_image_url=product.image_url or "",
                unit_price=product.price,
                quantity=line.quantity,
                line_total=product.price * line.quantity,
                available_stock=product.stock_quantity,
            ))

        return CartResponse(
            id=cart.id,
            items=items,
            total_amount=sum((item.line_total for item in items), Decimal("0.00")),
            total_items=sum(item.quantity for item in items),
        )

    @staticmethod
    def get_cart(db: Session, user: TokenData) -> CartResponse:
        """Get the user's cart, creating it on first access."""
        with UnitOfWork(db):
            cart = CartService._get_or_create_cart(db, user)
        return CartService.view(db, cart)

    @staticmethod
    def add_item(db: Session, user: TokenData, product_id: int, quantity: int) -> CartResponse:
        """Add a product, merging with an existing line for the same product."""
        if quantity < 1:
            raise InvalidQuantityError(quantity)

        with UnitOfWork(db):
            product = db.get(Product, product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            cart = CartService._get_or_create_cart(db, user, lock=True)
            line = next((l for l in cart.lines if l.product_id == product_id), None)
            new_quantity = quantity + (line.quantity if line else 0)

            if new_quantity > product.stock_quantity:
                logger.warning(
                    f"User {user.user_id} asked for {new_quantity} of product {product_id}, "
                    f"only {product.stock_quantity} in stock"
                )
                raise InsufficientStockError(product_id, new_quantity, product.stock_quantity)

            if line:
                line.quantity = new_quantity
            else:
                cart.lines.append(CartLine(product_id=product_id, quantity=quantity))
            cart.updated_at = datetime.now(timezone.utc)

        return CartService.view(db, cart)

    @staticmethod
    def update_item(db: Session, user: TokenData, line_id: int, quantity: int) -> CartResponse:
        """Set a line's quantity, re-checked against current stock."""
        if quantity < 1:
            raise InvalidQuantityError(quantity)

        with UnitOfWork(db):
            line = CartService._owned_line(db, user.user_id, line_id)
            available = InventoryLedger(db).available(line.product_id)
            if quantity > available:
                raise InsufficientStockError(line.product_id, quantity, available)
            line.quantity = quantity

        return CartService.get_cart(db, user)

    @staticmethod
    def remove_item(db: Session, user: TokenData, line_id: int) -> CartResponse:
        with UnitOfWork(db):
            line = CartService._owned_line(db, user.user_id, line_id)
            db.delete(line)

        return CartService.get_cart(db, user)

    @staticmethod
    def clear(db: Session, user: TokenData) -> CartResponse:
        """Empty the cart. Clearing an empty or missing cart is a no-op."""
        with UnitOfWork(db):
            cart = CartService.load_cart(db, user.user_id, lock=True)
            if cart is not None and cart.lines:
                cart.lines.clear()
                cart.updated_at = datetime.now(timezone.utc)

        return CartService.get_cart(db, user)
