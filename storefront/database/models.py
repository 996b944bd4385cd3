# Central models file so every table is registered on Base.metadata
# before create_all runs. Users first: carts and orders reference them.

from .core import Base

from ..users.models import User
from ..catalogue.models import Category, Product
from ..cart.models import Cart, CartLine
from ..orders.models import Order, OrderLine, OrderStatus

__all__ = [
    "Base",
    "User",
    "Category",
    "Product",
    "Cart",
    "CartLine",
    "Order",
    "OrderLine",
    "OrderStatus",
]
