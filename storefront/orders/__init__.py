from .models import Order, OrderLine, OrderStatus
from .checkout import CheckoutCoordinator
from .service import OrderService

__all__ = ["Order", "OrderLine", "OrderStatus", "CheckoutCoordinator", "OrderService"]
