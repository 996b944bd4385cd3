# storefront/core/exceptions.py

from enum import Enum
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Catalogue errors
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CATEGORY_EXISTS = "CATEGORY_EXISTS"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    PRODUCT_IN_USE = "PRODUCT_IN_USE"

    # Cart and checkout errors
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    EMPTY_CART = "EMPTY_CART"

    # Order errors
    INVALID_STATE = "INVALID_STATE"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Access errors
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"

    # System errors
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

class StorefrontError(Exception):
    """Base exception for all storefront domain errors."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.user_message = user_message
        self.technical_details = technical_details
        self.context = context or {}

        super().__init__(self.user_message)

    def to_response(self) -> Dict[str, Any]:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.user_message,
                "context": self.context
            }
        }

class ProductNotFoundError(StorefrontError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            code=ErrorCode.PRODUCT_NOT_FOUND,
            user_message=f"Product {product_id} does not exist",
            context={"productId": product_id}
        )

class InsufficientStockError(StorefrontError):
    """Raised when requested quantity exceeds the product's available stock."""

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            code=ErrorCode.INSUFFICIENT_STOCK,
            user_message=f"Insufficient stock for product {product_id}: requested {requested}, available {available}",
            context={
                "productId": product_id,
                "requested": requested,
                "available": available
            }
        )

class InvalidQuantityError(StorefrontError):
    def __init__(self, quantity: int):
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            user_message=f"Quantity must be at least 1. Provided: {quantity}",
            context={"quantity": quantity}
        )

class EmptyCartError(StorefrontError):
    def __init__(self, user_id: str):
        super().__init__(
            code=ErrorCode.EMPTY_CART,
            user_message="Cart is empty",
            technical_details=f"No cart lines for user {user_id}"
        )

class NotFoundError(StorefrontError):
    """A cart line, order or category that does not exist for the caller."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            user_message=f"{resource} {resource_id} not found",
            context={"resource": resource, "id": resource_id}
        )

class InvalidStateError(StorefrontError):
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(code=ErrorCode.INVALID_STATE, user_message=message, context=context)

class InvalidTransitionError(StorefrontError):
    def __init__(self, current: str, requested: str):
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            user_message=f"Cannot move an order from {current} to {requested}",
            context={"from": current, "to": requested}
        )

class ForbiddenError(StorefrontError):
    def __init__(self, message: str = "You do not have access to this resource"):
        super().__init__(code=ErrorCode.FORBIDDEN, user_message=message)

class AuthenticationError(StorefrontError):
    """Exception raised for authentication-related errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(code=ErrorCode.UNAUTHORIZED, user_message=message)

class CategoryExistsError(StorefrontError):
    def __init__(self, name: str):
        super().__init__(
            code=ErrorCode.CATEGORY_EXISTS,
            user_message=f"Category '{name}' already exists",
            context={"name": name}
        )

class CategoryInUseError(StorefrontError):
    def __init__(self, category_id: int, product_count: int):
        super().__init__(
            code=ErrorCode.CATEGORY_IN_USE,
            user_message=f"Category {category_id} still has {product_count} product(s)",
            context={"categoryId": category_id, "productCount": product_count}
        )

class ProductInUseError(StorefrontError):
    def __init__(self, product_id: int):
        super().__init__(
            code=ErrorCode.PRODUCT_IN_USE,
            user_message=f"Product {product_id} is referenced by carts or orders",
            context={"productId": product_id}
        )

class ConcurrentModificationError(StorefrontError):
    def __init__(self, technical_details: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CONCURRENT_MODIFICATION,
            user_message="The resource was modified by another request. Please retry.",
            technical_details=technical_details
        )
