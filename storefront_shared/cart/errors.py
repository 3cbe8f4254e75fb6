"""Cart error taxonomy, shared so both sides agree on error codes"""

from typing import Optional


class CartError(Exception):
    """Base exception for cart operations"""

    code = "cart_error"
    status_code = 500
    default_message = "Cart operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CartError):
    """Malformed input, rejected before any mutation"""
    code = "validation_error"
    status_code = 400
    default_message = "Validation failed"


class OutOfStock(CartError):
    """Requested quantity exceeds stock-on-hand"""

    code = "out_of_stock"
    status_code = 400
    default_message = "Product is out of stock"

    def __init__(
        self,
        message: Optional[str] = None,
        product_name: Optional[str] = None,
        available: Optional[int] = None,
    ):
        if message is None and product_name:
            message = f"Product {product_name} is out of stock"
            if available is not None:
                message += f". Available: {available}"
        super().__init__(message)
        self.product_name = product_name
        self.available = available


class OwnershipError(CartError):
    """Cart does not belong to the calling identity"""
    code = "ownership_error"
    status_code = 400
    default_message = "Cart not found for this user"


class NotAuthenticated(CartError):
    code = "not_authenticated"
    status_code = 401
    default_message = "User not authenticated"


class ProductNotFound(CartError):
    code = "product_not_found"
    status_code = 404
    default_message = "Product not found"


class TransientSyncFailure(CartError):
    """Bulk sync failed partway; no rollback or retry is attempted"""
    code = "sync_failed"
    status_code = 500
    default_message = "Failed to sync cart"


class NetworkError(CartError):
    """Transport failure or timeout talking to the cart service (client side only)"""
    code = "network_error"
    status_code = 503
    default_message = "Could not reach the cart service"


ERRORS_BY_CODE: dict[str, type[CartError]] = {
    cls.code: cls
    for cls in (
        ValidationError,
        OutOfStock,
        OwnershipError,
        NotAuthenticated,
        ProductNotFound,
        TransientSyncFailure,
        NetworkError,
    )
}

_ERRORS_BY_STATUS: dict[int, type[CartError]] = {
    400: ValidationError,
    401: NotAuthenticated,
    404: ProductNotFound,
    422: ValidationError,
}


def error_from_response(
    code: Optional[str],
    status_code: int,
    message: Optional[str] = None,
) -> CartError:
    """Rebuild a CartError from an error envelope's code, falling back on HTTP status"""
    error_cls = ERRORS_BY_CODE.get(code or "") or _ERRORS_BY_STATUS.get(status_code, CartError)
    return error_cls(message)
