# Cart domain: wire models, totals and error taxonomy

from .models import (
    ANONYMOUS_USER_ID,
    AddToCartRequest,
    ApiResponse,
    Cart,
    CartLine,
    CartStatus,
    Product,
    ProductCategory,
    ProductSearchResponse,
    SyncCartRequest,
    UpdateCartItemRequest,
)
from .errors import (
    CartError,
    NetworkError,
    NotAuthenticated,
    OutOfStock,
    OwnershipError,
    ProductNotFound,
    TransientSyncFailure,
    ValidationError,
)

__all__ = [
    "ANONYMOUS_USER_ID",
    "AddToCartRequest",
    "ApiResponse",
    "Cart",
    "CartLine",
    "CartStatus",
    "Product",
    "ProductCategory",
    "ProductSearchResponse",
    "SyncCartRequest",
    "UpdateCartItemRequest",
    "CartError",
    "NetworkError",
    "NotAuthenticated",
    "OutOfStock",
    "OwnershipError",
    "ProductNotFound",
    "TransientSyncFailure",
    "ValidationError",
]
