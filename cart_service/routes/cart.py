"""Cart API routes"""

from fastapi import APIRouter, Depends

from storefront_shared.cart.models import (
    AddToCartRequest,
    ApiResponse,
    Cart,
    SyncCartRequest,
    UpdateCartItemRequest,
)

from ..security.auth import AuthenticatedUser, require_user
from ..services.cart import CartService, get_cart_service

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.post("/sync", response_model=ApiResponse[Cart])
async def sync_cart(
    request: SyncCartRequest,
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Replace the caller's active cart lines with a client-held cart"""
    cart = service.sync_cart(user.id, request)
    return ApiResponse(success=True, data=cart, message="Cart synced")


@router.get("", response_model=ApiResponse[Cart])
async def get_cart(
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Get the caller's active cart, creating it if needed"""
    cart = service.get_or_create_active_cart(user.id)
    return ApiResponse(success=True, data=cart)


@router.post("", response_model=ApiResponse[Cart], status_code=201)
async def add_to_cart(
    request: AddToCartRequest,
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Add an item to the caller's active cart"""
    cart = service.add_to_cart(user.id, request.product_id, request.quantity)
    return ApiResponse(success=True, data=cart, message="Item added to cart successfully")


@router.put("/{cart_id}/{product_id}", response_model=ApiResponse[Cart])
async def update_cart_item(
    cart_id: str,
    product_id: str,
    request: UpdateCartItemRequest,
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Update item quantity; zero or less removes the item"""
    cart = service.update_cart_item_quantity(user.id, cart_id, product_id, request.quantity)
    message = "Cart item updated successfully" if request.quantity > 0 else "Item removed from cart"
    return ApiResponse(success=True, data=cart, message=message)


@router.delete("/{cart_id}/{product_id}", response_model=ApiResponse[Cart])
async def remove_from_cart(
    cart_id: str,
    product_id: str,
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Remove an item from the cart"""
    cart = service.remove_from_cart(user.id, cart_id, product_id)
    return ApiResponse(success=True, data=cart, message="Item removed from cart successfully")


@router.delete("/{cart_id}", response_model=ApiResponse[Cart])
async def clear_cart(
    cart_id: str,
    user: AuthenticatedUser = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Clear all items from cart"""
    cart = service.clear_cart(user.id, cart_id)
    return ApiResponse(success=True, data=cart, message="Cart cleared successfully")
