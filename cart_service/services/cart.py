"""Cart business rules: stock admission, ownership and bulk sync"""

import logging

from fastapi import Depends

from storefront_shared.cart.calculations import check_stock
from storefront_shared.cart.errors import (
    CartError,
    ProductNotFound,
    TransientSyncFailure,
    ValidationError,
)
from storefront_shared.cart.models import Cart, Product, SyncCartRequest

from ..database import CartDatabase, ProductDatabase, get_cart_db, get_product_db

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart operations for an authenticated user.

    Stock checks are point-in-time: nothing is reserved between the check
    and the write.
    """

    def __init__(self, cart_db: CartDatabase, product_db: ProductDatabase):
        self.cart_db = cart_db
        self.product_db = product_db

    def _validate_product_stock(self, product_id: str, quantity: int) -> Product:
        product = self.product_db.get_product(product_id)
        if not product:
            raise ProductNotFound(f"Product {product_id} not found")
        check_stock(product, quantity)
        return product

    def get_or_create_active_cart(self, user_id: str) -> Cart:
        return self.cart_db.get_or_create_active_cart(user_id)

    def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> Cart:
        """Add to the active cart; an existing line's quantity is summed and re-checked"""
        product = self._validate_product_stock(product_id, quantity)
        cart = self.cart_db.get_or_create_active_cart(user_id)

        existing = self.cart_db.get_line(cart.id, product_id)
        if existing:
            self._validate_product_stock(product_id, existing.quantity + quantity)

        updated = self.cart_db.add_line(cart.id, product, quantity)
        logger.info(f"User {user_id} added {quantity}x {product.name} to cart {cart.id}")
        return updated

    def update_cart_item_quantity(
        self,
        user_id: str,
        cart_id: str,
        product_id: str,
        quantity: int,
    ) -> Cart:
        """Set a line's quantity; zero or less removes the line"""
        self.cart_db.verify_ownership(cart_id, user_id)

        if quantity <= 0:
            return self.cart_db.remove_line(cart_id, product_id)

        if not self.cart_db.get_line(cart_id, product_id):
            raise ValidationError("Item not in cart")

        self._validate_product_stock(product_id, quantity)
        return self.cart_db.set_line_quantity(cart_id, product_id, quantity)

    def remove_from_cart(self, user_id: str, cart_id: str, product_id: str) -> Cart:
        self.cart_db.verify_ownership(cart_id, user_id)
        return self.cart_db.remove_line(cart_id, product_id)

    def clear_cart(self, user_id: str, cart_id: str) -> Cart:
        self.cart_db.verify_ownership(cart_id, user_id)
        cart = self.cart_db.clear_lines(cart_id)
        logger.info(f"Cart {cart_id} cleared")
        return cart

    def sync_cart(self, user_id: str, request: SyncCartRequest) -> Cart:
        """
        Replace the active cart's lines with ``request.items``.

        Every line is stock-checked before anything is written, so a rejected
        line leaves the existing cart untouched.
        """
        cart = self.cart_db.get_or_create_active_cart(user_id)

        lines: list[tuple[Product, int]] = []
        for item in request.items:
            product = self.product_db.get_product(item.product.id)
            if not product:
                raise ProductNotFound(f"Product {item.product.name or item.product.id} not found")
            check_stock(product, item.quantity)
            lines.append((product, item.quantity))

        try:
            synced = self.cart_db.replace_lines(cart.id, lines)
        except CartError:
            raise
        except Exception as e:
            logger.error(f"Cart sync failed for cart {cart.id}: {e}", exc_info=True)
            raise TransientSyncFailure() from e

        logger.info(f"Synced {len(lines)} lines into cart {cart.id} for user {user_id}")
        return synced


def get_cart_service(
    cart_db: CartDatabase = Depends(get_cart_db),
    product_db: ProductDatabase = Depends(get_product_db),
) -> CartService:
    return CartService(cart_db, product_db)
