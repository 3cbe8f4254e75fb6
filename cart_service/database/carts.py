"""Cart storage, one active cart per user"""

import uuid
from typing import Optional

from storefront_shared.cart import calculations
from storefront_shared.cart.errors import OwnershipError
from storefront_shared.cart.models import Cart, CartLine, CartStatus, Product

from .products import ProductDatabase


class CartDatabase:
    """
    In-memory cart storage.

    Carts are stored by id. ``get_or_create_active_cart`` is keyed by user
    and idempotent. Line snapshots are refreshed from the catalog on read so
    totals follow current prices.
    """

    def __init__(self, product_db: ProductDatabase):
        self.product_db = product_db
        self.carts: dict[str, Cart] = {}
        self._active_cart_ids: dict[str, str] = {}

    def get_or_create_active_cart(self, user_id: str) -> Cart:
        """Get the user's active cart, creating an empty one if none exists"""
        cart_id = self._active_cart_ids.get(user_id)
        cart = self.carts.get(cart_id) if cart_id else None

        if cart is None or cart.status != CartStatus.ACTIVE:
            cart = calculations.empty_cart(cart_id=str(uuid.uuid4()), user_id=user_id)
            self.carts[cart.id] = cart
            self._active_cart_ids[user_id] = cart.id

        return self._refreshed(cart)

    def get_cart(self, cart_id: str) -> Optional[Cart]:
        """Get a cart by ID"""
        cart = self.carts.get(cart_id)
        return self._refreshed(cart) if cart else None

    def verify_ownership(self, cart_id: str, user_id: str) -> Cart:
        """Return the cart if it belongs to ``user_id``, else raise OwnershipError"""
        cart = self.carts.get(cart_id)
        if cart is None or cart.user_id != user_id:
            raise OwnershipError()
        return cart

    def get_line(self, cart_id: str, product_id: str) -> Optional[CartLine]:
        cart = self.carts.get(cart_id)
        if not cart:
            return None
        return calculations.find_line(cart.items, product_id)

    def add_line(self, cart_id: str, product: Product, quantity: int) -> Cart:
        """Insert a line, or add ``quantity`` to the existing one"""
        cart = self.carts[cart_id]
        items = calculations.add_line(cart.items, product, quantity, cart_id)
        return self._store(calculations.with_items(cart, items))

    def set_line_quantity(self, cart_id: str, product_id: str, quantity: int) -> Cart:
        """Replace a line's quantity; zero or less removes it"""
        cart = self.carts[cart_id]
        items = calculations.update_line_quantity(cart.items, product_id, quantity)
        return self._store(calculations.with_items(cart, items))

    def remove_line(self, cart_id: str, product_id: str) -> Cart:
        return self.set_line_quantity(cart_id, product_id, 0)

    def clear_lines(self, cart_id: str) -> Cart:
        """Remove all lines from a cart"""
        cart = self.carts[cart_id]
        return self._store(calculations.with_items(cart, []))

    def replace_lines(self, cart_id: str, lines: list[tuple[Product, int]]) -> Cart:
        """Swap the cart's whole line set for ``lines`` in one step"""
        cart = self.carts[cart_id]
        items: list[CartLine] = []
        for product, quantity in lines:
            items = calculations.add_line(items, product, quantity, cart_id)
        return self._store(calculations.with_items(cart, items))

    def _store(self, cart: Cart) -> Cart:
        self.carts[cart.id] = cart
        return self._refreshed(cart)

    def _refreshed(self, cart: Cart) -> Cart:
        """Refresh product snapshots from the catalog and recompute totals"""
        items = []
        for item in cart.items:
            product = self.product_db.get_product(item.product_id)
            items.append(item.model_copy(update={"product": product}) if product else item)
        return calculations.with_items(cart, items, touch=False)
