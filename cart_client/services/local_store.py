"""Client-side persistence of the anonymous cart"""

import json
import logging

from storefront_shared.cart import calculations
from storefront_shared.cart.models import Cart

from ..core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "storefront:cart"


class LocalCartStore:
    """
    Persists one cart under a fixed storage key.

    Never raises: unreadable state loads as an empty cart and failed writes
    are logged, leaving the in-memory cart authoritative for the session.
    """

    def __init__(self, storage: KeyValueStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Cart:
        """Load the persisted cart, or an empty one if absent or invalid"""
        try:
            saved = self.storage.read(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read cart from storage: {e}")
            return calculations.empty_cart()

        if not saved:
            return calculations.empty_cart()

        try:
            parsed = json.loads(saved)
            if not isinstance(parsed, dict) or not isinstance(parsed.get("items"), list):
                raise ValueError("stored cart has no items array")
            cart = Cart.model_validate(parsed)
        except ValueError as e:
            logger.warning(f"Discarding invalid stored cart: {e}")
            return calculations.empty_cart()

        return calculations.with_items(cart, cart.items, touch=False)

    def save(self, cart: Cart) -> None:
        try:
            self.storage.write(self.key, cart.model_dump_json(by_alias=True))
        except OSError as e:
            logger.warning(f"Failed to save cart to storage: {e}")

    def clear(self) -> None:
        try:
            self.storage.delete(self.key)
        except OSError as e:
            logger.warning(f"Failed to clear cart from storage: {e}")
