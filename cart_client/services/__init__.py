# Service modules

from .cart_api import CartApiClient
from .local_store import CART_STORAGE_KEY, LocalCartStore
from .reconciler import CartReconciler

__all__ = ["CartApiClient", "CART_STORAGE_KEY", "LocalCartStore", "CartReconciler"]
