# Service modules

from .cart import CartService, get_cart_service

__all__ = ["CartService", "get_cart_service"]
