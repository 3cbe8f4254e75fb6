# Database modules

from .products import product_db, ProductDatabase
from .carts import CartDatabase

cart_db = CartDatabase(product_db)


def get_product_db() -> ProductDatabase:
    """Dependency: catalog storage"""
    return product_db


def get_cart_db() -> CartDatabase:
    """Dependency: cart storage"""
    return cart_db


__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "get_product_db",
    "get_cart_db",
]
