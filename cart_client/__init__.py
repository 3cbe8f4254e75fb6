"""Storefront cart client: local/server cart stores and login-time reconciliation"""

from .core.session import CartSession, Identity, SessionState
from .core.storage import FileStorage, MemoryStorage
from .services import CartApiClient, CartReconciler, LocalCartStore

__all__ = [
    "CartSession",
    "Identity",
    "SessionState",
    "FileStorage",
    "MemoryStorage",
    "CartApiClient",
    "CartReconciler",
    "LocalCartStore",
]
