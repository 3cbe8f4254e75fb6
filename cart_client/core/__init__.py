# Core modules

from .config import settings, get_settings, Settings
from .session import CartSession, Identity, SessionState
from .storage import FileStorage, KeyValueStorage, MemoryStorage, StorageFull

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartSession",
    "Identity",
    "SessionState",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StorageFull",
]
