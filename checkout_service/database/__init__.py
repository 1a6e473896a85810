# Cart persistence

from .storage import CartStorage, MemoryStorage, FileStorage
from .carts import cart_db, CartDatabase, CartStore

__all__ = [
    "CartStorage",
    "MemoryStorage",
    "FileStorage",
    "cart_db",
    "CartDatabase",
    "CartStore",
]
