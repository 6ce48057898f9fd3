# Database modules

from .products import CatalogReader, LocalCatalog, PRODUCTS
from .http_catalog import HttpCatalog
from .carts import CartStore, KeyedLocks
from .orders import OrderRepository

__all__ = [
    "CatalogReader",
    "LocalCatalog",
    "PRODUCTS",
    "HttpCatalog",
    "CartStore",
    "KeyedLocks",
    "OrderRepository",
]
