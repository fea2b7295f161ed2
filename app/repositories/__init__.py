# Repositories Package - store ports and their SQLAlchemy adapters
from .base import ProductStore, OrderStore, BillStore
from .product_repository import SqlProductStore
from .order_repository import SqlOrderStore
from .bill_repository import SqlBillStore

__all__ = [
    "ProductStore", "OrderStore", "BillStore",
    "SqlProductStore", "SqlOrderStore", "SqlBillStore",
]
