# Services Package
from .product_service import ProductService
from .order_service import OrderService
from .invoice_service import InvoiceService

__all__ = [
    "ProductService",
    "OrderService",
    "InvoiceService",
]
