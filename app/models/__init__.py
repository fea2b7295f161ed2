from .base import TimestampMixin, UUIDMixin, SoftDeleteMixin
from .product import Product
from .order import OpenBill, OpenBillProduct, OrderStatus, LineItemStatus
from .customer import BillOwner
from .bill import Bill, BillProduct, InvoiceSequence

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin", "SoftDeleteMixin",
    # Product
    "Product",
    # Order
    "OpenBill", "OpenBillProduct", "OrderStatus", "LineItemStatus",
    # Customer
    "BillOwner",
    # Bill
    "Bill", "BillProduct", "InvoiceSequence",
]
