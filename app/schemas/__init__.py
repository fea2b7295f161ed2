# Pydantic Schemas Package
from .product import ProductCreate, ProductUpdate, ProductResponse
from .order import OrderCreate, OrderUpdate, OrderPay, OrderProductItem, OrderItemResponse, OrderResponse
from .invoice import (
    PaymentCode, DocumentType, TaxCode, Customer,
    InvoiceAllowance, InvoiceTax, InvoiceItem, InvoiceAmounts, ElectronicInvoiceCreate,
    BillProductResponse, BillResponse, InvoiceStatusResponse,
)

__all__ = [
    "ProductCreate", "ProductUpdate", "ProductResponse",
    "OrderCreate", "OrderUpdate", "OrderPay", "OrderProductItem", "OrderItemResponse", "OrderResponse",
    "PaymentCode", "DocumentType", "TaxCode", "Customer",
    "InvoiceAllowance", "InvoiceTax", "InvoiceItem", "InvoiceAmounts", "ElectronicInvoiceCreate",
    "BillProductResponse", "BillResponse", "InvoiceStatusResponse",
]
