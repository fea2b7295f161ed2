"""
Order (Open Bill) Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from .product import ProductResponse
from .invoice import Customer, PaymentCode

class OrderCreate(BaseModel):
    product_ids: List[UUID] = []

class OrderProductItem(BaseModel):
    product_id: UUID
    quantity: int = Field(1, ge=1)

class OrderUpdate(BaseModel):
    products: List[OrderProductItem] = []

class OrderPay(BaseModel):
    payment_code: PaymentCode = PaymentCode.CASH
    customer: Optional[Customer] = None
    document_url: Optional[str] = None

class OrderItemResponse(BaseModel):
    product_id: UUID
    quantity: int

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: UUID
    temporal_identifier: str
    status: str
    total_price: Decimal
    vat: Decimal
    ico: Decimal
    tip: Decimal
    document_url: Optional[str] = None
    items: List[OrderItemResponse] = []
    products: List[ProductResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
