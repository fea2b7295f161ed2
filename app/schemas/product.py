"""
Product Schemas
"""
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID
from decimal import Decimal

class ProductCreate(BaseModel):
    name: str = ""
    category: str = ""
    sku: str = ""
    # Prices and rates arrive as decimal strings ("11900", "19")
    total_price_with_taxes: str = ""
    vat: str = ""
    ico: str = ""
    taxes_format: str = "percentage"  # percentage, fixed (fixed is rejected)
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None

    @field_validator("total_price_with_taxes", "vat", "ico", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value

class ProductUpdate(ProductCreate):
    """Full replace of price, tax and metadata fields"""
    pass

class ProductResponse(BaseModel):
    id: UUID
    name: str
    category: str
    sku: str
    version: int
    unit_price: Decimal
    total_price_with_taxes: Decimal
    vat: Decimal
    ico: Decimal
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
