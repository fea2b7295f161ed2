"""
Product Catalog Model
"""
from sqlalchemy import Column, String, Numeric, Integer, Text
from app.core import Base
from .base import UUIDMixin, TimestampMixin, SoftDeleteMixin

class Product(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """Sellable item"""
    __tablename__ = "products"
    
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    sku = Column(String(255), nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)  # Pinned to 1, reserved for price split tests
    
    # Prices: unit_price excludes taxes, total_price_with_taxes is the shelf price
    unit_price = Column(Numeric(14, 2), nullable=False)
    total_price_with_taxes = Column(Numeric(14, 2), nullable=False)
    
    # Rates as decimals: 0.19 = 19%. Scale fits any percentage with up to 6 places
    vat = Column(Numeric(16, 8), nullable=False, default=0)
    ico = Column(Numeric(16, 8), nullable=False, default=0)
    
    description = Column(Text)
    brand = Column(String(255))
    model = Column(String(255))
