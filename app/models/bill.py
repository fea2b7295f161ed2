"""
Bill Models
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Text, Uuid, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.core import Base
from .base import UUIDMixin, TimestampMixin, SoftDeleteMixin

JSONType = JSON().with_variant(JSONB(), "postgresql")

class Bill(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """Frozen financial snapshot of a paid order or an electronic invoice request"""
    __tablename__ = "bills"
    
    open_bill_id = Column(Uuid(as_uuid=True), ForeignKey("open_bills.id"))
    customer_id = Column(String(255), ForeignKey("bill_owners.id"))
    
    # Amounts
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    discount_amount = Column(Numeric(14, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    pay_amount = Column(Numeric(14, 2), default=0, nullable=False)
    vat = Column(Numeric(14, 2), default=0, nullable=False)
    ico = Column(Numeric(14, 2), default=0, nullable=False)
    tip = Column(Numeric(14, 2), default=0, nullable=False)
    
    payment_code = Column(String(50), nullable=False)  # cash, credit_card, ...
    document_url = Column(Text)
    
    # Electronic invoice numbering and provider confirmation
    prefix = Column(String(20))
    consecutive = Column(Integer)
    cufe = Column(String(255))
    tascode = Column(String(255), index=True)
    
    # Relationships
    products = relationship("BillProduct", back_populates="bill", cascade="all, delete-orphan")
    customer = relationship("BillOwner")

class BillProduct(Base, UUIDMixin, TimestampMixin):
    """Billed line, created once with the bill"""
    __tablename__ = "bill_products"
    
    bill_id = Column(Uuid(as_uuid=True), ForeignKey("bills.id"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    
    description = Column(Text)
    brand = Column(String(255))
    model = Column(String(255))
    code = Column(String(255))  # Product SKU
    
    # Decimal amounts kept as strings inside these documents
    allowance = Column(JSONType)
    taxes = Column(JSONType)
    
    # Relationships
    bill = relationship("Bill", back_populates="products")

class InvoiceSequence(Base):
    """Last electronic invoice consecutive issued per prefix"""
    __tablename__ = "invoice_sequences"
    
    prefix = Column(String(20), primary_key=True)
    last_consecutive = Column(Integer, default=0, nullable=False)
