"""
Open Bill (Order) Models
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from app.core import Base
from .base import UUIDMixin, TimestampMixin, SoftDeleteMixin

class OrderStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PAID = "PAID"


class LineItemStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    REMOVED = "REMOVED"


class OpenBill(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """Open tab while the customer is still ordering"""
    __tablename__ = "open_bills"
    
    temporal_identifier = Column(String(255), nullable=False)
    status = Column(String(20), default=OrderStatus.DRAFT.value, nullable=False, index=True)  # DRAFT, PAID
    
    # Amounts
    total_price = Column(Numeric(14, 2), default=0, nullable=False)
    vat = Column(Numeric(14, 2), default=0, nullable=False)
    ico = Column(Numeric(14, 2), default=0, nullable=False)
    tip = Column(Numeric(14, 2), default=0, nullable=False)
    
    document_url = Column(Text)
    
    # Relationships
    items = relationship("OpenBillProduct", back_populates="open_bill", cascade="all, delete-orphan",
                         order_by="OpenBillProduct.created_at")

class OpenBillProduct(Base, UUIDMixin, TimestampMixin):
    """Order line. Never hard deleted: removal flips status to REMOVED"""
    __tablename__ = "open_bills_products"
    
    open_bill_id = Column(Uuid(as_uuid=True), ForeignKey("open_bills.id"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    status = Column(String(20), default=LineItemStatus.ACTIVE.value, nullable=False)  # ACTIVE, REMOVED
    
    # Relationships
    open_bill = relationship("OpenBill", back_populates="items")
    
    __table_args__ = (
        UniqueConstraint("open_bill_id", "product_id", name="uq_open_bill_product"),
    )
