"""
Bill Owner (Customer) Model
"""
from sqlalchemy import Column, String
from app.core import Base
from .base import TimestampMixin, SoftDeleteMixin

class BillOwner(Base, TimestampMixin, SoftDeleteMixin):
    """Identified buyer, keyed by document number"""
    __tablename__ = "bill_owners"
    
    id = Column(String(255), primary_key=True)  # Document number
    celphone = Column(String(50))
    email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    identification_type = Column(String(50))  # CC, NIT
