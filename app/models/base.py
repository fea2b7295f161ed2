"""
Base Model Mixins
"""
from sqlalchemy import Column, DateTime, Uuid, func
import uuid

class UUIDMixin:
    """Mixin for UUID primary key"""
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

class SoftDeleteMixin:
    """Mixin for soft-deleted rows (excluded from reads while deleted_at is set)"""
    deleted_at = Column(DateTime(timezone=True))
