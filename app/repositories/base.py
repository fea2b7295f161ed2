"""
Store Ports - Abstract persistence interfaces used by the services

Each port has one SQLAlchemy adapter in this package. Tests swap in
in-memory implementations.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from app.schemas.product import ProductResponse
from app.schemas.order import OrderResponse, OrderProductItem
from app.schemas.invoice import BillResponse


class ProductStore(ABC):
    """Product catalog persistence. Soft-deleted products are invisible to every read"""

    @abstractmethod
    def create(self, product: ProductResponse) -> ProductResponse:
        pass

    @abstractmethod
    def update(self, product_id: UUID, product: ProductResponse) -> ProductResponse:
        pass

    @abstractmethod
    def soft_delete(self, product_id: UUID) -> None:
        pass

    @abstractmethod
    def find_all(self) -> List[ProductResponse]:
        pass

    @abstractmethod
    def find_by_id(self, product_id: UUID) -> Optional[ProductResponse]:
        pass

    @abstractmethod
    def find_by_ids(self, product_ids: Sequence[UUID]) -> List[ProductResponse]:
        """Return the non-deleted products among the distinct ids requested"""
        pass


class OrderStore(ABC):
    """Open bill persistence"""

    @abstractmethod
    def create(self, order: OrderResponse, items: Sequence[OrderProductItem]) -> OrderResponse:
        """Insert the order and its line items in one transaction"""
        pass

    @abstractmethod
    def find_by_id(self, order_id: UUID) -> Optional[OrderResponse]:
        """Order with its ACTIVE line items, or None"""
        pass

    @abstractmethod
    def update(self, order: OrderResponse, items: Sequence[OrderProductItem]) -> OrderResponse:
        """
        Save new totals and reconcile line items in one transaction:
        requested and existing -> restore + set quantity, requested only -> insert,
        existing only -> REMOVED.
        """
        pass


class BillStore(ABC):
    """Bill persistence"""

    @abstractmethod
    def create(self, bill, prefix: Optional[str] = None) -> BillResponse:
        """
        Insert the bill, its products and the customer upsert in one transaction.
        Assigns the next consecutive for `prefix` when given and marks the
        source open bill as PAID when the bill has one.
        """
        pass

    @abstractmethod
    def find_by_id(self, bill_id: UUID) -> Optional[BillResponse]:
        pass

    @abstractmethod
    def apply_confirmation(self, bill_id: UUID, cufe: str, tascode: str) -> None:
        """Idempotent: writing the same codes twice leaves the same row"""
        pass

    @abstractmethod
    def apply_document_url(self, bill_id: UUID, document_url: str) -> None:
        pass
