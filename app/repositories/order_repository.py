"""
Order Repository - SQLAlchemy adapter for open bills and their line items
"""
from sqlalchemy.orm import Session
from typing import Optional, Sequence
from uuid import UUID

from app.models import OpenBill, OpenBillProduct, LineItemStatus
from app.schemas.order import OrderResponse, OrderItemResponse, OrderProductItem
from .base import OrderStore


class SqlOrderStore(OrderStore):

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def to_response(row: OpenBill) -> OrderResponse:
        active = [item for item in row.items if item.status == LineItemStatus.ACTIVE.value]
        return OrderResponse(
            id=row.id,
            temporal_identifier=row.temporal_identifier,
            status=row.status,
            total_price=row.total_price,
            vat=row.vat,
            ico=row.ico,
            tip=row.tip,
            document_url=row.document_url,
            items=[OrderItemResponse(product_id=item.product_id, quantity=item.quantity) for item in active],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _get_row(self, order_id: UUID) -> Optional[OpenBill]:
        return self.db.query(OpenBill).filter(
            OpenBill.id == order_id,
            OpenBill.deleted_at.is_(None),
        ).first()

    def create(self, order: OrderResponse, items: Sequence[OrderProductItem]) -> OrderResponse:
        row = OpenBill(
            id=order.id,
            temporal_identifier=order.temporal_identifier,
            status=order.status,
            total_price=order.total_price,
            vat=order.vat,
            ico=order.ico,
            tip=order.tip,
            document_url=order.document_url,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        for item in items:
            row.items.append(OpenBillProduct(
                product_id=item.product_id,
                quantity=item.quantity,
                status=LineItemStatus.ACTIVE.value,
            ))

        try:
            self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(row)
        return self.to_response(row)

    def find_by_id(self, order_id: UUID) -> Optional[OrderResponse]:
        row = self._get_row(order_id)
        return self.to_response(row) if row else None

    def update(self, order: OrderResponse, items: Sequence[OrderProductItem]) -> OrderResponse:
        row = self._get_row(order.id)
        if not row:
            raise LookupError(f"open bill {order.id} not found")

        try:
            row.total_price = order.total_price
            row.vat = order.vat
            row.ico = order.ico
            row.tip = order.tip
            row.document_url = order.document_url
            row.updated_at = order.updated_at

            existing = {line.product_id: line for line in row.items}
            requested = {item.product_id: item.quantity for item in items}

            for product_id, quantity in requested.items():
                line = existing.get(product_id)
                if line is not None:
                    # Restore a removed line or adjust an active one
                    if line.status != LineItemStatus.ACTIVE.value:
                        line.status = LineItemStatus.ACTIVE.value
                    if line.quantity != quantity:
                        line.quantity = quantity
                else:
                    row.items.append(OpenBillProduct(
                        product_id=product_id,
                        quantity=quantity,
                        status=LineItemStatus.ACTIVE.value,
                    ))

            for product_id, line in existing.items():
                if product_id not in requested and line.status == LineItemStatus.ACTIVE.value:
                    line.status = LineItemStatus.REMOVED.value

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(row)
        return self.to_response(row)
