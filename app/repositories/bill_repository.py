"""
Bill Repository - SQLAlchemy adapter for bills, billed products and bill owners
"""
import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.models import (
    Bill as BillRow, BillProduct as BillProductRow, BillOwner, InvoiceSequence,
    OpenBill, OrderStatus,
)
from app.schemas.invoice import BillResponse, BillProductResponse, Customer
from app.services.billing import Bill
from .base import BillStore

logger = logging.getLogger(__name__)


class SqlBillStore(BillStore):

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def to_response(row: BillRow) -> BillResponse:
        customer = None
        if row.customer is not None:
            customer = Customer(
                document_number=row.customer.id,
                document_type=row.customer.identification_type,
                name=row.customer.name,
                email=row.customer.email,
            )

        return BillResponse(
            id=row.id,
            open_bill_id=row.open_bill_id,
            total_amount=row.total_amount,
            discount_amount=row.discount_amount,
            tax_amount=row.tax_amount,
            pay_amount=row.pay_amount,
            vat=row.vat,
            ico=row.ico,
            tip=row.tip,
            payment_code=row.payment_code,
            document_url=row.document_url,
            customer=customer,
            prefix=row.prefix,
            consecutive=row.consecutive,
            cufe=row.cufe,
            tascode=row.tascode,
            products=[
                BillProductResponse(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    description=item.description,
                    brand=item.brand,
                    model=item.model,
                    code=item.code or "",
                    allowance=item.allowance or [],
                    taxes=item.taxes or [],
                )
                for item in row.products
            ],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _upsert_owner(self, customer: Customer) -> str:
        """Insert the buyer or refresh name/email/identification type of a repeat one"""
        owner = self.db.get(BillOwner, customer.document_number)
        if owner is None:
            owner = BillOwner(
                id=customer.document_number,
                email=customer.email,
                name=customer.name,
                identification_type=customer.document_type.value,
            )
            self.db.add(owner)
        else:
            owner.email = customer.email
            owner.name = customer.name
            owner.identification_type = customer.document_type.value
        return owner.id

    def _next_consecutive(self, prefix: str) -> int:
        sequence = self.db.query(InvoiceSequence).filter(
            InvoiceSequence.prefix == prefix
        ).with_for_update().first()
        if sequence is None:
            sequence = InvoiceSequence(prefix=prefix, last_consecutive=0)
            self.db.add(sequence)
        sequence.last_consecutive = (sequence.last_consecutive or 0) + 1
        return sequence.last_consecutive

    def create(self, bill: Bill, prefix: Optional[str] = None) -> BillResponse:
        try:
            customer_id = self._upsert_owner(bill.customer) if bill.customer else None

            row = BillRow(
                id=bill.id,
                open_bill_id=bill.open_bill_id,
                customer_id=customer_id,
                total_amount=bill.total_amount,
                discount_amount=bill.discount_amount,
                tax_amount=bill.tax_amount,
                pay_amount=bill.pay_amount,
                vat=bill.vat,
                ico=bill.ico,
                tip=bill.tip,
                payment_code=bill.payment_code.value,
                document_url=bill.document_url,
                created_at=bill.created_at,
                updated_at=bill.updated_at,
            )
            if prefix:
                row.prefix = prefix
                row.consecutive = self._next_consecutive(prefix)

            for product in bill.products:
                row.products.append(BillProductRow(
                    product_id=product.product_id,
                    quantity=product.quantity,
                    unit_price=product.unit_price,
                    description=product.description,
                    brand=product.brand,
                    model=product.model,
                    code=product.code,
                    allowance=[a.model_dump(mode="json", by_alias=True) for a in product.allowance],
                    taxes=[t.model_dump(mode="json", by_alias=True) for t in product.taxes],
                ))

            if bill.open_bill_id is not None:
                order = self.db.query(OpenBill).filter(
                    OpenBill.id == bill.open_bill_id
                ).with_for_update().first()
                if order is None or order.status != OrderStatus.DRAFT.value:
                    raise LookupError(f"open bill {bill.open_bill_id} is not an open draft")
                order.status = OrderStatus.PAID.value
                if bill.document_url:
                    order.document_url = bill.document_url

            self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(row)
        logger.info(f"Bill {row.id} stored (prefix={row.prefix}, consecutive={row.consecutive})")
        return self.to_response(row)

    def find_by_id(self, bill_id: UUID) -> Optional[BillResponse]:
        row = self.db.query(BillRow).filter(
            BillRow.id == bill_id,
            BillRow.deleted_at.is_(None),
        ).first()
        return self.to_response(row) if row else None

    def _update_fields(self, bill_id: UUID, values: dict) -> None:
        values[BillRow.updated_at] = datetime.now(timezone.utc)
        try:
            self.db.query(BillRow).filter(BillRow.id == bill_id).update(values, synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def apply_confirmation(self, bill_id: UUID, cufe: str, tascode: str) -> None:
        self._update_fields(bill_id, {BillRow.cufe: cufe, BillRow.tascode: tascode})

    def apply_document_url(self, bill_id: UUID, document_url: str) -> None:
        self._update_fields(bill_id, {BillRow.document_url: document_url})
