"""
Invoice Service - Electronic Invoice Issuing

Local rows are committed before the gateway is called. A failed call leaves
the bill stored without CUFE/tascode; a successful one is recorded through a
separate idempotent update keyed by bill id.
"""
import logging
from uuid import UUID

from app.core.errors import (
    AppError, CustomerRequired, ProductNotFound, ProductsCannotBeEmpty,
    BillNotFound, BillCreationFailed, InvalidRequest,
)
from app.integrations.base import InvoiceProvider, InvoiceSubmission
from app.repositories.base import BillStore, ProductStore
from app.schemas.invoice import BillResponse, ElectronicInvoiceCreate, InvoiceStatusResponse
from .billing import new_bill_product, bill_from_electronic_invoice

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for issuing electronic invoices through the gateway"""

    def __init__(
        self,
        product_store: ProductStore,
        bill_store: BillStore,
        provider: InvoiceProvider,
        prefix: str,
    ):
        self.product_store = product_store
        self.bill_store = bill_store
        self.provider = provider
        self.prefix = prefix

    async def create_electronic_invoice(self, invoice: ElectronicInvoiceCreate) -> BillResponse:
        """Build and store a bill from the request, then issue it"""
        if not invoice.items:
            raise ProductsCannotBeEmpty()
        if invoice.customer is None:
            raise CustomerRequired()

        product_ids = [item.product_id for item in invoice.items]
        products = {p.id: p for p in self.product_store.find_by_ids(product_ids)}

        bill_products = []
        for item in invoice.items:
            product = products.get(item.product_id)
            if product is None:
                logger.warning(f"Product {item.product_id} not found for electronic invoice")
                raise ProductNotFound(field_value=str(item.product_id))
            bill_products.append(new_bill_product(
                product_id=product.id,
                quantity=item.quantity,
                unit_price=product.unit_price,
                code=product.sku,
                vat=product.vat,
                ico=product.ico,
                allowance=item.allowance,
                description=product.description,
                brand=product.brand,
                model=product.model,
            ))

        bill = bill_from_electronic_invoice(invoice, bill_products)

        try:
            stored = self.bill_store.create(bill, prefix=self.prefix)
        except Exception as e:
            logger.error(f"Failed to store bill for electronic invoice: {e}")
            raise BillCreationFailed.wrap(e) from e

        logger.info(f"Bill created: {stored.id} ({stored.prefix}{stored.consecutive})")
        return await self.submit_bill(stored)

    async def submit_bill(self, bill: BillResponse) -> BillResponse:
        """Issue an already stored bill and record the gateway confirmation"""
        if bill.customer is None:
            raise CustomerRequired(field_value=str(bill.id))

        submission = InvoiceSubmission.from_bill(bill)
        try:
            confirmation = await self.provider.submit(submission)
        except AppError as e:
            logger.error(f"Electronic invoice for bill {bill.id} failed: {e}")
            raise

        self.bill_store.apply_confirmation(bill.id, confirmation.cufe, confirmation.tascode)
        logger.info(f"Invoice confirmed for bill {bill.id}: tascode={confirmation.tascode}")
        return bill.model_copy(update={"cufe": confirmation.cufe, "tascode": confirmation.tascode})

    async def get_invoice_status(self, bill_id: UUID) -> InvoiceStatusResponse:
        """Poll the gateway for an issued bill, storing the PDF URL once available"""
        bill = self.get_bill(bill_id)
        if not bill.tascode:
            raise InvalidRequest("bill has not been issued as an electronic invoice", str(bill_id))

        status = await self.provider.get_status(bill.tascode)
        if status.pdf_url and status.pdf_url != bill.document_url:
            self.bill_store.apply_document_url(bill.id, status.pdf_url)

        return InvoiceStatusResponse(
            bill_id=bill.id,
            tascode=status.tascode,
            cufe=status.cufe or bill.cufe,
            document=status.document,
            process=status.process,
            retries=status.retries,
            pdf_url=status.pdf_url,
            url=status.url,
        )

    def get_bill(self, bill_id: UUID) -> BillResponse:
        bill = self.bill_store.find_by_id(bill_id)
        if bill is None:
            raise BillNotFound(field_value=str(bill_id))
        return bill
