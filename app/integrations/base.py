"""
Base Invoice Provider - Abstract base class for electronic invoicing gateways
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any
import logging

from app.schemas.invoice import BillResponse, BillProductResponse, Customer, PaymentCode

logger = logging.getLogger(__name__)


@dataclass
class InvoiceSubmission:
    """
    Everything the gateway needs to issue one electronic invoice
    """
    prefix: str
    consecutive: int
    payment_code: PaymentCode
    customer: Optional[Customer]

    # Amounts
    total_amount: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    pay_amount: Decimal

    items: List[BillProductResponse] = field(default_factory=list)
    issued_at: datetime = field(default_factory=datetime.now)  # Server local time

    @classmethod
    def from_bill(cls, bill: BillResponse, issued_at: Optional[datetime] = None) -> "InvoiceSubmission":
        submission = cls(
            prefix=bill.prefix or "",
            consecutive=bill.consecutive or 0,
            payment_code=bill.payment_code,
            customer=bill.customer,
            total_amount=bill.total_amount,
            discount_amount=bill.discount_amount,
            tax_amount=bill.tax_amount,
            pay_amount=bill.pay_amount,
            items=list(bill.products),
        )
        if issued_at is not None:
            submission.issued_at = issued_at
        return submission


@dataclass
class InvoiceConfirmation:
    """Gateway acknowledgement of an accepted invoice"""
    tascode: str
    cufe: str
    int_id: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DocumentStatus:
    """Processing state of an issued invoice"""
    tascode: str
    cufe: Optional[str] = None
    document: Optional[str] = None
    process: Optional[int] = None
    retries: Optional[int] = None
    pdf_url: Optional[str] = None
    url: Optional[str] = None
    attached: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class InvoiceProvider(ABC):
    """
    Abstract base class for electronic invoicing gateways
    """
    PROVIDER_NAME: str = "base"

    @abstractmethod
    async def submit(self, submission: InvoiceSubmission) -> InvoiceConfirmation:
        """
        Issue an invoice. Raises CustomerRequired before any call when the
        submission has no customer, ProviderHTTPError / ProviderRejected otherwise.
        """
        pass

    @abstractmethod
    async def get_status(self, tascode: str) -> DocumentStatus:
        """
        Poll the processing state of an issued invoice
        """
        pass

    # ========== Utilities ==========

    def _log_api_call(self, method: str, endpoint: str, status_code: int):
        """Log API call for debugging"""
        logger.info(f"[{self.PROVIDER_NAME}] {method} {endpoint} -> {status_code}")
