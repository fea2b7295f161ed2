"""
Electronic Invoice & Bill Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal
import enum


class PaymentCode(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    TRANSFER_DEBIT_BANK = "transfer_debit_bank"
    TRANSFER_CREDIT_BANK = "transfer_credit_bank"
    TRANSFER_DEBIT_INTERBANK = "transfer_debit_interbank"


class DocumentType(str, enum.Enum):
    CC = "CC"    # National identification number
    NIT = "NIT"


class TaxCode(str, enum.Enum):
    VAT = "VAT"
    ICO = "ICO"


def _amount_to_str(value):
    # Amounts travel as exact strings; accept JSON numbers too
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return value


class Customer(BaseModel):
    document_number: str = Field(alias="id", min_length=1)
    document_type: DocumentType
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)

    class Config:
        populate_by_name = True


class InvoiceAllowance(BaseModel):
    charge: str = "false"
    reason_code: str = Field("", alias="reasonCode")
    description: str = ""
    base_amount: str = Field("0", alias="baseAmount")
    amount: str = "0"

    class Config:
        populate_by_name = True

    @field_validator("base_amount", "amount", "charge", mode="before")
    @classmethod
    def coerce_amounts(cls, value):
        return _amount_to_str(value)


class InvoiceTax(BaseModel):
    tax_code: TaxCode = Field(alias="taxCode")
    tax_amount: str = Field(alias="taxAmount")
    percent: str

    class Config:
        populate_by_name = True

    @field_validator("tax_amount", "percent", mode="before")
    @classmethod
    def coerce_amounts(cls, value):
        return _amount_to_str(value)


class InvoiceItem(BaseModel):
    product_id: UUID
    quantity: int = Field(ge=1)
    allowance: List[InvoiceAllowance] = []
    # Accepted for request compatibility; line taxes are recomputed from the product rates
    taxes: List[InvoiceTax] = []


class InvoiceAmounts(BaseModel):
    total_amount: str = Field("0", alias="totalAmount")
    discount_amount: str = Field("0", alias="discountAmount")
    tax_amount: str = Field("0", alias="taxAmount")
    pay_amount: str = Field("0", alias="payAmount")

    class Config:
        populate_by_name = True

    @field_validator("total_amount", "discount_amount", "tax_amount", "pay_amount", mode="before")
    @classmethod
    def coerce_amounts(cls, value):
        return _amount_to_str(value)


class ElectronicInvoiceCreate(BaseModel):
    """Inbound electronic invoice request"""
    # Ignored: the consecutive comes from the prefix sequence and the issue
    # date/time from the server clock when the invoice is submitted
    consecutive: Optional[int] = None
    issue_date: Optional[str] = None
    issue_time: Optional[str] = None
    payment_code: PaymentCode = PaymentCode.CASH
    customer: Optional[Customer] = None
    # Ignored: amounts are totalled from the bill lines
    amounts: InvoiceAmounts = Field(default_factory=InvoiceAmounts)
    items: List[InvoiceItem] = []


class BillProductResponse(BaseModel):
    product_id: UUID
    quantity: int
    unit_price: Decimal
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    code: str
    allowance: List[InvoiceAllowance] = []
    taxes: List[InvoiceTax] = []

    class Config:
        from_attributes = True
        populate_by_name = True


class BillResponse(BaseModel):
    id: UUID
    open_bill_id: Optional[UUID] = None
    total_amount: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    pay_amount: Decimal
    vat: Decimal
    ico: Decimal
    tip: Decimal
    payment_code: PaymentCode
    document_url: Optional[str] = None
    customer: Optional[Customer] = None
    prefix: Optional[str] = None
    consecutive: Optional[int] = None
    cufe: Optional[str] = None
    tascode: Optional[str] = None
    products: List[BillProductResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceStatusResponse(BaseModel):
    bill_id: UUID
    tascode: str
    cufe: Optional[str] = None
    document: Optional[str] = None
    process: Optional[int] = None
    retries: Optional[int] = None
    pdf_url: Optional[str] = None
    url: Optional[str] = None
