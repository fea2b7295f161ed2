"""
Bill Aggregate - Immutable snapshot of what the customer pays

A bill is built exactly once, either from a paid open order or from an
inbound electronic invoice request, and is never mutated afterwards. The
provider confirmation (CUFE, tascode) is attached later by the bill store
through a targeted update, not through this object.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Sequence, Tuple
from uuid import UUID, uuid4

from app.core.errors import ProductsCannotBeEmpty, InvalidAllowanceAmount, InvalidTaxAmount
from app.schemas.invoice import (
    Customer, ElectronicInvoiceCreate, InvoiceAllowance, InvoiceTax, PaymentCode, TaxCode,
)
from app.schemas.order import OrderResponse
from .pricing import parse_decimal, round_cents, HUNDRED

ZERO = Decimal("0")


def format_amount(value: Decimal) -> str:
    """Fixed 2-decimal string for fiscal documents"""
    return str(round_cents(Decimal(value)))


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BillProduct:
    product_id: UUID
    quantity: int
    unit_price: Decimal
    code: str
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    allowance: Tuple[InvoiceAllowance, ...] = ()
    taxes: Tuple[InvoiceTax, ...] = ()

    @property
    def base_amount(self) -> Decimal:
        return self.unit_price * self.quantity


def new_bill_product(
    product_id: UUID,
    quantity: int,
    unit_price: Decimal,
    code: str,
    vat: Decimal,
    ico: Decimal,
    allowance: Sequence[InvoiceAllowance] = (),
    description: Optional[str] = None,
    brand: Optional[str] = None,
    model: Optional[str] = None,
) -> BillProduct:
    """Build a billed line, computing one tax entry per positive rate (rates are decimals)"""
    base_amount = Decimal(unit_price) * quantity
    taxes = []

    if vat > 0:
        taxes.append(InvoiceTax(
            tax_code=TaxCode.VAT,
            tax_amount=format_amount(base_amount * vat),
            percent=format_amount(vat * HUNDRED),
        ))

    if ico > 0:
        taxes.append(InvoiceTax(
            tax_code=TaxCode.ICO,
            tax_amount=format_amount(base_amount * ico),
            percent=format_amount(ico * HUNDRED),
        ))

    return BillProduct(
        product_id=product_id,
        quantity=quantity,
        unit_price=Decimal(unit_price),
        code=code,
        description=description,
        brand=brand,
        model=model,
        allowance=tuple(allowance),
        taxes=tuple(taxes),
    )


@dataclass(frozen=True)
class Bill:
    total_amount: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    pay_amount: Decimal
    vat: Decimal
    ico: Decimal
    tip: Decimal
    payment_code: PaymentCode
    products: Tuple[BillProduct, ...]
    customer: Optional[Customer] = None
    document_url: Optional[str] = None
    open_bill_id: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


def bill_from_electronic_invoice(invoice: ElectronicInvoiceCreate, products: Sequence[BillProduct]) -> Bill:
    """
    Build a bill from an inbound electronic invoice request.

    Trusts the per-line tax entries (already computed from each product's
    own rates) instead of the flat order-level rates.
    """
    if not products:
        raise ProductsCannotBeEmpty()

    total_amount = ZERO
    discount_amount = ZERO
    total_vat = ZERO
    total_ico = ZERO

    for product in products:
        total_amount += product.base_amount

        for allowance in product.allowance:
            amount = parse_decimal(allowance.amount)
            if amount is None:
                raise InvalidAllowanceAmount(f"invalid allowance amount: {allowance.amount}", allowance.amount)
            discount_amount += amount

        for tax in product.taxes:
            amount = parse_decimal(tax.tax_amount)
            if amount is None:
                raise InvalidTaxAmount(f"invalid tax amount: {tax.tax_amount}", tax.tax_amount)
            if tax.tax_code == TaxCode.VAT:
                total_vat += amount
            elif tax.tax_code == TaxCode.ICO:
                total_ico += amount

    tax_amount = total_vat + total_ico

    return Bill(
        total_amount=total_amount,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        pay_amount=total_amount + tax_amount - discount_amount,
        vat=total_vat,
        ico=total_ico,
        tip=ZERO,
        payment_code=invoice.payment_code,
        products=tuple(products),
        customer=invoice.customer,
    )


def bill_from_open_bill(
    order: OrderResponse,
    products: Sequence[BillProduct],
    payment_code: PaymentCode = PaymentCode.CASH,
    customer: Optional[Customer] = None,
    document_url: Optional[str] = None,
) -> Bill:
    """Freeze an open order into a bill using the totals already computed on the order"""
    tax_amount = order.vat + order.ico
    return Bill(
        total_amount=order.total_price,
        discount_amount=ZERO,
        tax_amount=tax_amount,
        pay_amount=order.total_price + tax_amount,
        vat=order.vat,
        ico=order.ico,
        tip=order.tip,
        payment_code=payment_code,
        products=tuple(products),
        customer=customer,
        document_url=document_url or order.document_url,
        open_bill_id=order.id,
    )
