from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.errors import (
    BillCreationFailed, BillNotFound, CustomerRequired, InvalidRequest, ProductNotFound,
    ProductsCannotBeEmpty, ProviderRejected,
)
from app.schemas.invoice import ElectronicInvoiceCreate, InvoiceAmounts, InvoiceTax, PaymentCode, TaxCode
from app.services.invoice_service import InvoiceService

from fakes import InMemoryProductStore, InMemoryBillStore, FakeInvoiceProvider, make_product


@pytest.fixture
def p1():
    return make_product(unit_price="100", vat="0.19", ico="0", sku="P1", name="Agua", brand="Casa")


@pytest.fixture
def p2():
    return make_product(unit_price="50", vat="0", ico="0.08", sku="P2", name="Bandeja")


@pytest.fixture
def bill_store():
    return InMemoryBillStore()


@pytest.fixture
def provider():
    return FakeInvoiceProvider()


@pytest.fixture
def service(p1, p2, bill_store, provider):
    return InvoiceService(InMemoryProductStore([p1, p2]), bill_store, provider, prefix="SETP")


def _payload(*items, customer=True):
    data = {
        "payment_code": "debit_card",
        "items": [
            {
                "product_id": str(product.id),
                "quantity": quantity,
                "allowance": [{"amount": "5", "baseAmount": "100", "reasonCode": "01"}] if with_allowance else [],
            }
            for product, quantity, with_allowance in items
        ],
    }
    if customer:
        data["customer"] = {"id": "900123", "document_type": "NIT", "name": "ACME SAS", "email": "f@acme.co"}
    return ElectronicInvoiceCreate.model_validate(data)


@pytest.mark.anyio
async def test_create_electronic_invoice(service, bill_store, provider, p1, p2):
    bill = await service.create_electronic_invoice(_payload((p1, 2, True), (p2, 1, False)))

    assert bill.total_amount == Decimal("250")
    assert bill.discount_amount == Decimal("5")
    assert bill.vat == Decimal("38.00")
    assert bill.ico == Decimal("4.00")
    assert bill.pay_amount == Decimal("287.00")
    assert bill.payment_code == PaymentCode.DEBIT_CARD
    assert (bill.prefix, bill.consecutive) == ("SETP", 1)
    assert (bill.cufe, bill.tascode) == ("CUFE-SETP1", "TAS-1")

    # Lines keep request order and product data
    assert [p.product_id for p in bill.products] == [p1.id, p2.id]
    assert bill.products[0].code == "P1"
    assert bill.products[0].brand == "Casa"

    assert len(provider.submissions) == 1
    assert provider.submissions[0].customer.document_number == "900123"
    assert bill_store.confirmations == [(bill.id, "CUFE-SETP1", "TAS-1")]
    assert bill_store.bills[bill.id].tascode == "TAS-1"


@pytest.mark.anyio
async def test_requires_items(service, provider):
    with pytest.raises(ProductsCannotBeEmpty):
        await service.create_electronic_invoice(_payload())
    assert provider.submissions == []


@pytest.mark.anyio
async def test_requires_customer(service, bill_store, p1):
    with pytest.raises(CustomerRequired):
        await service.create_electronic_invoice(_payload((p1, 1, False), customer=False))
    assert bill_store.bills == {}


@pytest.mark.anyio
async def test_unknown_product(service, bill_store, p1):
    ghost = make_product(sku="GHOST")

    with pytest.raises(ProductNotFound):
        await service.create_electronic_invoice(_payload((p1, 1, False), (ghost, 1, False)))
    assert bill_store.bills == {}


@pytest.mark.anyio
async def test_store_failure(service, bill_store, provider, p1):
    bill_store.fail = True

    with pytest.raises(BillCreationFailed):
        await service.create_electronic_invoice(_payload((p1, 1, False)))
    assert provider.submissions == []


@pytest.mark.anyio
async def test_rejected_invoice_keeps_the_bill(p1, bill_store):
    provider = FakeInvoiceProvider(error=ProviderRejected("invoice API error: duplicated"))
    service = InvoiceService(InMemoryProductStore([p1]), bill_store, provider, prefix="SETP")

    with pytest.raises(ProviderRejected):
        await service.create_electronic_invoice(_payload((p1, 1, False)))

    [stored] = bill_store.bills.values()
    assert stored.tascode is None
    assert stored.cufe is None
    assert bill_store.confirmations == []


@pytest.mark.anyio
async def test_get_invoice_status_stores_pdf(service, bill_store, provider, p1):
    bill = await service.create_electronic_invoice(_payload((p1, 1, False)))

    status = await service.get_invoice_status(bill.id)

    assert provider.status_requests == ["TAS-1"]
    assert status.bill_id == bill.id
    assert status.process == 3
    assert status.pdf_url == "https://invoice.test/pdf/1"
    assert bill_store.bills[bill.id].document_url == "https://invoice.test/pdf/1"


@pytest.mark.anyio
async def test_get_status_of_unknown_bill(service):
    with pytest.raises(BillNotFound):
        await service.get_invoice_status(uuid4())


@pytest.mark.anyio
async def test_get_status_of_unissued_bill(service, bill_store, provider, p1):
    provider.error = ProviderRejected()
    with pytest.raises(ProviderRejected):
        await service.create_electronic_invoice(_payload((p1, 1, False)))
    [stored] = bill_store.bills.values()

    with pytest.raises(InvalidRequest):
        await service.get_invoice_status(stored.id)


@pytest.mark.anyio
async def test_client_totals_and_numbering_are_recomputed(service, provider, p1):
    request = _payload((p1, 1, False)).model_copy(update={
        "consecutive": 99,
        "issue_date": "20000101",
        "amounts": InvoiceAmounts(total_amount="1", pay_amount="1"),
    })
    request.items[0].taxes = [InvoiceTax(tax_code=TaxCode.VAT, tax_amount="1.00", percent="1.00")]

    bill = await service.create_electronic_invoice(request)

    assert bill.consecutive == 1
    assert bill.total_amount == Decimal("100")
    assert bill.pay_amount == Decimal("119.00")
    assert bill.products[0].taxes[0].tax_amount == "19.00"
    assert provider.submissions[0].issued_at.year != 2000
