import base64
import json
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest

from app.core.errors import CustomerRequired, ProviderHTTPError, ProviderRejected, ProviderError
from app.integrations import ElectronicInvoiceClient, InvoiceSubmission
from app.integrations.payment_codes import payment_code_to_provider, tax_code_to_provider
from app.schemas.invoice import (
    BillProductResponse, Customer, DocumentType, InvoiceAllowance, InvoiceTax, PaymentCode, TaxCode,
)

ACCEPTED = {
    "invoiceResult": {
        "status": {"code": 200, "text": "Documento recibido"},
        "documento": {"tascode": "TAS-77", "CUFE": "cufe-abc", "intID": "7"},
    }
}


def _submission(customer=True, **overrides):
    data = {
        "prefix": "SETP",
        "consecutive": 7,
        "payment_code": PaymentCode.CREDIT_CARD,
        "customer": Customer(document_number="900123", document_type=DocumentType.NIT,
                             name="ACME SAS", email="facturas@acme.co") if customer else None,
        "total_amount": Decimal("150"),
        "discount_amount": Decimal("10"),
        "tax_amount": Decimal("23"),
        "pay_amount": Decimal("163"),
        "items": [
            BillProductResponse(
                product_id=uuid4(), quantity=1, unit_price=Decimal("100"), code="P1",
                description="Agua", brand="Casa", model="500ml",
                allowance=[InvoiceAllowance(reason_code="01", description="promo", base_amount="100", amount="10")],
                taxes=[InvoiceTax(tax_code=TaxCode.VAT, tax_amount="19.00", percent="19.00")],
            ),
            BillProductResponse(
                product_id=uuid4(), quantity=2, unit_price=Decimal("25"), code="P2",
                taxes=[InvoiceTax(tax_code=TaxCode.ICO, tax_amount="4.00", percent="8.00")],
            ),
        ],
        "issued_at": datetime(2024, 3, 9, 14, 5, 30),
    }
    data.update(overrides)
    return InvoiceSubmission(**data)


def _client(handler):
    return ElectronicInvoiceClient(
        base_url="https://invoice.test/",
        user="pos-user",
        password="pos-secret",
        transport=httpx.MockTransport(handler),
    )


def test_payload_mapping():
    payload = _client(lambda request: None).build_invoice_payload(_submission())
    invoice = payload["invoice"]

    assert invoice["prefix"] == "SETP"
    assert invoice["intID"] == "7"
    assert invoice["issueDate"] == "20240309"
    assert invoice["issueTime"] == "140530"
    assert invoice["paymentType"] == "1"
    assert invoice["paymentCode"] == "48"
    assert invoice["note1"] == "ciento sesenta y tres pesos"
    assert invoice["customer"] == {
        "additionalAccountID": "1",
        "name": "ACME SAS",
        "city": "No reporta",
        "countrySubentity": "No reporta",
        "addressLine": "No reporta",
        "documentNumber": "900123",
        "documentType": "NIT",
        "telephone": "No reporta",
        "email": "facturas@acme.co",
    }
    assert invoice["amounts"] == {
        "totalAmount": "150.00",
        "discountAmount": "10.00",
        "taxAmount": "23.00",
        "payAmount": "163.00",
    }

    first, second = invoice["items"]
    assert first["quantity"] == "1"
    assert first["unitPrice"] == "100.00"
    assert first["total"] == "100.00"
    assert (first["description"], first["brand"], first["model"], first["code"]) == ("Agua", "Casa", "500ml", "P1")
    assert first["allowance"] == [{
        "charge": "false", "reasonCode": "01", "description": "promo", "baseAmount": "100", "amount": "10",
    }]
    assert first["taxes"] == [{"ID": "01", "taxAmount": "19.00", "percent": "19.00"}]
    assert second["total"] == "50.00"
    assert second["description"] == ""
    assert second["taxes"] == [{"ID": "04", "taxAmount": "4.00", "percent": "8.00"}]


@pytest.mark.parametrize("code,expected", [
    (PaymentCode.CREDIT_CARD, "48"),
    (PaymentCode.DEBIT_CARD, "49"),
    (PaymentCode.CASH, "10"),
    (PaymentCode.TRANSFER_CREDIT_BANK, "45"),
    (PaymentCode.TRANSFER_DEBIT_INTERBANK, "46"),
    (PaymentCode.TRANSFER_DEBIT_BANK, "47"),
    ("bitcoin", "10"),
])
def test_payment_code_map(code, expected):
    assert payment_code_to_provider(code) == expected


def test_tax_code_map():
    assert tax_code_to_provider(TaxCode.VAT) == "01"
    assert tax_code_to_provider("ICO") == "04"
    assert tax_code_to_provider("03") == "03"


@pytest.mark.anyio
async def test_submit_posts_with_basic_auth():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["method"] = request.method
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=ACCEPTED)

    confirmation = await _client(handler).submit(_submission())

    assert seen["method"] == "POST"
    assert seen["url"] == "https://invoice.test/facturacion.v30/invoice/"
    assert seen["auth"] == "Basic " + base64.b64encode(b"pos-user:pos-secret").decode()
    assert seen["body"]["invoice"]["intID"] == "7"
    assert confirmation.tascode == "TAS-77"
    assert confirmation.cufe == "cufe-abc"
    assert confirmation.int_id == "7"


@pytest.mark.anyio
async def test_submit_without_customer_makes_no_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=ACCEPTED)

    with pytest.raises(CustomerRequired):
        await _client(handler).submit(_submission(customer=False))
    assert calls == []


@pytest.mark.anyio
async def test_http_error_status():
    client = _client(lambda request: httpx.Response(401, text="bad credentials"))

    with pytest.raises(ProviderHTTPError) as exc_info:
        await client.submit(_submission())

    assert exc_info.value.http_status == 401
    assert exc_info.value.field_value == "bad credentials"
    assert exc_info.value.status_code == 500


@pytest.mark.anyio
async def test_embedded_rejection():
    body = {"invoiceResult": {"status": {"code": 409, "text": "Consecutivo ya utilizado"}}}
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ProviderRejected) as exc_info:
        await client.submit(_submission())

    assert exc_info.value.provider_status == 409
    assert "Consecutivo ya utilizado" in str(exc_info.value)


@pytest.mark.anyio
async def test_transport_failure_is_a_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as exc_info:
        await _client(handler).submit(_submission())

    assert isinstance(exc_info.value, ProviderHTTPError)
    assert isinstance(exc_info.value.unwrap(), httpx.ConnectError)


@pytest.mark.anyio
async def test_invalid_json_response():
    client = _client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(ProviderHTTPError):
        await client.submit(_submission())


@pytest.mark.anyio
async def test_get_status():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "invoiceResult": {
                "status": {"code": "200", "text": "OK"},
                "document": {
                    "tascode": "TAS-77", "CUFE": "cufe-abc", "document": "SETP7",
                    "process": 3, "retries": 1,
                    "URL": "https://invoice.test/doc", "PDF": "https://invoice.test/pdf", "ATTACHED": "",
                },
            }
        })

    status = await _client(handler).get_status("TAS-77")

    assert seen["body"] == {"verifyStatus": {"tascode": "TAS-77"}}
    assert status.tascode == "TAS-77"
    assert status.cufe == "cufe-abc"
    assert status.document == "SETP7"
    assert status.process == 3
    assert status.retries == 1
    assert status.pdf_url == "https://invoice.test/pdf"
    assert status.url == "https://invoice.test/doc"
    assert status.attached is None


@pytest.mark.anyio
async def test_get_status_rejected():
    body = {"invoiceResult": {"status": {"code": 404, "text": "tascode desconocido"}}}
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ProviderRejected):
        await client.get_status("nope")
