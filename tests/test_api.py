from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_invoice_provider
from app.core import get_db
from app.core.errors import ProviderRejected
from main import app

from fakes import FakeInvoiceProvider

CUSTOMER = {"id": "1020", "document_type": "CC", "name": "Ana", "email": "ana@mail.co"}


@pytest.fixture
def provider():
    return FakeInvoiceProvider()


@pytest.fixture
def client(db, provider):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_invoice_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_product(client, **overrides):
    body = {
        "name": "Limonada",
        "category": "drinks",
        "sku": "LIM-1",
        "total_price_with_taxes": "11900",
        "vat": "19",
        "ico": "0",
    }
    body.update(overrides)
    response = client.post("/api/products", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ========== products ==========

def test_product_crud(client):
    product = _create_product(client)
    assert product["unit_price"] == "10000.00"
    assert product["brand"] == "unknown"

    listed = client.get("/api/products").json()
    assert listed["total"] == 1
    assert listed["products"][0]["id"] == product["id"]

    updated = client.put(f"/api/products/{product['id']}", json={
        "name": "Limonada", "category": "drinks", "sku": "LIM-2",
        "total_price_with_taxes": 10800, "vat": 0, "ico": 8,
    })
    assert updated.status_code == 200
    assert updated.json()["sku"] == "LIM-2"

    assert client.delete(f"/api/products/{product['id']}").status_code == 204
    assert client.get(f"/api/products/{product['id']}").status_code == 404
    assert client.get("/api/products").json()["total"] == 0


def test_product_validation_errors(client):
    response = client.post("/api/products", json={"name": "", "category": "x", "sku": "y",
                                                  "total_price_with_taxes": "1", "vat": "19", "ico": "0"})
    assert response.status_code == 400
    assert response.json()["code"] == "PRODUCT_MISSING_NAME"

    response = client.post("/api/products", json={"name": "a", "category": "x", "sku": "y",
                                                  "total_price_with_taxes": "1", "vat": "0", "ico": "0"})
    assert response.status_code == 400
    assert response.json()["code"] == "PRODUCT_INVALID_TAX_CALCULATION"


def test_malformed_body_is_400(client):
    response = client.post("/api/products", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_missing_product_is_404(client):
    for method in ("get", "delete"):
        response = getattr(client, method)(f"/api/products/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"


# ========== orders ==========

def test_order_flow(client, provider):
    product = _create_product(client)

    created = client.post("/api/orders", json={"product_ids": [product["id"]]})
    assert created.status_code == 201
    order = created.json()
    assert order["status"] == "DRAFT"
    assert order["total_price"] == "10000.00"
    assert order["vat"] == "1900.00"

    updated = client.put(f"/api/orders/{order['id']}", json={"products": [{"product_id": product["id"], "quantity": 2}]})
    assert updated.status_code == 200
    assert updated.json()["total_price"] == "20000.00"
    assert updated.json()["items"] == [{"product_id": product["id"], "quantity": 2}]

    fetched = client.get(f"/api/orders/{order['id']}").json()
    assert fetched["products"][0]["id"] == product["id"]

    paid = client.post(f"/api/orders/{order['id']}/pay", json={"payment_code": "cash"})
    assert paid.status_code == 201
    bill = paid.json()
    assert bill["open_bill_id"] == order["id"]
    assert bill["pay_amount"] == "25400.00"
    assert bill["consecutive"] is None
    assert provider.submissions == []

    assert client.get(f"/api/orders/{order['id']}").json()["status"] == "PAID"
    conflict = client.put(f"/api/orders/{order['id']}", json={"products": []})
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "ORDER_NOT_DRAFT"


def test_pay_with_customer_issues_invoice(client, provider):
    product = _create_product(client)
    order = client.post("/api/orders", json={"product_ids": [product["id"]]}).json()

    response = client.post(f"/api/orders/{order['id']}/pay", json={"payment_code": "credit_card", "customer": CUSTOMER})

    assert response.status_code == 201
    bill = response.json()
    assert (bill["prefix"], bill["consecutive"]) == ("SETP", 1)
    assert bill["tascode"] == "TAS-1"
    assert bill["customer"]["id"] == "1020"
    assert len(provider.submissions) == 1


def test_pay_without_body(client):
    product = _create_product(client)
    order = client.post("/api/orders", json={"product_ids": [product["id"]]}).json()

    response = client.post(f"/api/orders/{order['id']}/pay")

    assert response.status_code == 201
    assert response.json()["payment_code"] == "cash"


def test_order_with_unknown_product_is_404(client):
    response = client.post("/api/orders", json={"product_ids": [str(uuid4())]})

    assert response.status_code == 404
    assert response.json()["code"] == "PRODUCT_NOT_FOUND"


def test_unknown_order_is_404(client):
    assert client.get(f"/api/orders/{uuid4()}").status_code == 404
    assert client.put(f"/api/orders/{uuid4()}", json={"products": []}).status_code == 404


def test_order_quantity_must_be_positive(client):
    order = client.post("/api/orders", json={"product_ids": []}).json()

    response = client.put(f"/api/orders/{order['id']}", json={"products": [{"product_id": str(uuid4()), "quantity": 0}]})

    assert response.status_code == 400


# ========== invoices ==========

def test_electronic_invoice_and_status(client, provider):
    product = _create_product(client)

    response = client.post("/api/invoices/electronic", json={
        "payment_code": "debit_card",
        "customer": CUSTOMER,
        "items": [{"product_id": product["id"], "quantity": 1, "allowance": [], "taxes": []}],
    })
    assert response.status_code == 201
    bill = response.json()
    assert bill["tascode"] == "TAS-1"
    assert bill["products"][0]["taxes"][0] == {"taxCode": "VAT", "taxAmount": "1900.00", "percent": "19.00"}

    status = client.get(f"/api/invoices/{bill['id']}/status")
    assert status.status_code == 200
    assert status.json()["pdf_url"] == "https://invoice.test/pdf/1"


def test_electronic_invoice_without_items_is_400(client):
    response = client.post("/api/invoices/electronic", json={"customer": CUSTOMER, "items": []})

    assert response.status_code == 400
    assert response.json()["code"] == "PRODUCTS_CANNOT_BE_EMPTY"


def test_provider_failure_is_500(client, provider):
    product = _create_product(client)
    provider.error = ProviderRejected("invoice API error: rejected")

    response = client.post("/api/invoices/electronic", json={
        "customer": CUSTOMER,
        "items": [{"product_id": product["id"], "quantity": 1}],
    })

    assert response.status_code == 500
    assert response.json()["code"] == "PROVIDER_REJECTED"


def test_unknown_bill_status_is_404(client):
    assert client.get(f"/api/invoices/{uuid4()}/status").status_code == 404
