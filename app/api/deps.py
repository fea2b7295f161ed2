"""
API Dependencies - Service wiring per request
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core import get_db, get_settings
from app.integrations import InvoiceProvider, ElectronicInvoiceClient
from app.repositories import SqlProductStore, SqlOrderStore, SqlBillStore
from app.services import ProductService, OrderService, InvoiceService
from app.services.pricing import TaxConfig


def get_invoice_provider() -> InvoiceProvider:
    settings = get_settings()
    return ElectronicInvoiceClient(
        base_url=settings.ELECTRONIC_INVOICE_URL,
        user=settings.ELECTRONIC_INVOICE_USER,
        password=settings.ELECTRONIC_INVOICE_PASSWORD,
        timeout=settings.ELECTRONIC_INVOICE_TIMEOUT,
    )


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(SqlProductStore(db))


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    settings = get_settings()
    return OrderService(
        order_store=SqlOrderStore(db),
        product_store=SqlProductStore(db),
        bill_store=SqlBillStore(db),
        tax_config=TaxConfig.from_settings(settings),
        prefix=settings.INVOICE_PREFIX,
    )


def get_invoice_service(
    db: Session = Depends(get_db),
    provider: InvoiceProvider = Depends(get_invoice_provider),
) -> InvoiceService:
    return InvoiceService(
        product_store=SqlProductStore(db),
        bill_store=SqlBillStore(db),
        provider=provider,
        prefix=get_settings().INVOICE_PREFIX,
    )
