"""
Invoices API - Electronic invoice endpoints
"""
from fastapi import APIRouter, Depends
from uuid import UUID

from app.schemas.invoice import BillResponse, ElectronicInvoiceCreate, InvoiceStatusResponse
from app.services import InvoiceService
from .deps import get_invoice_service

invoice_router = APIRouter(prefix="/invoices", tags=["Invoices"])


@invoice_router.post("/electronic", status_code=201, response_model=BillResponse)
async def create_electronic_invoice(
    data: ElectronicInvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
):
    return await service.create_electronic_invoice(data)


@invoice_router.get("/{bill_id}/status", response_model=InvoiceStatusResponse)
async def get_invoice_status(bill_id: UUID, service: InvoiceService = Depends(get_invoice_service)):
    """Poll the gateway; stores the PDF URL on the bill once it is available"""
    return await service.get_invoice_status(bill_id)
