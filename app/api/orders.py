"""
Orders API - Open bill endpoints
"""
from fastapi import APIRouter, Depends
from typing import Optional
from uuid import UUID

from app.schemas.invoice import BillResponse
from app.schemas.order import OrderCreate, OrderUpdate, OrderPay, OrderResponse
from app.services import OrderService, InvoiceService
from .deps import get_order_service, get_invoice_service

order_router = APIRouter(prefix="/orders", tags=["Orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(data: OrderCreate, service: OrderService = Depends(get_order_service)):
    return service.create_order(data.product_ids)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: UUID, service: OrderService = Depends(get_order_service)):
    return service.get_order(order_id)


@order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID,
    data: OrderUpdate,
    service: OrderService = Depends(get_order_service),
):
    return service.update_order(order_id, data.products)


@order_router.post("/{order_id}/pay", status_code=201, response_model=BillResponse)
async def pay_order(
    order_id: UUID,
    data: Optional[OrderPay] = None,
    service: OrderService = Depends(get_order_service),
    invoices: InvoiceService = Depends(get_invoice_service),
):
    """
    Pay an open order.

    When a customer is given the bill is also issued as an electronic
    invoice; the bill stays stored even if the gateway call fails.
    """
    bill = service.pay_order(order_id, data)
    if bill.customer is not None:
        bill = await invoices.submit_bill(bill)
    return bill
