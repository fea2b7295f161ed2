"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter

# Import sub-routers
from app.api.products import product_router
from app.api.orders import order_router
from app.api.invoices import invoice_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(product_router)
api_router.include_router(order_router)
api_router.include_router(invoice_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/health")
async def health():
    return {"status": "ok"}
