"""
Products API - Catalog endpoints
"""
from fastapi import APIRouter, Depends, Response
from uuid import UUID

from app.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from app.services import ProductService
from .deps import get_product_service

product_router = APIRouter(prefix="/products", tags=["Products"])


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(data: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.create_product(data)


@product_router.get("")
async def list_products(service: ProductService = Depends(get_product_service)):
    products = service.list_products()
    return {
        "products": [p.model_dump(mode="json") for p in products],
        "total": len(products),
    }


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: UUID, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return service.update_product(product_id, data)


@product_router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: UUID, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return Response(status_code=204)
