"""
Product Service - Business Logic for Products
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Sequence, Type
from uuid import UUID, uuid4

from app.core.errors import (
    ValidationError, MissingName, MissingCategory, MissingSKU,
    ProductNotFound, ProductCreationFailed, ProductUpdateFailed, ProductDeleteFailed,
)
from app.repositories.base import ProductStore
from app.schemas.product import ProductCreate, ProductResponse
from .pricing import calculate_taxes_and_unit_price

logger = logging.getLogger(__name__)

DEFAULT_BRAND = "unknown"
DEFAULT_MODEL = "unknown"
PRODUCT_VERSION = 1  # Reserved for price-change split testing


@dataclass(frozen=True)
class FieldError:
    field: str
    kind: Type[ValidationError]

    def to_error(self, value=None) -> ValidationError:
        return self.kind(field_value=value)


def validate_product_request(req: ProductCreate) -> List[FieldError]:
    """Required-field checks for create/update bodies, in reporting order"""
    errors = []
    if not req.name.strip():
        errors.append(FieldError("name", MissingName))
    if not req.category.strip():
        errors.append(FieldError("category", MissingCategory))
    if not req.sku.strip():
        errors.append(FieldError("sku", MissingSKU))
    return errors


class ProductService:
    """Product catalog business logic"""

    def __init__(self, store: ProductStore):
        self.store = store

    @staticmethod
    def _validate(req: ProductCreate) -> None:
        errors = validate_product_request(req)
        if errors:
            first = errors[0]
            logger.warning(f"Rejected product request: {first.field} is missing")
            raise first.to_error(getattr(req, first.field))

    def create_product(self, req: ProductCreate) -> ProductResponse:
        self._validate(req)
        breakdown = calculate_taxes_and_unit_price(req.total_price_with_taxes, req.vat, req.ico, req.taxes_format)

        now = datetime.now(timezone.utc)
        product = ProductResponse(
            id=uuid4(),
            name=req.name,
            category=req.category,
            sku=req.sku,
            version=PRODUCT_VERSION,
            unit_price=breakdown.unit_price,
            total_price_with_taxes=breakdown.total_price_with_taxes,
            vat=breakdown.vat,
            ico=breakdown.ico,
            description=req.description or "",
            brand=req.brand or DEFAULT_BRAND,
            model=req.model or DEFAULT_MODEL,
            created_at=now,
            updated_at=now,
        )

        try:
            created = self.store.create(product)
        except Exception as e:
            logger.error(f"Failed to create product {req.sku}: {e}")
            raise ProductCreationFailed.wrap(e, field_value=req.sku) from e

        logger.info(f"Product created: {created.id} ({created.sku})")
        return created

    def update_product(self, product_id: UUID, req: ProductCreate) -> ProductResponse:
        existing = self.get_product(product_id)
        self._validate(req)
        breakdown = calculate_taxes_and_unit_price(req.total_price_with_taxes, req.vat, req.ico, req.taxes_format)

        product = existing.model_copy(update={
            "name": req.name,
            "category": req.category,
            "sku": req.sku,
            "version": PRODUCT_VERSION,
            "unit_price": breakdown.unit_price,
            "total_price_with_taxes": breakdown.total_price_with_taxes,
            "vat": breakdown.vat,
            "ico": breakdown.ico,
            "description": req.description or "",
            "brand": req.brand or "",
            "model": req.model or "",
            "updated_at": datetime.now(timezone.utc),
        })

        try:
            updated = self.store.update(product_id, product)
        except Exception as e:
            logger.error(f"Failed to update product {product_id}: {e}")
            raise ProductUpdateFailed.wrap(e, field_value=str(product_id)) from e

        logger.info(f"Product updated: {product_id}")
        return updated

    def delete_product(self, product_id: UUID) -> None:
        self.get_product(product_id)
        try:
            self.store.soft_delete(product_id)
        except Exception as e:
            logger.error(f"Failed to delete product {product_id}: {e}")
            raise ProductDeleteFailed.wrap(e, field_value=str(product_id)) from e
        logger.info(f"Product deleted: {product_id}")

    def get_product(self, product_id: UUID) -> ProductResponse:
        product = self.store.find_by_id(product_id)
        if product is None:
            raise ProductNotFound(field_value=str(product_id))
        return product

    def list_products(self) -> List[ProductResponse]:
        return self.store.find_all()

    def get_products_by_ids(self, product_ids: Sequence[UUID]) -> List[ProductResponse]:
        """Non-deleted products among the distinct ids requested"""
        return self.store.find_by_ids(product_ids)
