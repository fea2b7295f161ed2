"""
Product Repository - SQLAlchemy adapter for the product catalog
"""
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import List, Optional, Sequence
from uuid import UUID

from app.models import Product
from app.schemas.product import ProductResponse
from .base import ProductStore


class SqlProductStore(ProductStore):

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Product).filter(Product.deleted_at.is_(None))

    def create(self, product: ProductResponse) -> ProductResponse:
        row = Product(
            id=product.id,
            name=product.name,
            category=product.category,
            sku=product.sku,
            version=product.version,
            unit_price=product.unit_price,
            total_price_with_taxes=product.total_price_with_taxes,
            vat=product.vat,
            ico=product.ico,
            description=product.description,
            brand=product.brand,
            model=product.model,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return ProductResponse.model_validate(row)

    def update(self, product_id: UUID, product: ProductResponse) -> ProductResponse:
        row = self._active().filter(Product.id == product_id).first()
        if not row:
            raise LookupError(f"product {product_id} not found")

        for field in ("name", "category", "sku", "version", "unit_price", "total_price_with_taxes",
                      "vat", "ico", "description", "brand", "model"):
            setattr(row, field, getattr(product, field))
        row.updated_at = product.updated_at

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return ProductResponse.model_validate(row)

    def soft_delete(self, product_id: UUID) -> None:
        now = datetime.now(timezone.utc)
        try:
            self._active().filter(Product.id == product_id).update(
                {Product.deleted_at: now, Product.updated_at: now},
                synchronize_session=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def find_all(self) -> List[ProductResponse]:
        rows = self._active().order_by(Product.name).all()
        return [ProductResponse.model_validate(row) for row in rows]

    def find_by_id(self, product_id: UUID) -> Optional[ProductResponse]:
        row = self._active().filter(Product.id == product_id).first()
        return ProductResponse.model_validate(row) if row else None

    def find_by_ids(self, product_ids: Sequence[UUID]) -> List[ProductResponse]:
        if not product_ids:
            return []
        rows = self._active().filter(Product.id.in_(set(product_ids))).all()
        return [ProductResponse.model_validate(row) for row in rows]
