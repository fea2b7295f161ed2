"""
Order Service - Business Logic for Open Bills (Orders)

An order is a mutable cart while DRAFT. Paying it freezes the current lines
and totals into a Bill and moves the order to PAID, after which it can no
longer be changed.
"""
import logging
import time
from collections import Counter
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from uuid import UUID, uuid4

from app.core.errors import (
    InvalidRequest, ProductNotFound, OrderNotFound, OrderNotDraft, ProductsCannotBeEmpty,
    OrderCreationFailed, OrderUpdateFailed, OrderPaymentFailed,
)
from app.models.order import OrderStatus
from app.repositories.base import OrderStore, ProductStore, BillStore
from app.schemas.invoice import BillResponse
from app.schemas.order import OrderResponse, OrderProductItem, OrderPay
from app.schemas.product import ProductResponse
from .billing import new_bill_product, bill_from_open_bill
from .pricing import TaxConfig, round_cents

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def new_temporal_identifier() -> str:
    return f"ORDER-{time.time_ns()}"


def merge_items(items: Sequence[OrderProductItem]) -> List[OrderProductItem]:
    """Sum quantities of repeated product ids, keeping first-seen order"""
    merged: Dict[UUID, int] = {}
    for item in items:
        if item.quantity < 1:
            raise InvalidRequest("quantity must be at least 1", item.quantity)
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return [OrderProductItem(product_id=pid, quantity=qty) for pid, qty in merged.items()]


class OrderService:
    """Order business logic"""

    def __init__(
        self,
        order_store: OrderStore,
        product_store: ProductStore,
        bill_store: Optional[BillStore] = None,
        tax_config: Optional[TaxConfig] = None,
        prefix: Optional[str] = None,
    ):
        self.order_store = order_store
        self.product_store = product_store
        self.bill_store = bill_store
        self.tax_config = tax_config or TaxConfig()
        self.prefix = prefix

    def _totals(self, total_price: Decimal) -> dict:
        return {
            "total_price": round_cents(total_price),
            "vat": round_cents(total_price * self.tax_config.vat_rate),
            "ico": round_cents(total_price * self.tax_config.ico_rate),
            "tip": round_cents(total_price * self.tax_config.tip_rate),
        }

    def _fetch_products(self, product_ids: Sequence[UUID]) -> Dict[UUID, ProductResponse]:
        """Resolve every requested id or fail with the first unknown one"""
        products = {p.id: p for p in self.product_store.find_by_ids(list(dict.fromkeys(product_ids)))}
        for product_id in product_ids:
            if product_id not in products:
                logger.warning(f"Product {product_id} not found while pricing order")
                raise ProductNotFound(field_value=str(product_id))
        return products

    def _get_draft(self, order_id: UUID) -> OrderResponse:
        order = self.order_store.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(field_value=str(order_id))
        if order.status != OrderStatus.DRAFT.value:
            logger.warning(f"Rejected change on order {order_id} in status {order.status}")
            raise OrderNotDraft(field_value=order.status)
        return order

    def _with_products(self, order: OrderResponse) -> OrderResponse:
        if not order.items:
            return order
        products = self.product_store.find_by_ids([item.product_id for item in order.items])
        return order.model_copy(update={"products": products})

    def create_order(self, product_ids: Sequence[UUID]) -> OrderResponse:
        """
        Open a DRAFT order. Every occurrence of an id is priced at quantity 1;
        repeated ids are stored as one line whose quantity is the occurrence count.
        """
        products = self._fetch_products(product_ids) if product_ids else {}
        total_price = sum((products[pid].unit_price for pid in product_ids), ZERO)

        now = datetime.now(timezone.utc)
        order = OrderResponse(
            id=uuid4(),
            temporal_identifier=new_temporal_identifier(),
            status=OrderStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
            **self._totals(total_price),
        )
        items = [
            OrderProductItem(product_id=pid, quantity=count)
            for pid, count in Counter(product_ids).items()
        ]

        try:
            created = self.order_store.create(order, items)
        except Exception as e:
            logger.error(f"Failed to create order {order.temporal_identifier}: {e}")
            raise OrderCreationFailed.wrap(e, field_value=order.temporal_identifier) from e

        logger.info(f"Order created: {created.id} ({created.temporal_identifier}) total={created.total_price}")
        return created.model_copy(update={"products": list(products.values())})

    def update_order(self, order_id: UUID, items: Sequence[OrderProductItem]) -> OrderResponse:
        """Replace the order lines. An empty list clears the order"""
        order = self._get_draft(order_id)
        items = merge_items(items)

        products = self._fetch_products([item.product_id for item in items]) if items else {}
        total_price = sum((products[item.product_id].unit_price * item.quantity for item in items), ZERO)

        changed = order.model_copy(update={
            **self._totals(total_price),
            "updated_at": datetime.now(timezone.utc),
        })

        try:
            updated = self.order_store.update(changed, items)
        except Exception as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise OrderUpdateFailed.wrap(e, field_value=str(order_id)) from e

        logger.info(f"Order updated: {order_id} lines={len(items)} total={updated.total_price}")
        return updated.model_copy(update={"products": list(products.values())})

    def get_order(self, order_id: UUID) -> OrderResponse:
        order = self.order_store.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(field_value=str(order_id))
        return self._with_products(order)

    def pay_order(self, order_id: UUID, payment: Optional[OrderPay] = None) -> BillResponse:
        """
        Freeze the order into a bill and mark it PAID in one transaction.

        A consecutive number is reserved only when the payment names a
        customer, since only those bills become electronic invoices.
        """
        payment = payment or OrderPay()
        order = self._get_draft(order_id)
        if not order.items:
            raise ProductsCannotBeEmpty(field_value=str(order_id))

        products = self._fetch_products([item.product_id for item in order.items])
        bill_products = []
        for item in order.items:
            product = products[item.product_id]
            bill_products.append(new_bill_product(
                product_id=product.id,
                quantity=item.quantity,
                unit_price=product.unit_price,
                code=product.sku,
                vat=product.vat,
                ico=product.ico,
                description=product.description,
                brand=product.brand,
                model=product.model,
            ))

        bill = bill_from_open_bill(
            order,
            bill_products,
            payment_code=payment.payment_code,
            customer=payment.customer,
            document_url=payment.document_url,
        )
        prefix = self.prefix if payment.customer else None

        try:
            created = self.bill_store.create(bill, prefix=prefix)
        except Exception as e:
            logger.error(f"Failed to pay order {order_id}: {e}")
            raise OrderPaymentFailed.wrap(e, field_value=str(order_id)) from e

        logger.info(f"Order paid: {order_id} -> bill {created.id} pay_amount={created.pay_amount}")
        return created
