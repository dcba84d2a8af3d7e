from __future__ import annotations

import threading
from decimal import Decimal
from uuid import uuid4

from packages.shared.schemas.order import (
    OrderCreateRequestV1,
    OrderStatusV1,
    OrderV1,
    ProductV1,
)
from services.storefront.app.services.order_service_base import (
    ConfirmationError,
    OrderNotFoundError,
    SubmissionError,
)


class InMemoryOrderService:
    """Deterministic Order Service for tests and local dev.

    Orders live in process memory only. A second confirm of the same order is rejected,
    the way the real service guards the transition.
    """

    name = "MOCK"

    def __init__(self, products: list[ProductV1] | None = None) -> None:
        if products is None:
            products = [
                ProductV1(id=1, name="Widget", cost=Decimal("10.00")),
                ProductV1(id=2, name="Gadget", cost=Decimal("24.50")),
                ProductV1(id=3, name="Gizmo", cost=Decimal("5.25")),
            ]
        self._products = {p.id: p for p in products}
        self._orders: dict[str, OrderV1] = {}
        self._lock = threading.Lock()

    def list_products(self) -> list[ProductV1]:
        return list(self._products.values())

    def create_order(self, payload: OrderCreateRequestV1) -> OrderV1:
        product = self._products.get(payload.product_id)
        if product is None:
            raise SubmissionError(f"Unknown product id: {payload.product_id}")

        order = OrderV1(
            order_id=uuid4().hex[:12],
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            product=product,
            quantity=payload.quantity,
            total_cost=payload.total_cost,
            status=OrderStatusV1.ORDER_PLACED.value,
        )
        with self._lock:
            self._orders[order.order_id] = order
        return order

    def get_order(self, order_id: str) -> OrderV1:
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def confirm_order(self, order_id: str) -> None:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise ConfirmationError(order_id, "order not found")
            if order.status != OrderStatusV1.ORDER_PLACED.value:
                raise ConfirmationError(order_id, f"status is {order.status!r}")
            self._orders[order_id] = order.model_copy(
                update={"status": OrderStatusV1.CONFIRMED.value}
            )
