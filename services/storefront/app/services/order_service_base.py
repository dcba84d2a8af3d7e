from __future__ import annotations

from typing import Protocol

from packages.shared.schemas.order import OrderCreateRequestV1, OrderV1, ProductV1


class OrderServiceError(Exception):
    """Base class for Order Service errors."""


class FetchError(OrderServiceError):
    """The catalog or an order could not be read."""


class SubmissionError(OrderServiceError):
    """Order creation failed."""


class ConfirmationError(OrderServiceError):
    """The confirm transition failed."""

    def __init__(self, order_id: str, reason: str) -> None:
        super().__init__(f"Could not confirm order {order_id}: {reason}")
        self.order_id = order_id
        self.reason = reason


class OrderNotFoundError(FetchError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class OrderService(Protocol):
    name: str

    def list_products(self) -> list[ProductV1]: ...

    def create_order(self, payload: OrderCreateRequestV1) -> OrderV1: ...

    def get_order(self, order_id: str) -> OrderV1: ...

    def confirm_order(self, order_id: str) -> None: ...
