from __future__ import annotations

import os

from services.storefront.app.services.order_service_base import OrderService
from services.storefront.app.services.order_service_mock import InMemoryOrderService

_MOCK_SERVICE: InMemoryOrderService | None = None


def get_order_service() -> OrderService:
    """Select an Order Service adapter based on env vars.

    Defaults to the in-memory mock so tests and local dev are deterministic unless
    explicitly configured otherwise. The mock is cached so orders survive between the
    composer and the confirmation screen.
    """

    global _MOCK_SERVICE

    mode = os.getenv("ORDERDESK_ORDER_SERVICE", "mock").strip().lower()

    if mode == "mock":
        if _MOCK_SERVICE is None:
            _MOCK_SERVICE = InMemoryOrderService()
        return _MOCK_SERVICE

    if mode == "http":
        from services.storefront.app.services.order_service_http import OrderServiceHttpClient

        return OrderServiceHttpClient.from_env()

    raise ValueError(f"Unknown ORDERDESK_ORDER_SERVICE={mode!r}. Expected mock or http.")


def redirect_delay_ms() -> int:
    raw = os.getenv("ORDERDESK_REDIRECT_DELAY_MS", "3000").strip()
    try:
        return max(0, int(raw))
    except ValueError as e:
        raise ValueError(f"ORDERDESK_REDIRECT_DELAY_MS must be an integer, got {raw!r}") from e
