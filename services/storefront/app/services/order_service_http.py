from __future__ import annotations

import http.client
import json
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from packages.shared.schemas.order import OrderCreateRequestV1, OrderV1, ProductV1
from pydantic import TypeAdapter, ValidationError
from services.storefront.app.services.order_service_base import (
    ConfirmationError,
    FetchError,
    OrderNotFoundError,
    SubmissionError,
)

_PRODUCTS = TypeAdapter(list[ProductV1])


@dataclass(frozen=True, slots=True)
class _HttpConfig:
    base_url: str


class _HttpCallError(Exception):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class OrderServiceHttpClient:
    """Order Service adapter over HTTP + JSON.

    No request timeout is set; calls rely on the socket default.

    Env vars:
    - ORDERDESK_ORDER_SERVICE=http
    - ORDERDESK_BACKEND_URL (default: http://localhost:8000)
    """

    name = "HTTP"

    def __init__(self, cfg: _HttpConfig) -> None:
        self._cfg = cfg

    @classmethod
    def from_env(cls) -> "OrderServiceHttpClient":
        base_url = os.getenv("ORDERDESK_BACKEND_URL", "http://localhost:8000").strip()
        if not base_url:
            raise ValueError("ORDERDESK_BACKEND_URL is required when ORDERDESK_ORDER_SERVICE=http")
        return cls(_HttpConfig(base_url=base_url.rstrip("/")))

    def list_products(self) -> list[ProductV1]:
        try:
            data = self._call("GET", "/api/products/")
            return _PRODUCTS.validate_python(data)
        except _HttpCallError as e:
            raise FetchError(f"Product list request failed: {e}") from e
        except ValidationError as e:
            raise FetchError(f"Unexpected product list shape: {e}") from e

    def create_order(self, payload: OrderCreateRequestV1) -> OrderV1:
        try:
            data = self._call("POST", "/api/orders/", body=payload.model_dump(mode="json"))
            return OrderV1.model_validate(data)
        except _HttpCallError as e:
            raise SubmissionError(f"Order creation failed: {e}") from e
        except ValidationError as e:
            raise SubmissionError(f"Unexpected order creation response: {e}") from e

    def get_order(self, order_id: str) -> OrderV1:
        try:
            data = self._call("GET", f"/api/orders/{quote(order_id, safe='')}/")
            return OrderV1.model_validate(data)
        except _HttpCallError as e:
            if e.status == 404:
                raise OrderNotFoundError(order_id) from e
            raise FetchError(f"Order lookup failed: {e}") from e
        except ValidationError as e:
            raise FetchError(f"Unexpected order shape: {e}") from e

    def confirm_order(self, order_id: str) -> None:
        try:
            self._call("POST", f"/api/confirm-order/{quote(order_id, safe='')}/")
        except _HttpCallError as e:
            raise ConfirmationError(order_id, str(e)) from e

    def _call(self, method: str, path: str, body: dict | None = None) -> Any:
        url = f"{self._cfg.base_url}{path}"

        req = urllib.request.Request(url, method=method)
        req.add_header("Accept", "application/json")
        data = None
        if body is not None:
            req.add_header("Content-Type", "application/json")
            data = json.dumps(body).encode("utf-8")

        try:
            with urllib.request.urlopen(req, data=data) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            raise _HttpCallError(f"HTTP {e.code} from {method} {path}: {detail}", e.code) from e
        except urllib.error.URLError as e:
            raise _HttpCallError(f"{method} {path} unreachable: {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            # Resets, timeouts and truncated bodies surface outside URLError.
            raise _HttpCallError(f"{method} {path} failed: {type(e).__name__}: {e}") from e
        except UnicodeDecodeError as e:
            raise _HttpCallError(f"Non-UTF-8 response from {method} {path}") from e

        if not raw.strip():
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise _HttpCallError(f"Non-JSON response from {method} {path}") from e
