"""Shared Order Service schema (v1).

These models mirror the payloads of the external Order Service. The storefront only
consumes persisted orders; it never mutates them except through the confirm call.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatusV1(str, Enum):
    ORDER_PLACED = "Order Placed"
    CONFIRMED = "Confirmed"


class ProductV1(BaseModel):
    id: int
    name: str
    cost: Decimal = Field(..., gt=0)


class OrderCreateRequestV1(BaseModel):
    customer_name: str
    quantity: int = Field(..., ge=1)
    product_id: int
    customer_email: str
    # Fixed-point string with two fraction digits, e.g. "30.00".
    total_cost: str


class OrderV1(BaseModel):
    # Services may key orders by integer pk.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_id: str
    customer_name: str
    customer_email: str
    product: ProductV1
    quantity: int
    total_cost: str

    # Kept as a plain string: the service may report statuses outside OrderStatusV1.
    status: str

    @field_validator("total_cost", mode="before")
    @classmethod
    def format_total_cost(cls, value: object) -> object:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
        return value
