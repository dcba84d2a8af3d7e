from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

OrderField = Literal["customer_name", "customer_email", "product_id", "quantity"]


class FieldUpdateRequest(BaseModel):
    name: OrderField
    value: str = ""


class FieldBlurRequest(BaseModel):
    name: OrderField
