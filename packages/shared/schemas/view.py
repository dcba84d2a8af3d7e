"""Shared screen payload schema (v1).

Clients render the order composer and the confirmation screen from these payloads.
"""

from __future__ import annotations

from enum import Enum

from packages.shared.schemas.order import OrderV1
from pydantic import BaseModel, Field


class NotificationLevelV1(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class NotificationV1(BaseModel):
    level: NotificationLevelV1
    message: str


class NavigationV1(BaseModel):
    path: str = "/"
    delay_ms: int = Field(..., ge=0)


class ProductOptionV1(BaseModel):
    value: str
    label: str


class ComposerViewV1(BaseModel):
    version: str = "1"

    draft: dict[str, str]
    errors: dict[str, str] = Field(default_factory=dict)
    products: list[ProductOptionV1] = Field(default_factory=list)
    total_cost: str = "0.00"

    can_submit: bool = False
    is_submitting: bool = False


class SubmitOutcomeV1(str, Enum):
    PLACED = "PLACED"
    FAILED = "FAILED"
    INVALID = "INVALID"
    BUSY = "BUSY"


class SubmitResponseV1(BaseModel):
    outcome: SubmitOutcomeV1
    notification: NotificationV1 | None = None
    order: OrderV1 | None = None
    view: ComposerViewV1


class ConfirmationStateV1(str, Enum):
    LOADING = "Loading"
    ALREADY_CONFIRMED = "AlreadyConfirmed"
    CONFIRMING = "Confirming"
    CONFIRMED = "Confirmed"
    CONFIRM_FAILED = "ConfirmFailed"
    UNKNOWN = "Unknown"
    ERROR = "Error"


class OrderDetailsV1(BaseModel):
    order_id: str
    customer_name: str
    product_name: str
    quantity: int
    total_cost: str
    customer_email: str


class ConfirmationViewV1(BaseModel):
    version: str = "1"

    order_id: str
    state: ConfirmationStateV1
    busy: bool = False
    headline: str

    # Present only while the screen shows order data.
    details: OrderDetailsV1 | None = None

    notifications: list[NotificationV1] = Field(default_factory=list)
    navigate: NavigationV1 | None = None
