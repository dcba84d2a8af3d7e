"""Field rules for the order composer.

Every rule is a pure function of the raw form value. An empty string means valid.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from packages.shared.schemas.order import ProductV1

REQUIRED_FIELDS: tuple[str, ...] = ("customer_name", "product_id", "quantity", "customer_email")

_NAME_RE = re.compile(r"[A-Za-z\s]+")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")

_CENTS = Decimal("0.01")


class OrderValidationError(ValueError):
    """A draft failed field validation. Never reaches the Order Service."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        super().__init__("Invalid order: " + ", ".join(sorted(errors)))
        self.errors = dict(errors)


def parse_int(value: str) -> int | None:
    value = (value or "").strip()
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


def _validate_name(value: str) -> str:
    name = value.strip()
    if not name:
        return "Name is required"
    if len(name) < 2 or not _NAME_RE.fullmatch(name):
        return "Name must be at least 2 characters and contain only letters"
    return ""


def _validate_email(value: str) -> str:
    if not value.strip():
        return "Email is required"
    if not _EMAIL_RE.fullmatch(value):
        return "Please enter a valid email address"
    return ""


def _validate_product(value: str) -> str:
    if not value.strip():
        return "Please select a product"
    return ""


def _validate_quantity(value: str) -> str:
    if not value.strip():
        return "Quantity is required"
    qty = parse_int(value)
    if qty is None:
        return "Quantity must be a whole number"
    if qty < 1:
        return "Quantity must be at least 1"
    return ""


_RULES = {
    "customer_name": _validate_name,
    "customer_email": _validate_email,
    "product_id": _validate_product,
    "quantity": _validate_quantity,
}


def validate_field(name: str, value: str | None) -> str:
    rule = _RULES.get(name)
    if rule is None:
        raise ValueError(f"Unknown order field: {name!r}")
    return rule("" if value is None else str(value))


def validate_draft(draft: Mapping[str, str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in REQUIRED_FIELDS:
        error = validate_field(field, draft.get(field, ""))
        if error:
            errors[field] = error
    return errors


def find_product(catalog: list[ProductV1], product_id: str) -> ProductV1 | None:
    pid = parse_int(product_id)
    if pid is None:
        return None
    for product in catalog:
        if product.id == pid:
            return product
    return None


def total_cost(product: ProductV1 | None, quantity: str) -> str:
    """Price a draft line as a two-digit fixed-point string.

    Missing product or unusable quantity prices at "0.00".
    """

    qty = parse_int(quantity)
    if product is None or qty is None or qty < 1:
        return "0.00"
    return str((product.cost * qty).quantize(_CENTS, rounding=ROUND_HALF_UP))
