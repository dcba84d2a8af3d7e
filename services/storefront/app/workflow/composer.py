from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from packages.shared.schemas.order import OrderCreateRequestV1, OrderV1, ProductV1
from packages.shared.schemas.view import (
    ComposerViewV1,
    NotificationLevelV1,
    NotificationV1,
    ProductOptionV1,
    SubmitOutcomeV1,
)
from services.storefront.app.services.order_service_base import (
    FetchError,
    OrderService,
    SubmissionError,
)
from services.storefront.app.workflow.validation import (
    REQUIRED_FIELDS,
    OrderValidationError,
    find_product,
    parse_int,
    total_cost,
    validate_draft,
    validate_field,
)

logger = logging.getLogger(__name__)

MSG_PLACED = "Order placed successfully! Check your email for confirmation."
MSG_PLACE_FAILED = "Error placing order. Please try again."


def empty_draft() -> dict[str, str]:
    return {field: "" for field in REQUIRED_FIELDS}


@dataclass(frozen=True, slots=True)
class SubmitResult:
    outcome: SubmitOutcomeV1
    notification: NotificationV1 | None = None
    order: OrderV1 | None = None


def build_order_request(draft: dict[str, str], catalog: list[ProductV1]) -> OrderCreateRequestV1:
    """Turn a draft into the creation payload, or raise OrderValidationError."""

    errors = validate_draft(draft)

    product = find_product(catalog, draft["product_id"])
    if "product_id" not in errors and product is None:
        errors["product_id"] = "Please select a product"

    if errors:
        raise OrderValidationError(errors)

    return OrderCreateRequestV1(
        customer_name=draft["customer_name"],
        quantity=parse_int(draft["quantity"]),
        product_id=product.id,
        customer_email=draft["customer_email"],
        total_cost=total_cost(product, draft["quantity"]),
    )


class OrderComposer:
    """Order capture form state for one browser session.

    The catalog is written once by load_catalog(); everything else reads it. The selected
    product is always recomputed from (catalog, product_id) and never stored.
    """

    def __init__(self, service: OrderService) -> None:
        self._service = service
        self._catalog: list[ProductV1] = []
        self._catalog_attempted = False

        self._draft = empty_draft()
        self._errors: dict[str, str] = {}

        self._in_flight = threading.Lock()

    @property
    def catalog(self) -> list[ProductV1]:
        return list(self._catalog)

    @property
    def draft(self) -> dict[str, str]:
        return dict(self._draft)

    @property
    def errors(self) -> dict[str, str]:
        return {k: v for k, v in self._errors.items() if v}

    @property
    def is_submitting(self) -> bool:
        return self._in_flight.locked()

    @property
    def selected_product(self) -> ProductV1 | None:
        return find_product(self._catalog, self._draft["product_id"])

    def load_catalog(self) -> None:
        if self._catalog_attempted:
            return
        self._catalog_attempted = True

        try:
            products = self._service.list_products()
        except FetchError:
            logger.error("Error fetching products", exc_info=True)
            return

        self._catalog = list(products)
        logger.debug("Loaded %d products from %s", len(self._catalog), self._service.name)

    def set_field(self, name: str, value: str) -> None:
        if name not in self._draft:
            raise ValueError(f"Unknown order field: {name!r}")

        self._draft[name] = "" if value is None else str(value)
        self._errors.pop(name, None)

    def blur_field(self, name: str) -> str:
        error = validate_field(name, self._draft.get(name, ""))
        self._errors[name] = error
        return error

    def compute_total_cost(self) -> str:
        return total_cost(self.selected_product, self._draft["quantity"])

    def is_submit_eligible(self) -> bool:
        if self.is_submitting:
            return False
        if not all(self._draft[field].strip() for field in REQUIRED_FIELDS):
            return False
        if any(self._errors.values()):
            return False
        return not validate_draft(self._draft)

    def submit(self) -> SubmitResult:
        # Non-blocking: a duplicate trigger while a submission is in flight is a no-op.
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Submit ignored: submission already in flight")
            return SubmitResult(outcome=SubmitOutcomeV1.BUSY)

        try:
            try:
                payload = build_order_request(self._draft, self._catalog)
            except OrderValidationError as e:
                self._errors = dict(e.errors)
                return SubmitResult(outcome=SubmitOutcomeV1.INVALID)

            try:
                order = self._service.create_order(payload)
            except SubmissionError:
                logger.error("Error placing order", exc_info=True)
                return SubmitResult(
                    outcome=SubmitOutcomeV1.FAILED,
                    notification=NotificationV1(
                        level=NotificationLevelV1.ERROR, message=MSG_PLACE_FAILED
                    ),
                )

            if not order.order_id:
                logger.error("Order Service acknowledged creation without an order id")
                return SubmitResult(
                    outcome=SubmitOutcomeV1.FAILED,
                    notification=NotificationV1(
                        level=NotificationLevelV1.ERROR, message=MSG_PLACE_FAILED
                    ),
                )

            logger.info("Order %s placed for product %s", order.order_id, payload.product_id)
            self._draft = empty_draft()
            self._errors = {}
            return SubmitResult(
                outcome=SubmitOutcomeV1.PLACED,
                notification=NotificationV1(level=NotificationLevelV1.SUCCESS, message=MSG_PLACED),
                order=order,
            )
        finally:
            self._in_flight.release()

    def view(self) -> ComposerViewV1:
        return ComposerViewV1(
            draft=self.draft,
            errors=self.errors,
            products=[
                ProductOptionV1(value=str(p.id), label=f"{p.name} - {p.cost}")
                for p in self._catalog
            ],
            total_cost=self.compute_total_cost(),
            can_submit=self.is_submit_eligible(),
            is_submitting=self.is_submitting,
        )
