"""Confirmation lifecycle for one visit to /confirm-order/{order_id}.

The lifecycle is an explicit state machine:

    Loading --fetched "Confirmed"-------> AlreadyConfirmed
    Loading --fetched "Order Placed"----> Confirming --ok-----> Confirmed
                                                     --failed-> ConfirmFailed
    Loading --fetched other status------> Unknown
    Loading --fetch failed--------------> Error

`transition` is pure: it maps (state, event) to (next state, effects). The controller
performs the effects and owns the per-visit latch, so the fetch-then-maybe-confirm
sequence runs once per order id no matter how often the screen is rendered.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from packages.shared.schemas.order import OrderStatusV1, OrderV1
from packages.shared.schemas.view import (
    ConfirmationStateV1,
    ConfirmationViewV1,
    NavigationV1,
    NotificationLevelV1,
    NotificationV1,
    OrderDetailsV1,
)
from services.storefront.app.services.order_service_base import (
    ConfirmationError,
    FetchError,
    OrderService,
)

logger = logging.getLogger(__name__)

MSG_FETCH_FAILED = "Failed to fetch order details."
MSG_ALREADY_CONFIRMED = "Order already confirmed!"
MSG_CONFIRMED = "Order confirmed! You will receive a confirmation email."
MSG_CONFIRM_FAILED = "Failed to confirm order. Please try again."


# States


@dataclass(frozen=True, slots=True)
class Loading:
    order_id: str


@dataclass(frozen=True, slots=True)
class AlreadyConfirmed:
    order: OrderV1


@dataclass(frozen=True, slots=True)
class Confirming:
    order: OrderV1


@dataclass(frozen=True, slots=True)
class Confirmed:
    order: OrderV1


@dataclass(frozen=True, slots=True)
class ConfirmFailed:
    order: OrderV1
    reason: str


@dataclass(frozen=True, slots=True)
class Unknown:
    order: OrderV1


@dataclass(frozen=True, slots=True)
class Error:
    order_id: str
    reason: str


State = Loading | AlreadyConfirmed | Confirming | Confirmed | ConfirmFailed | Unknown | Error


# Events


@dataclass(frozen=True, slots=True)
class OrderFetched:
    order: OrderV1


@dataclass(frozen=True, slots=True)
class OrderFetchFailed:
    reason: str


@dataclass(frozen=True, slots=True)
class ConfirmSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class ConfirmRejected:
    reason: str


Event = OrderFetched | OrderFetchFailed | ConfirmSucceeded | ConfirmRejected


# Effects


@dataclass(frozen=True, slots=True)
class FetchOrder:
    order_id: str


@dataclass(frozen=True, slots=True)
class ConfirmOrder:
    order_id: str


@dataclass(frozen=True, slots=True)
class Notify:
    notification: NotificationV1


@dataclass(frozen=True, slots=True)
class NavigateAway:
    navigation: NavigationV1


Effect = FetchOrder | ConfirmOrder | Notify | NavigateAway


def start(order_id: str) -> tuple[State, list[Effect]]:
    return Loading(order_id=order_id), [FetchOrder(order_id=order_id)]


def _finish(level: NotificationLevelV1, message: str, redirect_delay_ms: int) -> list[Effect]:
    return [
        Notify(NotificationV1(level=level, message=message)),
        NavigateAway(NavigationV1(path="/", delay_ms=redirect_delay_ms)),
    ]


def transition(
    state: State, event: Event, *, redirect_delay_ms: int
) -> tuple[State, list[Effect]]:
    if isinstance(state, Loading):
        if isinstance(event, OrderFetchFailed):
            return (
                Error(order_id=state.order_id, reason=event.reason),
                _finish(NotificationLevelV1.ERROR, MSG_FETCH_FAILED, redirect_delay_ms),
            )

        if isinstance(event, OrderFetched):
            order = event.order
            if order.status == OrderStatusV1.CONFIRMED.value:
                return (
                    AlreadyConfirmed(order=order),
                    _finish(NotificationLevelV1.INFO, MSG_ALREADY_CONFIRMED, redirect_delay_ms),
                )
            if order.status == OrderStatusV1.ORDER_PLACED.value:
                return Confirming(order=order), [ConfirmOrder(order_id=order.order_id)]
            return Unknown(order=order), []

    if isinstance(state, Confirming):
        if isinstance(event, ConfirmSucceeded):
            return (
                Confirmed(order=state.order),
                _finish(NotificationLevelV1.SUCCESS, MSG_CONFIRMED, redirect_delay_ms),
            )
        if isinstance(event, ConfirmRejected):
            return (
                ConfirmFailed(order=state.order, reason=event.reason),
                _finish(NotificationLevelV1.ERROR, MSG_CONFIRM_FAILED, redirect_delay_ms),
            )

    return state, []


@dataclass
class _Visit:
    order_id: str
    state: State
    notifications: list[NotificationV1] = field(default_factory=list)
    navigation: NavigationV1 | None = None


class ConfirmationController:
    def __init__(self, service: OrderService, *, redirect_delay_ms: int = 3000) -> None:
        self._service = service
        self._redirect_delay_ms = redirect_delay_ms

        self._lock = threading.Lock()
        # The latch: identity of the visit whose side effects have been started.
        self._visit: _Visit | None = None

    @property
    def state(self) -> State | None:
        visit = self._visit
        return visit.state if visit is not None else None

    def render(self, order_id: str) -> ConfirmationViewV1:
        with self._lock:
            visit = self._visit
            if visit is not None and visit.order_id == order_id:
                return _to_view(visit)

            state, effects = start(order_id)
            visit = _Visit(order_id=order_id, state=state)
            self._visit = visit

        self._run(visit, effects)
        return _to_view(visit)

    def _run(self, visit: _Visit, effects: list[Effect]) -> None:
        pending = list(effects)
        while pending:
            effect = pending.pop(0)
            event = self._perform(visit, effect)
            if event is not None:
                pending.extend(self._dispatch(visit, event))

    def _perform(self, visit: _Visit, effect: Effect) -> Event | None:
        if isinstance(effect, FetchOrder):
            try:
                order = self._service.get_order(effect.order_id)
            except FetchError as e:
                logger.error("Error fetching order %s", effect.order_id, exc_info=True)
                return OrderFetchFailed(reason=str(e))
            return OrderFetched(order=order)

        if isinstance(effect, ConfirmOrder):
            try:
                self._service.confirm_order(effect.order_id)
            except ConfirmationError as e:
                logger.error("Error confirming order %s", effect.order_id, exc_info=True)
                return ConfirmRejected(reason=str(e))
            logger.info("Order %s confirmed", effect.order_id)
            return ConfirmSucceeded()

        with self._lock:
            if self._visit is not visit:
                return None
            if isinstance(effect, Notify):
                visit.notifications.append(effect.notification)
            elif isinstance(effect, NavigateAway):
                visit.navigation = effect.navigation
        return None

    def _dispatch(self, visit: _Visit, event: Event) -> list[Effect]:
        with self._lock:
            if self._visit is not visit:
                # Outcome of a visit the user already left.
                logger.debug(
                    "Dropping %s for superseded visit %s", type(event).__name__, visit.order_id
                )
                return []

            state, effects = transition(
                visit.state, event, redirect_delay_ms=self._redirect_delay_ms
            )
            logger.debug(
                "Order %s: %s -> %s",
                visit.order_id,
                type(visit.state).__name__,
                type(state).__name__,
            )
            visit.state = state
            return effects


def _details(order: OrderV1) -> OrderDetailsV1:
    return OrderDetailsV1(
        order_id=order.order_id,
        customer_name=order.customer_name,
        product_name=order.product.name,
        quantity=order.quantity,
        total_cost=order.total_cost,
        customer_email=order.customer_email,
    )


def _to_view(visit: _Visit) -> ConfirmationViewV1:
    state = visit.state
    common = {
        "order_id": visit.order_id,
        "notifications": list(visit.notifications),
        "navigate": visit.navigation,
    }

    if isinstance(state, Loading):
        return ConfirmationViewV1(
            state=ConfirmationStateV1.LOADING,
            busy=True,
            headline="Confirming your order...",
            **common,
        )

    if isinstance(state, (Confirming, Confirmed, ConfirmFailed)):
        kind = {
            Confirming: ConfirmationStateV1.CONFIRMING,
            Confirmed: ConfirmationStateV1.CONFIRMED,
            ConfirmFailed: ConfirmationStateV1.CONFIRM_FAILED,
        }[type(state)]
        return ConfirmationViewV1(
            state=kind,
            headline="Order Details",
            details=_details(state.order),
            **common,
        )

    if isinstance(state, Error):
        return ConfirmationViewV1(
            state=ConfirmationStateV1.ERROR,
            headline=MSG_FETCH_FAILED,
            **common,
        )

    kind = (
        ConfirmationStateV1.ALREADY_CONFIRMED
        if isinstance(state, AlreadyConfirmed)
        else ConfirmationStateV1.UNKNOWN
    )
    return ConfirmationViewV1(state=kind, headline="Order already confirmed", **common)
