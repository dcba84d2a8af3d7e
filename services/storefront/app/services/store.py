from __future__ import annotations

import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from uuid import uuid4

from services.storefront.app.services.order_service_factory import (
    get_order_service,
    redirect_delay_ms,
)
from services.storefront.app.workflow.composer import OrderComposer
from services.storefront.app.workflow.confirmation import ConfirmationController


@dataclass
class SessionRecord:
    session_id: str
    composer: OrderComposer
    confirmation: ConfirmationController


def session_limit() -> int:
    raw = os.getenv("ORDERDESK_MAX_SESSIONS", "1000").strip()
    try:
        return max(1, int(raw))
    except ValueError as e:
        raise ValueError(f"ORDERDESK_MAX_SESSIONS must be an integer, got {raw!r}") from e


class InMemorySessionStore:
    """Per-browser screen state. Nothing here outlives the process.

    Holds at most max_sessions records; the least recently used one is dropped first.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._max_sessions = max(1, max_sessions) if max_sessions is not None else session_limit()
        self._sessions: OrderedDict[str, SessionRecord] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(self, session_id: str | None) -> tuple[SessionRecord, bool]:
        with self._lock:
            if session_id:
                record = self._sessions.get(session_id)
                if record is not None:
                    self._sessions.move_to_end(session_id)
                    return record, False

            service = get_order_service()
            record = SessionRecord(
                session_id=uuid4().hex,
                composer=OrderComposer(service),
                confirmation=ConfirmationController(
                    service, redirect_delay_ms=redirect_delay_ms()
                ),
            )
            self._sessions[record.session_id] = record
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
            return record, True

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


store = InMemorySessionStore()
