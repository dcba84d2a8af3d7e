from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from packages.shared.schemas.view import ConfirmationViewV1
from services.storefront.app.services.deps import get_session
from services.storefront.app.services.store import SessionRecord

router = APIRouter()


@router.get("/confirm-order/{order_id}", response_model=ConfirmationViewV1)
def show_confirmation(
    order_id: str,
    response: Response,
    session: SessionRecord = Depends(get_session),
) -> ConfirmationViewV1:
    view = session.confirmation.render(order_id)

    if view.navigate is not None:
        # Browsers follow this after the delay, once the outcome has been shown.
        seconds = max(1, round(view.navigate.delay_ms / 1000))
        response.headers["Refresh"] = f"{seconds}; url={view.navigate.path}"

    return view
