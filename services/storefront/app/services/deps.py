from __future__ import annotations

from fastapi import HTTPException, Request, Response
from services.storefront.app.services.store import SessionRecord, store

SESSION_COOKIE = "orderdesk_session"


def get_session(request: Request, response: Response) -> SessionRecord:
    try:
        record, created = store.get_or_create(request.cookies.get(SESSION_COOKIE))
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    if created:
        response.set_cookie(SESSION_COOKIE, record.session_id, httponly=True, samesite="lax")
    return record
