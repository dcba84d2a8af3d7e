from __future__ import annotations

from fastapi import APIRouter, Depends
from packages.shared.schemas.view import ComposerViewV1, SubmitResponseV1
from services.storefront.app.models.composer import FieldBlurRequest, FieldUpdateRequest
from services.storefront.app.services.deps import get_session
from services.storefront.app.services.store import SessionRecord

router = APIRouter()


@router.get("/", response_model=ComposerViewV1)
def show_composer(session: SessionRecord = Depends(get_session)) -> ComposerViewV1:
    composer = session.composer
    composer.load_catalog()
    return composer.view()


@router.post("/composer/field", response_model=ComposerViewV1)
def update_field(
    payload: FieldUpdateRequest, session: SessionRecord = Depends(get_session)
) -> ComposerViewV1:
    composer = session.composer
    composer.set_field(payload.name, payload.value)
    return composer.view()


@router.post("/composer/blur", response_model=ComposerViewV1)
def blur_field(
    payload: FieldBlurRequest, session: SessionRecord = Depends(get_session)
) -> ComposerViewV1:
    composer = session.composer
    composer.blur_field(payload.name)
    return composer.view()


@router.post("/composer/submit", response_model=SubmitResponseV1)
def submit_order(session: SessionRecord = Depends(get_session)) -> SubmitResponseV1:
    composer = session.composer
    result = composer.submit()
    return SubmitResponseV1(
        outcome=result.outcome,
        notification=result.notification,
        order=result.order,
        view=composer.view(),
    )
