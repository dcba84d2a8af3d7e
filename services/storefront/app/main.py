"""Orderdesk storefront entrypoint."""

import logging
import os

from fastapi import FastAPI

from services.storefront.app.routers.composer import router as composer_router
from services.storefront.app.routers.confirm import router as confirm_router

logging.basicConfig(
    level=os.getenv("ORDERDESK_LOG_LEVEL", "INFO").strip().upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Orderdesk Storefront")

app.include_router(composer_router)
app.include_router(confirm_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
