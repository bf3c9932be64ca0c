from __future__ import annotations  # FastAPI server exposing station marking

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from api.routes import get_catalog, router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:  # Fail fast on a broken catalog file
    catalog = get_catalog()
    logger.info("Station catalog ready: %s", ", ".join(catalog.ids()))
    yield


app = FastAPI(title="Station Marking API", lifespan=lifespan)
app.include_router(router)


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}
