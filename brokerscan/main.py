"""FastAPI application.

Assembles CORS, the shared outbound HTTP client and all API routers.
Run with ``uvicorn brokerscan.main:app``.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brokerscan.api.routes.brokers import router as brokers_router
from brokerscan.api.routes.health import router as health_router
from brokerscan.api.routes.scans import router as scans_router
from brokerscan.core.logging import setup_logging
from brokerscan.core.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    settings = get_settings()
    app.state.http_client = httpx.AsyncClient(timeout=settings.scan_call_timeout_s)
    logger.info("Outbound HTTP client ready (timeout=%ss)", settings.scan_call_timeout_s)
    try:
        yield
    finally:
        await app.state.http_client.aclose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(brokers_router)
app.include_router(scans_router)
