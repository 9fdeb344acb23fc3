# src/gpstriangulation/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and mounts the routes.
Business logic lives in `gpstriangulation.matching` and `gpstriangulation.core`.

Run locally with: `uvicorn gpstriangulation.api.app:app --reload`
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from gpstriangulation.config.settings import get_settings
from gpstriangulation.core.logging import configure_logging

from .routes import router

configure_logging()

logger = logging.getLogger(__name__)

_settings = get_settings()
_dev = _settings.app.is_development

# OpenAPI docs are only exposed in development mode.
app = FastAPI(
    title=f"{_settings.app.name} API",
    version="0.1.0",
    docs_url="/docs" if _dev else None,
    redoc_url="/redoc" if _dev else None,
    openapi_url="/openapi.json" if _dev else None,
)
if _dev:
    logger.info("Development mode: serving OpenAPI docs at /docs")

app.include_router(router)
