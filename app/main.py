"""
FastAPI application entrypoint for the TIL relay.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.core.config import get_settings
from app.core.errors import ServiceError
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render taxonomy errors as ``{"message": code, "data": null}``."""
    logger.info(
        "%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc
    )
    return JSONResponse(
        status_code=int(exc.status_code),
        content={"message": exc.code, "data": None},
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="TIL Relay",
        version="0.1.0",
        description="Publishes TIL notes to GitHub and proxies the LLM service.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, service_error_handler)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
