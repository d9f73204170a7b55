"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecoestate_shared.config import settings

from ecoestate_api import __version__
from ecoestate_api.middleware.logging import RequestLoggingMiddleware
from ecoestate_api.routers import api_router
from ecoestate_api.routers.health import router as health_router
from ecoestate_data.registry import DataServices, build_services
from ecoestate_data.scheduler import build_scheduler
from ecoestate_data.utils.logging import configure_logging

logger = structlog.get_logger()


def create_app(
    services: DataServices | None = None,
    *,
    enable_scheduler: bool | None = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        services:         Pre-built data services (tests). Built in the
                          lifespan with a shared HTTP client otherwise.
        enable_scheduler: Run the cache-clearing jobs. Defaults to
                          settings.scheduler_enabled.
    """
    run_scheduler = settings.scheduler_enabled if enable_scheduler is None else enable_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        if app.state.services is None:
            client = httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True)
            app.state.services = build_services(client=client)

        scheduler = None
        if run_scheduler:
            scheduler = build_scheduler(app.state.services)
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            await app.state.services.aclose()
            logger.info("app_stopped")

    app = FastAPI(
        title="EcoEstate API",
        description="Property prices and environmental map layers for the Helsinki region",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Routers
    app.include_router(health_router)
    app.include_router(api_router)

    logger.info("app_created", cors_origins=settings.cors_origins_list)
    return app


app = create_app()
