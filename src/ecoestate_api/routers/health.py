"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ecoestate_api import __version__
from ecoestate_api.dependencies import DataServices, get_services

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(services: DataServices = Depends(get_services)) -> dict:
    return {"status": "ready", "caches": services.cache_sizes()}
