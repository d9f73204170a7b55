"""Postal code boundary endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ecoestate_api.dependencies import DataServices, get_services
from ecoestate_api.responses import error_response

router = APIRouter(prefix="/postcodes", tags=["postcodes"])


@router.get("")
async def postcode_boundaries(services: DataServices = Depends(get_services)):
    """All postal code areas as GeoJSON in EPSG:3879."""
    collection = await services.postal_boundaries.fetch_postal_boundaries()
    if collection.is_empty():
        # The source logs the underlying failure
        return JSONResponse(
            status_code=500,
            content=error_response("Failed to retrieve postcode boundaries."),
        )
    return JSONResponse(
        content=collection.to_geojson(),
        media_type="application/geo+json",
    )
