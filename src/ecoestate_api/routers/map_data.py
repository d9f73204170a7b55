"""Map overlay endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ecoestate_api.dependencies import DataServices, get_services

router = APIRouter(prefix="/map-data", tags=["map-data"])


@router.get("/green-spaces")
async def green_spaces(services: DataServices = Depends(get_services)) -> dict:
    """Parks, forests and other green areas of the Helsinki region (GeoJSON).

    Failures upstream yield an empty FeatureCollection rather than an error.
    """
    collection = await services.green_spaces.fetch_green_spaces()
    return collection.to_geojson()
