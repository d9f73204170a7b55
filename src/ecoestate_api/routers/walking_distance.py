"""Walking-distance zone endpoint."""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from ecoestate_api.dependencies import DataServices, get_services

router = APIRouter(prefix="/walking-distance", tags=["walking-distance"])


def _coordinate(raw: str | None, name: str) -> float:
    if raw is None or not raw.strip():
        raise HTTPException(
            status_code=400,
            detail="Missing or invalid query parameters: x and y are required.",
        )
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid coordinate value for {name}: x and y must be numbers.",
        )
    return value


@router.get("")
async def walking_distance(
    x: str | None = Query(None, description="Easting in EPSG:3879"),
    y: str | None = Query(None, description="Northing in EPSG:3879"),
    services: DataServices = Depends(get_services),
):
    x_coord = _coordinate(x, "x")
    y_coord = _coordinate(y, "y")

    zone = await services.walking_distance.get_walking_distance(x_coord, y_coord)
    if zone is None:
        return JSONResponse(
            status_code=404,
            content={
                "message": "Point is outside known walking distance zones or data unavailable.",
                "walkingDistance": None,
            },
        )
    return {"walkingDistance": zone}
