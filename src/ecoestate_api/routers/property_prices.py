"""Property price and price trend endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from ecoestate_api.dependencies import DataServices, get_services
from ecoestate_api.responses import wrap_response
from ecoestate_api.services.property_service import prices_to_csv, validate_year
from ecoestate_data.errors import PropertyPriceFetchError
from ecoestate_data.transforms.trends import trend_window

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/property-prices", tags=["property-prices"])


@router.get("")
async def prices_for_year(
    year: str | None = Query(None, description="Four-digit year, 2010 to current"),
    format: str = Query("json", pattern="^(json|csv)$"),
    services: DataServices = Depends(get_services),
):
    try:
        year = validate_year(year)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        rows = await services.property_prices.fetch_property_prices(year)
    except PropertyPriceFetchError as exc:
        log.error("prices_route_failed", year=year, error=str(exc))
        raise HTTPException(
            status_code=500,
            detail="Internal server error while retrieving property prices for the specified year.",
        ) from exc

    if format == "csv":
        return StreamingResponse(
            iter([prices_to_csv(rows)]),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="property_prices_{year}.csv"'},
        )
    return wrap_response([row.to_api_dict() for row in rows])


@router.get("/trends")
async def price_trends(
    end_year: int | None = Query(None, alias="endYear"),
    services: DataServices = Depends(get_services),
):
    try:
        window = trend_window(end_year)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        trends = await services.property_prices.fetch_price_trends(
            window.start_year, window.end_year
        )
    except PropertyPriceFetchError as exc:
        log.error("trends_route_failed", window=window.metadata(), error=str(exc))
        raise HTTPException(
            status_code=500,
            detail="Internal server error while retrieving property price trends.",
        ) from exc

    return wrap_response(
        [trend.to_api_dict() for trend in trends],
        metadata=window.metadata(),
    )
