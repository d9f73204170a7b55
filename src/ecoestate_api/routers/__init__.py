"""API routers mounted under /api."""

from fastapi import APIRouter

from ecoestate_api.routers.map_data import router as map_data_router
from ecoestate_api.routers.postcodes import router as postcodes_router
from ecoestate_api.routers.property_prices import router as property_prices_router
from ecoestate_api.routers.walking_distance import router as walking_distance_router

api_router = APIRouter(prefix="/api")
api_router.include_router(property_prices_router)
api_router.include_router(map_data_router)
api_router.include_router(walking_distance_router)
api_router.include_router(postcodes_router)

__all__ = ["api_router"]
