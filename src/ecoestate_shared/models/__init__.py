"""
ecoestate_shared.models — Pydantic models for the data the backend serves.

These models are used by:
- ecoestate_data: canonical shapes produced by the source transforms
- ecoestate_api: serialized into API responses (camelCase aliases)
"""

from ecoestate_shared.models.geojson import Feature, FeatureCollection
from ecoestate_shared.models.property_prices import PostalCodeData, PriceTrend, TrendMetric

__all__ = [
    "Feature",
    "FeatureCollection",
    "PostalCodeData",
    "PriceTrend",
    "TrendMetric",
]
