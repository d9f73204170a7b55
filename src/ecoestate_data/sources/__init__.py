"""
ecoestate_data.sources — cached remote data sources.

Each source wraps one external service behind its own TTLCache:
  PostalBoundarySource  — HSY WFS postal code polygons (GeoJSON, EPSG:3879)
  GreenSpaceSource      — Overpass API parks and forests (GeoJSON)
  WalkingDistanceSource — HSY WMS walking-distance zones for a point
  PropertyPriceSource   — Statistics Finland prices per m² by postal code
"""

from ecoestate_data.sources.hsy_wfs import PostalBoundarySource
from ecoestate_data.sources.hsy_wms import WalkingDistanceSource
from ecoestate_data.sources.overpass import GreenSpaceSource
from ecoestate_data.sources.statfi import PropertyPriceSource

__all__ = [
    "PostalBoundarySource",
    "GreenSpaceSource",
    "WalkingDistanceSource",
    "PropertyPriceSource",
]
