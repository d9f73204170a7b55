"""
sources/hsy_wfs.py — HSY WFS postal code boundary source.

Downloads every polygon of the Helsinki-region postal code layer as GeoJSON.
Coordinates are requested and returned in EPSG:3879; reprojection is left to
the consumer.

Request:
  GET https://kartta.hsy.fi/geoserver/wfs?SERVICE=WFS&VERSION=2.0.0
      &REQUEST=GetFeature&TYPENAMES=<layer>&OUTPUTFORMAT=application/json
      &SRSNAME=EPSG:3879

The layer is not parameterized per request, so the whole collection lives
under one cache key. On failure an empty collection is returned and nothing
is cached.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ecoestate_shared.config import settings
from ecoestate_shared.constants import HSY_CRS, POSTCODE_LAYER
from ecoestate_shared.models import FeatureCollection
from ecoestate_data.errors import RemoteBadResponse, RemoteError
from ecoestate_data.sources.base import CachedSource

CACHE_KEY = "all_postcodes"

WFS_VERSION = "2.0.0"


class PostalBoundarySource(CachedSource[FeatureCollection]):
    """Postal code area polygons from the HSY geoserver."""

    name = "HSY WFS"

    @staticmethod
    def query_params() -> dict[str, str]:
        return {
            "SERVICE": "WFS",
            "VERSION": WFS_VERSION,
            "REQUEST": "GetFeature",
            "TYPENAMES": POSTCODE_LAYER,
            "OUTPUTFORMAT": "application/json",
            "SRSNAME": HSY_CRS,
        }

    async def extract(self, **kwargs: Any) -> Any:
        self._log.info("wfs_fetch", layer=POSTCODE_LAYER)
        return await self._request_json(
            "GET", settings.hsy_wfs_url, params=self.query_params()
        )

    def transform(self, raw: Any) -> FeatureCollection:
        try:
            collection = FeatureCollection.model_validate(raw)
        except ValidationError as exc:
            raise RemoteBadResponse(
                self.name, f"response is not a GeoJSON FeatureCollection: {exc.error_count()} errors"
            ) from exc
        self._log.info("wfs_parsed", features=len(collection.features))
        return collection

    async def fetch_postal_boundaries(self) -> FeatureCollection:
        """
        All postal code boundaries (EPSG:3879).

        Returns an empty FeatureCollection when the service fails or answers
        with something other than a FeatureCollection; the failure is logged
        and the next call tries again.
        """
        try:
            return await self.read_through(CACHE_KEY)
        except RemoteError as exc:
            self._log.error("postal_boundaries_unavailable", error=str(exc))
            return FeatureCollection.empty()
