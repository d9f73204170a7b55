"""
sources/overpass.py — OpenStreetMap green spaces via the Overpass API.

Fetches parks, gardens, forests, meadows and similar areas inside a fixed
Helsinki-region bounding box and converts them to GeoJSON.

Request:
  POST https://overpass-api.de/api/interpreter   (form field `data` = Overpass QL)

Overpass QL (abridged):
  [out:json][timeout:60][bbox:59.9,24.4,60.5,25.4];
  (
    node["leisure"="park"]; way["leisure"="park"]; relation["leisure"="park"];
    ...
  );
  out body;
  >;
  out skel qt;

The query takes no request parameters, so one cache key covers it. Callers
(the map UI) always get a FeatureCollection: failures return an empty one,
which is not cached.
"""

from __future__ import annotations

from typing import Any

from ecoestate_shared.config import settings
from ecoestate_shared.constants import GREEN_SPACE_TAGS, HELSINKI_REGION_BBOX
from ecoestate_shared.models import FeatureCollection
from ecoestate_data.errors import RemoteBadResponse, RemoteError
from ecoestate_data.sources.base import CachedSource
from ecoestate_data.transforms.osm import overpass_to_geojson

CACHE_KEY = "helsinki_region_green_spaces"

# Server-side query budget in seconds, part of the QL settings line
QUERY_TIMEOUT_S = 60


def build_green_space_query(
    bbox: str = HELSINKI_REGION_BBOX,
    tags: tuple[tuple[str, str], ...] = GREEN_SPACE_TAGS,
) -> str:
    """Overpass QL selecting every node, way and relation carrying one of `tags`."""
    selectors = "\n".join(
        f'  {kind}["{key}"="{value}"];'
        for key, value in tags
        for kind in ("node", "way", "relation")
    )
    return (
        f"[out:json][timeout:{QUERY_TIMEOUT_S}][bbox:{bbox}];\n"
        f"(\n{selectors}\n);\n"
        "out body;\n"
        ">;\n"
        "out skel qt;\n"
    )


class GreenSpaceSource(CachedSource[FeatureCollection]):
    """Helsinki-region green spaces as GeoJSON."""

    name = "Overpass"

    async def extract(self, **kwargs: Any) -> Any:
        self._log.info("overpass_fetch", bbox=HELSINKI_REGION_BBOX)
        return await self._request_json(
            "POST",
            settings.overpass_url,
            data={"data": build_green_space_query()},
            timeout=settings.overpass_timeout,
        )

    def transform(self, raw: Any) -> FeatureCollection:
        if not isinstance(raw, dict) or not isinstance(raw.get("elements"), list):
            raise RemoteBadResponse(self.name, "response has no 'elements' list")
        try:
            collection = overpass_to_geojson(raw["elements"])
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise RemoteBadResponse(self.name, f"malformed OSM element: {exc!r}") from exc
        self._log.info(
            "overpass_converted",
            elements=len(raw["elements"]),
            features=len(collection.features),
        )
        return collection

    async def fetch_green_spaces(self) -> FeatureCollection:
        """
        Green spaces of the Helsinki region. Never raises.

        A successful query with no matches is cached like any other result;
        a failed query yields an empty collection and is retried next call.
        """
        try:
            return await self.read_through(CACHE_KEY)
        except RemoteError as exc:
            self._log.error("green_spaces_unavailable", error=str(exc))
            return FeatureCollection.empty()
