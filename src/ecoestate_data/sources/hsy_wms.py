"""
sources/hsy_wms.py — HSY WMS walking-distance zones.

HSY publishes three polygon layers marking the areas within a 5, 10 and
15 minute walk of a public transport stop. A point's zone is found by asking
each layer in turn (WMS 1.1.1 GetFeatureInfo on a 20 m box around the point)
and stopping at the first layer that reports a feature.

Every probe has three outcomes:

  FOUND      the layer has a feature at the point
  NOT_FOUND  the layer answered and has no feature there
  ERROR      the layer could not be checked (network, HTTP, bad payload)

Callers only see the zone or None, but caching depends on the difference:
None is cached only when every probe answered NOT_FOUND. If any probe failed,
None is returned uncached so the next request checks again.

Usage:
    source = WalkingDistanceSource(TTLCache("HSY WMS Walking Distance", ttl=86400))
    zone = await source.get_walking_distance(25496000.0, 6673000.0)   # "5min" | ... | None
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from ecoestate_shared.config import settings
from ecoestate_shared.constants import HSY_CRS, WALKING_ZONE_LAYERS, WalkingZone
from ecoestate_data.errors import RemoteBadResponse, RemoteError
from ecoestate_data.sources.base import CachedSource
from ecoestate_data.utils.cache import MISSING

# Half-width of the query box in metres (EPSG:3879 units)
PROBE_BUFFER_M = 10
PROBE_IMAGE_PX = 10

SOURCE_NAME = "HSY WMS"


class ProbeResult(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class ZoneLookup:
    """Outcome of probing the zone layers for one point."""

    zone: WalkingZone | None = None
    probes: dict[str, ProbeResult] = field(default_factory=dict)

    @property
    def had_errors(self) -> bool:
        return ProbeResult.ERROR in self.probes.values()

    @property
    def cacheable(self) -> bool:
        return self.zone is not None or not self.had_errors


def cache_key(x: float, y: float) -> str:
    return f"{x},{y}"


def feature_info_params(layer: str, x: float, y: float) -> dict[str, str | int]:
    """GetFeatureInfo parameters querying the centre pixel of a box around (x, y)."""
    bbox = (
        f"{x - PROBE_BUFFER_M},{y - PROBE_BUFFER_M},"
        f"{x + PROBE_BUFFER_M},{y + PROBE_BUFFER_M}"
    )
    return {
        "SERVICE": "WMS",
        "VERSION": "1.1.1",
        "REQUEST": "GetFeatureInfo",
        "LAYERS": layer,
        "QUERY_LAYERS": layer,
        "STYLES": "",
        "SRS": HSY_CRS,
        "BBOX": bbox,
        "WIDTH": PROBE_IMAGE_PX,
        "HEIGHT": PROBE_IMAGE_PX,
        "X": PROBE_IMAGE_PX // 2,
        "Y": PROBE_IMAGE_PX // 2,
        "INFO_FORMAT": "application/json",
        "FEATURE_COUNT": 1,
    }


def probe_result(raw: Any) -> ProbeResult:
    """
    Classify one GetFeatureInfo answer.

    Raises:
        RemoteBadResponse: the payload is not a GeoJSON FeatureCollection.
    """
    if (
        not isinstance(raw, dict)
        or raw.get("type") != "FeatureCollection"
        or not isinstance(raw.get("features"), list)
    ):
        raise RemoteBadResponse(SOURCE_NAME, "GetFeatureInfo did not return a FeatureCollection")
    return ProbeResult.FOUND if raw["features"] else ProbeResult.NOT_FOUND


class WalkingDistanceSource(CachedSource[WalkingZone | None]):
    """
    Shortest walking-distance zone for a point in EPSG:3879.

    extract() runs the whole probe sequence and returns a ZoneLookup;
    transform() reduces it to the zone. get_walking_distance() does not go
    through read_through(): read_through() would cache every result, while a
    None produced by a failed probe must stay uncached.
    """

    name = SOURCE_NAME

    # ------------------------------------------------------------------
    # Probing
    # ------------------------------------------------------------------

    async def probe_zone(self, zone: str, x: float, y: float) -> ProbeResult:
        """Check one zone layer. Failures are logged and reported as ERROR."""
        layer = WALKING_ZONE_LAYERS[zone]
        try:
            raw = await self._request_json(
                "GET", settings.hsy_wms_url, params=feature_info_params(layer, x, y)
            )
            result = probe_result(raw)
        except RemoteError as exc:
            self._log.warning("zone_probe_failed", zone=zone, layer=layer, error=str(exc))
            return ProbeResult.ERROR
        self._log.debug("zone_probe", zone=zone, result=result.value)
        return result

    async def extract(self, *, x: float, y: float, **kwargs: Any) -> ZoneLookup:
        """Probe 5 → 10 → 15 minutes, stopping at the first FOUND."""
        lookup = ZoneLookup()
        for zone in WALKING_ZONE_LAYERS:
            result = await self.probe_zone(zone, x, y)
            lookup.probes[zone] = result
            if result is ProbeResult.FOUND:
                lookup.zone = zone  # type: ignore[assignment]
                break
        return lookup

    def transform(self, raw: ZoneLookup) -> WalkingZone | None:
        return raw.zone

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_walking_distance(self, x: float, y: float) -> WalkingZone | None:
        """
        "5min", "10min" or "15min", or None when outside every zone or unknown.

        Args:
            x: Easting in EPSG:3879.
            y: Northing in EPSG:3879.
        """
        key = cache_key(x, y)
        cached = self.cache.get(key)
        if cached is not MISSING:
            return cached

        lookup = await self.extract(x=x, y=y)
        zone = self.transform(lookup)
        if lookup.cacheable:
            self.cache.set(key, zone)
        else:
            self._log.warning(
                "walking_distance_unknown",
                cache_key=key,
                probes={name: result.value for name, result in lookup.probes.items()},
            )
        self._log.info("walking_distance", cache_key=key, zone=zone)
        return zone
