"""
registry.py — Build the caches and sources once and share them.

Each resource type gets exactly one TTLCache, constructed at process start
and injected into its source. The API keeps the DataServices instance on
app.state, the scheduler clears its caches, and tests build their own with
fake clocks or short TTLs.

Usage:
    services = build_services()
    zone = await services.walking_distance.get_walking_distance(x, y)
    services.clear_all()
    await services.aclose()
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from ecoestate_shared.config import Settings, settings as default_settings
from ecoestate_shared.constants import WalkingZone
from ecoestate_shared.models import FeatureCollection, PostalCodeData
from ecoestate_data.sources import (
    GreenSpaceSource,
    PostalBoundarySource,
    PropertyPriceSource,
    WalkingDistanceSource,
)
from ecoestate_data.sources.base import CachedSource
from ecoestate_data.utils.cache import TTLCache

log = structlog.get_logger(__name__)


@dataclass
class DataServices:
    postal_boundaries: PostalBoundarySource
    green_spaces: GreenSpaceSource
    walking_distance: WalkingDistanceSource
    property_prices: PropertyPriceSource
    client: httpx.AsyncClient | None = field(default=None, repr=False)

    @property
    def sources(self) -> tuple[CachedSource, ...]:
        return (
            self.postal_boundaries,
            self.green_spaces,
            self.walking_distance,
            self.property_prices,
        )

    def clear_all(self) -> None:
        for source in self.sources:
            source.clear_cache()

    def cache_sizes(self) -> dict[str, int]:
        return {source.cache.name: source.cache.size() for source in self.sources}

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None


def build_services(
    config: Settings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> DataServices:
    """
    Construct every cache and source.

    Args:
        config: Settings to read TTLs and timeouts from (module settings by default).
        client: Shared HTTP client. When omitted each call opens its own.

    Raises:
        ValueError: a configured TTL is not positive.
    """
    config = config or default_settings

    postcode_cache: TTLCache[FeatureCollection] = TTLCache(
        "HSY WFS Postcodes", config.postcode_cache_ttl
    )
    green_space_cache: TTLCache[FeatureCollection] = TTLCache(
        "Overpass Green Spaces GeoJSON", config.green_space_cache_ttl
    )
    walking_cache: TTLCache[WalkingZone | None] = TTLCache(
        "HSY WMS Walking Distance", config.walking_distance_cache_ttl
    )
    price_cache: TTLCache[list[PostalCodeData]] = TTLCache(
        "StatFi Property Prices", config.property_price_cache_ttl
    )

    services = DataServices(
        postal_boundaries=PostalBoundarySource(
            postcode_cache, client=client, timeout=config.http_timeout
        ),
        green_spaces=GreenSpaceSource(
            green_space_cache, client=client, timeout=config.http_timeout
        ),
        walking_distance=WalkingDistanceSource(
            walking_cache, client=client, timeout=config.http_timeout
        ),
        property_prices=PropertyPriceSource(
            price_cache, client=client, timeout=config.http_timeout
        ),
        client=client,
    )
    log.info("services_built", caches=services.cache_sizes())
    return services
