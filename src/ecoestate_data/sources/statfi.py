"""
sources/statfi.py — Statistics Finland (StatFin) property price source.

Queries the PxWeb API table `statfin_ashi_pxt_13mu.px` (prices of old
dwellings in housing companies by postal code) for one year at a time and
returns the average price per m² for each postal code and building type.

Request:
  POST {statfi_base_url}/{statfi_table_id}
  {"query": [{"code": "Vuosi",  "selection": {"filter": "item", "values": ["2023"]}},
             {"code": "Tiedot", "selection": {"filter": "item", "values": ["keskihinta_aritm_nw"]}}],
   "response": {"format": "json-stat2"}}

Each year is cached separately (key = the year string). Unlike the map
layers there is no safe empty result for a year of prices, so every failure
is re-raised as PropertyPriceFetchError and nothing is cached.

Usage:
    source = PropertyPriceSource(TTLCache("StatFi Property Prices", ttl=86400))
    rows = await source.fetch_property_prices("2023")
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

import structlog

from ecoestate_shared.config import settings
from ecoestate_shared.constants import METRIC_DIMENSION, PRICE_METRIC, YEAR_DIMENSION
from ecoestate_shared.models import PostalCodeData, PriceTrend
from ecoestate_data.errors import PropertyPriceFetchError, RemoteBadResponse
from ecoestate_data.sources.base import CachedSource
from ecoestate_data.transforms.jsonstat import parse_property_prices
from ecoestate_data.transforms.trends import calculate_trends

log = structlog.get_logger(__name__)

DEFAULT_YEAR = "2023"

_YEAR_RE = re.compile(r"[0-9]{4}")


def build_price_query(year: str) -> dict[str, Any]:
    """PxWeb query selecting one year of the average price per m²."""
    return {
        "query": [
            {
                "code": YEAR_DIMENSION,
                "selection": {"filter": "item", "values": [year]},
            },
            {
                "code": METRIC_DIMENSION,
                "selection": {"filter": "item", "values": [PRICE_METRIC]},
            },
        ],
        "response": {"format": "json-stat2"},
    }


class PropertyPriceSource(CachedSource[list[PostalCodeData]]):
    """Average prices per m² by postal code and building type, one year per call."""

    name = "StatFin"

    @property
    def table_url(self) -> str:
        return settings.statfi_table_url

    async def extract(self, *, year: str, **kwargs: Any) -> Any:
        self._log.info("statfi_fetch", year=year, url=self.table_url)
        return await self._request_json(
            "POST",
            self.table_url,
            json=build_price_query(year),
            headers={"Content-Type": "application/json"},
        )

    def transform(self, raw: Any) -> list[PostalCodeData]:
        try:
            rows = parse_property_prices(raw)
        except ValueError as exc:
            raise RemoteBadResponse(self.name, str(exc)) from exc
        self._log.info("statfi_parsed", postal_codes=len(rows))
        return rows

    async def fetch_property_prices(self, year: str = DEFAULT_YEAR) -> list[PostalCodeData]:
        """
        Property prices for every postal code with at least one price in `year`.

        Args:
            year: Four-digit year string. Range checks are the caller's job.

        Raises:
            ValueError:              year is not a four-digit string.
            PropertyPriceFetchError: the API call or response parsing failed.
        """
        if not isinstance(year, str) or not _YEAR_RE.fullmatch(year):
            raise ValueError(f"year must be a 4-digit string, got {year!r}")
        try:
            return await self.read_through(year, year=year)
        except Exception as exc:
            self._log.error("property_prices_failed", year=year, error=str(exc))
            raise PropertyPriceFetchError(year) from exc

    async def fetch_price_trends(self, start_year: int, end_year: int) -> list[PriceTrend]:
        """
        Fetch every year of the window concurrently and aggregate the trends.

        Each year is read through the cache independently, so overlapping
        windows reuse already fetched years.

        Raises:
            PropertyPriceFetchError: any year in the window failed.
        """
        years = [str(year) for year in range(start_year, end_year + 1)]
        snapshots = await asyncio.gather(
            *(self.fetch_property_prices(year) for year in years)
        )
        return calculate_trends(list(snapshots), start_year, end_year)
