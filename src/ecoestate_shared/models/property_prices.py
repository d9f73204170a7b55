"""
models/property_prices.py — Pydantic models for Statistics Finland price data.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ecoestate_shared.constants import TrendDirection

# A building-type price: euros per m², or "N/A" when StatFin has no figure
Price = int | float | Literal["N/A"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PostalCodeData(_CamelModel):
    """One postal code area for one year."""

    postal_code: str
    district: str
    municipality: str
    full_label: str                 # "00100 Helsinki Keskusta (Helsinki)"
    prices: dict[str, Price]        # building type label -> price

    def numeric_price(self, building_type: str) -> float | None:
        price = self.prices.get(building_type)
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        return float(price)


class TrendMetric(_CamelModel):
    percent_change: float
    direction: TrendDirection
    start_price: float
    end_price: float
    average_yearly_change: float


class PriceTrend(_CamelModel):
    """Start-to-end price movement of one postal code across a trend window."""

    postal_code: str
    district: str
    municipality: str
    full_label: str
    trends: dict[str, TrendMetric | None]
