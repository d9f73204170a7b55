"""
transforms/trends.py — Price trends across a window of yearly snapshots.

calculate_trends() joins one list of PostalCodeData per year on postal code
and, for each of the four tracked building types, compares the first year's
price with the last year's. Years in between are ignored even when present,
so a code priced in 2018 and 2022 but missing in 2019-2021 still gets a trend.

A (postal code, building type) pair has no trend (None) when either endpoint
is missing or "N/A", or the start price is not positive. Postal codes without
a single trend are left out. District, municipality and label come from the
earliest year in which the code appears.

Partial data is the normal state (codes appear, get renamed, years lack
coverage), so bad input yields fewer results rather than exceptions.

Usage:
    snapshots = [await source.fetch_property_prices(str(y)) for y in range(2019, 2024)]
    trends = calculate_trends(snapshots, 2019, 2023)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import structlog

from ecoestate_shared.config import settings
from ecoestate_shared.constants import BUILDING_TYPES, TREND_STABLE_THRESHOLD, TrendDirection
from ecoestate_shared.models import PostalCodeData, PriceTrend, TrendMetric

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TrendWindow:
    start_year: int
    end_year: int
    period_length: int

    def metadata(self) -> dict[str, int]:
        return {
            "startYear": self.start_year,
            "endYear": self.end_year,
            "periodLength": self.period_length,
        }


def trend_window(end_year: int | None = None, *, today: date | None = None) -> TrendWindow:
    """
    Fixed-length window ending at end_year (last calendar year by default).

    Length and earliest start come from settings.trend_period_length and
    settings.price_min_year.

    Raises:
        ValueError: the window would start before the first year with data.
    """
    period_length = settings.trend_period_length
    end = end_year or (today or date.today()).year - 1
    start = end - (period_length - 1)
    if start < settings.price_min_year:
        raise ValueError(
            f"Invalid period. Start year ({start}) must be "
            f"{settings.price_min_year} or later."
        )
    return TrendWindow(start_year=start, end_year=end, period_length=period_length)


def classify_direction(percent_change: float) -> TrendDirection:
    """Up above +1 %, down below -1 %, stable in between (bounds inclusive)."""
    if percent_change > TREND_STABLE_THRESHOLD:
        return "up"
    if percent_change < -TREND_STABLE_THRESHOLD:
        return "down"
    return "stable"


def compute_trend_metric(
    start_price: float | None,
    end_price: float | None,
    period_length: int,
) -> TrendMetric | None:
    """Trend between two endpoint prices, or None if it cannot be computed."""
    if start_price is None or end_price is None or start_price <= 0 or period_length < 2:
        return None
    change = end_price - start_price
    percent_change = change / start_price * 100
    return TrendMetric(
        percent_change=round(percent_change, 2),
        direction=classify_direction(percent_change),
        start_price=start_price,
        end_price=end_price,
        average_yearly_change=round(change / (period_length - 1), 2),
    )


def _by_postal_code(snapshot: Sequence[PostalCodeData]) -> dict[str, PostalCodeData]:
    rows: dict[str, PostalCodeData] = {}
    for row in snapshot:
        rows.setdefault(row.postal_code, row)
    return rows


def calculate_trends(
    yearly_snapshots: Sequence[Sequence[PostalCodeData]],
    start_year: int,
    end_year: int,
    *,
    building_types: Sequence[str] = BUILDING_TYPES,
) -> list[PriceTrend]:
    """
    Compute per-postal-code, per-building-type trends for a year window.

    Args:
        yearly_snapshots: yearly_snapshots[i] holds every row for start_year + i.
        start_year:       First year of the window.
        end_year:         Last year of the window (inclusive).
        building_types:   Categories to compare; the four StatFin types by default.

    Returns:
        One PriceTrend per postal code with at least one non-null trend, in the
        order the codes first appear across the snapshots. Empty when the
        window is shorter than two years or does not match the snapshot count.
    """
    period_length = end_year - start_year + 1
    if period_length < 2 or len(yearly_snapshots) != period_length:
        log.warning(
            "trend_window_invalid",
            start_year=start_year,
            end_year=end_year,
            snapshots=len(yearly_snapshots),
        )
        return []

    first_seen: dict[str, PostalCodeData] = {}
    for snapshot in yearly_snapshots:
        for row in snapshot:
            first_seen.setdefault(row.postal_code, row)

    start_rows = _by_postal_code(yearly_snapshots[0])
    end_rows = _by_postal_code(yearly_snapshots[-1])

    results: list[PriceTrend] = []
    for postal_code, label_row in first_seen.items():
        start_row = start_rows.get(postal_code)
        end_row = end_rows.get(postal_code)
        trends = {
            building_type: compute_trend_metric(
                start_row.numeric_price(building_type) if start_row else None,
                end_row.numeric_price(building_type) if end_row else None,
                period_length,
            )
            for building_type in building_types
        }
        if all(metric is None for metric in trends.values()):
            continue
        results.append(
            PriceTrend(
                postal_code=postal_code,
                district=label_row.district,
                municipality=label_row.municipality,
                full_label=label_row.full_label,
                trends=trends,
            )
        )

    log.debug(
        "trends_calculated",
        start_year=start_year,
        end_year=end_year,
        postal_codes=len(first_seen),
        with_trend=len(results),
    )
    return results
