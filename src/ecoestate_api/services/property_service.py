"""Property price request validation and CSV export."""

from __future__ import annotations

import re
from datetime import date

import polars as pl

from ecoestate_shared.config import settings
from ecoestate_shared.constants import BUILDING_TYPES, NOT_AVAILABLE
from ecoestate_shared.models import PostalCodeData

_YEAR_RE = re.compile(r"[0-9]{4}")


def validate_year(year: str | None, *, today: date | None = None) -> str:
    """
    Check a requested price year.

    Raises:
        ValueError: missing, not four digits, or outside min year..current year.
    """
    if not year or not _YEAR_RE.fullmatch(year):
        raise ValueError(
            "Invalid or missing year query parameter. Please provide a 4-digit year."
        )
    current_year = (today or date.today()).year
    if not settings.price_min_year <= int(year) <= current_year:
        raise ValueError(
            f"Year {year} is out of the reasonable range "
            f"({settings.price_min_year}-{current_year})."
        )
    return year


def prices_to_csv(rows: list[PostalCodeData]) -> str:
    """One CSV line per postal code, one column per tracked building type."""
    if not rows:
        return ""
    records = [
        {
            "postal_code": row.postal_code,
            "district": row.district,
            "municipality": row.municipality,
            **{
                building_type: (
                    None
                    if row.prices.get(building_type, NOT_AVAILABLE) == NOT_AVAILABLE
                    else float(row.prices[building_type])
                )
                for building_type in BUILDING_TYPES
            },
        }
        for row in rows
    ]
    schema = {
        "postal_code": pl.String,
        "district": pl.String,
        "municipality": pl.String,
        **{building_type: pl.Float64 for building_type in BUILDING_TYPES},
    }
    df = pl.DataFrame(records, schema=schema)
    return df.write_csv()
