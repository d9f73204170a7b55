"""
constants.py — shared constants used across the data layer and API.

Building-type labels, walking-zone layers, and Overpass query parameters are
defined here so they stay in sync between the sources, transforms, and routes.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Statistics Finland property prices
# ---------------------------------------------------------------------------

# Placeholder stored in PostalCodeData.prices when no usable number exists
NOT_AVAILABLE: Final = "N/A"

# Raw JSON-stat markers meaning "no data" / "too few transactions"
MISSING_VALUE_MARKERS: Final[frozenset[str]] = frozenset({".", "..."})

# JSON-stat dimension codes in the StatFin ashi table
YEAR_DIMENSION: Final = "Vuosi"
POSTAL_CODE_DIMENSION: Final = "Postinumero"
BUILDING_TYPE_DIMENSION: Final = "Talotyyppi"
METRIC_DIMENSION: Final = "Tiedot"

# Average price per square metre (arithmetic mean, unweighted)
PRICE_METRIC: Final = "keskihinta_aritm_nw"

# Building types used for trend analysis, in display order
BUILDING_TYPES: Final[tuple[str, ...]] = (
    "Kerrostalo yksiöt",
    "Kerrostalo kaksiot",
    "Kerrostalo kolmiot+",
    "Rivitalot yhteensä",
)

TrendDirection = Literal["up", "down", "stable"]

# ±1 % around zero counts as noise
TREND_STABLE_THRESHOLD: Final = 1.0

# ---------------------------------------------------------------------------
# HSY geoserver
# ---------------------------------------------------------------------------

HSY_CRS: Final = "EPSG:3879"

POSTCODE_LAYER: Final = "taustakartat_ja_aluejaot:pks_postinumeroalueet_2022"

WalkingZone = Literal["5min", "10min", "15min"]

# Probe order matters: shortest walk first
WALKING_ZONE_LAYERS: Final[dict[str, str]] = {
    "5min": "asuminen_ja_maankaytto:kavely_5min",
    "10min": "asuminen_ja_maankaytto:kavely_10min",
    "15min": "asuminen_ja_maankaytto:kavely_15min",
}

# ---------------------------------------------------------------------------
# Overpass green spaces
# ---------------------------------------------------------------------------

# South, West, North, East
HELSINKI_REGION_BBOX: Final = "59.9,24.4,60.5,25.4"

GREEN_SPACE_TAGS: Final[tuple[tuple[str, str], ...]] = (
    ("leisure", "park"),
    ("leisure", "garden"),
    ("leisure", "dog_park"),
    ("landuse", "grass"),
    ("landuse", "forest"),
    ("landuse", "meadow"),
    ("natural", "wood"),
    ("natural", "tree_row"),
    ("natural", "grassland"),
)
