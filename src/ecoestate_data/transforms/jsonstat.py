"""
transforms/jsonstat.py — Parse the StatFin property-price cross-tabulation.

The PxWeb API answers in JSON-stat 2.0: the dimensions (Vuosi × Postinumero ×
Talotyyppi × Tiedot) are flattened into one `value` array in row-major order.
The query pins Vuosi and Tiedot to a single category each, so they add no
offset term and the value for (postal code i, building type j) sits at
i * <building type count> + j.

Example payload (abridged):
    {
      "id": ["Vuosi", "Postinumero", "Talotyyppi", "Tiedot"],
      "size": [1, 2, 2, 1],
      "dimension": {
        "Postinumero": {"category": {
            "index": {"00100": 0, "00120": 1},
            "label": {"00100": "00100 Helsinki Keskusta - Etu-Töölö (Helsinki)", ...}}},
        "Talotyyppi": {"category": {
            "index": {"1": 0, "2": 1},
            "label": {"1": "Kerrostalo yksiöt", "2": "Kerrostalo kaksiot"}}},
        ...
      },
      "value": [9120, 8240, ".", 7650]
    }
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from ecoestate_shared.constants import (
    BUILDING_TYPE_DIMENSION,
    MISSING_VALUE_MARKERS,
    NOT_AVAILABLE,
    POSTAL_CODE_DIMENSION,
)
from ecoestate_shared.models import PostalCodeData
from ecoestate_shared.models.property_prices import Price

# "00100 Helsinki Keskusta - Etu-Töölö (Helsinki)" -> district, municipality
_POSTAL_LABEL_RE = re.compile(r"^\d+\s+(.+?)\s*\((.+?)\)$")

_REQUIRED_KEYS = ("id", "size", "dimension", "value")


def flat_index(
    postal_code_index: int,
    building_type_count: int,
    building_type_index: int,
) -> int:
    """Offset of (postal code, building type) in the flattened value array."""
    if postal_code_index < 0 or building_type_index < 0:
        raise ValueError("category indexes must be non-negative")
    if building_type_index >= building_type_count:
        raise ValueError(
            f"building type index {building_type_index} out of range "
            f"for {building_type_count} building types"
        )
    return postal_code_index * building_type_count + building_type_index


def parse_price(raw: Any) -> Price:
    """Numeric price, or "N/A" for StatFin missing markers and junk."""
    if raw is None or isinstance(raw, bool):
        return NOT_AVAILABLE
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) else NOT_AVAILABLE
    if isinstance(raw, str):
        text = raw.strip()
        if not text or text in MISSING_VALUE_MARKERS:
            return NOT_AVAILABLE
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return NOT_AVAILABLE
        return number if math.isfinite(number) else NOT_AVAILABLE
    return NOT_AVAILABLE


def parse_postal_label(label: str) -> tuple[str, str]:
    """Split "<code> <district> (<municipality>)"; ("N/A", "N/A") if it doesn't fit."""
    match = _POSTAL_LABEL_RE.match(label.strip())
    if match is None:
        return NOT_AVAILABLE, NOT_AVAILABLE
    return match.group(1).strip(), match.group(2).strip()


def _category_index(category: Mapping[str, Any]) -> dict[str, int]:
    # JSON-stat allows the index as either {code: position} or [code, ...]
    index = category["index"]
    if isinstance(index, Sequence) and not isinstance(index, str):
        return {code: position for position, code in enumerate(index)}
    return {str(code): int(position) for code, position in index.items()}


def _dimension(payload: Mapping[str, Any], code: str) -> tuple[dict[str, int], dict[str, str]]:
    try:
        category = payload["dimension"][code]["category"]
        index = _category_index(category)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"JSON-stat response has no usable '{code}' dimension") from exc
    labels = category.get("label") or {}
    return index, {key: str(labels.get(key, key)) for key in index}


def _dimension_size(payload: Mapping[str, Any], code: str, fallback: int) -> int:
    ids = payload["id"]
    sizes = payload["size"]
    if code in ids and ids.index(code) < len(sizes):
        return int(sizes[ids.index(code)])
    return fallback


def _value_at(values: Sequence[Any] | Mapping[str, Any], offset: int) -> tuple[bool, Any]:
    # Dense arrays are the norm; JSON-stat also permits a sparse {offset: value} object
    if isinstance(values, Mapping):
        key = str(offset)
        return key in values, values.get(key)
    if offset < len(values):
        return True, values[offset]
    return False, None


def parse_property_prices(payload: Any) -> list[PostalCodeData]:
    """
    Turn a StatFin JSON-stat response into one PostalCodeData per postal code.

    Postal codes whose every building-type price is "N/A" are dropped.
    Results are sorted by postal code.

    Raises:
        ValueError: the payload lacks the expected top-level keys or dimensions.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("JSON-stat response is not an object")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ValueError(f"JSON-stat response is missing {', '.join(missing)}")
    if not isinstance(payload["value"], (list, Mapping)):
        raise ValueError("JSON-stat value must be an array or an object")

    postal_index, postal_labels = _dimension(payload, POSTAL_CODE_DIMENSION)
    building_index, building_labels = _dimension(payload, BUILDING_TYPE_DIMENSION)
    building_type_count = _dimension_size(
        payload, BUILDING_TYPE_DIMENSION, fallback=len(building_index)
    )
    label_by_position = {
        position: building_labels[key] for key, position in building_index.items()
    }
    values = payload["value"]

    rows: list[PostalCodeData] = []
    for code_key, code_position in postal_index.items():
        prices: dict[str, Price] = {}
        for building_position in range(building_type_count):
            building_label = label_by_position.get(building_position)
            if building_label is None:
                continue
            offset = flat_index(code_position, building_type_count, building_position)
            present, raw = _value_at(values, offset)
            if present:
                prices[building_label] = parse_price(raw)

        if all(price == NOT_AVAILABLE for price in prices.values()):
            continue

        full_label = postal_labels[code_key]
        district, municipality = parse_postal_label(full_label)
        rows.append(
            PostalCodeData(
                postal_code=code_key.strip(),
                district=district,
                municipality=municipality,
                full_label=full_label,
                prices=prices,
            )
        )

    rows.sort(key=lambda row: row.postal_code)
    return rows
