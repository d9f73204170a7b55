"""
models/geojson.py — Minimal GeoJSON models.

Geometry is kept as a raw mapping: the backend forwards coordinates untouched
(EPSG:3879 from HSY, EPSG:4326 from OpenStreetMap) and never reprojects.
Extra top-level members such as `crs` or `totalFeatures` are preserved.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Feature(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"]
    id: str | int | None = None
    geometry: dict[str, Any] | None
    properties: dict[str, Any] | None


class FeatureCollection(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"]
    features: list[Feature]

    @classmethod
    def empty(cls) -> "FeatureCollection":
        return cls(type="FeatureCollection", features=[])

    def is_empty(self) -> bool:
        return not self.features

    def to_geojson(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
