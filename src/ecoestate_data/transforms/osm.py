"""
transforms/osm.py — Convert Overpass API elements to GeoJSON.

The green-space query ends with `out body; >; out skel qt;`, so the payload
holds the tagged nodes/ways/relations followed by the untagged skeleton nodes
their geometry is built from. Only tagged elements become features:

  node                    → Point
  closed way (≥ 4 nodes)  → Polygon
  open way (≥ 2 nodes)    → LineString
  multipolygon relation   → MultiPolygon of its closed outer ways, with inner
                            ways attached to the outer ring whose bounding
                            box contains them

Entries that are not JSON objects are ignored. Ways referencing nodes
missing from the payload are skipped, as are outer rings split across several
open ways and non-multipolygon relations.
Coordinates stay in OSM's [lon, lat] (EPSG:4326).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ecoestate_shared.models import Feature, FeatureCollection

Coordinate = list[float]
Ring = list[Coordinate]


def _element_id(element: Mapping[str, Any]) -> str:
    return f"{element['type']}/{element['id']}"


def _resolve_way(way: Mapping[str, Any], nodes: Mapping[int, Coordinate]) -> Ring | None:
    refs = way.get("nodes") or []
    if any(ref not in nodes for ref in refs):
        return None
    return [nodes[ref] for ref in refs]


def _is_closed(ring: Ring) -> bool:
    return len(ring) >= 4 and ring[0] == ring[-1]


def _bbox_contains(ring: Ring, point: Coordinate) -> bool:
    lons = [coord[0] for coord in ring]
    lats = [coord[1] for coord in ring]
    return min(lons) <= point[0] <= max(lons) and min(lats) <= point[1] <= max(lats)


def _way_geometry(ring: Ring) -> dict[str, Any] | None:
    if _is_closed(ring):
        return {"type": "Polygon", "coordinates": [ring]}
    if len(ring) >= 2:
        return {"type": "LineString", "coordinates": ring}
    return None


def _multipolygon_geometry(
    relation: Mapping[str, Any],
    ways: Mapping[int, Mapping[str, Any]],
    nodes: Mapping[int, Coordinate],
) -> dict[str, Any] | None:
    outers: list[Ring] = []
    inners: list[Ring] = []
    for member in relation.get("members") or []:
        if not isinstance(member, Mapping):
            continue
        if member.get("type") != "way" or member.get("ref") not in ways:
            continue
        ring = _resolve_way(ways[member["ref"]], nodes)
        if ring is None or not _is_closed(ring):
            continue
        if member.get("role") == "inner":
            inners.append(ring)
        else:
            outers.append(ring)

    if not outers:
        return None

    polygons: list[list[Ring]] = [[outer] for outer in outers]
    for inner in inners:
        for polygon in polygons:
            if _bbox_contains(polygon[0], inner[0]):
                polygon.append(inner)
                break
    return {"type": "MultiPolygon", "coordinates": polygons}


def overpass_to_geojson(elements: Iterable[Mapping[str, Any]]) -> FeatureCollection:
    """Build a FeatureCollection from the `elements` of an Overpass JSON response."""
    # Anything that is not an object cannot be an OSM element
    elements = [el for el in elements if isinstance(el, Mapping)]
    nodes: dict[int, Coordinate] = {
        el["id"]: [float(el["lon"]), float(el["lat"])]
        for el in elements
        if el.get("type") == "node" and "lat" in el and "lon" in el
    }
    ways: dict[int, Mapping[str, Any]] = {
        el["id"]: el for el in elements if el.get("type") == "way"
    }

    features: list[Feature] = []
    seen: set[str] = set()
    for element in elements:
        tags = element.get("tags")
        if not tags or not isinstance(tags, Mapping):
            continue
        element_id = _element_id(element)
        # `out body` and the recursed skeleton can list an element twice
        if element_id in seen:
            continue

        geometry: dict[str, Any] | None = None
        kind = element.get("type")
        if kind == "node" and element["id"] in nodes:
            geometry = {"type": "Point", "coordinates": nodes[element["id"]]}
        elif kind == "way":
            ring = _resolve_way(element, nodes)
            geometry = _way_geometry(ring) if ring is not None else None
        elif kind == "relation" and tags.get("type") == "multipolygon":
            geometry = _multipolygon_geometry(element, ways, nodes)

        if geometry is None:
            continue
        seen.add(element_id)
        features.append(
            Feature(
                type="Feature",
                id=element_id,
                geometry=geometry,
                properties={**tags, "@id": element_id},
            )
        )

    return FeatureCollection(type="FeatureCollection", features=features)
