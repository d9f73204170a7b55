"""
tests/test_transforms/test_osm.py — Tests for the Overpass → GeoJSON conversion.
"""

from __future__ import annotations

from ecoestate_data.transforms.osm import overpass_to_geojson


def _by_id(collection) -> dict:
    return {feature.id: feature for feature in collection.features}


class TestOverpassToGeoJSON:
    def test_fixture_features(self, overpass_payload):
        collection = overpass_to_geojson(overpass_payload["elements"])

        features = _by_id(collection)
        assert set(features) == {"node/10", "way/100", "relation/200"}
        assert collection.type == "FeatureCollection"

    def test_tagged_node_becomes_point(self, overpass_payload):
        point = _by_id(overpass_to_geojson(overpass_payload["elements"]))["node/10"]

        assert point.geometry == {"type": "Point", "coordinates": [24.9402, 60.1712]}
        assert point.properties["leisure"] == "dog_park"
        assert point.properties["@id"] == "node/10"

    def test_closed_way_becomes_polygon(self, overpass_payload):
        park = _by_id(overpass_to_geojson(overpass_payload["elements"]))["way/100"]

        assert park.geometry["type"] == "Polygon"
        ring = park.geometry["coordinates"][0]
        assert len(ring) == 5
        assert ring[0] == ring[-1] == [24.93, 60.17]

    def test_multipolygon_with_hole(self, overpass_payload):
        forest = _by_id(overpass_to_geojson(overpass_payload["elements"]))["relation/200"]

        assert forest.geometry["type"] == "MultiPolygon"
        polygons = forest.geometry["coordinates"]
        assert len(polygons) == 1
        outer, inner = polygons[0]
        assert outer[0] == [24.90, 60.20]
        assert inner[0] == [24.91, 60.21]
        assert "type" in forest.properties

    def test_open_way_becomes_linestring(self):
        elements = [
            {"type": "way", "id": 1, "nodes": [1, 2, 3], "tags": {"natural": "tree_row"}},
            {"type": "node", "id": 1, "lat": 60.0, "lon": 24.0},
            {"type": "node", "id": 2, "lat": 60.1, "lon": 24.1},
            {"type": "node", "id": 3, "lat": 60.2, "lon": 24.2},
        ]
        feature = overpass_to_geojson(elements).features[0]
        assert feature.geometry["type"] == "LineString"
        assert len(feature.geometry["coordinates"]) == 3

    def test_way_with_unresolved_nodes_skipped(self):
        elements = [
            {"type": "way", "id": 1, "nodes": [1, 2, 3, 1], "tags": {"leisure": "park"}},
            {"type": "node", "id": 1, "lat": 60.0, "lon": 24.0},
        ]
        assert overpass_to_geojson(elements).is_empty()

    def test_untagged_and_duplicate_elements(self):
        elements = [
            {"type": "node", "id": 1, "lat": 60.0, "lon": 24.0, "tags": {"leisure": "garden"}},
            {"type": "node", "id": 1, "lat": 60.0, "lon": 24.0, "tags": {"leisure": "garden"}},
            {"type": "node", "id": 2, "lat": 60.1, "lon": 24.1},
        ]
        collection = overpass_to_geojson(elements)
        assert [feature.id for feature in collection.features] == ["node/1"]

    def test_empty_elements(self):
        collection = overpass_to_geojson([])
        assert collection.to_geojson() == {"type": "FeatureCollection", "features": []}

    def test_non_object_entries_ignored(self):
        elements = [
            "junk",
            None,
            42,
            {"type": "way", "id": 5, "nodes": [1, 2], "tags": "park"},
            {"type": "node", "id": 1, "lat": 60.0, "lon": 24.0, "tags": {"leisure": "park"}},
        ]
        collection = overpass_to_geojson(elements)
        assert [feature.id for feature in collection.features] == ["node/1"]
