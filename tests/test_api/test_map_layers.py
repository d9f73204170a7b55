"""Tests for postcode, green space and walking distance endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from ecoestate_shared.models import FeatureCollection


def test_postcodes(client, services, postcodes_payload):
    collection = FeatureCollection.model_validate(postcodes_payload)
    with patch.object(
        services.postal_boundaries,
        "fetch_postal_boundaries",
        AsyncMock(return_value=collection),
    ):
        response = client.get("/api/postcodes")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/geo+json")
    assert len(response.json()["features"]) == 2


def test_postcodes_empty_is_server_error(client, services):
    with patch.object(
        services.postal_boundaries,
        "fetch_postal_boundaries",
        AsyncMock(return_value=FeatureCollection.empty()),
    ):
        response = client.get("/api/postcodes")

    assert response.status_code == 500
    assert "error" in response.json()


def test_green_spaces(client, services):
    with patch.object(
        services.green_spaces,
        "fetch_green_spaces",
        AsyncMock(return_value=FeatureCollection.empty()),
    ):
        response = client.get("/api/map-data/green-spaces")

    assert response.status_code == 200
    assert response.json() == {"type": "FeatureCollection", "features": []}


def test_walking_distance_found(client, services):
    lookup = AsyncMock(return_value="10min")
    with patch.object(services.walking_distance, "get_walking_distance", lookup):
        response = client.get("/api/walking-distance", params={"x": "25496000", "y": "6673000.5"})

    assert response.status_code == 200
    assert response.json() == {"walkingDistance": "10min"}
    lookup.assert_awaited_once_with(25496000.0, 6673000.5)


def test_walking_distance_outside(client, services):
    with patch.object(
        services.walking_distance, "get_walking_distance", AsyncMock(return_value=None)
    ):
        response = client.get("/api/walking-distance", params={"x": "1", "y": "2"})

    assert response.status_code == 404
    assert response.json()["walkingDistance"] is None


@pytest.mark.parametrize(
    "params",
    [{}, {"x": "1"}, {"x": "abc", "y": "2"}, {"x": "1", "y": "nan"}, {"x": "", "y": "2"}],
)
def test_walking_distance_bad_coordinates(client, services, params):
    lookup = AsyncMock()
    with patch.object(services.walking_distance, "get_walking_distance", lookup):
        response = client.get("/api/walking-distance", params=params)

    assert response.status_code == 400
    lookup.assert_not_awaited()
