"""Tests for property price endpoints."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from ecoestate_shared.models import PriceTrend, TrendMetric
from ecoestate_data.errors import PropertyPriceFetchError


def test_prices_for_year(client, services, sample_rows):
    fetch = AsyncMock(return_value=sample_rows)
    with patch.object(services.property_prices, "fetch_property_prices", fetch):
        response = client.get("/api/property-prices", params={"year": "2023"})

    assert response.status_code == 200
    body = response.json()
    assert body["data"][0]["postalCode"] == "00100"
    assert body["data"][0]["fullLabel"].startswith("00100 ")
    assert body["data"][0]["prices"]["Rivitalot yhteensä"] == "N/A"
    fetch.assert_awaited_once_with("2023")


@pytest.mark.parametrize(
    "params", [{}, {"year": "23"}, {"year": "abcd"}, {"year": "2009"}, {"year": "2999"}]
)
def test_prices_invalid_year(client, services, params):
    fetch = AsyncMock()
    with patch.object(services.property_prices, "fetch_property_prices", fetch):
        response = client.get("/api/property-prices", params=params)

    assert response.status_code == 400
    fetch.assert_not_awaited()


def test_prices_fetch_failure(client, services):
    fetch = AsyncMock(side_effect=PropertyPriceFetchError("2023"))
    with patch.object(services.property_prices, "fetch_property_prices", fetch):
        response = client.get("/api/property-prices", params={"year": "2023"})

    assert response.status_code == 500


def test_prices_csv_export(client, services, sample_rows):
    fetch = AsyncMock(return_value=sample_rows)
    with patch.object(services.property_prices, "fetch_property_prices", fetch):
        response = client.get(
            "/api/property-prices", params={"year": "2023", "format": "csv"}
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "property_prices_2023.csv" in response.headers["content-disposition"]
    header, first = response.text.strip().splitlines()
    assert header.startswith("postal_code,district,municipality,Kerrostalo yksiöt")
    assert first.startswith("00100,")
    # "N/A" becomes an empty cell
    assert first.endswith(",")


def _trend() -> PriceTrend:
    return PriceTrend(
        postal_code="00100",
        district="Keskusta",
        municipality="Helsinki",
        full_label="00100 Keskusta (Helsinki)",
        trends={
            "Kerrostalo yksiöt": TrendMetric(
                percent_change=20.0,
                direction="up",
                start_price=3000,
                end_price=3600,
                average_yearly_change=150.0,
            ),
            "Kerrostalo kaksiot": None,
        },
    )


def test_trends_with_end_year(client, services):
    fetch = AsyncMock(return_value=[_trend()])
    with patch.object(services.property_prices, "fetch_price_trends", fetch):
        response = client.get("/api/property-prices/trends", params={"endYear": 2023})

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"] == {"startYear": 2019, "endYear": 2023, "periodLength": 5}
    assert body["data"][0]["trends"]["Kerrostalo yksiöt"]["percentChange"] == 20.0
    assert body["data"][0]["trends"]["Kerrostalo kaksiot"] is None
    fetch.assert_awaited_once_with(2019, 2023)


def test_trends_default_end_year_is_last_year(client, services):
    fetch = AsyncMock(return_value=[])
    with patch.object(services.property_prices, "fetch_price_trends", fetch):
        response = client.get("/api/property-prices/trends")

    last_year = date.today().year - 1
    assert response.status_code == 200
    assert response.json()["metadata"]["endYear"] == last_year
    fetch.assert_awaited_once_with(last_year - 4, last_year)


def test_trends_start_before_data(client, services):
    fetch = AsyncMock()
    with patch.object(services.property_prices, "fetch_price_trends", fetch):
        response = client.get("/api/property-prices/trends", params={"endYear": 2013})

    assert response.status_code == 400
    fetch.assert_not_awaited()


def test_trends_fetch_failure(client, services):
    fetch = AsyncMock(side_effect=PropertyPriceFetchError("2021"))
    with patch.object(services.property_prices, "fetch_price_trends", fetch):
        response = client.get("/api/property-prices/trends", params={"endYear": 2023})

    assert response.status_code == 500
