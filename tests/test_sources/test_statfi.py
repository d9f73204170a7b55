"""
tests/test_sources/test_statfi.py — Unit tests for PropertyPriceSource.

HTTP is mocked with respx; the fixture mirrors a real StatFin json-stat2 answer.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from ecoestate_shared.config import settings
from ecoestate_data.errors import PropertyPriceFetchError
from ecoestate_data.sources.statfi import build_price_query
from tests.conftest import jsonstat_payload


class TestBuildPriceQuery:
    def test_selects_year_and_metric(self):
        query = build_price_query("2021")

        assert query["response"] == {"format": "json-stat2"}
        selections = {item["code"]: item["selection"]["values"] for item in query["query"]}
        assert selections == {"Vuosi": ["2021"], "Tiedot": ["keskihinta_aritm_nw"]}


class TestFetchPropertyPrices:
    @pytest.mark.asyncio
    async def test_parses_and_caches(self, services, statfi_payload):
        source = services.property_prices
        with respx.mock() as router:
            route = router.post(settings.statfi_table_url).mock(
                return_value=httpx.Response(200, json=statfi_payload)
            )
            first = await source.fetch_property_prices("2023")
            second = await source.fetch_property_prices("2023")

        assert [row.postal_code for row in first] == ["00100", "00120"]
        assert second == first
        assert route.call_count == 1
        assert json.loads(route.calls[0].request.content) == build_price_query("2023")

    @pytest.mark.asyncio
    async def test_years_cached_separately(self, services, statfi_payload):
        source = services.property_prices
        with respx.mock() as router:
            route = router.post(settings.statfi_table_url).mock(
                return_value=httpx.Response(200, json=statfi_payload)
            )
            await source.fetch_property_prices("2022")
            await source.fetch_property_prices("2023")

        assert route.call_count == 2
        assert source.cache.size() == 2

    @pytest.mark.asyncio
    async def test_failure_raises_and_is_not_cached(self, services, statfi_payload):
        source = services.property_prices
        with respx.mock() as router:
            route = router.post(settings.statfi_table_url).mock(
                return_value=httpx.Response(503)
            )
            with pytest.raises(PropertyPriceFetchError, match="year 2023"):
                await source.fetch_property_prices("2023")
            # 5xx is transient: every attempt was made
            assert route.call_count == settings.http_max_attempts

            route.mock(return_value=httpx.Response(200, json=statfi_payload))
            rows = await source.fetch_property_prices("2023")

        assert len(rows) == 2
        assert route.call_count == settings.http_max_attempts + 1

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, services):
        with respx.mock() as router:
            route = router.post(settings.statfi_table_url).mock(
                return_value=httpx.Response(400, text="bad query")
            )
            with pytest.raises(PropertyPriceFetchError):
                await services.property_prices.fetch_property_prices("2023")

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_malformed_payload(self, services):
        with respx.mock() as router:
            router.post(settings.statfi_table_url).mock(
                return_value=httpx.Response(200, json={"error": "nope"})
            )
            with pytest.raises(PropertyPriceFetchError) as exc_info:
                await services.property_prices.fetch_property_prices("2023")

        assert services.property_prices.cache.size() == 0
        assert exc_info.value.year == "2023"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", ["23", "20234", "abcd", ""])
    async def test_bad_year_rejected_before_request(self, services, year):
        with respx.mock(assert_all_called=False) as router:
            route = router.post(settings.statfi_table_url)
            with pytest.raises(ValueError):
                await services.property_prices.fetch_property_prices(year)

        assert not route.called


class TestFetchPriceTrends:
    @pytest.mark.asyncio
    async def test_fetches_each_year_and_aggregates(self, services):
        prices_by_year = {
            "2019": {"00100": {"Kerrostalo yksiöt": 5000}},
            "2020": {"00100": {"Kerrostalo yksiöt": 5100}},
            "2021": {"00100": {"Kerrostalo yksiöt": "."}},
            "2022": {"00100": {"Kerrostalo yksiöt": 5300}},
            "2023": {"00100": {"Kerrostalo yksiöt": 5500}},
        }

        def respond(request: httpx.Request) -> httpx.Response:
            year = json.loads(request.content)["query"][0]["selection"]["values"][0]
            return httpx.Response(200, json=jsonstat_payload(prices_by_year[year], year))

        with respx.mock() as router:
            route = router.post(settings.statfi_table_url).mock(side_effect=respond)
            trends = await services.property_prices.fetch_price_trends(2019, 2023)

        assert route.call_count == 5
        assert len(trends) == 1
        metric = trends[0].trends["Kerrostalo yksiöt"]
        assert metric.start_price == 5000
        assert metric.end_price == 5500
        assert metric.percent_change == 10.0
        assert metric.average_yearly_change == 125.0

    @pytest.mark.asyncio
    async def test_one_failed_year_fails_window(self, services):
        def respond(request: httpx.Request) -> httpx.Response:
            year = json.loads(request.content)["query"][0]["selection"]["values"][0]
            if year == "2021":
                return httpx.Response(404)
            return httpx.Response(200, json=jsonstat_payload({"00100": {"A": 1}}, year))

        with respx.mock() as router:
            router.post(settings.statfi_table_url).mock(side_effect=respond)
            with pytest.raises(PropertyPriceFetchError, match="2021"):
                await services.property_prices.fetch_price_trends(2019, 2023)
