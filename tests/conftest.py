"""
tests/conftest.py — Shared pytest fixtures for the EcoEstate test suite.

Provides:
  fixture_path / load_fixture — resolve and load JSON files from tests/fixtures/
  _fast_retries               — zero retry backoff so failing calls return at once
  fake_clock                  — manually advanced clock for TTLCache
  services                    — DataServices with fresh caches and no shared client
  statfi_payload, ...         — decoded fixture payloads
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ecoestate_shared.config import settings
from ecoestate_data.registry import DataServices, build_services

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


def load_fixture(name: str) -> Any:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Settings overrides
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _fast_retries(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep three attempts but never sleep between them."""
    monkeypatch.setattr(settings, "http_max_attempts", 3)
    monkeypatch.setattr(settings, "http_retry_base_delay", 0.0)
    monkeypatch.setattr(settings, "http_retry_max_delay", 0.0)


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.fixture
def services() -> DataServices:
    """Fresh caches per test; each request opens its own httpx client."""
    return build_services()


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def statfi_payload() -> dict:
    return load_fixture("statfi_prices_sample.json")


@pytest.fixture
def overpass_payload() -> dict:
    return load_fixture("overpass_sample.json")


@pytest.fixture
def postcodes_payload() -> dict:
    return load_fixture("hsy_postcodes_sample.json")


def jsonstat_payload(prices: dict[str, dict[str, Any]], year: str = "2023") -> dict:
    """
    Minimal JSON-stat 2.0 body for {postal code: {building type: value}}.

    Every postal code gets the same building-type columns; absent cells are
    filled with the "." missing marker.
    """
    codes = list(prices)
    types: list[str] = []
    for row in prices.values():
        for building_type in row:
            if building_type not in types:
                types.append(building_type)
    return {
        "id": ["Vuosi", "Postinumero", "Talotyyppi", "Tiedot"],
        "size": [1, len(codes), len(types), 1],
        "dimension": {
            "Vuosi": {"category": {"index": {year: 0}}},
            "Postinumero": {
                "category": {
                    "index": {code: i for i, code in enumerate(codes)},
                    "label": {code: f"{code} Alue {code} (Helsinki)" for code in codes},
                }
            },
            "Talotyyppi": {
                "category": {
                    "index": {str(i + 1): i for i in range(len(types))},
                    "label": {str(i + 1): label for i, label in enumerate(types)},
                }
            },
            "Tiedot": {"category": {"index": {"keskihinta_aritm_nw": 0}}},
        },
        "value": [prices[code].get(bt, ".") for code in codes for bt in types],
    }
