"""Fixtures for the HTTP API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ecoestate_shared.models import PostalCodeData


@pytest.fixture()
def app(services):
    """Test app over injected services; no scheduler, no shared HTTP client."""
    from ecoestate_api.app import create_app
    return create_app(services, enable_scheduler=False)


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def sample_rows() -> list[PostalCodeData]:
    return [
        PostalCodeData(
            postal_code="00100",
            district="Helsinki Keskusta - Etu-Töölö",
            municipality="Helsinki",
            full_label="00100 Helsinki Keskusta - Etu-Töölö (Helsinki)",
            prices={
                "Kerrostalo yksiöt": 9120,
                "Kerrostalo kaksiot": 8240,
                "Kerrostalo kolmiot+": 7650,
                "Rivitalot yhteensä": "N/A",
            },
        )
    ]
