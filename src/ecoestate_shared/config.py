"""
config.py — pydantic-settings Settings class.

All environment variables for the EcoEstate backend are declared here.
Both the data layer and the API import `settings` from this module.

Usage:
    from ecoestate_shared.config import settings
    print(settings.statfi_base_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Remote data sources
    # -------------------------------------------------------------------------
    statfi_base_url: str = Field(
        default="https://pxdata.stat.fi/PxWeb/api/v1/fi/StatFin/ashi"
    )
    statfi_table_id: str = Field(default="statfin_ashi_pxt_13mu.px")
    hsy_wfs_url: str = Field(default="https://kartta.hsy.fi/geoserver/wfs")
    hsy_wms_url: str = Field(default="https://kartta.hsy.fi/geoserver/wms")
    overpass_url: str = Field(default="https://overpass-api.de/api/interpreter")

    # -------------------------------------------------------------------------
    # Cache TTLs (seconds)
    # -------------------------------------------------------------------------
    postcode_cache_ttl: float = Field(default=60 * 60 * 24)
    green_space_cache_ttl: float = Field(default=60 * 60)
    walking_distance_cache_ttl: float = Field(default=60 * 60 * 24)
    property_price_cache_ttl: float = Field(default=60 * 60 * 24)

    # -------------------------------------------------------------------------
    # Outbound HTTP
    # -------------------------------------------------------------------------
    http_timeout: float = Field(default=30.0)
    overpass_timeout: float = Field(default=90.0)
    http_max_attempts: int = Field(default=3)
    http_retry_base_delay: float = Field(default=1.0)
    http_retry_max_delay: float = Field(default=10.0)

    # -------------------------------------------------------------------------
    # Property price trends
    # -------------------------------------------------------------------------
    trend_period_length: int = Field(default=5)
    price_min_year: int = Field(default=2010)

    # -------------------------------------------------------------------------
    # Scheduled cache maintenance
    # -------------------------------------------------------------------------
    scheduler_enabled: bool = Field(default=True)
    scheduler_timezone: str = Field(default="Europe/Helsinki")

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=3001)
    cors_origins: str = Field(default="http://localhost:5173")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def statfi_table_url(self) -> str:
        return f"{self.statfi_base_url}/{self.statfi_table_id}"

    @field_validator(
        "statfi_base_url", "hsy_wfs_url", "hsy_wms_url", "overpass_url", mode="before"
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton, imported everywhere
# ---------------------------------------------------------------------------
settings = Settings()
