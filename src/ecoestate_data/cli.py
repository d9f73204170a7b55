"""
cli.py — Click CLI for querying the remote sources by hand and serving the API.

Usage:
    ecoestate prices --year 2023
    ecoestate trends --end-year 2023
    ecoestate postcodes
    ecoestate green-spaces
    ecoestate walking-distance 25496000 6673000
    ecoestate serve --port 3001
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from ecoestate_shared.config import settings
from ecoestate_shared.constants import BUILDING_TYPES
from ecoestate_data.errors import PropertyPriceFetchError
from ecoestate_data.registry import DataServices, build_services
from ecoestate_data.transforms.trends import trend_window
from ecoestate_data.utils.logging import configure_logging, get_logger

log = get_logger(__name__, component="cli")

R = TypeVar("R")


def _run(fn: Callable[[DataServices], Awaitable[R]]) -> R:
    async def runner() -> R:
        services = build_services()
        try:
            return await fn(services)
        finally:
            await services.aclose()

    return asyncio.run(runner())


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["console", "json"]),
    help="Log renderer",
)
def main(log_level: str, log_format: str) -> None:
    """EcoEstate remote data sources."""
    configure_logging(log_level=log_level, log_format=log_format)


@main.command()
@click.option("--year", default="2023", show_default=True, help="Four-digit year")
@click.option("--as-json", is_flag=True, help="Print raw JSON instead of a table")
def prices(year: str, as_json: bool) -> None:
    """Property prices per m² by postal code for one year (Statistics Finland)."""
    try:
        rows = _run(lambda s: s.property_prices.fetch_property_prices(year))
    except (ValueError, PropertyPriceFetchError) as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        _echo_json([row.to_api_dict() for row in rows])
        return

    header = f"{'Postal code':12s}{'District':32s}{'Municipality':16s}" + "".join(
        f"{bt[:20]:>22s}" for bt in BUILDING_TYPES
    )
    click.echo(header)
    for row in rows:
        prices_cols = "".join(
            f"{str(row.prices.get(bt, 'N/A')):>22s}" for bt in BUILDING_TYPES
        )
        click.echo(
            f"{row.postal_code:12s}{row.district[:30]:32s}{row.municipality[:14]:16s}{prices_cols}"
        )
    click.echo(f"\n{len(rows)} postal code areas with price data for {year}.")


@main.command()
@click.option(
    "--end-year",
    type=int,
    default=None,
    help="Last year of the window (default: last calendar year)",
)
def trends(end_year: int | None) -> None:
    """Price trends over the configured window ending at END_YEAR."""
    try:
        window = trend_window(end_year)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--end-year") from exc
    try:
        result = _run(
            lambda s: s.property_prices.fetch_price_trends(window.start_year, window.end_year)
        )
    except PropertyPriceFetchError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(
        {
            "data": [trend.to_api_dict() for trend in result],
            "metadata": window.metadata(),
        }
    )


@main.command()
def postcodes() -> None:
    """Postal code boundaries from HSY WFS (EPSG:3879)."""
    collection = _run(lambda s: s.postal_boundaries.fetch_postal_boundaries())
    click.echo(f"{len(collection.features)} postal code features")
    if collection.is_empty():
        sys.exit(1)


@main.command("green-spaces")
@click.option("--as-json", is_flag=True, help="Print the GeoJSON")
def green_spaces(as_json: bool) -> None:
    """Green spaces in the Helsinki region from the Overpass API."""
    collection = _run(lambda s: s.green_spaces.fetch_green_spaces())
    if as_json:
        _echo_json(collection.to_geojson())
    else:
        click.echo(f"{len(collection.features)} green space features")


@main.command("walking-distance")
@click.argument("x", type=float)
@click.argument("y", type=float)
def walking_distance(x: float, y: float) -> None:
    """Walking-distance zone for a point given in EPSG:3879."""
    zone = _run(lambda s: s.walking_distance.get_walking_distance(x, y))
    click.echo(zone or "outside known walking distance zones or data unavailable")


@main.command()
@click.option("--host", default=settings.api_host, show_default=True)
@click.option("--port", default=settings.api_port, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    log.info("serve_start", host=host, port=port)
    uvicorn.run("ecoestate_api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
