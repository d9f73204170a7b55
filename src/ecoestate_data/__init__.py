"""
ecoestate_data — cached remote data services for the EcoEstate backend.

Architecture:
  sources/     — one module per external service (StatFin, HSY WFS, HSY WMS, Overpass),
                 each a read-through cache in front of the remote API
  transforms/  — pure functions: JSON-stat parsing, OSM → GeoJSON, price trends
  utils/       — TTL cache, structlog configuration, exponential-backoff retry
  registry.py  — builds the caches and sources once and shares them
  scheduler.py — cron jobs that clear the caches

Quick start:
    import asyncio
    from ecoestate_data.registry import build_services

    services = build_services()
    rows = asyncio.run(services.property_prices.fetch_property_prices("2023"))

CLI:
    ecoestate prices --year 2023
    ecoestate trends --end-year 2023
    ecoestate serve
"""

__version__ = "0.1.0"
