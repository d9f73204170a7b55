"""
errors.py — failures surfaced by the remote data sources.

CacheMiss is not represented here: a miss is the `MISSING` sentinel returned by
TTLCache.get(), never an exception.
"""

from __future__ import annotations


class RemoteError(Exception):
    """Base class for failures talking to an external service."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"[{source}] {message}")
        self.source = source
        self.message = message


class RemoteUnavailable(RemoteError):
    """Network error, timeout, or 5xx. Transient and retried."""


class RemoteRejected(RemoteError):
    """Non-2xx response that is not a server error."""

    def __init__(self, source: str, status_code: int, body: str = "") -> None:
        super().__init__(source, f"request rejected with HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class RemoteBadResponse(RemoteError):
    """Response that could not be decoded or had an unexpected shape."""


class PropertyPriceFetchError(Exception):
    """Property prices for a year could not be fetched or parsed.

    There is no safe empty fallback for a year of price data, so this is
    raised to the caller instead of being logged and swallowed.
    """

    def __init__(self, year: str) -> None:
        super().__init__(f"Failed to fetch property data for year {year}.")
        self.year = year
