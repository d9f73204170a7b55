"""
sources/base.py — Abstract base class for the cached remote data sources.

Each concrete source must implement:
  extract()   — call the external API, return the decoded JSON payload
  transform() — turn the payload into the source's canonical (cached) shape

read_through() orchestrates cache lookup → extract → transform → cache store
with timing and structured logging. Only transformed results are cached, and
nothing is written when extract() or transform() raises, so a failed call is
retried on the next request instead of being served from the cache.

Public fetch methods (fetch_property_prices(), fetch_green_spaces(), ...)
wrap read_through() with the source's own fallback policy.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import httpx
import structlog

from ecoestate_shared.config import settings
from ecoestate_data.errors import (
    RemoteBadResponse,
    RemoteRejected,
    RemoteUnavailable,
)
from ecoestate_data.utils.cache import MISSING, TTLCache
from ecoestate_data.utils.retry import with_retry

log = structlog.get_logger(__name__)

T = TypeVar("T")

# Longest response body kept on RemoteRejected / in logs
_BODY_SNIPPET_CHARS = 500


class CachedSource(ABC, Generic[T]):
    """Read-through cache in front of one external service."""

    # Set by each subclass; appears in logs and error messages
    name: str = "unknown"

    def __init__(
        self,
        cache: TTLCache[T],
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.cache = cache
        self._client = client
        self._timeout = timeout if timeout is not None else settings.http_timeout
        self._log = log.bind(source_name=self.name)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    async def extract(self, **kwargs: Any) -> Any:
        """
        Fetch the raw payload from the external service.

        Raises:
            RemoteUnavailable, RemoteRejected, RemoteBadResponse
        """
        ...

    @abstractmethod
    def transform(self, raw: Any) -> T:
        """
        Convert a raw payload into the value stored in the cache.

        Raises:
            RemoteBadResponse: the payload does not have the expected shape.
        """
        ...

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    async def read_through(self, key: str, **kwargs: Any) -> T:
        """
        Return the cached value for key, fetching and caching it on a miss.

        Args:
            key:      Cache key derived from the request parameters.
            **kwargs: Forwarded to extract().

        Raises:
            Any exception from extract() or transform() after logging it.
            The cache is left untouched in that case.
        """
        cached = self.cache.get(key)
        if cached is not MISSING:
            return cached

        run_log = self._log.bind(cache_key=key)
        run_log.info("source_run_start")

        t0 = time.monotonic()
        try:
            raw = await self.extract(**kwargs)
            extract_ms = int((time.monotonic() - t0) * 1000)
            run_log.info("extract_complete", duration_ms=extract_ms)

            result = self.transform(raw)
        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

        self.cache.set(key, result)
        run_log.info(
            "source_run_complete",
            total_duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return result

    def clear_cache(self) -> None:
        """Drop every cached entry of this source (scheduled maintenance)."""
        self.cache.clear()

    # ------------------------------------------------------------------
    # Shared HTTP helper
    # ------------------------------------------------------------------

    @with_retry()
    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Perform one HTTP request and decode the JSON body.

        Transport errors, timeouts, redirect loops and 5xx responses become
        RemoteUnavailable (retried); other non-2xx responses become
        RemoteRejected; a body that fails content decoding or JSON parsing
        becomes RemoteBadResponse.
        """
        request_timeout = timeout if timeout is not None else self._timeout
        self._log.debug("http_request", method=method, url=url)
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, timeout=request_timeout, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=request_timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteUnavailable(self.name, f"request timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise RemoteUnavailable(self.name, f"transport error: {exc}") from exc
        except httpx.DecodingError as exc:
            raise RemoteBadResponse(self.name, f"undecodable body: {exc}") from exc
        except httpx.RequestError as exc:
            # Redirect loops, unsupported protocols and other request failures
            raise RemoteUnavailable(self.name, f"request failed: {exc}") from exc

        if response.status_code >= 500:
            raise RemoteUnavailable(
                self.name, f"server error HTTP {response.status_code}"
            )
        if not response.is_success:
            raise RemoteRejected(
                self.name,
                response.status_code,
                response.text[:_BODY_SNIPPET_CHARS],
            )

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteBadResponse(
                self.name, f"response body is not JSON: {response.text[:80]!r}"
            ) from exc
