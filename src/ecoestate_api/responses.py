"""Standardized API response wrappers."""

from __future__ import annotations

from typing import Any


def wrap_response(
    data: Any,
    *,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the {"data": ..., "metadata": ...} envelope used by the price routes."""
    body: dict[str, Any] = {"data": data}
    if metadata:
        body["metadata"] = metadata
    return body


def error_response(
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dict."""
    err: dict[str, Any] = {"error": message}
    if details:
        err.update(details)
    return err
