"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ecoestate_data.registry import DataServices


def get_services(request: Request) -> DataServices:
    """The DataServices built at startup (or injected by tests)."""
    return request.app.state.services


__all__ = ["DataServices", "get_services"]
