"""Routing adapters - Implementations of the RouterPort."""

from .memory_router import CREATE_REQUEST_ROUTE, START_LOCATION, MemoryRouter, default_routes

__all__ = ["MemoryRouter", "default_routes", "START_LOCATION", "CREATE_REQUEST_ROUTE"]
