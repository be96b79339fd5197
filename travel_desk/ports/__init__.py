"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the stores and the adapters that talk
to the outside world (durable storage, cookies, router).
"""

from .cache import CachePort
from .routing import (
    DASHBOARD_ROUTE,
    LOGIN_ROUTE,
    NavigationGuard,
    NavigationTarget,
    RouteLocation,
    RouteRecord,
    RouterPort,
    SessionAdapterPort,
)
from .storage import KeyValueStoragePort, TokenCookiePort

__all__ = [
    # Cache
    "CachePort",
    # Storage
    "KeyValueStoragePort",
    "TokenCookiePort",
    # Routing
    "RouterPort",
    "SessionAdapterPort",
    "RouteRecord",
    "RouteLocation",
    "NavigationTarget",
    "NavigationGuard",
    "LOGIN_ROUTE",
    "DASHBOARD_ROUTE",
]
