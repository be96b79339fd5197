"""Routing ports - Navigation contracts used by the interceptor and the guard.

The HTTP interceptor only needs to know where the user currently is and how
to send them to the login view; the router behind it is an adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Protocol
from urllib.parse import urlencode

LOGIN_ROUTE = "login"
DASHBOARD_ROUTE = "dashboard"


@dataclass(frozen=True)
class RouteRecord:
    """A route declared in the route table.

    Attributes:
        name: Route name used for named navigation (None for redirects)
        path: Path matched by the route
        aliases: Extra paths resolving to the same route
        requires_auth: Only authenticated sessions may enter
        requires_guest: Only anonymous sessions may enter
        redirect: Path to redirect to instead of entering this route
    """

    name: Optional[str]
    path: str
    aliases: tuple[str, ...] = ()
    requires_auth: bool = False
    requires_guest: bool = False
    redirect: Optional[str] = None


@dataclass(frozen=True)
class NavigationTarget:
    """Where to navigate: a route name or a path, plus query parameters."""

    name: Optional[str] = None
    path: Optional[str] = None
    query: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteLocation:
    """A resolved location the router is at (or is about to enter)."""

    name: Optional[str]
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    requires_auth: bool = False
    requires_guest: bool = False

    @property
    def full_path(self) -> str:
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(dict(self.query))}"


NavigationGuard = Callable[[RouteLocation], Optional[NavigationTarget]]


class RouterPort(Protocol):
    """Port for the application router.

    Implementation: adapters/routing/memory_router.py (MemoryRouter)
    """

    @property
    def current_route(self) -> RouteLocation:
        """The location the router is currently at."""
        ...

    def push(self, target: NavigationTarget) -> RouteLocation:
        """Navigate to `target`, running guards, and return the final location."""
        ...


class SessionAdapterPort(Protocol):
    """The slice of the session store the HTTP interceptor may touch."""

    def clear_session(self, message: Optional[str] = None) -> None:
        ...

    def set_redirect_path(self, path: Optional[str]) -> None:
        ...

    def set_status_message(self, message: Optional[str] = None) -> None:
        ...
