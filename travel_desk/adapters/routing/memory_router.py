"""In-memory router with navigation guards.

Keeps track of the current location, resolves navigation targets against a
route table and runs `before_each` guards, following the redirects they
return. The default table mirrors the application views:

    /login (alias /)  login      guest only
    /dashboard        dashboard  authenticated
    /cadastrar        cadastrar  authenticated
    anything else  -> redirect to /
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import parse_qsl

from ...domain.errors import NavigationError
from ...ports.routing import (
    DASHBOARD_ROUTE,
    LOGIN_ROUTE,
    NavigationGuard,
    NavigationTarget,
    RouteLocation,
    RouteRecord,
)

CREATE_REQUEST_ROUTE = "cadastrar"

START_LOCATION = RouteLocation(name=None, path="/")


def default_routes() -> tuple[RouteRecord, ...]:
    return (
        RouteRecord(LOGIN_ROUTE, "/login", aliases=("/",), requires_guest=True),
        RouteRecord(DASHBOARD_ROUTE, "/dashboard", requires_auth=True),
        RouteRecord(CREATE_REQUEST_ROUTE, "/cadastrar", requires_auth=True),
    )


@dataclass
class MemoryRouter:
    """RouterPort implementation that keeps navigation state in memory.

    Attributes:
        routes: Route table, first match wins
        fallback_path: Where unknown paths redirect (None = raise)
        max_redirects: Guard redirects followed before giving up
    """

    routes: Sequence[RouteRecord] = field(default_factory=default_routes)
    fallback_path: Optional[str] = "/"
    max_redirects: int = 10

    history: List[RouteLocation] = field(default_factory=list, repr=False)
    _current: RouteLocation = field(default=START_LOCATION, repr=False)
    _guards: List[NavigationGuard] = field(default_factory=list, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def current_route(self) -> RouteLocation:
        return self._current

    def before_each(self, guard: NavigationGuard) -> Callable[[], None]:
        """Register a guard; returns a callable that removes it."""
        self._guards.append(guard)

        def remove() -> None:
            if guard in self._guards:
                self._guards.remove(guard)

        return remove

    def _find_by_name(self, name: str) -> RouteRecord:
        for record in self.routes:
            if record.name == name:
                return record
        raise NavigationError(f"Unknown route name: {name}", target=name)

    def _find_by_path(self, path: str) -> Optional[RouteRecord]:
        normalized = "/" + path.strip("/") if path.strip("/") else "/"
        for record in self.routes:
            if normalized == record.path or normalized in record.aliases:
                return record
        return None

    def resolve(self, target: NavigationTarget) -> RouteLocation:
        """Resolve a navigation target to a location, following route redirects."""
        query: Dict[str, str] = {}

        if target.name is not None:
            record = self._find_by_name(target.name)
            path = record.path
        elif target.path is not None:
            path, _, raw_query = target.path.partition("?")
            query.update(parse_qsl(raw_query))
            record = self._find_by_path(path)
            if record is None:
                if self.fallback_path is None or path == self.fallback_path:
                    raise NavigationError(f"No route matches {path}", target=path)
                return self.resolve(NavigationTarget(path=self.fallback_path))
            path = path or "/"
        else:
            raise NavigationError("Navigation target needs a name or a path")

        if record.redirect is not None:
            return self.resolve(NavigationTarget(path=record.redirect))

        query.update(target.query)
        return RouteLocation(
            name=record.name,
            path=path,
            query=query,
            requires_auth=record.requires_auth,
            requires_guest=record.requires_guest,
        )

    def push(self, target: NavigationTarget) -> RouteLocation:
        """Navigate to `target`, running guards, and return where the router ended."""
        for _ in range(self.max_redirects + 1):
            location = self.resolve(target)

            redirect: Optional[NavigationTarget] = None
            for guard in list(self._guards):
                redirect = guard(location)
                if redirect is not None:
                    break

            if redirect is None:
                self._current = location
                self.history.append(location)
                self._logger.debug("Navigated", extra={"route": location.full_path})
                return location

            self._logger.debug(
                "Navigation redirected",
                extra={"from": location.full_path, "to": redirect.name or redirect.path},
            )
            target = redirect

        raise NavigationError(
            "Too many navigation redirects",
            target=target.name or target.path or "",
        )
