"""Navigation guard gating routes on the session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain.messages import SESSION_EXPIRED
from ..ports.routing import DASHBOARD_ROUTE, LOGIN_ROUTE, NavigationTarget, RouteLocation
from .session_store import SessionStore


@dataclass
class AuthGuard:
    """Router guard: hydrate once, then enforce auth-only and guest-only routes.

    Install it with `router.before_each(AuthGuard(session))`. Returns None
    to let the navigation through, or the target to redirect to.
    """

    session: SessionStore

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def __call__(self, to: RouteLocation) -> Optional[NavigationTarget]:
        if not self.session.hydrated:
            try:
                self.session.hydrate()
            except Exception:
                self._logger.exception("Session hydration failed during navigation")

        if to.requires_auth and not self.session.is_authenticated:
            self.session.set_redirect_path(to.full_path)
            if not self.session.status_message:
                self.session.set_status_message(SESSION_EXPIRED)
            return NavigationTarget(name=LOGIN_ROUTE, query={"reason": "expired"})

        if to.requires_guest and self.session.is_authenticated:
            return NavigationTarget(name=DASHBOARD_ROUTE)

        return None
