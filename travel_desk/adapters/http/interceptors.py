"""Error interceptors applied to every failed API call.

The session-expiry interceptor maps authentication failures to session
side effects:
- 401: the session is cleared and, unless the user is already on the login
  view, the current path is remembered and the router is sent to the login
  view with `reason=expired`
- 403: only the status message changes
- anything else is left to the caller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.errors import ApiError
from ...domain.messages import FORBIDDEN, SESSION_EXPIRED
from ...ports.routing import LOGIN_ROUTE, NavigationTarget, RouterPort, SessionAdapterPort


@dataclass
class SessionExpiryInterceptor:
    """Clears or flags the session when the API rejects the credentials.

    Attributes:
        session: Session store slice (clear, redirect path, status message)
        router: Router used to read the current route and go to login
    """

    session: SessionAdapterPort
    router: RouterPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def __call__(self, error: ApiError) -> None:
        if error.status == 401:
            self._handle_unauthorized(error)
        elif error.status == 403:
            self._logger.info("API denied access", extra={"status": 403})
            self.session.set_status_message(error.server_message or FORBIDDEN)

    def _handle_unauthorized(self, error: ApiError) -> None:
        current = self.router.current_route
        on_login = current.name == LOGIN_ROUTE

        self._logger.info(
            "API rejected session",
            extra={"status": 401, "route": current.full_path, "on_login": on_login},
        )

        if on_login:
            self.session.clear_session()
        else:
            self.session.clear_session(SESSION_EXPIRED)
            self.session.set_redirect_path(current.full_path)

        self.session.set_status_message(error.server_message or SESSION_EXPIRED)

        if not on_login:
            self.router.push(NavigationTarget(name=LOGIN_ROUTE, query={"reason": "expired"}))
