"""Session store - Authenticated user, token and session messaging.

The token is kept in three places that must stay in sync: the store
itself, the `Authorization` header of the shared API client and the
token cookie used to hydrate the session at the next start.

Every `clear_session` starts a new session epoch. A call that was issued
in an older epoch (the user logged out, or the API expired the session
while the call was in flight) is discarded with StaleSessionError instead
of repopulating the session.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..adapters.http.api_client import ApiClient
from ..config import SessionConfig, get_config
from ..domain.errors import ApiError, MissingTokenError, StaleSessionError, TravelDeskError
from ..domain.messages import (
    INVALID_LOGIN_RESPONSE,
    MISSING_TOKEN,
    SESSION_EXPIRED,
    SESSION_VALIDATION_FAILED,
    STALE_SESSION,
    USER_VALIDATION_FAILED,
)
from ..domain.models import User
from ..ports.storage import TokenCookiePort
from .observable import Observable


def _expires_in(value: Any, default: int) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return value


@dataclass
class SessionStore(Observable):
    """Owns the authenticated session.

    Attributes:
        api: Shared API client (receives the bearer token)
        cookies: Token cookie storage
        config: Session configuration (cookie name, default token lifetime)
        user: Authenticated user, None when logged out
        token: Bearer token, None when logged out
        hydrated: Whether the session was restored at startup
        loading: A login is in progress
        status_message: Message to show to the user (empty when none)
        redirect_path: Where to go after the next login
    """

    api: ApiClient
    cookies: TokenCookiePort
    config: SessionConfig = field(default_factory=lambda: get_config().session)

    user: Optional[User] = None
    token: Optional[str] = None
    hydrated: bool = False
    loading: bool = False
    status_message: str = ""
    redirect_path: Optional[str] = None

    _epoch: int = field(default=0, repr=False)
    _hydrating: bool = field(default=False, repr=False)
    _token_ttl_seconds: float = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._token_ttl_seconds = self.config.default_token_ttl_seconds

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.token)

    @property
    def epoch(self) -> int:
        return self._epoch

    def set_status_message(self, message: Optional[str] = None) -> None:
        self._update(status_message=message or "")

    def set_redirect_path(self, path: Optional[str]) -> None:
        self._update(redirect_path=path)

    def _write_cookie(self, token: str) -> None:
        self.cookies.set(self.config.cookie_name, token, self._token_ttl_seconds)

    def set_session(self, token: str, user: User) -> None:
        self._update(token=token, user=user)
        self.api.set_auth_token(token)
        self._write_cookie(token)

    def clear_session(self, message: Optional[str] = None) -> None:
        """Drop user and token, remove the auth header and the cookie."""
        self._epoch += 1
        self._update(token=None, user=None)
        self.api.set_auth_token(None)
        self.cookies.remove(self.config.cookie_name)
        self._update(status_message=message or "")
        self._logger.debug("Session cleared", extra={"epoch": self._epoch})

    def _ensure_epoch(self, epoch: int) -> None:
        if epoch != self._epoch:
            self._logger.info(
                "Discarding response from a cleared session",
                extra={"epoch": epoch, "current_epoch": self._epoch},
            )
            raise StaleSessionError(STALE_SESSION, epoch=epoch, current_epoch=self._epoch)

    def fetch_user(self, token: Optional[str] = None, *, silent: bool = False) -> User:
        """Load the current user with the given (or stored) token.

        Args:
            token: Token to validate; the stored token is used when omitted.
            silent: Do not touch the status message on success or on
                non-auth failures.

        Raises:
            MissingTokenError: If there is no token to use.
            ApiError: If the API call fails (401/403 also clear the session).
            StaleSessionError: If the session was cleared meanwhile.
        """
        active_token = token or self.token
        if not active_token:
            raise MissingTokenError(MISSING_TOKEN)

        self.api.set_auth_token(active_token)
        if token:
            self._write_cookie(token)

        epoch = self._epoch
        try:
            data = self.api.get("/user")
            payload = data.get("user") if isinstance(data, Mapping) else None
            user = User.from_api(payload)
        except ApiError as exc:
            if exc.is_auth_failure:
                self.clear_session(SESSION_EXPIRED)
            elif not silent:
                self.set_status_message(exc.message or USER_VALIDATION_FAILED)
            raise
        except ValueError as exc:
            if not silent:
                self.set_status_message(USER_VALIDATION_FAILED)
            raise TravelDeskError(USER_VALIDATION_FAILED, cause=exc) from exc

        self._ensure_epoch(epoch)
        self.set_session(active_token, user)

        if not silent:
            self.set_status_message("")

        self._logger.info("User loaded", extra={"user_id": user.id})
        return user

    def login(self, email: str, password: str) -> str:
        """Authenticate with credentials and load the user.

        Returns:
            The bearer token issued by the API.

        Raises:
            ApiError: If the API rejects the credentials or fails.
            TravelDeskError: If the login response carries no token.
        """
        self.clear_session()
        self._update(loading=True, status_message="")
        epoch = self._epoch

        try:
            data = self.api.post("/login", json={"email": email, "password": password})
            if not isinstance(data, Mapping):
                data = {}

            token = data.get("token")
            if not isinstance(token, str) or not token:
                raise TravelDeskError(INVALID_LOGIN_RESPONSE)

            self._ensure_epoch(epoch)
            self._token_ttl_seconds = _expires_in(
                data.get("expires_in"), self.config.default_token_ttl_seconds
            )

            self._write_cookie(token)
            self.api.set_auth_token(token)
            self._update(token=token)

            self.fetch_user(token, silent=True)

            self.set_status_message("")
            self._logger.info("Login succeeded", extra={"ttl": self._token_ttl_seconds})
            return token
        finally:
            self._update(loading=False)

    def hydrate(self) -> None:
        """Restore the session from the token cookie (runs once)."""
        if self.hydrated or self._hydrating:
            return

        self._hydrating = True
        try:
            saved_token = self.cookies.get(self.config.cookie_name)
            if not saved_token:
                self.clear_session()
                return

            try:
                self.fetch_user(saved_token, silent=True)
            except StaleSessionError:
                self._logger.info("Session cleared while it was being restored")
            except ApiError as exc:
                self._logger.warning(
                    "Could not restore session",
                    extra={"status": exc.status, "error": exc.message},
                )
                if exc.is_auth_failure:
                    self.clear_session(SESSION_EXPIRED)
                else:
                    self.set_status_message(SESSION_VALIDATION_FAILED)
            except Exception as exc:
                self._logger.warning("Could not restore session", extra={"error": str(exc)})
                self.set_status_message(SESSION_VALIDATION_FAILED)
        finally:
            self._hydrating = False
            self._update(hydrated=True)

    def logout(self, message: Optional[str] = None) -> None:
        self.clear_session(message)
        self._update(redirect_path=None)
        self._logger.info("Logged out")
