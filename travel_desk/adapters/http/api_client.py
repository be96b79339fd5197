"""HTTP client wrapper for the travel-desk REST API.

One `requests.Session` is shared by every store. The wrapper:
- prefixes paths with the configured base URL
- sends JSON with the default Accept/Content-Type headers
- carries the bearer token set through `set_auth_token`
- turns every failure into a tagged ApiError and hands it to the
  registered error interceptors before raising it
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from ...config import ApiConfig, get_config
from ...domain.errors import AUTH_FAILURE_STATUSES, ApiError, ErrorKind
from ...domain.messages import COMMUNICATION_ERROR
from ...ports.routing import RouterPort, SessionAdapterPort
from .interceptors import SessionExpiryInterceptor

ErrorInterceptor = Callable[[ApiError], None]

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def _flatten_field_errors(errors: Any) -> Dict[str, List[str]]:
    if not isinstance(errors, Mapping):
        return {}

    flattened: Dict[str, List[str]] = {}
    for name, value in errors.items():
        if isinstance(value, (list, tuple)):
            messages = [str(item) for item in value if item is not None and str(item)]
        elif value is None:
            messages = []
        else:
            messages = [str(value)]
        if messages:
            flattened[str(name)] = messages
    return flattened


def normalize_error(
    exc: requests.RequestException,
    response: Optional[requests.Response] = None,
) -> ApiError:
    """Build the tagged ApiError for a failed request.

    `status` is None when no response was received. `message` prefers the
    server `message` field, then the transport error text, then a generic
    communication error.
    """
    payload: Dict[str, Any] = {}
    status: Optional[int] = None

    if response is not None:
        status = int(response.status_code)
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            payload = body

    server_message = payload.get("message")
    if isinstance(server_message, str):
        message = server_message
    else:
        message = str(exc) or COMMUNICATION_ERROR

    field_errors = _flatten_field_errors(payload.get("errors"))

    if status is None:
        kind = ErrorKind.TRANSPORT
    elif status in AUTH_FAILURE_STATUSES:
        kind = ErrorKind.AUTH
    elif field_errors or status == 422:
        kind = ErrorKind.VALIDATION
    else:
        kind = ErrorKind.HTTP

    return ApiError(
        message,
        cause=exc,
        kind=kind,
        status=status,
        field_errors=field_errors,
        payload=payload,
    )


@dataclass
class ApiClient:
    """Shared HTTP client configured with base URL and default headers.

    Attributes:
        config: API configuration (base URL, timeout)
        session: Underlying requests session

    Example:
        client = ApiClient()
        client.set_auth_token("abc")
        data = client.get("/travel-requests", params={"page": 1})
    """

    config: ApiConfig = field(default_factory=lambda: get_config().api)
    session: requests.Session = field(default_factory=requests.Session)

    _error_interceptors: List[ErrorInterceptor] = field(default_factory=list, repr=False)
    _interceptors_configured: bool = field(default=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.session.headers.update(DEFAULT_HEADERS)

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    @property
    def auth_token(self) -> Optional[str]:
        header = self.session.headers.get("Authorization")
        if not header or not header.startswith("Bearer "):
            return None
        return header[len("Bearer ") :]

    @property
    def interceptors_configured(self) -> bool:
        return self._interceptors_configured

    def set_auth_token(self, token: Optional[str]) -> None:
        """Set or remove the `Authorization: Bearer` header for later requests."""
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def add_error_interceptor(self, interceptor: ErrorInterceptor) -> None:
        self._error_interceptors.append(interceptor)

    def setup_interceptors(
        self,
        session_adapter: SessionAdapterPort,
        router: RouterPort,
    ) -> None:
        """Install the session-expiry interceptor (at most once per client)."""
        if self._interceptors_configured:
            return

        self.add_error_interceptor(SessionExpiryInterceptor(session_adapter, router))
        self._interceptors_configured = True

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Parameters whose value is None are not sent. An empty or non-JSON
        body yields None.

        Raises:
            ApiError: For any transport or HTTP failure, after the error
                interceptors have seen it.
        """
        url = self.url_for(path)
        query = {key: value for key, value in (params or {}).items() if value is not None}

        self._logger.debug(
            "API request",
            extra={"method": method, "url": url, "params": query},
        )

        try:
            response = self.session.request(
                method,
                url,
                params=query or None,
                json=json,
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise self._handle_failure(exc, exc.response) from exc
        except requests.RequestException as exc:
            raise self._handle_failure(exc, None) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            self._logger.warning(
                "API response is not JSON",
                extra={"method": method, "url": url, "status": response.status_code},
            )
            return None

    def _handle_failure(
        self,
        exc: requests.RequestException,
        response: Optional[requests.Response],
    ) -> ApiError:
        error = normalize_error(exc, response)
        self._logger.info(
            "API request failed",
            extra={"status": error.status, "kind": error.kind.value},
        )
        for interceptor in self._error_interceptors:
            interceptor(error)
        return error

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)
