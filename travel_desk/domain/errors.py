"""Typed domain errors for the travel-desk client.

Failures are normalized once at the HTTP boundary into an ApiError tagged
with its kind, so stores never have to duck-type arbitrary exceptions.

All errors inherit from TravelDeskError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

AUTH_FAILURE_STATUSES = frozenset({401, 403})


class ErrorKind(str, Enum):
    """Category of a failed API call."""

    TRANSPORT = "transport"
    AUTH = "auth"
    VALIDATION = "validation"
    HTTP = "http"


@dataclass
class TravelDeskError(Exception):
    """Base error for the travel-desk client.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ApiError(TravelDeskError):
    """A request to the REST API failed.

    Attributes:
        kind: Failure category (transport, auth, validation, http)
        status: HTTP status code, None when no response was received
        field_errors: Field-level validation messages, flattened to lists
        payload: JSON object returned by the server, if any
        messages: Human-readable messages attached by the stores
    """

    kind: ErrorKind = ErrorKind.HTTP
    status: Optional[int] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)

    @property
    def server_message(self) -> Optional[str]:
        """The top-level `message` sent by the server, if it is a non-empty string."""
        message = self.payload.get("message")
        if isinstance(message, str) and message:
            return message
        return None

    @property
    def is_auth_failure(self) -> bool:
        return self.status in AUTH_FAILURE_STATUSES


@dataclass
class MissingTokenError(TravelDeskError):
    """An authenticated call was attempted without a token."""


@dataclass
class StaleSessionError(TravelDeskError):
    """A response arrived after the session it belonged to was cleared.

    Attributes:
        epoch: Session epoch the request was issued in
        current_epoch: Session epoch when the response arrived
    """

    epoch: int = 0
    current_epoch: int = 0


@dataclass
class NavigationError(TravelDeskError):
    """A navigation could not be resolved.

    Attributes:
        target: Description of the navigation target
    """

    target: str = ""
