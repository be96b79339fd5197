"""Domain models for the travel-desk client.

Records received from the API are frozen dataclasses built through their
`from_api` constructors, which take care of reshaping server payloads into
the view-oriented form (canonical dates, derived location label). Filters
and pagination are plain mutable state owned by the stores.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..dates import to_api_date

STATUS_FILTER_ALL = "all"


class TravelStatus(str, Enum):
    """Lifecycle status of a travel request.

    `requested` may move to `approved` or `cancelled`; both are terminal.
    """

    REQUESTED = "requested"
    APPROVED = "approved"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any) -> TravelStatus:
        """Parse a status from a raw value, ignoring case and surrounding spaces.

        Raises:
            ValueError: If the value is not a known status.
        """
        raw = getattr(value, "value", value)
        return cls(str(raw if raw is not None else "").strip().lower())

    @property
    def is_terminal(self) -> bool:
        return self is not TravelStatus.REQUESTED

    def can_transition_to(self, target: TravelStatus) -> bool:
        return self is TravelStatus.REQUESTED and target.is_terminal


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_id(value: Any) -> Optional[int]:
    """Coerce an identifier to an int, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def build_location_label(city: Any) -> str:
    """Build "City, ST, Country" from a city payload, skipping empty parts.

    The state is represented by its code when available, else its name.
    Both nested objects ({"state": {"code", "name"}}) and flat strings
    ({"state": "...", "state_code": "..."}) are accepted.
    """
    if not isinstance(city, Mapping):
        return ""

    name = _text(city.get("name"))

    state = city.get("state")
    state_code = _text(city.get("state_code"))
    if isinstance(state, Mapping):
        state_code = state_code or _text(state.get("code"))
        state_name = _text(state.get("name"))
    else:
        state_name = _text(state)

    country = city.get("country")
    if isinstance(country, Mapping):
        country_name = _text(country.get("name"))
    else:
        country_name = _text(country)

    parts = (name, state_code or state_name, country_name)
    return ", ".join(part for part in parts if part)


@dataclass(frozen=True, slots=True)
class User:
    """Authenticated user as returned by `GET /user`.

    Attributes:
        id: Server identifier
        name: Display name
        email: Login e-mail
        role: Primary role, if any
        roles: All roles granted to the user
        extra: Any other field sent by the server
    """

    id: Any
    name: str
    email: str
    role: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Any) -> User:
        """Build a user from an API payload.

        Raises:
            ValueError: If the payload is not an object.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("User payload must be an object")

        known = {"id", "name", "email", "role", "roles"}
        roles = payload.get("roles")
        if isinstance(roles, str):
            roles = [roles]
        elif not isinstance(roles, (list, tuple)):
            roles = []
        return cls(
            id=payload.get("id"),
            name=_text(payload.get("name")),
            email=_text(payload.get("email")),
            role=payload.get("role"),
            roles=tuple(str(role) for role in roles if role is not None),
            extra={key: value for key, value in payload.items() if key not in known},
        )


@dataclass(frozen=True, slots=True)
class Destination:
    """A searchable destination (a city) offered by `GET /destinations`."""

    id: Any
    slug: str
    city_id: Optional[int]
    city: str
    state: Optional[str]
    country: str
    label: str
    state_code: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> Destination:
        state = payload.get("state")
        state_code = payload.get("state_code")
        return cls(
            id=payload.get("id"),
            slug=_text(payload.get("slug")),
            city_id=coerce_id(payload.get("city_id")),
            city=_text(payload.get("city")),
            state=None if state is None else str(state),
            country=_text(payload.get("country")),
            label=_text(payload.get("label")),
            state_code=None if state_code is None else str(state_code),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class TravelRequest:
    """A travel request in its view-oriented shape.

    Attributes:
        id: Server identifier
        city_id: Destination city identifier, None if unknown
        requester_name: Name of the traveller
        departure_date: Canonical YYYY-MM-DD departure date
        return_date: Canonical YYYY-MM-DD return date
        status: Current status
        notes: Free-text notes, None when empty
        created_at: Server creation timestamp
        updated_at: Server update timestamp
        location_label: Human-readable destination label
        city: Raw city payload, if the server embedded it
        user: Owner of the request, if the server embedded it
    """

    id: Any
    city_id: Optional[int]
    requester_name: str
    departure_date: str
    return_date: str
    status: TravelStatus
    notes: Optional[str]
    created_at: str
    updated_at: str
    location_label: str
    city: Optional[Mapping[str, Any]] = None
    user: Optional[User] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> TravelRequest:
        """Normalize a travel request payload.

        Unknown statuses fall back to `requested`; the server stays
        authoritative and the next fetch will correct the value.
        """
        try:
            status = TravelStatus.parse(payload.get("status"))
        except ValueError:
            status = TravelStatus.REQUESTED

        city = payload.get("city")
        city = city if isinstance(city, Mapping) else None

        label = _text(payload.get("location_label"))
        if not label:
            label = build_location_label(city)

        user_payload = payload.get("user")
        user = User.from_api(user_payload) if isinstance(user_payload, Mapping) else None

        notes = payload.get("notes")
        raw_id = payload.get("id")
        numeric_id = coerce_id(raw_id)

        return cls(
            id=raw_id if numeric_id is None else numeric_id,
            city_id=coerce_id(payload.get("city_id")),
            requester_name=_text(payload.get("requester_name")),
            departure_date=to_api_date(payload.get("departure_date")) or "",
            return_date=to_api_date(payload.get("return_date")) or "",
            status=status,
            notes=None if notes is None else str(notes),
            created_at=_text(payload.get("created_at")),
            updated_at=_text(payload.get("updated_at")),
            location_label=label,
            city=city,
            user=user,
        )


@dataclass
class TravelFilters:
    """Filters applied to the travel request list."""

    status: str = STATUS_FILTER_ALL
    location: str = ""
    departure_from: str = ""
    departure_to: str = ""
    return_from: str = ""
    return_to: str = ""

    @property
    def is_empty(self) -> bool:
        return self == TravelFilters()


@dataclass
class Pagination:
    """Pagination state, seeded by the client and corrected by the server."""

    current_page: int = 1
    per_page: int = 15
    total: int = 0
    last_page: int = 1
