"""Travel request store - Paginated, filtered list with create and status updates.

Server payloads are normalized into TravelRequest records (canonical dates,
derived location label, numeric city id). Failures are turned into
human-readable messages: every field-level validation message when the API
sent an `errors` map, else the error message, else a localized fallback.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from ..adapters.http.api_client import ApiClient
from ..dates import to_api_date
from ..domain.errors import ApiError
from ..domain.messages import CREATE_FAILED, LIST_FAILED, UPDATE_FAILED
from ..domain.models import (
    STATUS_FILTER_ALL,
    Pagination,
    TravelFilters,
    TravelRequest,
    TravelStatus,
    coerce_id,
)
from .observable import Observable

OUTGOING_DATE_FIELDS = ("departure_date", "return_date")


def extract_messages(error: Exception, fallback: str) -> List[str]:
    """Collect the human-readable messages carried by an error."""
    if isinstance(error, ApiError):
        messages = [message for group in error.field_errors.values() for message in group]
        if messages:
            return messages
        if error.message:
            return [error.message]
        return [fallback]

    text = str(error)
    return [text] if text else [fallback]


def _unwrap(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        return {}
    inner = data.get("data")
    if isinstance(inner, Mapping):
        return inner
    return data


def _page_number(value: Any, default: int, minimum: int = 1) -> int:
    number = coerce_id(value)
    if number is None or number < minimum:
        return default
    return number


def _optional_date(value: str) -> Optional[str]:
    return to_api_date(value) if value else None


@dataclass
class TravelRequestStore(Observable):
    """Holds the travel request list shown to the user.

    Attributes:
        api: Shared API client
        items: Requests of the current page, as returned by the server
        loading: A list or create call is in progress
        error: Last error shown to the user (empty when none)
        filters: Current list filters
        pagination: Current pagination state
    """

    api: ApiClient
    items: List[TravelRequest] = field(default_factory=list)
    loading: bool = False
    error: str = ""
    filters: TravelFilters = field(default_factory=TravelFilters)
    pagination: Pagination = field(default_factory=Pagination)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def filtered(self) -> List[TravelRequest]:
        """Loaded items narrowed by the current filters, without a new fetch."""
        if self.filters.is_empty:
            return list(self.items)

        f = self.filters
        location = f.location.strip().lower()
        departure_from = _optional_date(f.departure_from)
        departure_to = _optional_date(f.departure_to)
        return_from = _optional_date(f.return_from)
        return_to = _optional_date(f.return_to)

        def matches(item: TravelRequest) -> bool:
            if f.status != STATUS_FILTER_ALL and item.status.value != f.status:
                return False
            if location and location not in item.location_label.lower():
                return False
            if departure_from and item.departure_date < departure_from:
                return False
            if departure_to and item.departure_date > departure_to:
                return False
            if return_from and item.return_date < return_from:
                return False
            if return_to and item.return_date > return_to:
                return False
            return True

        return [item for item in self.items if matches(item)]

    def set_filters(self, **changes: str) -> None:
        """Change filter fields (status, location, departure_from, ...)."""
        for name, value in changes.items():
            if not hasattr(self.filters, name):
                raise TypeError(f"Unknown filter: {name}")
            setattr(self.filters, name, value)
        self._notify("filters")

    def reset_filters(self) -> None:
        defaults = TravelFilters()
        for f in fields(TravelFilters):
            setattr(self.filters, f.name, getattr(defaults, f.name))
        self._notify("filters")

    def _query_params(self) -> Dict[str, Any]:
        f = self.filters
        return {
            "status": None if f.status == STATUS_FILTER_ALL else f.status,
            "location": f.location.strip() or None,
            "departure_from": _optional_date(f.departure_from),
            "departure_to": _optional_date(f.departure_to),
            "return_from": _optional_date(f.return_from),
            "return_to": _optional_date(f.return_to),
            "page": self.pagination.current_page,
            "per_page": self.pagination.per_page,
        }

    def fetch(self) -> List[TravelRequest]:
        """Load the current page with the current filters.

        Failures are reported through `error` and never raised.
        """
        self._update(loading=True, error="")

        try:
            data = self.api.get("/travel-requests", params=self._query_params())
        except ApiError as exc:
            self._update(error=" ".join(extract_messages(exc, LIST_FAILED)))
            self._logger.warning(
                "Travel request list failed",
                extra={"status": exc.status, "error": exc.message},
            )
            return self.items
        finally:
            self._update(loading=False)

        if not isinstance(data, Mapping):
            data = {}
        raw_items = data.get("data")
        if not isinstance(raw_items, list):
            raw_items = []
        try:
            items = [
                TravelRequest.from_api(item) for item in raw_items if isinstance(item, Mapping)
            ]
        except (TypeError, ValueError, AttributeError) as exc:
            self._update(error=LIST_FAILED)
            self._logger.warning(
                "Travel request list could not be normalized", extra={"error": str(exc)}
            )
            return self.items

        meta = data.get("meta")
        if not isinstance(meta, Mapping):
            meta = data

        p = self.pagination
        p.per_page = _page_number(meta.get("per_page"), p.per_page)
        p.total = _page_number(meta.get("total"), len(items), minimum=0)
        p.last_page = _page_number(meta.get("last_page"), max(1, math.ceil(p.total / p.per_page)))
        p.current_page = _page_number(meta.get("current_page"), p.current_page)

        self._update(items=items)
        self._notify("pagination")
        self._logger.debug(
            "Travel requests loaded",
            extra={"count": len(items), "page": p.current_page, "total": p.total},
        )
        return items

    def _fail(self, exc: ApiError, fallback: str) -> None:
        messages = extract_messages(exc, fallback)
        joined = " ".join(messages)
        self._update(error=joined)
        exc.messages = messages
        if not exc.message:
            exc.message = joined

    def create(self, payload: Mapping[str, Any]) -> TravelRequest:
        """Create a travel request and prepend it to the list.

        Raises:
            ApiError: With `messages` listing every human-readable error.
        """
        body = dict(payload)
        for name in OUTGOING_DATE_FIELDS:
            if name in body:
                body[name] = to_api_date(body[name])
        notes = body.get("notes")
        if notes is None or (isinstance(notes, str) and not notes.strip()):
            body["notes"] = None

        self._update(error="", loading=True)
        try:
            data = self.api.post("/travel-requests", json=body)
        except ApiError as exc:
            self._fail(exc, CREATE_FAILED)
            raise
        finally:
            self._update(loading=False)

        created = TravelRequest.from_api(_unwrap(data))
        self._update(items=[created, *self.items])
        self.pagination.total += 1
        self._notify("pagination")
        self._logger.info("Travel request created", extra={"id": created.id})
        return created

    def update_status(self, request_id: Any, status: Any) -> TravelRequest:
        """Change the status of a request and replace it in the list.

        Raises:
            ValueError: If `status` is not a known status.
            ApiError: With `messages` listing every human-readable error.
        """
        target = TravelStatus.parse(status)

        self._update(error="")
        try:
            data = self.api.patch(
                f"/travel-requests/{request_id}/status",
                json={"status": target.value},
            )
        except ApiError as exc:
            self._fail(exc, UPDATE_FAILED)
            raise

        updated = TravelRequest.from_api(_unwrap(data))
        self._update(
            items=[updated if str(item.id) == str(request_id) else item for item in self.items]
        )
        self._logger.info(
            "Travel request status updated",
            extra={"id": request_id, "status": target.value},
        )
        return updated

    def go_to_page(self, page: int) -> None:
        target = min(max(1, int(page)), max(1, self.pagination.last_page))
        if target == self.pagination.current_page:
            return
        self.pagination.current_page = target
        self._notify("pagination")
        self.fetch()

    def set_per_page(self, per_page: int) -> None:
        self.pagination.per_page = max(1, int(per_page))
        self.pagination.current_page = 1
        self._notify("pagination")
        self.fetch()
