"""Domain layer - Core models, errors and user-facing messages.

No I/O happens here; the models only reshape data received from or sent
to the REST API.
"""

from .errors import (
    ApiError,
    ErrorKind,
    MissingTokenError,
    NavigationError,
    StaleSessionError,
    TravelDeskError,
)
from .messages import get_status_label
from .models import (
    STATUS_FILTER_ALL,
    Destination,
    Pagination,
    TravelFilters,
    TravelRequest,
    TravelStatus,
    User,
    build_location_label,
)

__all__ = [
    # Models
    "User",
    "Destination",
    "TravelRequest",
    "TravelStatus",
    "TravelFilters",
    "Pagination",
    "STATUS_FILTER_ALL",
    "build_location_label",
    "get_status_label",
    # Errors
    "TravelDeskError",
    "ApiError",
    "ErrorKind",
    "MissingTokenError",
    "StaleSessionError",
    "NavigationError",
]
