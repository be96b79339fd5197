"""Services layer - Stateful stores consumed by the views.

Available services:
- SessionStore: authenticated user, token and session messaging
- DestinationStore: cached destination search
- TravelRequestStore: paginated travel request list and mutations
- AuthGuard: navigation guard based on the session state
"""

from .destination_store import DestinationStore
from .observable import Observable
from .route_guard import AuthGuard
from .session_store import SessionStore
from .travel_request_store import TravelRequestStore, extract_messages

__all__ = [
    "SessionStore",
    "DestinationStore",
    "TravelRequestStore",
    "AuthGuard",
    "Observable",
    "extract_messages",
]
