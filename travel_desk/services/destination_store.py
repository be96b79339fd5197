"""Destination search backed by an expiring local cache.

Queries are keyed by their trimmed, lower-cased form. A fresh cache entry
answers without touching the network; otherwise `GET /destinations` is
called with the raw query and the result is cached, even when empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from ..ports.cache import CachePort
from ..adapters.http.api_client import ApiClient
from ..domain.models import Destination
from .observable import Observable


def normalize_query(value: str) -> str:
    return value.strip().lower()


def _destinations_from(items: Any) -> List[Destination]:
    if not isinstance(items, list):
        return []
    return [Destination.from_api(item) for item in items if isinstance(item, Mapping)]


@dataclass
class DestinationStore(Observable):
    """Searches destinations, caching results per normalized query.

    Attributes:
        api: Shared API client
        cache: Cache of raw destination payloads keyed by normalized query
        limit: Maximum number of results requested from the API
        loading: A network search is in progress
    """

    api: ApiClient
    cache: CachePort[List[dict]]
    limit: int = 10
    loading: bool = False

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def search(self, query: str) -> List[Destination]:
        """Search destinations matching `query`.

        Returns:
            Matching destinations; empty for a blank query or an unexpected
            response shape.

        Raises:
            ApiError: If the network call fails (nothing is cached).
        """
        normalized = normalize_query(query)
        if not normalized:
            return []

        cached = self.cache.get(normalized)
        if cached is not None:
            self._logger.debug("Destination cache hit", extra={"query": normalized})
            return _destinations_from(cached)

        self._update(loading=True)
        try:
            data = self.api.get("/destinations", params={"q": query, "limit": self.limit})
        finally:
            self._update(loading=False)

        items = data.get("data") if isinstance(data, Mapping) else None
        if not isinstance(items, list):
            items = []
        payload = [dict(item) for item in items if isinstance(item, Mapping)]

        self.cache.set(normalized, payload)
        self._logger.debug(
            "Destination search",
            extra={
                "query": normalized,
                "results": len(payload),
                "cache": self.cache.stats(),
            },
        )
        return _destinations_from(payload)
