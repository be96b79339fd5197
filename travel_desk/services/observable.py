"""Observable state base for the stores.

Views (or anything else) subscribe to a store and are called once per
changed field:

    unsubscribe = store.subscribe(lambda name, value: print(name, value))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List

Listener = Callable[[str, Any], None]

_logger = logging.getLogger(__name__)


@dataclass
class Observable:
    """Mixin giving a dataclass store subscribe/notify semantics."""

    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener(field_name, value)`; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, name: str) -> None:
        value = getattr(self, name)
        for listener in list(self._listeners):
            try:
                listener(name, value)
            except Exception:
                _logger.exception("State listener failed", extra={"field": name})

    def _update(self, **changes: Any) -> None:
        """Assign fields and notify listeners of those whose value changed."""
        changed = []
        for name, value in changes.items():
            if getattr(self, name) != value:
                changed.append(name)
            setattr(self, name, value)
        for name in changed:
            self._notify(name)
