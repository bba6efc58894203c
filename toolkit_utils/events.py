"""A simple named-event dispatcher."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable, Dict, Hashable

EventHandler = Callable[[Any], bool]


class EventManager:
    """Dispatches payloads to handlers registered under event names.

    A handler returning a truthy value is removed after being called.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._handlers: Dict[Hashable, Dict[int, EventHandler]] = {}
        self._lock = threading.Lock()

    def on(self, name: Hashable, handler: EventHandler) -> int:
        """Register ``handler`` for ``name`` and return its id."""
        with self._lock:
            handler_id = next(self._ids)
            self._handlers.setdefault(name, {})[handler_id] = handler
            return handler_id

    def off(self, handler_id: int) -> None:
        """Remove the handler with ``handler_id``."""
        with self._lock:
            for handlers in self._handlers.values():
                handlers.pop(handler_id, None)

    def emit(self, name: Hashable, payload: Any = None) -> None:
        """Call every handler of ``name`` in registration order."""
        with self._lock:
            handlers = sorted(self._handlers.get(name, {}).items())
        for handler_id, handler in handlers:
            if handler(payload):
                self.off(handler_id)