"""An object that closes several things in reverse order of registration."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from .errors import Errors

CloseFunc = Callable[[], object]
OnClosed = Callable[[Optional[Errors]], None]


class Closer:
    """Runs registered close functions, most recently added first.

    Exceptions raised by close functions are collected and raised together
    as an :class:`Errors` once every function has run.
    """

    def __init__(self) -> None:
        self._closed = False
        self._funcs: List[Callable[[], object]] = []
        self._close_lock = threading.RLock()
        self._funcs_lock = threading.Lock()
        self._on_closed: Optional[OnClosed] = None

    def close(self) -> None:
        """Run every close function; raise Errors if any of them failed."""
        with self._close_lock:
            with self._funcs_lock:
                funcs = list(self._funcs)
            errs = Errors()
            for fn in funcs:
                try:
                    result = fn()
                except Exception as exc:  # noqa: BLE001 - collected and re-raised
                    errs.add(exc)
                else:
                    if isinstance(result, BaseException):
                        errs.add(result)
            with self._funcs_lock:
                self._funcs = []
            self._closed = True
            outcome = None if errs.is_nil() else errs
            if self._on_closed is not None:
                self._on_closed(outcome)
            if outcome is not None:
                raise outcome

    def add(self, fn: CloseFunc) -> None:
        """Register a close function whose return value is ignored."""

        def _wrapped() -> None:
            fn()

        self.add_with_error(_wrapped)

    def add_with_error(self, fn: CloseFunc) -> None:
        """Register a close function that may raise or return an exception."""
        with self._funcs_lock:
            self._funcs.insert(0, fn)

    def append(self, other: "Closer") -> None:
        """Append the close functions of ``other`` after this closer's ones."""
        with self._funcs_lock, other._funcs_lock:
            self._funcs.extend(other._funcs)

    def new_child(self) -> "Closer":
        """Create a closer that is closed when this one is."""
        child = Closer()
        self.add_with_error(child.close)
        return child

    def do(self, fn: Callable[[], object]) -> None:
        """Run ``fn`` unless closed, preventing a concurrent close meanwhile."""
        with self._close_lock:
            if self._closed:
                return
            fn()

    def on_closed(self, fn: Optional[OnClosed]) -> None:
        """Set the callback called after each close with the errors or None."""
        with self._close_lock:
            self._on_closed = fn

    def is_closed(self) -> bool:
        """Return whether the closer has been closed."""
        with self._close_lock:
            return self._closed

    def __enter__(self) -> "Closer":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False