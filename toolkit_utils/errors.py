"""An exception that aggregates several errors."""

from __future__ import annotations

import threading
from typing import Iterable, Iterator, List, Optional, Type, Union

ErrorTarget = Union[BaseException, Type[BaseException]]


def _chain(err: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _matches(err: BaseException, target: ErrorTarget) -> bool:
    for item in _chain(err):
        if isinstance(target, type):
            if isinstance(item, target):
                return True
        elif item is target:
            return True
        if isinstance(item, Errors) and item.contains(target):
            return True
    return False


class Errors(Exception):
    """An error made of several errors, rendered joined by ``" && "``."""

    def __init__(self, *args: BaseException) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._errors: List[BaseException] = [e for e in args if e is not None]

    def add(self, err: Optional[BaseException]) -> None:
        """Append ``err``; None is ignored."""
        if err is None:
            return
        with self._lock:
            self._errors.append(err)

    def is_nil(self) -> bool:
        """Return whether no error has been collected."""
        with self._lock:
            return not self._errors

    def __iter__(self) -> Iterator[BaseException]:
        with self._lock:
            snapshot: Iterable[BaseException] = list(self._errors)
        return iter(snapshot)

    def __str__(self) -> str:
        with self._lock:
            return " && ".join(str(e) for e in self._errors)

    def contains(self, target: ErrorTarget) -> bool:
        """Return whether one of the errors, or its causes, matches ``target``.

        ``target`` is either an exception instance, matched by identity, or an
        exception class, matched with ``isinstance``.
        """
        with self._lock:
            snapshot = list(self._errors)
        return any(_matches(err, target) for err in snapshot)


def error_cause(err: BaseException) -> BaseException:
    """Follow the ``__cause__`` chain of ``err`` and return its root."""
    root = err
    for item in _chain(err):
        root = item
    return root