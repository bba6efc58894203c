"""I/O helpers: cancellable copy, line-splitting writer and an in-memory pipe."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Optional, Protocol

_CHUNK_SIZE = 32 * 1024


class Cancelled(Exception):
    """Raised when an operation is interrupted by its cancel event."""


class _CancelEvent(Protocol):
    def is_set(self) -> bool: ...


class _Reader(Protocol):
    def read(self, size: int = -1) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes) -> object: ...


class CtxReader:
    """A reader that refuses to read once its cancel event is set."""

    def __init__(self, cancel: Optional[_CancelEvent], reader: _Reader) -> None:
        self._cancel = cancel
        self._reader = reader

    def read(self, size: int = -1) -> bytes:
        """Read from the wrapped reader, raising Cancelled if cancelled."""
        if self._cancel is not None and self._cancel.is_set():
            raise Cancelled("context canceled")
        return self._reader.read(size)


def copy(cancel: Optional[_CancelEvent], dst: _Writer, src: _Reader) -> int:
    """Copy ``src`` into ``dst`` until EOF, checking ``cancel`` before each read."""
    reader = CtxReader(cancel, src)
    total = 0
    while True:
        chunk = reader.read(_CHUNK_SIZE)
        if not chunk:
            return total
        dst.write(chunk)
        total += len(chunk)


class _NopCloser:
    """Writer wrapper whose close leaves the wrapped writer open."""

    def __init__(self, writer: _Writer) -> None:
        self._writer = writer
        self.closed = False

    def write(self, data: bytes) -> object:
        return self._writer.write(data)

    def close(self) -> None:
        """Mark the wrapper closed without closing the wrapped writer."""
        self.closed = True


def nop_closer(writer: _Writer) -> _NopCloser:
    """Wrap ``writer`` in an object whose ``close`` leaves it open."""
    return _NopCloser(writer)


class WriterAdapter:
    """A writer that forwards data to a callback, optionally split on a separator.

    With a separator, every complete segment is passed to the callback and the
    trailing partial segment is buffered until more data or ``close``.
    """

    def __init__(
        self,
        callback: Optional[Callable[[bytes], None]] = None,
        split: bytes = b"",
    ) -> None:
        self._callback = callback
        self._split = bytes(split)
        self._buffer = bytearray()

    def write(self, data: bytes) -> int:
        """Accept ``data`` and return its length."""
        data = bytes(data)
        if not self._split:
            self._emit(data)
            return len(data)
        if self._split not in data:
            self._buffer += data
            return len(data)
        *complete, rest = data.split(self._split)
        complete[0] = bytes(self._buffer) + complete[0]
        self._buffer.clear()
        for segment in complete:
            self._emit(segment)
        self._buffer += rest
        return len(data)

    def close(self) -> None:
        """Flush any buffered data to the callback."""
        if self._buffer:
            pending = bytes(self._buffer)
            self._buffer.clear()
            self._emit(pending)

    def _emit(self, data: bytes) -> None:
        if self._callback is not None:
            self._callback(data)


class Piper:
    """An in-memory pipe whose writes never block.

    Reads block until data is written or the pipe is closed, or until
    ``read_timeout`` seconds pass when one is given. Closing interrupts
    pending reads and makes reads and writes raise EOFError.
    """

    def __init__(
        self,
        read_timeout: Optional[float] = None,
        read_timeout_error: Optional[BaseException] = None,
    ) -> None:
        self._read_timeout = read_timeout
        self._read_timeout_error = read_timeout_error
        self._chunks: Deque[bytes] = deque()
        self._closed = False
        self._cond = threading.Condition()

    def read(self) -> bytes:
        """Return the next written chunk.

        On timeout, ``read_timeout_error`` is raised if set, otherwise an empty
        bytes object is returned.
        """
        deadline = None
        if self._read_timeout is not None and self._read_timeout > 0:
            deadline = time.monotonic() + self._read_timeout
        with self._cond:
            while True:
                remaining = None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        if self._read_timeout_error is not None:
                            raise self._read_timeout_error
                        return b""
                if self._closed:
                    raise EOFError("piper is closed")
                if self._chunks:
                    return self._chunks.popleft()
                self._cond.wait(remaining)

    def write(self, data: bytes) -> int:
        """Queue a copy of ``data`` and return its length."""
        chunk = bytes(data)
        with self._cond:
            if self._closed:
                raise EOFError("piper is closed")
            self._chunks.append(chunk)
            self._cond.notify()
        return len(chunk)

    def close(self) -> None:
        """Close the pipe, waking up any pending read."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()