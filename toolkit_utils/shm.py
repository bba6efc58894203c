"""POSIX shared memory segments and variable-size readers and writers."""

from __future__ import annotations

import mmap
import os
import threading
from dataclasses import dataclass
from typing import Optional

import _posixshmem

_MODE = 0o600


class SharedMemory:
    """A named POSIX shared memory segment mapped into this process.

    The public name never has a leading ``/``; the system name always has one.
    A segment created by :meth:`create` is unlinked when closed.
    """

    def __init__(self, name: str, fd: int, buffer: mmap.mmap, size: int, unlink: bool) -> None:
        self._name = name
        self._fd: Optional[int] = fd
        self._buffer: Optional[mmap.mmap] = buffer
        self._size = size
        self._unlink = unlink

    @classmethod
    def _open(cls, name: str, flags: int, size: Optional[int]) -> "SharedMemory":
        public = name.removeprefix("/")
        system = "/" + public
        fd = _posixshmem.shm_open(system, flags, mode=_MODE)
        unlink = size is not None
        try:
            if size is not None:
                os.ftruncate(fd, size)
            actual = os.fstat(fd).st_size
            buffer = mmap.mmap(fd, actual)
        except BaseException:
            if unlink:
                _posixshmem.shm_unlink(system)
            os.close(fd)
            raise
        return cls(public, fd, buffer, actual, unlink)

    @classmethod
    def create(cls, name: str, size: int) -> "SharedMemory":
        """Create a new segment of ``size`` bytes; FileExistsError if it exists."""
        return cls._open(name, os.O_CREAT | os.O_EXCL | os.O_RDWR, size)

    @classmethod
    def open(cls, name: str) -> "SharedMemory":
        """Open an existing segment."""
        return cls._open(name, os.O_RDWR, None)

    def close(self) -> None:
        """Unlink the segment if this object created it, then unmap and close it."""
        if self._unlink:
            _posixshmem.shm_unlink("/" + self._name)
            self._unlink = False
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def _mapped(self) -> mmap.mmap:
        if self._buffer is None:
            raise ValueError("shared memory is unmapped")
        return self._buffer

    def write_bytes(self, data: bytes) -> None:
        """Copy ``data`` to the start of the segment."""
        buffer = self._mapped()
        if len(data) > self._size:
            raise ValueError(f"{len(data)} bytes do not fit in {self._size} bytes of shared memory")
        buffer[: len(data)] = bytes(data)

    def read_bytes(self, size: int) -> bytes:
        """Return a copy of the first ``size`` bytes of the segment."""
        buffer = self._mapped()
        if not 0 <= size <= self._size:
            raise ValueError(f"cannot read {size} bytes from {self._size} bytes of shared memory")
        return bytes(buffer[:size])

    def name(self) -> str:
        """Return the segment name, without a leading ``/``."""
        return self._name

    def size(self) -> int:
        """Return the segment size in bytes."""
        return self._size

    def __enter__(self) -> "SharedMemory":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


@dataclass(frozen=True)
class VariableSizeReadOptions:
    """What a reader needs to read what a writer wrote."""

    name: str
    size: int


class VariableSizeSharedMemoryWriter:
    """Writes data of any size, allocating a larger segment when needed."""

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._shm: Optional[SharedMemory] = None
        self._lock = threading.Lock()

    def write_bytes(self, data: bytes) -> VariableSizeReadOptions:
        """Write ``data`` and return the options to read it back."""
        size = len(data)
        with self._lock:
            if self._shm is None or size > self._shm.size():
                self._close_shm()
                self._shm = SharedMemory.create(f"{self._prefix}-{size}", size)
            self._shm.write_bytes(data)
            return VariableSizeReadOptions(name=self._shm.name(), size=size)

    def _close_shm(self) -> None:
        if self._shm is not None:
            self._shm.close()
            self._shm = None

    def close(self) -> None:
        """Close the current segment."""
        with self._lock:
            self._close_shm()


class VariableSizeSharedMemoryReader:
    """Reads data written by a VariableSizeSharedMemoryWriter."""

    def __init__(self) -> None:
        self._shm: Optional[SharedMemory] = None
        self._lock = threading.Lock()

    def read_bytes(self, options: VariableSizeReadOptions) -> bytes:
        """Read the data described by ``options``, reopening the segment if it changed."""
        with self._lock:
            if self._shm is None or self._shm.name() != options.name:
                self._close_shm()
                self._shm = SharedMemory.open(options.name)
            return self._shm.read_bytes(options.size)

    def _close_shm(self) -> None:
        if self._shm is not None:
            self._shm.close()
            self._shm = None

    def close(self) -> None:
        """Close the current segment."""
        with self._lock:
            self._close_shm()