"""Sequential byte iteration and padding helpers."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


class BytesIterator:
    """Iterates through a byte sequence, raising IndexError on overruns."""

    def __init__(self, data: BytesLike) -> None:
        self._data = data
        self._offset = 0

    def _check(self, end: int, reported: int) -> None:
        if self._offset < 0 or len(self._data) < end:
            raise IndexError(
                f"slice length is {len(self._data)}, offset {reported} is invalid"
            )

    def next_byte(self) -> int:
        """Return the next byte."""
        self._check(self._offset + 1, self._offset)
        value = self._data[self._offset]
        self._offset += 1
        return value

    def next_bytes(self, n: int) -> bytes:
        """Return a copy of the next ``n`` bytes."""
        if n < 0:
            raise ValueError(f"byte count {n} must not be negative")
        end = self._offset + n
        self._check(end, end)
        out = bytes(self._data[self._offset:end])
        self._offset = end
        return out

    def next_bytes_no_copy(self, n: int) -> memoryview:
        """Return a view over the next ``n`` bytes, sharing the iterator's buffer."""
        if n < 0:
            raise ValueError(f"byte count {n} must not be negative")
        end = self._offset + n
        self._check(end, end)
        view = memoryview(self._data)[self._offset:end]
        self._offset = end
        return view

    def seek(self, n: int) -> None:
        """Move to absolute offset ``n``."""
        self._offset = n

    def skip(self, n: int) -> None:
        """Move ``n`` bytes forward (or backward if negative)."""
        self._offset += n

    def has_bytes_left(self) -> bool:
        """Return whether bytes remain."""
        return self._offset < len(self._data)

    def offset(self) -> int:
        """Return the current offset."""
        return self._offset

    def dump(self) -> bytes:
        """Return the remaining bytes and move to the end."""
        if not self.has_bytes_left():
            return b""
        out = bytes(self._data[self._offset:])
        self._offset = len(self._data)
        return out

    def __len__(self) -> int:
        return len(self._data)


def _repeat_byte(repeat: Union[int, bytes, str]) -> int:
    if isinstance(repeat, int):
        return repeat & 0xFF
    if len(repeat) != 1:
        raise ValueError("repeat must be a single byte or character")
    if isinstance(repeat, str):
        return ord(repeat) & 0xFF
    return repeat[0]


def bytes_pad(
    data: BytesLike,
    repeat: Union[int, bytes, str],
    length: int,
    *,
    cut: bool = False,
    right: bool = False,
) -> bytes:
    """Pad ``data`` to ``length`` with ``repeat``, on the left unless ``right``.

    Longer input is returned unchanged unless ``cut`` is set, in which case it
    is truncated to ``length``.
    """
    data = bytes(data)
    if len(data) >= length:
        return data[:length] if cut else data
    padding = bytes([_repeat_byte(repeat)]) * (length - len(data))
    return data + padding if right else padding + data


def str_pad(
    text: str,
    repeat: str,
    length: int,
    *,
    cut: bool = False,
    right: bool = False,
) -> str:
    """Pad the UTF-8 encoding of ``text`` to ``length`` bytes."""
    padded = bytes_pad(text.encode("utf-8"), repeat, length, cut=cut, right=right)
    return padded.decode("utf-8", errors="replace")