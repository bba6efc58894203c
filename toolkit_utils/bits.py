"""Bit-level writing helpers and small byte decoding tables."""

from __future__ import annotations

import enum
from typing import Callable, Optional, Protocol, Tuple

WriteCallback = Callable[[bytes], None]


class _Writer(Protocol):
    def write(self, data: bytes) -> object: ...


class ByteOrder(enum.Enum):
    """Byte order used when writing multi-byte integers."""

    BIG = "big"
    LITTLE = "little"


def _check_uint(value: object, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"invalid type {type(value).__name__}")
    if not 0 <= value < (1 << bits):
        raise ValueError(f"value {value} does not fit in {bits} unsigned bits")
    return value


class BitsWriter:
    """Writes individual bits into a writer, emitting whole bytes only.

    ``write`` accepts a string of ``'0'``/``'1'`` characters (one bit per
    character), ``bytes`` (whole bytes) or a ``bool`` (one bit). Unsigned
    integers are written with ``write_uint8`` to ``write_uint64`` or with
    ``write_n`` for an arbitrary bit width.
    """

    def __init__(
        self,
        writer: _Writer,
        byte_order: ByteOrder = ByteOrder.BIG,
        write_callback: Optional[WriteCallback] = None,
    ) -> None:
        self._writer = writer
        self._byte_order = byte_order
        self._callback = write_callback
        self._cache = 0
        self._cache_len = 0

    def set_write_callback(self, callback: Optional[WriteCallback]) -> None:
        """Set the callback invoked with every full byte that is written."""
        self._callback = callback

    def write(self, value: object) -> None:
        """Write a bit string, raw bytes or a single boolean bit."""
        if isinstance(value, str):
            for char in value:
                self._write_bit(char == "1")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self._write_byte_slice(bytes(value))
        elif isinstance(value, bool):
            self._write_bit(value)
        else:
            raise TypeError(f"invalid type {type(value).__name__}")

    def write_uint8(self, value: int) -> None:
        """Write an 8-bit unsigned integer."""
        self._write_full_byte(_check_uint(value, 8))

    def write_uint16(self, value: int) -> None:
        """Write a 16-bit unsigned integer in the configured byte order."""
        self._write_full_int(_check_uint(value, 16), 2)

    def write_uint32(self, value: int) -> None:
        """Write a 32-bit unsigned integer in the configured byte order."""
        self._write_full_int(_check_uint(value, 32), 4)

    def write_uint64(self, value: int) -> None:
        """Write a 64-bit unsigned integer in the configured byte order."""
        self._write_full_int(_check_uint(value, 64), 8)

    def write_n(self, value: int, n: int) -> None:
        """Write the ``n`` lowest bits of ``value``, most significant first."""
        _check_uint(value, 64)
        if not 0 <= n <= 64:
            raise ValueError(f"bit count {n} must be between 0 and 64")
        self._write_bits(value, n)

    def write_bytes_n(self, data: bytes, n: int, pad_byte: int) -> None:
        """Write exactly ``n`` bytes: truncate ``data`` or pad it with ``pad_byte``."""
        if n < 0:
            raise ValueError(f"byte count {n} must not be negative")
        if n == 0:
            return
        data = bytes(data)
        if len(data) >= n:
            self._write_byte_slice(data[:n])
            return
        self._write_byte_slice(data)
        self._write_byte_slice(bytes([_check_uint(pad_byte, 8)]) * (n - len(data)))

    def _emit(self, data: bytes) -> None:
        self._writer.write(data)
        if self._callback is not None:
            for byte in data:
                self._callback(bytes([byte]))

    def _write_byte_slice(self, data: bytes) -> None:
        if not data:
            return
        if self._cache_len:
            for byte in data:
                self._write_full_byte(byte)
        else:
            self._emit(data)

    def _write_full_byte(self, byte: int) -> None:
        if self._cache_len == 0:
            out = byte
        else:
            out = self._cache | (byte >> self._cache_len)
            self._cache = (byte << (8 - self._cache_len)) & 0xFF
        self._emit(bytes([out]))

    def _write_full_int(self, value: int, size: int) -> None:
        if self._byte_order is ByteOrder.BIG:
            self._write_bits(value, size * 8)
        else:
            for shift in range(0, size * 8, 8):
                self._write_full_byte((value >> shift) & 0xFF)

    def _write_bit(self, bit: bool) -> None:
        if bit:
            self._cache |= 1 << (7 - self._cache_len)
        self._cache_len += 1
        if self._cache_len == 8:
            out = self._cache
            self._cache = 0
            self._cache_len = 0
            self._emit(bytes([out]))

    def _write_bits(self, value: int, n: int) -> None:
        value &= (1 << n) - 1
        while n > 0:
            free = 8 - self._cache_len
            if n >= free:
                n -= free
                out = self._cache | ((value >> n) & ((1 << free) - 1))
                self._cache = 0
                self._cache_len = 0
                self._emit(bytes([out]))
            else:
                self._cache |= (value & ((1 << n) - 1)) << (free - n)
                self._cache_len += n
                n = 0


class BitsWriterBatch:
    """Chains writes on a BitsWriter and keeps the first error raised."""

    def __init__(self, writer: BitsWriter) -> None:
        self._writer = writer
        self._error: Optional[Exception] = None

    def _run(self, fn: Callable[..., None], *args: object) -> None:
        if self._error is not None:
            return
        try:
            fn(*args)
        except Exception as exc:  # noqa: BLE001 - the batch records any failure
            self._error = exc

    def write(self, value: object) -> None:
        """Call ``BitsWriter.write`` unless an earlier write failed."""
        self._run(self._writer.write, value)

    def write_uint8(self, value: int) -> None:
        """Call ``BitsWriter.write_uint8`` unless an earlier write failed."""
        self._run(self._writer.write_uint8, value)

    def write_n(self, value: int, n: int) -> None:
        """Call ``BitsWriter.write_n`` unless an earlier write failed."""
        self._run(self._writer.write_n, value, n)

    def write_bytes_n(self, data: bytes, n: int, pad_byte: int) -> None:
        """Call ``BitsWriter.write_bytes_n`` unless an earlier write failed."""
        self._run(self._writer.write_bytes_n, data, n, pad_byte)

    def error(self) -> Optional[Exception]:
        """Return the first error raised, or None."""
        return self._error


_HAMMING84 = (
    0x01, 0xFF, 0xFF, 0x08, 0xFF, 0x0C, 0x04, 0xFF, 0xFF, 0x08, 0x08, 0x08, 0x06, 0xFF, 0xFF, 0x08,
    0xFF, 0x0A, 0x02, 0xFF, 0x06, 0xFF, 0xFF, 0x0F, 0x06, 0xFF, 0xFF, 0x08, 0x06, 0x06, 0x06, 0xFF,
    0xFF, 0x0A, 0x04, 0xFF, 0x04, 0xFF, 0x04, 0x04, 0x00, 0xFF, 0xFF, 0x08, 0xFF, 0x0D, 0x04, 0xFF,
    0x0A, 0x0A, 0xFF, 0x0A, 0xFF, 0x0A, 0x04, 0xFF, 0xFF, 0x0A, 0x03, 0xFF, 0x06, 0xFF, 0xFF, 0x0E,
    0x01, 0x01, 0x01, 0xFF, 0x01, 0xFF, 0xFF, 0x0F, 0x01, 0xFF, 0xFF, 0x08, 0xFF, 0x0D, 0x05, 0xFF,
    0x01, 0xFF, 0xFF, 0x0F, 0xFF, 0x0F, 0x0F, 0x0F, 0xFF, 0x0B, 0x03, 0xFF, 0x06, 0xFF, 0xFF, 0x0F,
    0x01, 0xFF, 0xFF, 0x09, 0xFF, 0x0D, 0x04, 0xFF, 0xFF, 0x0D, 0x03, 0xFF, 0x0D, 0x0D, 0xFF, 0x0D,
    0xFF, 0x0A, 0x03, 0xFF, 0x07, 0xFF, 0xFF, 0x0F, 0x03, 0xFF, 0x03, 0x03, 0xFF, 0x0D, 0x03, 0xFF,
    0xFF, 0x0C, 0x02, 0xFF, 0x0C, 0x0C, 0xFF, 0x0C, 0x00, 0xFF, 0xFF, 0x08, 0xFF, 0x0C, 0x05, 0xFF,
    0x02, 0xFF, 0x02, 0x02, 0xFF, 0x0C, 0x02, 0xFF, 0xFF, 0x0B, 0x02, 0xFF, 0x06, 0xFF, 0xFF, 0x0E,
    0x00, 0xFF, 0xFF, 0x09, 0xFF, 0x0C, 0x04, 0xFF, 0x00, 0x00, 0x00, 0xFF, 0x00, 0xFF, 0xFF, 0x0E,
    0xFF, 0x0A, 0x02, 0xFF, 0x07, 0xFF, 0xFF, 0x0E, 0x00, 0xFF, 0xFF, 0x0E, 0xFF, 0x0E, 0x0E, 0x0E,
    0x01, 0xFF, 0xFF, 0x09, 0xFF, 0x0C, 0x05, 0xFF, 0xFF, 0x0B, 0x05, 0xFF, 0x05, 0xFF, 0x05, 0x05,
    0xFF, 0x0B, 0x02, 0xFF, 0x07, 0xFF, 0xFF, 0x0F, 0x0B, 0x0B, 0xFF, 0x0B, 0xFF, 0x0B, 0x05, 0xFF,
    0xFF, 0x09, 0x09, 0x09, 0x07, 0xFF, 0xFF, 0x09, 0x00, 0xFF, 0xFF, 0x09, 0xFF, 0x0D, 0x05, 0xFF,
    0x07, 0xFF, 0xFF, 0x09, 0x07, 0x07, 0x07, 0xFF, 0xFF, 0x0B, 0x03, 0xFF, 0x07, 0xFF, 0xFF, 0x0E,
)


def byte_hamming84_decode(value: int) -> Optional[int]:
    """Decode a Hamming 8/4 protected byte; return None if it cannot be corrected."""
    decoded = _HAMMING84[_check_uint(value, 8)]
    return None if decoded == 0xFF else decoded


def byte_parity(value: int) -> Tuple[int, bool]:
    """Return the 7 data bits of ``value`` and whether its parity is odd."""
    value = _check_uint(value, 8)
    return value & 0x7F, value.bit_count() % 2 == 1