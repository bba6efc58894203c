import io

import pytest

from toolkit_utils.bits import (
    BitsWriter,
    BitsWriterBatch,
    ByteOrder,
    byte_hamming84_decode,
    byte_parity,
)


def test_bits_writer_sequence():
    buf = io.BytesIO()
    received = bytearray()
    w = BitsWriter(buf, write_callback=received.extend)

    w.write("000000")
    assert buf.getvalue() == b""
    w.write(False)
    w.write(True)
    assert buf.getvalue() == bytes([1])
    w.write(bytes([2, 3]))
    assert buf.getvalue() == bytes([1, 2, 3])
    w.write_uint8(4)
    assert buf.getvalue() == bytes([1, 2, 3, 4])
    w.write_uint16(5)
    assert buf.getvalue() == bytes([1, 2, 3, 4, 0, 5])
    w.write_uint32(6)
    assert buf.getvalue() == bytes([1, 2, 3, 4, 0, 5, 0, 0, 0, 6])
    w.write_uint64(7)
    expected = bytes([1, 2, 3, 4, 0, 5, 0, 0, 0, 6, 0, 0, 0, 0, 0, 0, 0, 7])
    assert buf.getvalue() == expected
    assert bytes(received) == expected

    with pytest.raises(TypeError):
        w.write(1)

    buf.seek(0)
    buf.truncate()
    w.write_n(4, 3)
    w.write_n(4096, 13)
    assert buf.getvalue() == bytes([144, 0])


@pytest.mark.parametrize(
    "data, n, expected",
    [
        (b"", 0, b""),
        (b"\x00", 0, b""),
        (b"", 3, b"\xff\xff\xff"),
        (b"en", 3, b"en\xff"),
        (b"eng", 3, b"eng"),
        (b"english", 3, b"eng"),
    ],
)
def test_write_bytes_n(data, n, expected):
    buf = io.BytesIO()
    w = BitsWriter(buf)
    w.write_bytes_n(data, n, 0xFF)
    assert buf.getvalue() == expected


def test_write_bytes_n_negative_count():
    w = BitsWriter(io.BytesIO())
    with pytest.raises(ValueError):
        w.write_bytes_n(b"abc", -1, 0)


class _LimitedWriter:
    def __init__(self, limit):
        self.limit = limit

    def write(self, data):
        self.limit -= len(data)
        if self.limit < 0:
            raise EOFError("limit reached")
        return len(data)


def test_batch_keeps_first_error():
    w = BitsWriter(_LimitedWriter(1))
    batch = BitsWriterBatch(w)
    batch.write_uint8(0)
    assert batch.error() is None
    batch.write_uint8(1)
    first = batch.error()
    assert isinstance(first, EOFError)
    batch.write_uint8(2)
    assert batch.error() is first


def test_batch_methods_write_through():
    buf = io.BytesIO()
    batch = BitsWriterBatch(BitsWriter(buf))
    batch.write("1111")
    batch.write_n(0, 4)
    batch.write_bytes_n(b"a", 2, 0x00)
    assert batch.error() is None
    assert buf.getvalue() == b"\xf0a\x00"


def test_little_endian():
    buf = io.BytesIO()
    w = BitsWriter(buf, byte_order=ByteOrder.LITTLE)
    w.write_uint16(0x0102)
    w.write_uint32(0x01020304)
    assert buf.getvalue() == b"\x02\x01\x04\x03\x02\x01"


def test_unaligned_full_byte():
    buf = io.BytesIO()
    w = BitsWriter(buf)
    w.write("1010")
    w.write_uint8(0xFF)
    assert buf.getvalue() == b"\xaf"
    w.write("0000")
    assert buf.getvalue() == b"\xaf\xf0"


def test_unaligned_byte_slice():
    buf = io.BytesIO()
    w = BitsWriter(buf)
    w.write("1")
    w.write(b"\x00")
    w.write("0000000")
    assert buf.getvalue() == b"\x80\x00"


def test_set_write_callback():
    buf = io.BytesIO()
    seen = []
    w = BitsWriter(buf)
    w.write_uint8(1)
    w.set_write_callback(seen.append)
    w.write(b"\x02\x03")
    assert seen == [b"\x02", b"\x03"]
    assert buf.getvalue() == b"\x01\x02\x03"


def test_write_n_errors():
    w = BitsWriter(io.BytesIO())
    with pytest.raises(TypeError):
        w.write_n("x", 3)
    with pytest.raises(ValueError):
        w.write_n(1, -1)
    with pytest.raises(ValueError):
        w.write_n(1, 65)


def test_write_uint_range():
    w = BitsWriter(io.BytesIO())
    with pytest.raises(ValueError):
        w.write_uint8(256)
    with pytest.raises(ValueError):
        w.write_uint16(-1)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x00, 0x01),
        (0x01, None),
        (0x03, 0x08),
        (0x05, 0x0C),
        (0x06, 0x04),
        (0x0C, 0x06),
        (0x11, 0x0A),
        (0x12, 0x02),
        (0x28, 0x00),
        (0xF0, 0x07),
        (0xFF, 0x0E),
    ],
)
def test_hamming84_values(value, expected):
    assert byte_hamming84_decode(value) == expected


def test_hamming84_invariants():
    decoded = [byte_hamming84_decode(i) for i in range(256)]
    valid = [d for d in decoded if d is not None]
    assert len(valid) == 144
    assert all(0 <= d <= 15 for d in valid)


def test_hamming84_out_of_range():
    with pytest.raises(ValueError):
        byte_hamming84_decode(256)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x00, (0x00, False)),
        (0x01, (0x01, True)),
        (0x03, (0x03, False)),
        (0x7F, (0x7F, True)),
        (0x80, (0x00, True)),
        (0xFF, (0x7F, False)),
    ],
)
def test_byte_parity_values(value, expected):
    assert byte_parity(value) == expected


def test_byte_parity_flip_toggles():
    for i in range(256):
        data, ok = byte_parity(i)
        assert data == i & 0x7F
        assert byte_parity(i ^ 0x01)[1] is not ok
        assert byte_parity(i ^ 0x80)[1] is not ok