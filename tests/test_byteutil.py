import pytest

from toolkit_utils.byteutil import BytesIterator, bytes_pad, str_pad


def test_bytes_iterator():
    it = BytesIterator(b"12345678")
    assert len(it) == 8
    assert it.next_byte() == ord("1")
    assert it.next_bytes(2) == b"23"
    it.seek(1)
    assert bytes(it.next_bytes_no_copy(2)) == b"23"
    it.seek(4)
    assert it.next_byte() == ord("5")
    it.skip(1)
    assert it.next_byte() == ord("7")
    assert it.offset() == 7
    assert it.has_bytes_left() is True
    assert it.dump() == b"8"
    assert it.has_bytes_left() is False
    with pytest.raises(IndexError):
        it.next_byte()
    with pytest.raises(IndexError):
        it.next_bytes(2)
    assert it.dump() == b""


def test_next_bytes_no_copy_shares_buffer():
    data = bytearray(b"abcd")
    it = BytesIterator(data)
    view = it.next_bytes_no_copy(2)
    data[0] = ord("z")
    assert bytes(view) == b"zb"
    assert it.offset() == 2


def test_next_bytes_copies():
    data = bytearray(b"abcd")
    it = BytesIterator(data)
    out = it.next_bytes(2)
    data[0] = ord("z")
    assert out == b"ab"


def test_negative_count():
    it = BytesIterator(b"abc")
    with pytest.raises(ValueError):
        it.next_bytes(-1)


def test_failed_read_keeps_offset():
    it = BytesIterator(b"ab")
    with pytest.raises(IndexError):
        it.next_bytes(3)
    assert it.offset() == 0


@pytest.mark.parametrize(
    "data, length, kwargs, expected",
    [
        (b"test", 4, {}, b"test"),
        (b"testtest", 4, {}, b"testtest"),
        (b"testtest", 4, {"cut": True}, b"test"),
        (b"test", 6, {}, b"  test"),
        (b"test", 6, {"right": True}, b"test  "),
        (b"", 4, {}, b"    "),
    ],
)
def test_bytes_pad(data, length, kwargs, expected):
    assert bytes_pad(data, ord(" "), length, **kwargs) == expected


def test_bytes_pad_accepts_byte_repeat():
    assert bytes_pad(b"ab", b"0", 4) == b"00ab"


def test_bytes_pad_rejects_long_repeat():
    with pytest.raises(ValueError):
        bytes_pad(b"ab", b"00", 4)


@pytest.mark.parametrize(
    "text, length, kwargs, expected",
    [
        ("test", 4, {}, "test"),
        ("testtest", 4, {}, "testtest"),
        ("testtest", 4, {"cut": True}, "test"),
        ("test", 6, {}, "  test"),
        ("test", 6, {"right": True}, "test  "),
        ("", 4, {}, "    "),
    ],
)
def test_str_pad(text, length, kwargs, expected):
    assert str_pad(text, " ", length, **kwargs) == expected