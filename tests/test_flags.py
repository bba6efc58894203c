from toolkit_utils.flags import BitFlags, bool_to_uint32


def test_bit_flags():
    f = BitFlags(2 | 4)
    assert f.add(1) == 7
    assert f.delete(2) == 4
    assert f.has(1) is False
    assert f.has(4) is True


def test_bit_flags_are_not_mutated():
    f = BitFlags(6)
    f.add(1)
    f.delete(4)
    assert int(f) == 6


def test_bit_flags_has_zero():
    assert BitFlags(0xFF).has(0) is False


def test_bool_to_uint32():
    assert bool_to_uint32(False) == 0
    assert bool_to_uint32(True) == 1