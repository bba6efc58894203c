import pytest

from toolkit_utils.rational import Rational


def test_rational():
    r = Rational()
    r.unmarshal_text(b"")
    assert r.to_float() == 0.0
    with pytest.raises(ValueError):
        r.unmarshal_text(b"test")
    with pytest.raises(ValueError):
        r.unmarshal_text(b"1/test")
    r.unmarshal_text(b"0")
    assert r.num == 0
    assert r.den == 1
    r.unmarshal_text(b"1/2")
    assert r.num == 1
    assert r.den == 2
    assert r.to_float() == 0.5
    assert Rational(1, 2).marshal_text() == b"1/2"


def test_parse_and_str():
    r = Rational.parse("3/4")
    assert r == Rational(3, 4)
    assert str(r) == "3/4"
    assert Rational.parse(Rational(-5, 7).marshal_text()) == Rational(-5, 7)