"""A rational number with a ``num/den`` text form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

_INT = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f"atoi of {text} failed")
    return int(text)


@dataclass
class Rational:
    """A rational number ``num/den``."""

    num: int = 0
    den: int = 1

    def to_float(self) -> float:
        """Return the value as a float."""
        return self.num / self.den

    def marshal_text(self) -> bytes:
        """Return the ``num/den`` text form."""
        return str(self).encode()

    def unmarshal_text(self, data: Union[bytes, str]) -> None:
        """Parse ``num`` or ``num/den`` into this rational; empty input gives 0/1."""
        text = data.decode() if isinstance(data, (bytes, bytearray)) else data
        self.num = 0
        self.den = 1
        if not text:
            return
        items = text.split("/")
        self.num = _atoi(items[0])
        if len(items) > 1:
            self.den = _atoi(items[1])

    @classmethod
    def parse(cls, data: Union[bytes, str]) -> "Rational":
        """Return a new rational parsed from its text form."""
        rational = cls()
        rational.unmarshal_text(data)
        return rational

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"