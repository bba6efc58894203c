"""Bit flag and boolean helpers, plus shared defaults."""

from __future__ import annotations

DEFAULT_DIR_MODE = 0o755


class BitFlags(int):
    """An integer seen as a set of bit flags."""

    def add(self, flag: int) -> int:
        """Return the flags with ``flag`` set."""
        return int(self) | flag

    def delete(self, flag: int) -> int:
        """Return the flags with ``flag`` cleared."""
        return int(self) & ~flag

    def has(self, flag: int) -> bool:
        """Return whether any bit of ``flag`` is set."""
        return int(self) & flag > 0


def bool_to_uint32(value: bool) -> int:
    """Return 1 for True and 0 for False."""
    return 1 if value else 0