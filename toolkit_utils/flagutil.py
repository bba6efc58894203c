"""Command line helpers."""

from __future__ import annotations

import sys
from typing import List, Optional


def flag_cmd(argv: Optional[List[str]] = None) -> str:
    """Pop and return the sub-command from ``argv`` (``sys.argv`` by default).

    The sub-command is the first argument when it does not start with ``-``;
    it is removed from the list in place. Returns an empty string otherwise.
    """
    args = sys.argv if argv is None else argv
    if len(args) >= 2 and not args[1].startswith("-"):
        return args.pop(1)
    return ""


class FlagStrings:
    """Collects unique string values of a flag given several times.

    An instance can be passed as an ``argparse`` ``type``: each occurrence is
    recorded and the instance itself is stored as the argument's value.
    """

    def __init__(self) -> None:
        self.values: List[str] = []
        self._seen: set = set()

    def set(self, value: str) -> None:
        """Record ``value`` unless already present."""
        if value in self._seen:
            return
        self._seen.add(value)
        self.values.append(value)

    def __call__(self, value: str) -> "FlagStrings":
        self.set(value)
        return self

    def __contains__(self, value: object) -> bool:
        return value in self._seen

    def __str__(self) -> str:
        return ",".join(self.values)