"""JSON based comparison and deep copy helpers."""

from __future__ import annotations

import dataclasses
import json
from typing import Any


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _dumps(value: Any) -> str:
    return json.dumps(value, default=_default, separators=(",", ":"), sort_keys=True)


def json_equal(a: Any, b: Any) -> bool:
    """Return whether ``a`` and ``b`` have the same JSON encoding."""
    try:
        return _dumps(a) == _dumps(b)
    except (TypeError, ValueError):
        return False


def json_clone(src: Any) -> Any:
    """Return a deep copy of ``src`` made through a JSON round trip."""
    try:
        encoded = _dumps(src)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"marshaling failed: {exc}") from exc
    return json.loads(encoded)