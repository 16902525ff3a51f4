"""
Encoding of setting values across the storage boundary.

Storage holds strings. Reading parses a primitive literal (true/false,
numbers, null) and falls back to the raw string, so one store can hold
booleans, numbers and text side by side.
"""

from __future__ import annotations

import json
from typing import Any


class _Unset:
    """Marker for a key that was never written."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()

PRIMITIVES = (bool, int, float)


def decode(raw: Any) -> Any:
    if not isinstance(raw, str):
        # remote values may already arrive decoded
        return raw
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    if value is None or isinstance(value, PRIMITIVES):
        return value
    return raw


def encode(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, PRIMITIVES):
        return json.dumps(value)
    raise TypeError(f"Setting values must be primitives, got {type(value).__name__}")
