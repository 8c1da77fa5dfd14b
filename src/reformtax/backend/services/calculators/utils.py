"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def round_yen(value: float) -> int:
    """Round ``value`` to whole yen, halves rounding up."""

    return int(math.floor(value + 0.5))


def clamp_non_negative(value: float) -> float:
    """Return ``value`` floored at zero."""

    return value if value > 0 else 0.0


def decimal_to_number(value: Any) -> float:
    """Convert a persisted decimal (number, ``Decimal`` or string) to ``float``.

    ``None`` maps to ``0.0``. Objects that are neither numbers nor strings are
    converted through ``str()``, matching how arbitrary-precision decimal types
    from persistence layers render themselves. Text is read up to its leading
    number, so ``"12abc"`` gives ``12.0``.

    Raises ``ValueError`` when the text does not start with a number.
    """

    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    text = str(value).strip()
    match = _LEADING_NUMBER.match(text)
    if match is None:
        raise ValueError(f"Not a decimal value: {text!r}")
    return float(match.group(0))


__all__ = ["clamp_non_negative", "decimal_to_number", "round_yen"]
