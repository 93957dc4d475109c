from __future__ import annotations

import math
from typing import Any, Iterable

from ..core.exceptions import ValidationError


def round2(value: float) -> float:
    return round(float(value) + 0.0, 2)


def to_amount(value: Any, default: float = 0.0) -> float:
    """Lenient number coercion for client-supplied money fields ("", None -> default)."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError("Invalid amount")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not math.isfinite(amount):
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount


def total(values: Iterable[float]) -> float:
    return round2(sum(values, 0.0))
