from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_number(value: Any, field_name: str, *, minimum: float | None = None) -> float:
    # bool is an int subclass; a checkbox value is never a salary.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be a finite number")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum:g}")
    return float(value)


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is required")


def require_list(value: Any, field_name: str) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be a list")
    return value


def normalize_label(value: Any) -> str:
    """Canonical form used when matching free-typed names such as "Tea " and "tea"."""
    return " ".join(str(value or "").split()).casefold()


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: Any, field_name: str) -> bool:
    """Accept JSON booleans and the usual form spellings ("true", "0", "off", ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    raise ValidationError(f"{field_name} must be true or false")
