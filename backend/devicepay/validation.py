from __future__ import annotations

import math
from typing import Any

from devicepay.time_utils import parse_calendar_date


class ValidationError(ValueError):
    """400-level input problem."""


def _parse_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = float(stripped)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def normalize_number(number: float) -> int | float:
    """Keep integral amounts as int so they serialize and render without '.0'."""
    if float(number).is_integer():
        return int(number)
    return number


def coerce_number(value: Any, default: int | float = 0) -> int | float:
    """
    Lenient numeric coercion for catalog input.

    Absent or non-numeric -> default. Never raises.
    """
    number = _parse_float(value)
    if number is None:
        return default
    return normalize_number(number)


def require_number(value: Any, field: str, *, minimum: float = 0.0, allow_equal: bool = True) -> int | float:
    """Strict numeric coercion: raises ValidationError unless value >= minimum (or > minimum)."""
    number = _parse_float(value)
    if number is None:
        raise ValidationError(f"{field} must be a number")
    if number < minimum or (not allow_equal and number == minimum):
        op = ">=" if allow_equal else ">"
        raise ValidationError(f"{field} must be {op} {normalize_number(minimum)}")
    return normalize_number(number)


def require_quantity(value: Any, field: str = "quantity", *, allow_zero: bool = False) -> int:
    """
    Integer quantity validation - rejects bools, floats with a fraction and
    scientific notation strings.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        qty = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        qty = int(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped or "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            qty = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if qty < 0 or (qty == 0 and not allow_zero):
        raise ValidationError(f"{field} must be greater than zero")
    return qty


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def optional_text(value: Any) -> str | None:
    """Trimmed string; blank means absent."""
    text = clean_text(value)
    return text or None


def normalize_receipt_date(value: Any) -> str | None:
    """Receipt collection date as 'YYYY-MM-DD'; blank means absent."""
    if value is None:
        return None
    try:
        parsed = parse_calendar_date(str(value))
    except ValueError:
        raise ValidationError("receipt_received_at must be a YYYY-MM-DD date")
    return parsed.isoformat() if parsed else None


def json_object(payload: Any) -> dict:
    """Request body as a dict; absent body means {}."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def coerce_flag(value: Any) -> bool:
    """True only for a JSON true or an explicit 'true'/'1'/'yes' string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return False
