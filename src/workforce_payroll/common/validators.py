from __future__ import annotations

import math
from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.", code="missing_field")
    return value.strip()


def require_iso_date(value: Optional[str], field_name: str) -> date:
    v = (value or "").strip()
    if not v:
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD).", code="invalid_date")
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD.", code="invalid_date")


def require_date_range(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    if start is None or end is None:
        raise ValidationError("from and to are required (YYYY-MM-DD).", code="invalid_date")
    if end < start:
        raise ValidationError("to must not be before from.", code="invalid_range")
    return start, end


def require_positive_number(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number.", code="invalid_number")
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{field_name} must be > 0.", code="invalid_number")
    return number


def require_non_negative_number(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number.", code="invalid_number")
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{field_name} must be >= 0.", code="invalid_number")
    return number
