from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import MalformedScheduleError, ValidationError
from .datetime_utils import parse_wall_time


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid") from None
    if ident <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return ident


def require_non_negative_minutes(value: Any, field_name: str) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number of minutes") from None
    if minutes < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return minutes


def require_wall_time(value: Any, field_name: str):
    try:
        return parse_wall_time(value)
    except MalformedScheduleError:
        raise ValidationError(f"{field_name} must be HH:MM") from None


def require_date_window(start: date, end: Optional[date]) -> None:
    if end is not None and end < start:
        raise ValidationError("End date must not be before start date")
