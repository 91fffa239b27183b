from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from flask import jsonify

from ..core.exceptions import DomainError, ReferentialIntegrityError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


def error_response(exc: DomainError):
    status = 404 if isinstance(exc, ReferentialIntegrityError) else 400
    return jsonify({"error": str(exc)}), status


def require_date(value: Any, field_name: str) -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def optional_date(value: Any, field_name: str) -> Optional[date]:
    return require_date(value, field_name) if value else None


def optional_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO timestamp") from None


def optional_int_arg(value: Any, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
