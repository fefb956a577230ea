from __future__ import annotations

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .datetime_utils import format_iso_date, parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_iso_date(value: str) -> str:
    """Accept only calendar dates written exactly as YYYY-MM-DD."""
    try:
        parsed = parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}") from None
    # strptime tolerates missing zero padding (2024-1-5)
    if format_iso_date(parsed) != value:
        raise ValidationError(f"Invalid date: {value!r}")
    return value


def require_status(value) -> AttendanceStatus:
    try:
        status = AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value!r}") from None
    if status == AttendanceStatus.UNSET:
        raise ValidationError("Status must be present, absent or late")
    return status
