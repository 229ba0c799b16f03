"""Shared validation utilities"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from ..utils.sanitization import validate_and_sanitize_input
from .errors import ValidationError


def require_text(value: Optional[str], field: str, max_length: int = 500) -> str:
    """
    Validate that a required free-text field is present and sanitize it.

    Raises:
        ValidationError: If the value is missing, blank or too long
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return optional_text(value, field, max_length)


def optional_text(value: Optional[str], field: str, max_length: int = 500) -> Optional[str]:
    """Sanitize an optional free-text field, returning None for blank input"""
    try:
        cleaned = validate_and_sanitize_input(value, max_length=max_length)
    except ValueError as e:
        raise ValidationError(f"{field}: {e}", field=field) from e
    return cleaned or None


def parse_date(value: Union[date, datetime, str, None], field: str = "date") -> date:
    """
    Parse a calendar date from a date object or an ISO string (YYYY-MM-DD).

    Raises:
        ValidationError: If the value is missing or not a calendar date
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format", field=field) from e


_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


def parse_time_of_day(value: Optional[str], field: str = "startTime") -> str:
    """
    Normalize a time of day to HH:MM.

    Accepts "HH:MM" (24h) and the booking page's "hh:mm AM" / "hh:mm PM" spelling.

    Raises:
        ValidationError: If the value is missing or not a valid time of day
    """
    if not value or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)

    raw = str(value).strip()
    match = _TIME_24H.match(raw)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
    else:
        match = _TIME_12H.match(raw)
        if not match:
            raise ValidationError(f"{field} must look like HH:MM", field=field)
        hours, minutes = int(match.group(1)), int(match.group(2))
        if not 1 <= hours <= 12:
            raise ValidationError(f"{field} has an invalid hour", field=field)
        is_pm = match.group(3).lower() == "pm"
        hours = hours % 12 + (12 if is_pm else 0)

    if hours > 23 or minutes > 59:
        raise ValidationError(f"{field} is not a valid time of day", field=field)

    return f"{hours:02d}:{minutes:02d}"


def validate_percentage(value: Any) -> int:
    """
    Validate a progress percentage (integer 0-100).

    Raises:
        ValidationError: If the value is not an integer between 0 and 100
    """
    if isinstance(value, bool):
        raise ValidationError("Percentage must be a number", field="percentage")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Percentage must be a number", field="percentage") from e
    if number != number.to_integral_value():
        raise ValidationError("Percentage must be a whole number", field="percentage")
    if number < 0 or number > 100:
        raise ValidationError("Percentage must be between 0 and 100", field="percentage")
    return int(number)


def validate_hours(value: Any) -> Decimal:
    """
    Validate logged hours (strictly positive decimal).

    Raises:
        ValidationError: If hours are missing, not numeric or <= 0
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Hours must be greater than 0", field="hours")
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Hours must be a number", field="hours") from e
    if not hours.is_finite() or hours <= 0:
        raise ValidationError("Hours must be greater than 0", field="hours")
    return hours


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValidationError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValidationError("Invalid email format", field="email")

    return email
