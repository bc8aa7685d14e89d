import calendar
from datetime import date, datetime

from .errors import ValidationError


def to_local_key(value: date | datetime) -> str:
    """``YYYY-MM-DD`` from the value's own calendar fields.

    Aware datetimes keep their wall-clock day; nothing is converted to UTC.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_key(key: str) -> date:
    if not isinstance(key, str) or len(key) != 10:
        raise ValidationError("date must be YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(key)
    except ValueError as e:
        raise ValidationError("date must be YYYY-MM-DD") from e
    if to_local_key(parsed) != key:
        raise ValidationError("date must be YYYY-MM-DD")
    return parsed


def validate_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1000 <= year <= 9999:
        raise ValidationError("year must have 4 digits")


def month_range(year: int, month: int) -> tuple[str, str]:
    validate_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return (
        to_local_key(date(year, month, 1)),
        to_local_key(date(year, month, last_day)),
    )
