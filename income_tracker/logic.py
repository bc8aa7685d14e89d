from decimal import Decimal

from .errors import ValidationError
from .money import round_money, to_decimal

KINDS = ("income", "expense")


def validate_kind(s: str) -> str:
    if s not in KINDS:
        raise ValidationError("type must be income or expense")
    return s


def parse_amount(value) -> Decimal:
    """Parse a user-entered amount; positive, at most 2 decimals."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("amount required")
    d = to_decimal(value)
    if not d.is_finite():
        raise ValidationError("amount must be finite")
    if d <= 0:
        raise ValidationError("amount must be greater than 0")
    rounded = round_money(d)
    if rounded != d:
        raise ValidationError("amount supports up to 2 decimals")
    return rounded


def clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    stripped = note.strip()
    return stripped or None


def resolve_currency(
    requested: str | None, base: str, allowed: tuple[str, ...]
) -> str:
    """Map a requested code onto the allow-list; anything else is ``base``."""
    if not requested:
        return base
    code = requested.strip().upper()
    if code in allowed:
        return code
    return base
