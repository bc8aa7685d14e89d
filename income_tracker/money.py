from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from .errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Digits before the point; beyond this a value is not a monetary amount.
MAX_DIGITS = 400
# SQLite INTEGER is a signed 64-bit value.
MAX_CENTS = 2**63 - 1


def to_decimal(amount) -> Decimal:
    """Exact decimal value of ``amount``.

    Floats go through their shortest repr, so ``1.005`` is treated as the
    decimal the user typed rather than its binary approximation.
    """
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValidationError("amount invalid")
    if isinstance(amount, (int, float)):
        return Decimal(str(amount))
    if isinstance(amount, str):
        try:
            return Decimal(amount.strip())
        except InvalidOperation as e:
            raise ValidationError("amount invalid") from e
    raise ValidationError("amount invalid")


def round_money(amount) -> Decimal:
    """Round to cents, half away from zero."""
    d = to_decimal(amount)
    if not d.is_finite():
        raise ValidationError("amount must be finite")
    if d.adjusted() > MAX_DIGITS:
        raise ValidationError("amount too large")
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        return d.quantize(CENT, rounding=ROUND_HALF_UP)


def is_valid_amount(amount) -> bool:
    try:
        d = to_decimal(amount)
    except ValidationError:
        return False
    return d.is_finite() and d > 0


def to_cents(amount) -> int:
    value = round_money(amount)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return int(value.scaleb(2))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)
