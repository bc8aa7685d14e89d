import calendar
from collections.abc import Iterable
from decimal import Decimal

from .currency import convert_amount
from .models import Transaction

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _quote_note(note: str | None) -> str:
    # Notes are always quoted; the other columns never hold separators.
    if not note:
        return ""
    return '"' + note.replace('"', '""') + '"'


def render_csv(
    transactions: Iterable[Transaction],
    display_currency: str,
    rate: Decimal | None,
) -> str:
    """One header row plus one row per transaction, oldest date first."""
    ordered = sorted(transactions, key=lambda txn: (txn.date, txn.created_at))

    lines = [f"Date,Type,Amount ({display_currency}),Note,Timestamp"]
    for txn in ordered:
        lines.append(
            ",".join(
                [
                    txn.date,
                    txn.kind,
                    f"{convert_amount(txn.amount, rate):.2f}",
                    _quote_note(txn.note),
                    txn.created_at.strftime(TIMESTAMP_FORMAT),
                ]
            )
        )
    return "\n".join(lines) + "\n"


def export_filename(year: int, month: int, currency: str) -> str:
    return f"income-tracker-{calendar.month_name[month]}-{year}-{currency.lower()}.csv"
