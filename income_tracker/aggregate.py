from collections.abc import Iterable

from .models import DailyRollup, MonthlySummary, Transaction
from .money import ZERO, round_money


def _empty_day() -> dict:
    return {"income": ZERO, "expense": ZERO, "count": 0}


def aggregate(
    transactions: Iterable[Transaction],
) -> tuple[list[DailyRollup], MonthlySummary]:
    """Daily rollups and the month summary for a fully loaded transaction list.

    Rollups come out in first-seen date order, so a date-ordered input gives
    date-ordered rollups. Every date appears once; a day with only one kind
    reports zero for the other.
    """
    days: dict[str, dict] = {}
    for txn in transactions:
        day = days.setdefault(txn.date, _empty_day())
        day[txn.kind] += round_money(txn.amount)
        day["count"] += 1

    rollups = []
    for date_key, day in days.items():
        income = round_money(day["income"])
        expense = round_money(day["expense"])
        rollups.append(
            DailyRollup(
                date=date_key,
                income_total=income,
                expense_total=expense,
                net_total=round_money(income - expense),
                count=day["count"],
            )
        )

    total_income = round_money(sum((r.income_total for r in rollups), ZERO))
    total_expense = round_money(sum((r.expense_total for r in rollups), ZERO))
    summary = MonthlySummary(
        total_income=total_income,
        total_expense=total_expense,
        profit=round_money(total_income - total_expense),
        count=sum(r.count for r in rollups),
    )
    return rollups, summary
