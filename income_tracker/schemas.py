from datetime import datetime

from pydantic import BaseModel

from .models import DailyRollup, MonthlySummary, Transaction


class TransactionCreate(BaseModel):
    date: str | None = None
    type: str | None = None
    amount: float | str | None = None
    note: str | None = None


class TransactionOut(BaseModel):
    id: str
    date: str
    type: str
    amount: float
    note: str | None
    created_at: datetime


class DailyTotalOut(BaseModel):
    date: str
    income_total: float
    expense_total: float
    net_total: float
    transaction_count: int


class SummaryOut(BaseModel):
    total_income: float
    total_expense: float
    profit: float
    transaction_count: int


def transaction_out(txn: Transaction, amount=None) -> TransactionOut:
    return TransactionOut(
        id=txn.id,
        date=txn.date,
        type=txn.kind,
        amount=float(txn.amount if amount is None else amount),
        note=txn.note,
        created_at=txn.created_at,
    )


def daily_total_out(rollup: DailyRollup, convert=None) -> DailyTotalOut:
    convert = convert or (lambda value: value)
    return DailyTotalOut(
        date=rollup.date,
        income_total=float(convert(rollup.income_total)),
        expense_total=float(convert(rollup.expense_total)),
        net_total=float(convert(rollup.net_total)),
        transaction_count=rollup.count,
    )


def summary_out(summary: MonthlySummary, convert=None) -> SummaryOut:
    convert = convert or (lambda value: value)
    return SummaryOut(
        total_income=float(convert(summary.total_income)),
        total_expense=float(convert(summary.total_expense)),
        profit=float(convert(summary.profit)),
        transaction_count=summary.count,
    )
