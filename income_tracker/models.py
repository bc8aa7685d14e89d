from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal

Kind = Literal["income", "expense"]


@dataclass(frozen=True)
class Transaction:
    id: str
    owner: str
    date: str
    kind: Kind
    amount: Decimal
    note: str | None
    created_at: datetime


@dataclass(frozen=True)
class DailyRollup:
    date: str
    income_total: Decimal
    expense_total: Decimal
    net_total: Decimal
    count: int


@dataclass(frozen=True)
class MonthlySummary:
    total_income: Decimal
    total_expense: Decimal
    profit: Decimal
    count: int
