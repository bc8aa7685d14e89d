from datetime import datetime
from decimal import Decimal

import pytest

from income_tracker.db import init_db
from income_tracker.models import Transaction
from income_tracker.repo import SqliteTransactionStore
from income_tracker.settings import Settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, db_path=tmp_path / "t.sqlite")


@pytest.fixture
def store(settings):
    init_db(settings)
    return SqliteTransactionStore(settings.db_path)


def make_txn(date, kind, amount, note=None, created_at=None, txn_id=None, owner="alice"):
    return Transaction(
        id=txn_id or f"{date}-{kind}-{amount}",
        owner=owner,
        date=date,
        kind=kind,
        amount=Decimal(str(amount)),
        note=note,
        created_at=created_at or datetime.fromisoformat(f"{date} 09:00:00"),
    )


@pytest.fixture
def october_txns():
    return [
        make_txn("2025-10-02", "income", 1800, created_at=datetime(2025, 10, 2, 9, 0)),
        make_txn("2025-10-02", "expense", 450, created_at=datetime(2025, 10, 2, 12, 30)),
        make_txn("2025-10-06", "income", 3200, created_at=datetime(2025, 10, 6, 8, 15)),
    ]
