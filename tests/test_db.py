import sqlite3

import pytest

from income_tracker.db import init_db


def test_init_db_creates_schema_and_is_repeatable(settings):
    init_db(settings)
    init_db(settings)

    conn = sqlite3.connect(str(settings.db_path))
    conn.row_factory = sqlite3.Row
    columns = [
        row["name"] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()
    ]
    assert columns == ["id", "owner", "date", "kind", "amount_cents", "note", "created_at"]
    indexes = [row["name"] for row in conn.execute("PRAGMA index_list(transactions)")]
    assert "idx_transactions_owner_date" in indexes
    conn.close()


@pytest.mark.parametrize(
    "kind,amount_cents",
    [("transfer", 100), ("income", 0), ("expense", -1)],
)
def test_schema_rejects_bad_rows(settings, kind, amount_cents):
    init_db(settings)
    conn = sqlite3.connect(str(settings.db_path))
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            """
            INSERT INTO transactions(id, owner, date, kind, amount_cents)
            VALUES ('x', 'alice', '2026-03-01', ?, ?)
            """,
            (kind, amount_cents),
        )
    conn.close()
