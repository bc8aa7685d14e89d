import sqlite3
import uuid
from datetime import datetime
from typing import Protocol

from .dates import parse_key
from .db import connect
from .errors import StoreUnavailable, ValidationError
from .logger import get_logger
from .logic import clean_note, validate_kind
from .models import Transaction
from .money import MAX_CENTS, from_cents, is_valid_amount, round_money, to_cents

logger = get_logger(__name__)


class TransactionStore(Protocol):
    def list_by_owner_and_range(
        self, owner: str, start_key: str, end_key: str
    ) -> list[Transaction]: ...

    def insert(
        self, owner: str, date: str, kind: str, amount, note: str | None = None
    ) -> Transaction: ...

    def delete_by_id(self, owner: str, txn_id: str) -> None: ...


def _row_to_txn(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row["id"],
        owner=row["owner"],
        date=row["date"],
        kind=row["kind"],
        amount=from_cents(int(row["amount_cents"])),
        note=row["note"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SqliteTransactionStore:
    """Owner-scoped transaction rows in a local SQLite file."""

    def __init__(self, db_path):
        self.db_path = db_path

    def list_by_owner_and_range(
        self, owner: str, start_key: str, end_key: str
    ) -> list[Transaction]:
        try:
            with connect(self.db_path) as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM transactions
                    WHERE owner = ? AND date >= ? AND date <= ?
                    ORDER BY date ASC, created_at ASC, id ASC
                    """,
                    (owner, start_key, end_key),
                ).fetchall()
        except sqlite3.Error as exc:
            logger.error("[STORE] List failed for %s..%s: %s", start_key, end_key, exc)
            raise StoreUnavailable("transactions could not be loaded") from exc
        return [_row_to_txn(row) for row in rows]

    def insert(
        self, owner: str, date: str, kind: str, amount, note: str | None = None
    ) -> Transaction:
        if not owner:
            raise ValidationError("owner required")
        parse_key(date)
        validate_kind(kind)
        if not is_valid_amount(amount):
            raise ValidationError("amount must be greater than 0")
        amount_cents = to_cents(amount)
        if amount_cents <= 0:
            raise ValidationError("amount must be at least 0.01")
        if amount_cents > MAX_CENTS:
            raise ValidationError("amount too large")

        txn = Transaction(
            id=uuid.uuid4().hex,
            owner=owner,
            date=date,
            kind=kind,
            amount=round_money(amount),
            note=clean_note(note),
            created_at=datetime.now(),
        )
        try:
            with connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO transactions(id, owner, date, kind, amount_cents, note, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        txn.id,
                        txn.owner,
                        txn.date,
                        txn.kind,
                        amount_cents,
                        txn.note,
                        txn.created_at.isoformat(sep=" "),
                    ),
                )
        except sqlite3.Error as exc:
            logger.error("[STORE] Insert failed: %s", exc)
            raise StoreUnavailable("transaction could not be saved") from exc
        logger.debug("[STORE] Inserted %s %s on %s", txn.kind, txn.id, txn.date)
        return txn

    def delete_by_id(self, owner: str, txn_id: str) -> None:
        try:
            with connect(self.db_path) as conn:
                cur = conn.execute(
                    "DELETE FROM transactions WHERE id = ? AND owner = ?",
                    (txn_id, owner),
                )
        except sqlite3.Error as exc:
            logger.error("[STORE] Delete failed for %s: %s", txn_id, exc)
            raise StoreUnavailable("transaction could not be deleted") from exc
        if cur.rowcount == 0:
            logger.debug("[STORE] Delete of %s matched nothing for this owner", txn_id)
