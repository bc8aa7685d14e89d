from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .aggregate import aggregate
from .currency import CurrencyConverter, RateProvider
from .dates import month_range
from .db import init_db
from .dependencies import get_converter, get_owner, get_store
from .errors import StoreUnavailable, ValidationError
from .export import export_filename, render_csv
from .logger import get_logger, get_logging_config, setup_logging
from .logic import clean_note, parse_amount, validate_kind
from .models import Transaction
from .repo import SqliteTransactionStore, TransactionStore
from .schemas import (
    TransactionCreate,
    daily_total_out,
    summary_out,
    transaction_out,
)
from .settings import Settings, get_settings

logger = get_logger(__name__)

Owner = Annotated[str, Depends(get_owner)]
Store = Annotated[TransactionStore, Depends(get_store)]
Converter = Annotated[CurrencyConverter, Depends(get_converter)]


def _require_month(month: int | None, year: int | None) -> tuple[int, int]:
    if month is None or year is None:
        raise ValidationError("Month and year are required")
    month_range(year, month)
    return month, year


def _month_transactions(
    store: TransactionStore, owner: str, month: int | None, year: int | None
) -> list[Transaction]:
    resolved_month, resolved_year = _require_month(month, year)
    start, end = month_range(resolved_year, resolved_month)
    return store.list_by_owner_and_range(owner, start, end)


def create_app(
    settings: Settings | None = None,
    store: TransactionStore | None = None,
    rates: RateProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        init_db(settings)
        store = SqliteTransactionStore(settings.db_path)
    if rates is None:
        rates = RateProvider(
            base_currency=settings.base_currency,
            source_url=settings.rate_source_url,
            cache_ttl=settings.rate_cache_ttl,
            timeout=settings.rate_timeout,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Income tracker ready (base %s, currencies %s).",
            settings.base_currency,
            ",".join(settings.allowed_currencies),
        )
        yield
        await rates.aclose()
        logger.info("Income tracker shutting down.")

    app = FastAPI(title="Income Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.rates = rates

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(StoreUnavailable)
    async def store_error_handler(request: Request, exc: StoreUnavailable):
        logger.error("[STORE] %s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=503, content={"error": str(exc), "retryable": True}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "error": "Invalid request parameters",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.get("/api/transactions")
    def list_transactions(
        owner: Owner, store: Store, month: int | None = None, year: int | None = None
    ):
        transactions = _month_transactions(store, owner, month, year)
        return {"transactions": [transaction_out(txn) for txn in transactions]}

    @app.post("/api/transactions")
    def create_transaction(
        body: TransactionCreate, owner: Owner, store: Store, converter: Converter
    ):
        if not body.date or not body.type or body.amount is None:
            raise ValidationError("Date, type, and amount are required")
        kind = validate_kind(body.type)
        amount = converter.to_base(parse_amount(body.amount))
        txn = store.insert(owner, body.date, kind, amount, clean_note(body.note))
        logger.info("[TXN] Added %s on %s", txn.kind, txn.date)
        return {
            "transaction": transaction_out(txn),
            "currency": converter.effective_currency,
            "advisory": converter.advisory,
        }

    @app.delete("/api/transactions/{txn_id}")
    def delete_transaction(txn_id: str, owner: Owner, store: Store):
        store.delete_by_id(owner, txn_id)
        return {"success": True}

    @app.get("/api/daily-totals")
    def daily_totals(
        owner: Owner, store: Store, month: int | None = None, year: int | None = None
    ):
        rollups, _ = aggregate(_month_transactions(store, owner, month, year))
        return {"dailyTotals": [daily_total_out(rollup) for rollup in rollups]}

    @app.get("/api/summary")
    def summary(
        owner: Owner, store: Store, month: int | None = None, year: int | None = None
    ):
        _, monthly = aggregate(_month_transactions(store, owner, month, year))
        return {"summary": summary_out(monthly)}

    @app.get("/api/month")
    def month_view(
        owner: Owner,
        store: Store,
        converter: Converter,
        month: int | None = None,
        year: int | None = None,
    ):
        transactions = _month_transactions(store, owner, month, year)
        rollups, monthly = aggregate(transactions)
        convert = converter.to_display
        return {
            "currency": converter.effective_currency,
            "rate": float(converter.rate) if converter.converting else None,
            "advisory": converter.advisory,
            "transactions": [
                transaction_out(txn, convert(txn.amount)) for txn in transactions
            ],
            "dailyTotals": [daily_total_out(rollup, convert) for rollup in rollups],
            "summary": summary_out(monthly, convert),
            "formatted": {
                "total_income": converter.format_display(monthly.total_income),
                "total_expense": converter.format_display(monthly.total_expense),
                "profit": converter.format_display(monthly.profit),
            },
        }

    @app.get("/api/rate")
    def rate(converter: Converter):
        return {
            "base": converter.base_currency,
            "currency": converter.effective_currency,
            "rate": float(converter.rate) if converter.converting else 1.0,
            "advisory": converter.advisory,
        }

    @app.get("/api/export")
    def export_csv(
        owner: Owner,
        store: Store,
        converter: Converter,
        month: int | None = None,
        year: int | None = None,
    ):
        resolved_month, resolved_year = _require_month(month, year)
        transactions = _month_transactions(store, owner, resolved_month, resolved_year)
        currency = converter.effective_currency
        body = "\ufeff" + render_csv(
            transactions, currency, converter.rate if converter.converting else None
        )
        filename = export_filename(resolved_year, resolved_month, currency)
        logger.info("[EXPORT] %s rows as %s", len(transactions), filename)
        return Response(
            content=body,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


def main() -> None:
    setup_logging()
    uvicorn.run(
        "income_tracker.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_config=get_logging_config(),
    )


if __name__ == "__main__":
    main()
