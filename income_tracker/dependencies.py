from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from .currency import CurrencyConverter, RateProvider, resolve_converter
from .logic import resolve_currency
from .repo import TransactionStore
from .settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> TransactionStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Store not initialized")
    return store


def get_rates_optional(request: Request) -> RateProvider | None:
    return getattr(request.app.state, "rates", None)


def get_owner(x_user_id: Annotated[str | None, Header()] = None) -> str:
    # Identity comes from the upstream auth layer; it is trusted as-is.
    owner = (x_user_id or "").strip()
    if not owner:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return owner


async def get_converter(
    settings: Annotated[Settings, Depends(get_app_settings)],
    rates: Annotated[RateProvider | None, Depends(get_rates_optional)],
    currency: str | None = None,
) -> CurrencyConverter:
    requested = resolve_currency(
        currency, settings.base_currency, settings.allowed_currencies
    )
    return await resolve_converter(rates, settings.base_currency, requested)
