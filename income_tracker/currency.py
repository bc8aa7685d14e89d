import asyncio
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from time import monotonic

import httpx

from .errors import InvalidAmount, RateUnavailable, ValidationError
from .logger import get_logger
from .money import round_money, to_decimal

logger = get_logger(__name__)

CURRENCY_SYMBOLS = {
    "USD": "$",
    "PHP": "₱",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_amount(amount, currency: str) -> str:
    value = round_money(amount)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{currency.upper()} {digits}"
    return f"{sign}{symbol}{digits}"


def advisory_for(base_currency: str) -> str:
    return f"Unable to load exchange rate. Amounts will remain in {base_currency}."


def convert_amount(amount_in_base, rate: Decimal | None) -> Decimal:
    """Base amount in display units, rounded; ``rate=None`` means identity."""
    if rate is None:
        return round_money(amount_in_base)
    return round_money(to_decimal(amount_in_base) * rate)


class RateProvider:
    """Base-to-target exchange rates from an HTTP JSON source.

    Rates are cached per target for ``cache_ttl`` seconds. The lock keeps one
    fetch in flight at a time; callers waiting on it reuse the fresh value.
    """

    def __init__(
        self,
        base_currency: str,
        source_url: str,
        cache_ttl: float = 3600.0,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_currency = base_currency.upper()
        self.source_url = source_url
        self.timeout = timeout
        self._cache_ttl = max(0.0, cache_ttl)
        self._client = client
        self._lock = asyncio.Lock()
        self._cache: dict[str, tuple[Decimal, float]] = {}

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is None or client.is_closed:
            client = httpx.AsyncClient()
            self._client = client
        return client

    def _cached(self, target: str) -> Decimal | None:
        entry = self._cache.get(target)
        if entry is None:
            return None
        rate, expires_at = entry
        if monotonic() >= expires_at:
            return None
        return rate

    async def fetch_rate(self, target: str) -> Decimal:
        target = target.upper()
        if target == self.base_currency:
            return Decimal(1)

        cached = self._cached(target)
        if cached is not None:
            return cached

        async with self._lock:
            cached = self._cached(target)
            if cached is not None:
                return cached
            rate = await self._request_rate(target)
            if self._cache_ttl > 0:
                self._cache[target] = (rate, monotonic() + self._cache_ttl)
            logger.info("[RATE] 1 %s = %s %s", self.base_currency, rate, target)
            return rate

    async def _request_rate(self, target: str) -> Decimal:
        base_key = self.base_currency.lower()
        url = self.source_url.format(base=base_key)
        try:
            response = await self._get_client().get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RateUnavailable(f"rate request failed: {exc}") from exc

        rates = data.get(base_key) if isinstance(data, dict) else None
        raw = rates.get(target.lower()) if isinstance(rates, dict) else None
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise RateUnavailable(f"{self.base_currency} to {target} rate unavailable")
        try:
            rate = to_decimal(raw)
        except (ValidationError, InvalidOperation) as exc:
            raise RateUnavailable(f"{self.base_currency} to {target} rate invalid") from exc
        if not rate.is_finite() or rate <= 0:
            raise RateUnavailable(f"{self.base_currency} to {target} rate invalid")
        return rate


@dataclass(frozen=True)
class CurrencyConverter:
    """Request-scoped conversion between the storage currency and a display one."""

    base_currency: str
    display_currency: str
    rate: Decimal | None = None
    advisory: str | None = None

    @property
    def converting(self) -> bool:
        return self.rate is not None and self.display_currency != self.base_currency

    @property
    def effective_currency(self) -> str:
        return self.display_currency if self.converting else self.base_currency

    def to_display(self, amount_in_base) -> Decimal:
        return convert_amount(amount_in_base, self.rate if self.converting else None)

    def to_base(self, amount_in_display) -> Decimal:
        try:
            value = to_decimal(amount_in_display)
        except ValidationError as exc:
            raise InvalidAmount(str(exc)) from exc
        if self.converting:
            value = value / self.rate
        if not value.is_finite():
            raise InvalidAmount("amount is not a finite number")
        try:
            result = round_money(value)
        except InvalidOperation as exc:
            raise InvalidAmount("amount could not be converted") from exc
        if result <= 0:
            raise InvalidAmount("amount must be greater than 0 after conversion")
        return result

    def format_display(self, amount_in_base) -> str:
        return format_amount(self.to_display(amount_in_base), self.effective_currency)


async def resolve_converter(
    provider: RateProvider | None, base_currency: str, requested: str
) -> CurrencyConverter:
    """Converter for ``requested``; degrades to the base currency on any rate failure."""
    if requested == base_currency:
        return CurrencyConverter(base_currency, base_currency)
    if provider is None:
        return CurrencyConverter(
            base_currency, base_currency, advisory=advisory_for(base_currency)
        )
    try:
        rate = await provider.fetch_rate(requested)
    except RateUnavailable as exc:
        logger.warning("[RATE] %s; staying in %s", exc, base_currency)
        return CurrencyConverter(
            base_currency, base_currency, advisory=advisory_for(base_currency)
        )
    return CurrencyConverter(base_currency, requested, rate=rate)
