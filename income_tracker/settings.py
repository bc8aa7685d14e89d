import os
from dataclasses import dataclass
from pathlib import Path

from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_RATE_SOURCE_URL = (
    "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest"
    "/v1/currencies/{base}.min.json"
)
DEFAULT_RATE_CACHE_TTL = 3600.0
DEFAULT_RATE_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    base_currency: str = "USD"
    allowed_currencies: tuple[str, ...] = ("USD", "PHP")
    rate_source_url: str = DEFAULT_RATE_SOURCE_URL
    rate_cache_ttl: float = DEFAULT_RATE_CACHE_TTL
    rate_timeout: float = DEFAULT_RATE_TIMEOUT


def _env_float(name: str, default: float, min_value: float = 0.0) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def _env_currencies(name: str, base: str) -> tuple[str, ...]:
    raw = os.getenv(name, "USD,PHP")
    codes = [code.strip().upper() for code in raw.split(",") if code.strip()]
    if base not in codes:
        codes.insert(0, base)
    return tuple(dict.fromkeys(codes))


def get_settings() -> Settings:
    data_dir = Path(os.getenv("DATA_DIR") or Path.cwd() / ".data")
    db_path = Path(os.getenv("DB_PATH") or data_dir / "ledger.sqlite")
    base_currency = os.getenv("BASE_CURRENCY", "USD").strip().upper() or "USD"
    return Settings(
        data_dir=data_dir,
        db_path=db_path,
        base_currency=base_currency,
        allowed_currencies=_env_currencies("ALLOWED_CURRENCIES", base_currency),
        rate_source_url=os.getenv("RATE_SOURCE_URL") or DEFAULT_RATE_SOURCE_URL,
        rate_cache_ttl=_env_float("RATE_CACHE_TTL", DEFAULT_RATE_CACHE_TTL),
        rate_timeout=_env_float("RATE_TIMEOUT", DEFAULT_RATE_TIMEOUT, min_value=0.1),
    )
