from pathlib import Path

from income_tracker.settings import DEFAULT_RATE_CACHE_TTL, get_settings


def test_get_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DB_PATH", raising=False)
    monkeypatch.setenv("BASE_CURRENCY", "usd")
    monkeypatch.setenv("ALLOWED_CURRENCIES", "php, eur")
    monkeypatch.setenv("RATE_CACHE_TTL", "120")

    settings = get_settings()

    assert settings.data_dir == Path(tmp_path)
    assert settings.db_path == Path(tmp_path) / "ledger.sqlite"
    assert settings.base_currency == "USD"
    assert settings.allowed_currencies == ("USD", "PHP", "EUR")
    assert settings.rate_cache_ttl == 120.0


def test_invalid_ttl_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("RATE_CACHE_TTL", "hourly")
    assert get_settings().rate_cache_ttl == DEFAULT_RATE_CACHE_TTL

    monkeypatch.setenv("RATE_CACHE_TTL", "-5")
    assert get_settings().rate_cache_ttl == DEFAULT_RATE_CACHE_TTL
