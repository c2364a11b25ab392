"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

import pytest

from src.infrastructure import settings as settings_module
from src.infrastructure.settings import ApiSettings

ENV_VARS = (
    "LEDGER_API_BASE_URL",
    "LEDGER_API_TOKEN",
    "LEDGER_API_TIMEOUT",
    "PAYMENT_INDEX_PAGE_SIZE",
    "LEDGER_FLOOR",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: False)
    monkeypatch.setattr(settings_module, "get_app_logger", MagicMock)


def test_from_env_defaults() -> None:
    settings = ApiSettings.from_env()

    assert settings.base_url == "http://localhost:8080"
    assert settings.token is None
    assert settings.timeout == 30.0
    assert settings.page_size == 500
    assert settings.floor == "GROUND_FLOOR"
    assert settings.auth_headers() == {}


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_API_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("LEDGER_API_TOKEN", "secret")
    monkeypatch.setenv("LEDGER_API_TIMEOUT", "12.5")
    monkeypatch.setenv("PAYMENT_INDEX_PAGE_SIZE", "1000")
    monkeypatch.setenv("LEDGER_FLOOR", "first_floor")

    settings = ApiSettings.from_env()

    assert settings.base_url == "https://api.example.com"
    assert settings.timeout == 12.5
    assert settings.page_size == 1000
    assert settings.floor == "FIRST_FLOOR"
    assert settings.auth_headers() == {"Authorization": "Bearer secret"}


@pytest.mark.parametrize("raw", ["abc", "0", "-5"])
def test_invalid_numbers_fall_back_to_defaults(monkeypatch, raw) -> None:
    monkeypatch.setenv("PAYMENT_INDEX_PAGE_SIZE", raw)

    settings = ApiSettings.from_env()

    assert settings.page_size == 500


def test_unknown_floor_raises(monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_FLOOR", "ROOFTOP")

    with pytest.raises(ValueError):
        ApiSettings.from_env()
