"""Tests for runtime settings loading and validation."""

from __future__ import annotations

import pytest

from fuelcard.config import AppSettings, SettingsLoadError, config_load_database_url, config_load_settings


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Load settings from environment variables with normalization.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Directory without a dotenv file.

    Returns:
        None: Assertions validate loaded values.

    Raises:
        AssertionError: Raised when loaded values differ.
    """

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("INTERNAL_API_KEY", "  secret  ")
    monkeypatch.setenv("SETTLEMENT_CURRENCY", "eur")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///fuelcard.db")

    settings = config_load_settings()

    assert settings.internal_api_key == "secret"
    assert settings.settlement_currency == "EUR"
    assert settings.log_level == "DEBUG"
    assert settings.database_url == "sqlite:///fuelcard.db"
    assert settings.mapon_api_key == ""
    assert config_load_database_url() == "sqlite:///fuelcard.db"


def test_config_load_settings_requires_internal_api_key(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Raise typed load error when the API key is missing.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Directory without a dotenv file.

    Returns:
        None: Assertions validate error mapping.

    Raises:
        AssertionError: Raised when settings load succeeds.
    """

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("INTERNAL_API_KEY", raising=False)

    with pytest.raises(SettingsLoadError, match="Invalid runtime settings"):
        config_load_settings()


@pytest.mark.parametrize(
    "overrides",
    [
        {"internal_api_key": "   "},
        {"settlement_currency": "E1R"},
        {"log_level": "verbose"},
        {"api_default_limit": 100, "api_max_limit": 10},
    ],
)
def test_config_settings_reject_invalid_values(overrides: dict[str, object]) -> None:
    """Reject blank keys, malformed currencies, unknown levels and inverted limits.

    Args:
        overrides: Invalid field values.

    Returns:
        None: Assertions validate field validators.

    Raises:
        AssertionError: Raised when invalid values are accepted.
    """

    with pytest.raises(ValueError):
        AppSettings(**{"internal_api_key": "secret", **overrides})
