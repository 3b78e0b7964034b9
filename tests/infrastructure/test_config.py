"""Tests for environment-driven settings."""

from pathlib import Path

from orderflow.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.default_currency == "BRL"
    assert settings.log_level == "WARNING"
    assert settings.orders_file.name == "orders.json"
    assert settings.events_file.parent == settings.data_dir


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ORDERFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ORDERFLOW_DEFAULT_CURRENCY", "usd")
    monkeypatch.setenv("ORDERFLOW_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.data_dir == Path(tmp_path)
    assert settings.default_currency == "USD"
    assert settings.log_level == "DEBUG"
