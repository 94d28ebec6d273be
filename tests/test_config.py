"""Tests for core/config.py -- environment-driven Settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings


def test_defaults(monkeypatch):
    for var in ("DATABASE_URL", "PORT", "RESET_DATABASE", "CAKE_ORDER_SCHEMA", "MIN_PASSWORD_LENGTH"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 8087
    assert settings.reset_database is False
    assert settings.cake_order_schema == "fixed"
    assert settings.min_password_length == 4
    assert settings.database_url.startswith("sqlite:///")


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///elsewhere.db")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("RESET_DATABASE", "true")
    monkeypatch.setenv("CAKE_ORDER_SCHEMA", "ingredients")
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///elsewhere.db"
    assert settings.port == 9000
    assert settings.reset_database is True
    assert settings.cake_order_schema == "ingredients"


def test_rejects_unknown_order_schema(monkeypatch):
    monkeypatch.setenv("CAKE_ORDER_SCHEMA", "freestyle")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_rejects_empty_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "  ")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
