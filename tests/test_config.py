"""Tests for the configuration helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from alert_storage.config import DEFAULT_DB_PATH, StorageSettings, get_storage_settings

ENV_NAMES = ("ALERT_STORAGE_DB_PATH", "ALERT_STORAGE_DB_ECHO")


def _load_settings(monkeypatch: pytest.MonkeyPatch, env_file: Path) -> StorageSettings:
    monkeypatch.setenv("ALERT_STORAGE_ENV_FILE", str(env_file))
    get_storage_settings.cache_clear()
    try:
        return get_storage_settings()
    finally:
        get_storage_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the original state, including values
    # written by the .env loader.
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_settings_loaded_from_env_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# alert storage\nALERT_STORAGE_DB_PATH='/data/alerts.db'\nALERT_STORAGE_DB_ECHO=yes\n",
        encoding="utf-8",
    )

    settings = _load_settings(monkeypatch, env_file)

    assert settings.db_path == "/data/alerts.db"
    assert settings.echo is True


def test_environment_variable_overrides_env_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("ALERT_STORAGE_DB_PATH=/from/file.db\n", encoding="utf-8")
    monkeypatch.setenv("ALERT_STORAGE_DB_PATH", "/from/env.db")

    settings = _load_settings(monkeypatch, env_file)

    assert settings.db_path == "/from/env.db"
    assert settings.echo is False


def test_defaults_without_env_file(tmp_path, monkeypatch):
    settings = _load_settings(monkeypatch, tmp_path / "missing.env")

    assert settings.db_path == DEFAULT_DB_PATH
    assert settings.resolved_db_path == Path(DEFAULT_DB_PATH).expanduser()
