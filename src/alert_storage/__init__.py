"""Public package interface for the alert storage engine."""

from __future__ import annotations

from .alerts import Alarm, Alert, AlertState, Asset, AssetConfiguration, Reminder, Timer
from .cli import main as _cli_main
from .config import StorageSettings, get_storage_settings
from .diagnostics import StatLevel
from .errors import (
    AlertCodecError,
    AlertExistsError,
    AlertNotFoundError,
    AlertStorageError,
    InvalidAlertStateError,
    InvalidAlertTypeError,
    SchemaMigrationError,
)
from .storage import SQLiteAlertStorage

__all__ = [
    "Alarm",
    "Alert",
    "AlertState",
    "Asset",
    "AssetConfiguration",
    "Reminder",
    "Timer",
    "StorageSettings",
    "get_storage_settings",
    "StatLevel",
    "AlertCodecError",
    "AlertExistsError",
    "AlertNotFoundError",
    "AlertStorageError",
    "InvalidAlertStateError",
    "InvalidAlertTypeError",
    "SchemaMigrationError",
    "SQLiteAlertStorage",
    "main",
]


def main(argv: None | list[str] = None) -> None:
    """Entrypoint for the command-line interface."""
    _cli_main(argv)
