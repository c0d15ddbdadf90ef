"""Exceptions raised inside the storage engine."""

from __future__ import annotations


class AlertStorageError(RuntimeError):
    """Base class for failures detected by the storage engine."""


class AlertCodecError(AlertStorageError):
    """Raised when a value cannot be translated to or from its stored code."""


class InvalidAlertTypeError(AlertCodecError):
    """Raised for an alert type name or type code outside the known set."""


class InvalidAlertStateError(AlertCodecError):
    """Raised for an alert state or state code outside the known set."""


class AlertExistsError(AlertStorageError):
    """Raised when storing an alert whose token is already present."""


class AlertNotFoundError(AlertStorageError):
    """Raised when an alert addressed by token or id is not present."""


class SchemaMigrationError(AlertStorageError):
    """Raised when a legacy database cannot be upgraded."""
