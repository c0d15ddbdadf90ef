"""Table creation and the v1 -> v2 schema migration."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import Connection, inspect
from sqlalchemy.orm import Session

from . import mapper
from .db_models import (
    ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE_NAME,
    ALERT_ASSETS_TABLE_NAME,
    ALERTS_TABLE_NAME,
    LEGACY_ALERTS_TABLE_NAME,
    Base,
    SchemaVersion,
    legacy_alerts_table,
)
from .errors import AlertStorageError, SchemaMigrationError

V2_TABLE_NAMES = (
    ALERTS_TABLE_NAME,
    ALERT_ASSETS_TABLE_NAME,
    ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE_NAME,
)


def table_names(connection: Connection) -> set[str]:
    return set(inspect(connection).get_table_names())


def ensure_schema(connection: Connection) -> None:
    """Create any missing v2 table; existing tables are left alone."""
    Base.metadata.create_all(connection, checkfirst=True)


def migrate_if_needed(session: Session) -> bool:
    """Bring the database behind ``session`` up to the v2 layout.

    Returns True when a legacy table was migrated. Runs inside the session's
    transaction, so the legacy table is only gone once every row it held has
    been re-stored.
    """
    connection = session.connection()
    existing = table_names(connection)
    if ALERTS_TABLE_NAME in existing:
        return False

    ensure_schema(connection)

    if LEGACY_ALERTS_TABLE_NAME not in existing:
        logger.info("No legacy alerts table found; created v2 tables")
        return False

    try:
        legacy_alerts = mapper.load_alerts(session, SchemaVersion.V1)
    except AlertStorageError as exc:
        raise SchemaMigrationError("Could not load v1 alert records") from exc

    for alert in legacy_alerts:
        try:
            mapper.store_alert(session, alert)
        except AlertStorageError as exc:
            for line in alert.describe(everything=True):
                logger.error(line)
            raise SchemaMigrationError(
                f"Could not migrate alert {alert.token!r} to the v2 tables"
            ) from exc

    legacy_alerts_table.drop(connection)
    logger.bind(migrated=len(legacy_alerts)).info(
        "Migrated alerts database from v{} to v{}",
        int(SchemaVersion.V1),
        int(SchemaVersion.V2),
    )
    return True
