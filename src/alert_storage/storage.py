"""SQLite-backed alert storage with an explicit open/close lifecycle."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from . import mapper
from .alerts import Alert
from .config import StorageSettings
from .database import ensure_sqlite_directory, make_engine, make_session_factory
from .diagnostics import StatLevel, build_stats
from .errors import AlertStorageError
from .schema import ensure_schema, migrate_if_needed

_STORAGE_ERRORS = (AlertStorageError, SQLAlchemyError)


class SQLiteAlertStorage:
    """Persists alerts, their assets, and their play order in a SQLite file.

    The storage starts closed. ``create_database`` or ``open`` attach it to a
    file; every other operation fails until then. Each public operation runs in
    its own transaction and reports failure through its return value rather
    than by raising.
    """

    def __init__(self, settings: StorageSettings | None = None) -> None:
        self._settings = settings or StorageSettings()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._path: Path | None = None

    def __enter__(self) -> SQLiteAlertStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def path(self) -> Path | None:
        return self._path

    # Lifecycle -----------------------------------------------------------------

    def _attach(self, path: Path) -> None:
        self._engine = make_engine(path, echo=self._settings.echo)
        self._session_factory = make_session_factory(self._engine)
        self._path = path

    def create_database(self, path: str | Path) -> bool:
        """Create a new database file holding empty v2 tables."""
        db_path = Path(path).expanduser()
        if self.is_open():
            logger.error("Cannot create database: a database handle is already open")
            return False

        if db_path.exists():
            logger.bind(path=str(db_path)).error(
                "Cannot create database: file already exists"
            )
            return False

        try:
            ensure_sqlite_directory(db_path)
            self._attach(db_path)
            with self._engine.begin() as connection:
                ensure_schema(connection)
        except (OSError, SQLAlchemyError) as exc:
            logger.bind(path=str(db_path)).error("Database could not be created: {}", exc)
            self.close()
            return False

        logger.bind(path=str(db_path)).info("Created alerts database")
        return True

    def open(self, path: str | Path) -> bool:
        """Open an existing database file, migrating it to v2 if required."""
        db_path = Path(path).expanduser()
        if self.is_open():
            logger.error("Cannot open database: a database handle is already open")
            return False

        if not db_path.is_file():
            logger.bind(path=str(db_path)).error(
                "Cannot open database: file does not exist"
            )
            return False

        try:
            self._attach(db_path)
            with self._session_factory.begin() as session:
                migrate_if_needed(session)
        except _STORAGE_ERRORS as exc:
            logger.bind(path=str(db_path)).error(
                "Could not migrate database file from v1 to v2: {}", exc
            )
            self.close()
            return False

        logger.bind(path=str(db_path)).debug("Opened alerts database")
        return True

    def is_open(self) -> bool:
        return self._engine is not None

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        logger.bind(path=str(self._path)).debug("Closed alerts database")
        self._engine = None
        self._session_factory = None
        self._path = None

    def _check_open(self, operation: str) -> bool:
        if self.is_open():
            return True
        logger.bind(operation=operation).error("Database handle is not open")
        return False

    # Alerts --------------------------------------------------------------------

    def alert_exists(self, token: str) -> bool:
        if not self._check_open("alert_exists"):
            return False
        try:
            with self._session_factory.begin() as session:
                return mapper.alert_exists(session, token)
        except SQLAlchemyError as exc:
            logger.bind(token=token).error("Could not look up alert: {}", exc)
            return False

    def store(self, alert: Alert | None) -> bool:
        """Insert a new alert and record its assigned id on ``alert.db_id``."""
        if not self._check_open("store"):
            return False
        if alert is None:
            logger.error("Cannot store alert: alert is None")
            return False

        try:
            with self._session_factory.begin() as session:
                alert_id = mapper.store_alert(session, alert)
        except _STORAGE_ERRORS as exc:
            logger.bind(token=alert.token).error("Could not store alert: {}", exc)
            return False

        alert.db_id = alert_id
        logger.bind(token=alert.token, id=alert_id).info("Stored alert")
        return True

    def load(self) -> list[Alert] | None:
        """Return every stored alert, or None if they could not be read."""
        if not self._check_open("load"):
            return None

        try:
            with self._session_factory.begin() as session:
                return mapper.load_alerts(session)
        except _STORAGE_ERRORS as exc:
            logger.error("Could not load alerts: {}", exc)
            return None

    def modify(self, alert: Alert | None) -> bool:
        """Persist a stored alert's state and scheduled time."""
        if not self._check_open("modify"):
            return False
        if alert is None:
            logger.error("Cannot modify alert: alert is None")
            return False

        try:
            with self._session_factory.begin() as session:
                mapper.modify_alert(session, alert)
        except _STORAGE_ERRORS as exc:
            logger.bind(token=alert.token).error("Could not modify alert: {}", exc)
            return False
        return True

    def erase(self, alert: Alert | None) -> bool:
        """Remove a stored alert together with its assets and play order."""
        if not self._check_open("erase"):
            return False
        if alert is None:
            logger.error("Cannot erase alert: alert is None")
            return False

        try:
            with self._session_factory.begin() as session:
                mapper.erase_alert(session, alert)
        except _STORAGE_ERRORS as exc:
            logger.bind(token=alert.token).error("Could not erase alert: {}", exc)
            return False
        return True

    def erase_by_ids(self, alert_ids: Iterable[int]) -> bool:
        """Remove several alerts by id; if one cannot be erased none are."""
        if not self._check_open("erase_by_ids"):
            return False

        ids = list(alert_ids)
        if not ids:
            return True

        try:
            with self._session_factory.begin() as session:
                mapper.erase_alert_ids(session, ids)
        except _STORAGE_ERRORS as exc:
            logger.bind(ids=ids).error("Could not erase alerts: {}", exc)
            return False
        return True

    def clear_database(self) -> bool:
        """Delete every alert, asset, and play order row."""
        if not self._check_open("clear_database"):
            return False

        try:
            with self._session_factory.begin() as session:
                mapper.clear_tables(session)
        except SQLAlchemyError as exc:
            logger.error("Could not clear alert tables: {}", exc)
            return False
        logger.info("Cleared alerts database")
        return True

    # Diagnostics ---------------------------------------------------------------

    def stats(self, level: StatLevel = StatLevel.ONE_LINE) -> list[str] | None:
        if not self._check_open("stats"):
            return None

        try:
            with self._session_factory.begin() as session:
                alert_count = mapper.count_alerts(session)
                alerts = [] if level is StatLevel.ONE_LINE else mapper.load_alerts(session)
        except _STORAGE_ERRORS as exc:
            logger.error("Could not collect alert statistics: {}", exc)
            return None
        return build_stats(level, alert_count, alerts)

    def print_stats(self, level: StatLevel = StatLevel.ONE_LINE) -> None:
        lines = self.stats(level)
        for line in lines or ():
            logger.info(line)
