"""Engine and session helpers for the SQLite alert database."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker


def sqlite_url(path: str | Path) -> str:
    return f"sqlite:///{Path(path).expanduser()}"


def ensure_sqlite_directory(path: str | Path) -> None:
    Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _install_transaction_hooks(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, decide where transactions begin.

    pysqlite only opens a transaction implicitly before DML, so CREATE/DROP TABLE
    would otherwise run outside of it. Emitting BEGIN ourselves keeps schema
    changes inside the same unit of work as the rows they affect.
    """

    @event.listens_for(engine, "connect")
    def _disable_implicit_transactions(dbapi_connection, _connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")


def make_engine(path: str | Path, *, echo: bool = False) -> Engine:
    """Create an engine bound to the SQLite file at ``path``."""
    engine = create_engine(sqlite_url(path), echo=echo, future=True)
    _install_transaction_hooks(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
