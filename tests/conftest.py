"""Shared fixtures for the alert storage tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from alert_storage import (
    Alarm,
    Alert,
    AlertState,
    Asset,
    AssetConfiguration,
    SQLiteAlertStorage,
    StorageSettings,
)
from alert_storage.schema import V2_TABLE_NAMES


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "alerts.db"


@pytest.fixture
def storage(db_path: Path):
    store = SQLiteAlertStorage(StorageSettings(db_path=str(db_path)))
    assert store.create_database(db_path)
    yield store
    store.close()


@pytest.fixture
def make_alert():
    def _make(
        token: str,
        *,
        alert_class: type[Alert] = Alarm,
        state: AlertState = AlertState.SET,
        scheduled: datetime | None = None,
        assets: dict[str, str] | None = None,
        play_order: list[str] | None = None,
        loop_count: int = 0,
        loop_pause_ms: int = 0,
        background_asset: str = "",
    ) -> Alert:
        config = AssetConfiguration(
            assets={
                avs_id: Asset(id=avs_id, url=url)
                for avs_id, url in (assets or {}).items()
            },
            asset_play_order_items=list(play_order or []),
            background_asset_id=background_asset,
            loop_count=loop_count,
            loop_pause=timedelta(milliseconds=loop_pause_ms),
        )
        return alert_class(
            token=token,
            scheduled_time=scheduled or datetime(2026, 3, 1, 7, 30, tzinfo=UTC),
            state=state,
            asset_configuration=config,
        )

    return _make


@pytest.fixture
def row_counts():
    def _counts(path: Path) -> dict[str, int]:
        engine = create_engine(f"sqlite:///{path}")
        try:
            with engine.connect() as connection:
                return {
                    name: connection.execute(
                        text(f'SELECT COUNT(*) FROM "{name}"')
                    ).scalar_one()
                    for name in V2_TABLE_NAMES
                }
        finally:
            engine.dispose()

    return _counts
