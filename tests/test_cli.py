"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest

from alert_storage import Alarm, Asset, AssetConfiguration, SQLiteAlertStorage, StorageSettings
from alert_storage.cli import main as cli_main
from alert_storage.config import get_storage_settings


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("alert_storage.cli.configure_logging", lambda **_: None)


def _seed(path, *tokens: str) -> None:
    store = SQLiteAlertStorage(StorageSettings())
    assert store.open(path)
    for token in tokens:
        assert store.store(
            Alarm(
                token=token,
                asset_configuration=AssetConfiguration(
                    assets={"a1": Asset(id="a1", url="http://x/1")},
                    asset_play_order_items=["a1"],
                ),
            )
        )
    store.close()


def test_create_then_stats(db_path, capsys):
    cli_main(["create", str(db_path)])
    cli_main(["stats", str(db_path)])

    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"Created alerts database at {db_path}."
    assert out[1] == "ONE-LINE-STAT: Number of alerts:0"


def test_create_refuses_existing_file(db_path):
    cli_main(["create", str(db_path)])
    with pytest.raises(SystemExit, match="Unable to create"):
        cli_main(["create", str(db_path)])


def test_list_dumps_alerts_as_json(db_path, capsys):
    cli_main(["create", str(db_path)])
    _seed(db_path, "t1", "t2")
    capsys.readouterr()

    cli_main(["list", str(db_path)])
    data = json.loads(capsys.readouterr().out)

    assert data["total"] == 2
    first = data["alerts"][0]
    assert first["token"] == "t1"
    assert first["type"] == "ALARM"
    assert first["state"] == "SET"
    assert first["assets"] == {"a1": "http://x/1"}
    assert first["playOrder"] == ["a1"]


def test_stats_everything_includes_assets(db_path, capsys):
    cli_main(["create", str(db_path)])
    _seed(db_path, "t1")
    capsys.readouterr()

    cli_main(["stats", str(db_path), "--level", "everything"])
    out = capsys.readouterr().out

    assert "ONE-LINE-STAT: Number of alerts:1" in out
    assert "asset a1: http://x/1" in out


def test_clear_removes_alerts(db_path, capsys):
    cli_main(["create", str(db_path)])
    _seed(db_path, "t1")

    cli_main(["clear", str(db_path)])
    cli_main(["stats", str(db_path)])

    assert capsys.readouterr().out.splitlines()[-1] == "ONE-LINE-STAT: Number of alerts:0"


def test_migrate_reports_missing_file(tmp_path):
    with pytest.raises(SystemExit, match="Unable to open"):
        cli_main(["migrate", str(tmp_path / "missing.db")])


def test_path_defaults_to_configured_location(tmp_path, monkeypatch, capsys):
    target = tmp_path / "configured" / "alerts.db"
    monkeypatch.setenv("ALERT_STORAGE_DB_PATH", str(target))
    get_storage_settings.cache_clear()
    try:
        cli_main(["create"])
        cli_main(["migrate"])
    finally:
        get_storage_settings.cache_clear()

    assert target.exists()
    assert capsys.readouterr().out.splitlines()[-1] == (
        f"Alerts database at {target} is up to date."
    )
