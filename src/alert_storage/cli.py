"""Utility CLI for creating, migrating, and inspecting alert databases."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .alerts import Alert
from .config import get_storage_settings
from .diagnostics import StatLevel
from .storage import SQLiteAlertStorage
from .utils import configure_logging, logger


def _resolve_path(path: str | None) -> Path:
    if path:
        return Path(path).expanduser()
    return get_storage_settings().resolved_db_path


def _open_storage(path: Path) -> SQLiteAlertStorage:
    storage = SQLiteAlertStorage(get_storage_settings())
    if not storage.open(path):
        raise SystemExit(f"Unable to open alerts database at {path}.")
    return storage


def _alert_record(alert: Alert) -> dict[str, object]:
    config = alert.asset_configuration
    return {
        "id": alert.db_id,
        "token": alert.token,
        "type": alert.get_type_name(),
        "state": alert.state.value,
        "scheduledTime": alert.scheduled_time_iso_8601,
        "loopCount": config.loop_count,
        "loopPauseMs": alert.loop_pause_milliseconds,
        "backgroundAsset": config.background_asset_id,
        "assets": {asset.id: asset.url for asset in config.assets.values()},
        "playOrder": list(config.asset_play_order_items),
    }


def create_db(path: str | None = None, *, print_fn=print) -> None:
    """Create an empty alerts database."""
    db_path = _resolve_path(path)
    storage = SQLiteAlertStorage(get_storage_settings())
    if not storage.create_database(db_path):
        raise SystemExit(f"Unable to create alerts database at {db_path}.")
    storage.close()
    print_fn(f"Created alerts database at {db_path}.")


def migrate_db(path: str | None = None, *, print_fn=print) -> None:
    """Open a database so any legacy alerts table is migrated."""
    db_path = _resolve_path(path)
    with _open_storage(db_path):
        print_fn(f"Alerts database at {db_path} is up to date.")


def show_stats(
    path: str | None = None,
    *,
    level: StatLevel = StatLevel.ONE_LINE,
    print_fn=print,
) -> None:
    db_path = _resolve_path(path)
    with _open_storage(db_path) as storage:
        lines = storage.stats(level)
    if lines is None:
        raise SystemExit("Unable to read alert statistics.")
    for line in lines:
        print_fn(line)


def list_alerts(path: str | None = None, *, print_fn=print) -> None:
    """Dump every stored alert as JSON."""
    db_path = _resolve_path(path)
    with _open_storage(db_path) as storage:
        alerts = storage.load()
    if alerts is None:
        raise SystemExit("Unable to load alerts.")

    formatted = json.dumps(
        {"total": len(alerts), "alerts": [_alert_record(alert) for alert in alerts]},
        indent=2,
        sort_keys=True,
    )
    print_fn(formatted)


def clear_db(path: str | None = None, *, print_fn=print) -> None:
    db_path = _resolve_path(path)
    with _open_storage(db_path) as storage:
        if not storage.clear_database():
            raise SystemExit("Unable to clear alerts database.")
    logger.bind(path=str(db_path)).warning("All alerts removed")
    print_fn(f"Cleared alerts database at {db_path}.")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the alerts SQLite database.")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("create", "Create a new, empty alerts database."),
        ("migrate", "Upgrade a legacy alerts database in place."),
        ("list", "Print every stored alert as JSON."),
        ("clear", "Delete every stored alert."),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument("path", nargs="?", help="Database file (default: configured path).")

    stats_parser = sub.add_parser("stats", help="Print alert statistics.")
    stats_parser.add_argument("path", nargs="?", help="Database file (default: configured path).")
    stats_parser.add_argument(
        "--level",
        choices=[level.value for level in StatLevel],
        default=StatLevel.ONE_LINE.value,
        help="Amount of detail to print (default: one-line).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    configure_logging()
    args = parse_args(argv)
    if args.command == "create":
        create_db(args.path)
    elif args.command == "migrate":
        migrate_db(args.path)
    elif args.command == "stats":
        show_stats(args.path, level=StatLevel(args.level))
    elif args.command == "list":
        list_alerts(args.path)
    elif args.command == "clear":
        clear_db(args.path)
    else:
        raise SystemExit(f"Unknown command: {args.command}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main(sys.argv[1:])
