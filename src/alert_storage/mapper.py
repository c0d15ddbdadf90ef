"""Row mapping between alert objects and the alerts, assets, and play-order tables.

Every function here works on a :class:`~sqlalchemy.orm.Session` that already has
a transaction open and raises on failure; committing or rolling back is the
caller's responsibility. The tables carry no foreign keys, so parent/child
relationships are maintained explicitly: children are written only alongside
their parent row, removed together with it, and reattached by alert id when
loading.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import timedelta

from loguru import logger
from sqlalchemy import Table, delete, func, select, update
from sqlalchemy.orm import Session

from .alerts import Alert, Asset
from .codec import alert_class_for_code, code_to_state, state_to_code, type_to_code
from .db_models import (
    AlertAssetModel,
    AlertAssetPlayOrderItemModel,
    AlertModel,
    Base,
    SchemaVersion,
    legacy_alerts_table,
)
from .errors import AlertExistsError, AlertNotFoundError, AlertStorageError

CHILD_MODELS: tuple[type[Base], ...] = (AlertAssetModel, AlertAssetPlayOrderItemModel)


def _alerts_table(version: SchemaVersion) -> Table:
    if version is SchemaVersion.V1:
        return legacy_alerts_table
    return AlertModel.__table__


def next_id(session: Session, model: type[Base]) -> int:
    """Return the next surrogate id for ``model``: one past the current maximum."""
    current = session.scalar(select(func.max(model.id)))
    return (current or 0) + 1


def alert_exists(session: Session, token: str) -> bool:
    count = session.scalar(
        select(func.count()).select_from(AlertModel).where(AlertModel.token == token)
    )
    return bool(count)


def alert_exists_by_id(session: Session, alert_id: int) -> bool:
    count = session.scalar(
        select(func.count()).select_from(AlertModel).where(AlertModel.id == alert_id)
    )
    return bool(count)


def count_alerts(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(AlertModel)) or 0


# Store -----------------------------------------------------------------------


def _store_assets(session: Session, alert_id: int, assets: Iterable[Asset]) -> int:
    assets = list(assets)
    if not assets:
        return 0

    asset_id = next_id(session, AlertAssetModel)
    for asset in assets:
        session.add(
            AlertAssetModel(id=asset_id, alert_id=alert_id, avs_id=asset.id, url=asset.url)
        )
        asset_id += 1
    return len(assets)


def _store_play_order_items(session: Session, alert_id: int, items: list[str]) -> int:
    if not items:
        return 0

    item_id = next_id(session, AlertAssetPlayOrderItemModel)
    for position, asset_token in enumerate(items, start=1):
        session.add(
            AlertAssetPlayOrderItemModel(
                id=item_id,
                alert_id=alert_id,
                asset_play_order_position=position,
                asset_play_order_token=asset_token,
            )
        )
        item_id += 1
    return len(items)


def store_alert(session: Session, alert: Alert) -> int:
    """Insert ``alert`` with its assets and play order; return its new id."""
    if alert_exists(session, alert.token):
        raise AlertExistsError(f"Alert with token {alert.token!r} already exists")

    alert_type = type_to_code(alert.get_type_name())
    alert_state = state_to_code(alert.state)

    alert_id = next_id(session, AlertModel)
    session.add(
        AlertModel(
            id=alert_id,
            token=alert.token,
            type=alert_type,
            state=alert_state,
            scheduled_time_unix=alert.scheduled_time_unix,
            scheduled_time_iso_8601=alert.scheduled_time_iso_8601,
            asset_loop_count=alert.loop_count,
            asset_loop_pause_milliseconds=alert.loop_pause_milliseconds,
            background_asset=alert.background_asset_id,
        )
    )
    session.flush()

    config = alert.asset_configuration
    asset_count = _store_assets(session, alert_id, config.assets.values())
    item_count = _store_play_order_items(session, alert_id, config.asset_play_order_items)
    session.flush()

    logger.bind(token=alert.token, id=alert_id).debug(
        "Stored alert with {} asset(s) and {} play order item(s)",
        asset_count,
        item_count,
    )
    return alert_id


# Load ------------------------------------------------------------------------


def _row_to_alert(row) -> Alert:
    alert_class = alert_class_for_code(row["type"])
    alert = alert_class(token=row["token"], db_id=row["id"])
    try:
        alert.set_time_iso_8601(row["scheduled_time_iso_8601"])
    except ValueError as exc:
        raise AlertStorageError(
            f"Alert {row['id']} has an unreadable scheduled time"
        ) from exc
    alert.loop_count = row.get("asset_loop_count", 0)
    alert.loop_pause = timedelta(milliseconds=row.get("asset_loop_pause_milliseconds", 0))
    alert.background_asset_id = row.get("background_asset", "")
    alert.state = code_to_state(row["state"])
    return alert


def _load_assets(session: Session) -> dict[int, list[Asset]]:
    assets: dict[int, list[Asset]] = defaultdict(list)
    for row in session.execute(
        select(AlertAssetModel).order_by(AlertAssetModel.id)
    ).scalars():
        assets[row.alert_id].append(Asset(id=row.avs_id, url=row.url))
    return assets


def _load_play_order_items(session: Session) -> dict[int, dict[int, str]]:
    items: dict[int, dict[int, str]] = defaultdict(dict)
    for row in session.execute(
        select(AlertAssetPlayOrderItemModel).order_by(AlertAssetPlayOrderItemModel.id)
    ).scalars():
        # Positions are unique per alert; keep the first row seen for a duplicate.
        items[row.alert_id].setdefault(
            row.asset_play_order_position, row.asset_play_order_token
        )
    return items


def load_alerts(
    session: Session, version: SchemaVersion = SchemaVersion.V2
) -> list[Alert]:
    """Reconstruct every alert stored in the given schema version's tables."""
    table = _alerts_table(version)
    alerts = [
        _row_to_alert(row)
        for row in session.execute(select(table).order_by(table.c.id)).mappings()
    ]

    assets_by_alert = _load_assets(session)
    items_by_alert = _load_play_order_items(session)

    for alert in alerts:
        config = alert.asset_configuration
        for asset in assets_by_alert.get(alert.db_id, ()):
            config.assets[asset.id] = asset
        positions = items_by_alert.get(alert.db_id, {})
        config.asset_play_order_items = [
            positions[position] for position in sorted(positions)
        ]

    logger.bind(table=table.name).debug("Loaded {} alert(s)", len(alerts))
    return alerts


# Modify / erase ----------------------------------------------------------------


def modify_alert(session: Session, alert: Alert) -> None:
    """Persist the alert's state and scheduled time; nothing else changes."""
    if not alert_exists(session, alert.token):
        raise AlertNotFoundError(f"Alert with token {alert.token!r} does not exist")

    alert_state = state_to_code(alert.state)
    session.execute(
        update(AlertModel)
        .where(AlertModel.id == alert.db_id)
        .values(
            state=alert_state,
            scheduled_time_unix=alert.scheduled_time_unix,
            scheduled_time_iso_8601=alert.scheduled_time_iso_8601,
        )
    )


def _erase_by_id(session: Session, alert_id: int) -> None:
    session.execute(delete(AlertModel).where(AlertModel.id == alert_id))
    for model in CHILD_MODELS:
        session.execute(delete(model).where(model.alert_id == alert_id))


def erase_alert(session: Session, alert: Alert) -> None:
    if not alert_exists(session, alert.token):
        raise AlertNotFoundError(f"Alert with token {alert.token!r} does not exist")
    _erase_by_id(session, alert.db_id)


def erase_alert_ids(session: Session, alert_ids: Iterable[int]) -> None:
    for alert_id in alert_ids:
        if not alert_exists_by_id(session, alert_id):
            raise AlertNotFoundError(f"Alert with id {alert_id} does not exist")
        _erase_by_id(session, alert_id)


def clear_tables(session: Session) -> None:
    for model in (AlertModel, *CHILD_MODELS):
        session.execute(delete(model))
