"""SQLAlchemy ORM models for persisting alerts, their assets, and play order."""

from __future__ import annotations

from enum import IntEnum

from sqlalchemy import Column, Integer, MetaData, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ALERTS_TABLE_NAME = "alerts_v2"
ALERT_ASSETS_TABLE_NAME = "alertAssets"
ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE_NAME = "alertAssetPlayOrderItems"
LEGACY_ALERTS_TABLE_NAME = "alerts"


class SchemaVersion(IntEnum):
    """On-disk layouts: V1 keeps alerts in ``alerts``, V2 in ``alerts_v2``."""

    V1 = 1
    V2 = 2


class Base(DeclarativeBase):
    """Declarative base for the current (v2) schema."""


class AlertModel(Base):
    """One row per alert."""

    __tablename__ = ALERTS_TABLE_NAME

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    token: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    type: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_time_unix: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_time_iso_8601: Mapped[str] = mapped_column(Text, nullable=False)
    asset_loop_count: Mapped[int] = mapped_column(Integer, nullable=False)
    asset_loop_pause_milliseconds: Mapped[int] = mapped_column(Integer, nullable=False)
    background_asset: Mapped[str] = mapped_column(Text, nullable=False)


class AlertAssetModel(Base):
    """Assets owned by an alert; alert_id is not enforced by the engine."""

    __tablename__ = ALERT_ASSETS_TABLE_NAME

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    alert_id: Mapped[int] = mapped_column(Integer, nullable=False)
    avs_id: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)


class AlertAssetPlayOrderItemModel(Base):
    """Position/asset pairs defining an alert's playback sequence."""

    __tablename__ = ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE_NAME

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    alert_id: Mapped[int] = mapped_column(Integer, nullable=False)
    asset_play_order_position: Mapped[int] = mapped_column(Integer, nullable=False)
    asset_play_order_token: Mapped[str] = mapped_column(Text, nullable=False)


# Kept out of Base.metadata so create_all never recreates it.
legacy_metadata = MetaData()

legacy_alerts_table = Table(
    LEGACY_ALERTS_TABLE_NAME,
    legacy_metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("token", Text, nullable=False),
    Column("type", Integer, nullable=False),
    Column("state", Integer, nullable=False),
    Column("scheduled_time_unix", Integer, nullable=False),
    Column("scheduled_time_iso_8601", Text, nullable=False),
)
