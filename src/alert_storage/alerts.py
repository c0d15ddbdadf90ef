"""Alert objects persisted by the storage engine."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import ClassVar

ISO_8601_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_ISO_8601_OUTPUT_FORMAT = "%Y-%m-%dT%H:%M:%S+0000"


class AlertState(Enum):
    """Lifecycle states of an alert."""

    UNSET = "UNSET"
    SET = "SET"
    READY = "READY"
    ACTIVATING = "ACTIVATING"
    ACTIVE = "ACTIVE"
    SNOOZING = "SNOOZING"
    SNOOZED = "SNOOZED"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    COMPLETED = "COMPLETED"


@dataclass
class Asset:
    """An audio resource identified by its external asset id."""

    id: str
    url: str


@dataclass
class AssetConfiguration:
    """Playback configuration shared by all alert types."""

    assets: dict[str, Asset] = field(default_factory=dict)
    asset_play_order_items: list[str] = field(default_factory=list)
    background_asset_id: str = ""
    loop_count: int = 0
    loop_pause: timedelta = field(default_factory=timedelta)


def _epoch() -> datetime:
    return datetime.fromtimestamp(0, tz=UTC)


def parse_iso_8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp carrying an offset and normalise it to UTC."""
    text = value.strip()
    try:
        parsed = datetime.strptime(text, ISO_8601_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp {value!r} has no UTC offset")
    return parsed.astimezone(UTC)


@dataclass
class Alert:
    """Base alert; concrete types are Alarm, Timer and Reminder."""

    TYPE_NAME: ClassVar[str] = ""

    token: str = ""
    scheduled_time: datetime = field(default_factory=_epoch)
    state: AlertState = AlertState.SET
    asset_configuration: AssetConfiguration = field(
        default_factory=AssetConfiguration
    )
    db_id: int = 0

    def __post_init__(self) -> None:
        # Naive schedules are taken to be UTC.
        if self.scheduled_time.tzinfo is None:
            self.scheduled_time = self.scheduled_time.replace(tzinfo=UTC)

    def get_type_name(self) -> str:
        return self.TYPE_NAME

    @property
    def scheduled_time_unix(self) -> int:
        return calendar.timegm(self.scheduled_time.utctimetuple())

    @property
    def scheduled_time_iso_8601(self) -> str:
        return self.scheduled_time.astimezone(UTC).strftime(_ISO_8601_OUTPUT_FORMAT)

    def set_time_iso_8601(self, value: str) -> None:
        self.scheduled_time = parse_iso_8601(value)

    def set_time_unix(self, value: int) -> None:
        self.scheduled_time = datetime.fromtimestamp(value, tz=UTC)

    @property
    def loop_count(self) -> int:
        return self.asset_configuration.loop_count

    @loop_count.setter
    def loop_count(self, value: int) -> None:
        self.asset_configuration.loop_count = value

    @property
    def loop_pause(self) -> timedelta:
        return self.asset_configuration.loop_pause

    @loop_pause.setter
    def loop_pause(self, value: timedelta) -> None:
        self.asset_configuration.loop_pause = value

    @property
    def loop_pause_milliseconds(self) -> int:
        return int(self.asset_configuration.loop_pause / timedelta(milliseconds=1))

    @property
    def background_asset_id(self) -> str:
        return self.asset_configuration.background_asset_id

    @background_asset_id.setter
    def background_asset_id(self, value: str) -> None:
        self.asset_configuration.background_asset_id = value

    def describe(self, everything: bool = False) -> list[str]:
        """Return diagnostic lines describing the alert."""
        state = self.state.value if isinstance(self.state, AlertState) else self.state
        lines = [
            f"{self.get_type_name() or type(self).__name__} "
            f"id={self.db_id} token={self.token} state={state} "
            f"scheduled={self.scheduled_time_iso_8601}"
        ]
        if not everything:
            return lines

        config = self.asset_configuration
        lines.append(
            f"  loop_count={config.loop_count} "
            f"loop_pause_ms={self.loop_pause_milliseconds} "
            f"background_asset={config.background_asset_id or '-'}"
        )
        for asset in config.assets.values():
            lines.append(f"  asset {asset.id}: {asset.url}")
        if config.asset_play_order_items:
            lines.append("  play_order: " + ", ".join(config.asset_play_order_items))
        return lines


@dataclass
class Alarm(Alert):
    TYPE_NAME: ClassVar[str] = "ALARM"


@dataclass
class Timer(Alert):
    TYPE_NAME: ClassVar[str] = "TIMER"


@dataclass
class Reminder(Alert):
    TYPE_NAME: ClassVar[str] = "REMINDER"
