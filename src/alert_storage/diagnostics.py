"""Read-only summaries of the alert database."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .alerts import Alert


class StatLevel(Enum):
    ONE_LINE = "one-line"
    ALERTS_SUMMARY = "summary"
    EVERYTHING = "everything"


def one_line_summary(alert_count: int) -> str:
    return f"ONE-LINE-STAT: Number of alerts:{alert_count}"


def build_stats(level: StatLevel, alert_count: int, alerts: Iterable[Alert]) -> list[str]:
    """Return the lines reported for ``level``."""
    lines = [one_line_summary(alert_count)]
    if level is StatLevel.ONE_LINE:
        return lines

    everything = level is StatLevel.EVERYTHING
    for alert in alerts:
        lines.extend(alert.describe(everything=everything))
    return lines
