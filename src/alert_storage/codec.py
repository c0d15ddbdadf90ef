"""Translation between alert field values and the integer codes stored on disk."""

from __future__ import annotations

from .alerts import Alarm, Alert, AlertState, Reminder, Timer
from .errors import InvalidAlertStateError, InvalidAlertTypeError

ALERT_TYPE_ALARM = 1
ALERT_TYPE_TIMER = 2
ALERT_TYPE_REMINDER = 3

_TYPE_CODES: dict[str, int] = {
    Alarm.TYPE_NAME: ALERT_TYPE_ALARM,
    Timer.TYPE_NAME: ALERT_TYPE_TIMER,
    Reminder.TYPE_NAME: ALERT_TYPE_REMINDER,
}

_ALERT_CLASSES: dict[int, type[Alert]] = {
    ALERT_TYPE_ALARM: Alarm,
    ALERT_TYPE_TIMER: Timer,
    ALERT_TYPE_REMINDER: Reminder,
}

# Codes are part of the file format; READY was added after COMPLETED.
_STATE_CODES: dict[AlertState, int] = {
    AlertState.UNSET: 1,
    AlertState.SET: 2,
    AlertState.ACTIVATING: 3,
    AlertState.ACTIVE: 4,
    AlertState.SNOOZING: 5,
    AlertState.SNOOZED: 6,
    AlertState.STOPPING: 7,
    AlertState.STOPPED: 8,
    AlertState.COMPLETED: 9,
    AlertState.READY: 10,
}

_CODE_STATES: dict[int, AlertState] = {code: state for state, code in _STATE_CODES.items()}


def _is_code(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def type_to_code(type_name: str) -> int:
    """Return the stored code for an alert type name such as ``"ALARM"``."""
    try:
        return _TYPE_CODES[type_name]
    except (KeyError, TypeError):
        raise InvalidAlertTypeError(f"Unknown alert type {type_name!r}") from None


def code_to_type_name(code: int) -> str:
    return alert_class_for_code(code).TYPE_NAME


def alert_class_for_code(code: int) -> type[Alert]:
    """Return the concrete alert class for a stored type code."""
    if not _is_code(code) or code not in _ALERT_CLASSES:
        raise InvalidAlertTypeError(f"Unknown alert type code {code!r}")
    return _ALERT_CLASSES[code]


def state_to_code(state: AlertState) -> int:
    """Return the stored code for an alert state."""
    if not isinstance(state, AlertState):
        raise InvalidAlertStateError(f"Unknown alert state {state!r}")
    return _STATE_CODES[state]


def code_to_state(code: int) -> AlertState:
    """Return the alert state for a stored state code."""
    if not _is_code(code) or code not in _CODE_STATES:
        raise InvalidAlertStateError(f"Unknown alert state code {code!r}")
    return _CODE_STATES[code]
