"""Tests for the stored-code translation helpers."""

from __future__ import annotations

import pytest

from alert_storage import Alarm, AlertState, Reminder, Timer
from alert_storage.codec import (
    alert_class_for_code,
    code_to_state,
    code_to_type_name,
    state_to_code,
    type_to_code,
)
from alert_storage.errors import InvalidAlertStateError, InvalidAlertTypeError

STATE_CODES = {
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


def test_type_names_map_to_file_format_codes():
    assert type_to_code("ALARM") == 1
    assert type_to_code("TIMER") == 2
    assert type_to_code("REMINDER") == 3


@pytest.mark.parametrize("name", ["alarm", "", "NAP", None])
def test_unknown_type_names_are_rejected(name):
    with pytest.raises(InvalidAlertTypeError):
        type_to_code(name)


def test_type_codes_dispatch_to_concrete_classes():
    assert alert_class_for_code(1) is Alarm
    assert alert_class_for_code(2) is Timer
    assert alert_class_for_code(3) is Reminder
    assert code_to_type_name(3) == "REMINDER"


@pytest.mark.parametrize("code", [0, 4, -1, True])
def test_unknown_type_codes_are_rejected(code):
    with pytest.raises(InvalidAlertTypeError):
        alert_class_for_code(code)


def test_every_state_has_its_documented_code():
    for state, code in STATE_CODES.items():
        assert state_to_code(state) == code
        assert code_to_state(code) is state
    assert set(STATE_CODES) == set(AlertState)


@pytest.mark.parametrize("code", [0, 11, -3, True, "2"])
def test_unknown_state_codes_are_rejected(code):
    with pytest.raises(InvalidAlertStateError):
        code_to_state(code)


@pytest.mark.parametrize("state", ["SET", 2, None])
def test_values_that_are_not_states_are_rejected(state):
    with pytest.raises(InvalidAlertStateError):
        state_to_code(state)
