#!/usr/bin/env python3
"""Xiaomi GW3 - Test the state descriptors, and their setters."""

import json
from types import SimpleNamespace
from typing import Any

import pytest

from xgw3_rf.state import CATALOGUE, StateDescriptor, get_template
from xgw3_rf.state import catalogue as st
from xgw3_tx import converters as cv

from .helpers import assert_raises

CONFIG = SimpleNamespace(default_occupancy_timeout=60, no_motion_limit=1800)

VALUE_MAPPED = [s for s in CATALOGUE.values() if s.value_map is not None]


class RecordingTimers:
    """A stand-in for the TimerRegistry, that records (rather than schedules)."""

    def __init__(self) -> None:
        self.calls: dict[tuple[str, str], tuple[str, float, Any]] = {}

    def call_later(self, key: tuple[str, str], delay: float, fnc: Any) -> None:
        self.calls[key] = ("later", delay, fnc)

    def call_every(self, key: tuple[str, str], interval: float, fnc: Any) -> None:
        self.calls[key] = ("every", interval, fnc)


def test_decode_bound() -> None:
    """Check scenario: a switch resource of 'on' decodes as True."""

    switch = st.SWITCH.bind("4.1.85", [cv.switch("lumi.plug")])

    assert switch.decode([("4.1.85", "on")]) == {"switch": True}
    assert switch.decode([("4.1.85", "off")]) == {"switch": False}
    assert switch.decode([("0.12.85", 12), ("4.1.85", "on")]) == {"switch": True}
    assert switch.decode([("4.1.85", "on"), ("4.1.85", "off")]) == {"switch": False}

    assert switch.decode([("4.2.85", "on")]) == {}  # unknown resource, not an error
    assert switch.decode([("4.1.85", "toggle")]) == {}  # not in the value map
    assert switch.decode([]) == {}


def test_decode_unbound() -> None:
    available = st.AVAILABLE.bind(None, [cv.available("lumi.plug")])

    assert available.decode([("4.1.85", "on"), ("8.0.2007", 99)]) == {"available": True}
    assert available.decode([]) == {"available": True}


def test_decode_synthetic() -> None:
    timeout = st.OCCUPANCY_TIMEOUT.bind(None, [])

    assert timeout.is_synthetic
    assert timeout.decode([("3.1.85", 1)]) == {}
    assert timeout.normalize_left(5) is None


def test_decode_ble() -> None:
    temperature = st.TEMPERATURE.bind(0x1004, [cv.ble_temperature(1371)])

    assert temperature.decode([(0x1004, "2701")]) == {"temperature": 29.5}
    assert temperature.decode([(0x1004, "27")]) == {}  # wrong length
    assert temperature.decode([(0x1006, "7601")]) == {}


def test_state_class() -> None:
    alarm = st.ALARM.derive(value_map=((0, 1), (True, False))).bind(
        "13.1.85", [cv.default("lumi.sensor_smoke")]
    )

    assert alarm.normalize_left(0) is True
    assert alarm.normalize_right(False) == 1


def test_value_map_types() -> None:
    """A value map matches on type, so True is not 1 (but 1.0 is)."""

    assert st.SWITCH.map_left(1) is True
    assert st.SWITCH.map_left(1.0) is True
    assert st.SWITCH.map_left(True) is None
    assert st.SWITCH.map_left(2) is None

    assert st.SWITCH.normalize_right(True) == 1
    assert st.SWITCH.normalize_right(1) is None

    assert st.TEMPERATURE.map_left(21.5) == 21.5  # no value map
    assert st.TEMPERATURE.normalize_right(21.5) == 21.5


@pytest.mark.parametrize("state", VALUE_MAPPED, ids=[s.name for s in VALUE_MAPPED])
def test_value_map_round_trip(state: StateDescriptor) -> None:
    outer, canonical = state.value_map  # type: ignore[misc]

    for val in canonical:
        assert state.map_left(state.normalize_right(val)) == val
    for val in outer:
        assert state.normalize_right(state.map_left(val)) == val


def test_state_object() -> None:
    """Check the metadata defaults, as derived from the role."""

    obj = st.SWITCH.state_object
    assert (obj["type"], obj["read"], obj["write"]) == ("boolean", True, True)

    obj = st.BATTERY.state_object
    assert (obj["type"], obj["read"], obj["write"]) == ("number", True, False)
    assert (obj["unit"], obj["min"], obj["max"]) == ("%", 0, 100)

    obj = st.LINK_QUALITY.state_object  # an explicit override
    assert (obj["type"], obj["read"], obj["write"]) == ("number", True, False)

    obj = st.CONTACT.state_object
    assert (obj["type"], obj["read"], obj["write"]) == ("boolean", True, False)

    obj = st.SINGLE_PRESS.state_object
    assert (obj["type"], obj["read"], obj["write"]) == ("boolean", False, True)

    obj = st.COLOR_TEMPERATURE.state_object
    assert (obj["type"], obj["read"], obj["write"]) == ("number", True, True)

    obj = StateDescriptor("_rubbish_").state_object
    assert obj["role"] == "state"
    assert (obj["type"], obj["read"], obj["write"]) == ("string", True, True)

    assert st.SWITCH.writable
    assert not st.RUN_STATE.writable
    assert not st.NO_MOTION.writable


def test_descriptor_invalid() -> None:
    assert_raises(ValueError, StateDescriptor, "x", {"_rubbish_": 1})
    with pytest.raises(ValueError):
        StateDescriptor("x", None, value_map=((0, 1), (True,)))


def test_derive() -> None:
    assert st.WATER_LEAK.name == "water_leak"
    assert st.WATER_LEAK.meta == {"name": "Water leak detected", "role": "sensor.alarm"}
    assert st.WATER_LEAK.value_map == st.ALARM.value_map

    assert st.LONG_PRESS.value_map == ((16, 17), (True, False))
    assert st.LONG_PRESS.depends_on == ("long_timeout",)

    state = st.SWITCH.derive("relay", value_map=None, depends_on=["x"])
    assert state.value_map is None
    assert state.depends_on == ("x",)
    assert st.SWITCH.depends_on == ()  # the template is unchanged


def test_encode() -> None:
    switch = st.SWITCH.bind("4.1.85", [cv.switch("lumi.plug")])
    assert switch.encode(True) == {"params": [{"res_name": "4.1.85", "value": 1}]}

    switch = st.SWITCH.bind("2.1", [cv.switch("lumi.switch.l0agl1")])
    assert switch.encode(False) == {"mi_spec": [{"siid": 2, "piid": 1, "value": 0}]}

    assert st.BATTERY.bind(0x100A, []).encode(50) is None  # an eid
    assert st.OCCUPANCY_TIMEOUT.bind(None, []).encode(90) is None
    assert st.SWITCH.bind("_rubbish_", []).encode(True) is None


def test_catalogue() -> None:
    assert get_template("water_leak") is st.WATER_LEAK
    assert get_template("channel_2") is st.CHANNEL_2
    assert_raises(KeyError, get_template, "_rubbish_")

    for name, state in CATALOGUE.items():
        assert name == state.name
        assert state.resource is None


########################################################################################
# the setters


def test_default_setter() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()

    for context in ({"switch": (False, True)}, {"switch": (True, None)}, {}):
        st.SWITCH.set("did", emitted.append, context, timers, CONFIG)

    assert emitted == [True]
    assert timers.calls == {}


def test_occupancy_setter() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()
    context = {"occupancy": (None, True), "occupancy_timeout": (5, None)}

    st.OCCUPANCY.set("did", emitted.append, context, timers, CONFIG)

    assert emitted == [True]
    kind, delay, fnc = timers.calls[("did", "occupancy")]
    assert (kind, delay) == ("later", 5)

    fnc()
    assert emitted == [True, False]


def test_occupancy_setter_default() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()

    context = {"occupancy": (True, True)}
    st.OCCUPANCY.set("did", emitted.append, context, timers, CONFIG)
    assert timers.calls[("did", "occupancy")][1] == 60

    emitted.clear()
    timers.calls.clear()

    context = {"occupancy": (True, False)}
    st.OCCUPANCY.set("did", emitted.append, context, timers, CONFIG)
    assert emitted == [False]
    assert timers.calls == {}


def test_no_motion_setter() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()
    config = SimpleNamespace(default_occupancy_timeout=60, no_motion_limit=12)
    context = {"occupancy": (None, True), "occupancy_timeout": (5, None)}

    st.NO_MOTION.set("did", emitted.append, context, timers, config)

    assert emitted == [0]
    kind, interval, tick = timers.calls[("did", "no_motion")]
    assert (kind, interval) == ("every", 5)

    assert tick() is True
    assert tick() is True
    assert tick() is False  # 15 > 12, so it is the last
    assert emitted == [0, 5, 10, 15]


def test_no_motion_setter_no_occupancy() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()

    for context in ({"occupancy": (True, False)}, {}):
        st.NO_MOTION.set("did", emitted.append, context, timers, CONFIG)

    assert emitted == []
    assert timers.calls == {}


def test_debug_output_setter() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()

    old = json.dumps({"model": "lumi.plug", "lumi": ["4.2.85", "8.0.2007"], "x": 1})
    new = json.dumps({"model": "lumi.plug2", "lumi": ["4.10.85", "4.1.85", "8.0.2007"]})

    context = {"debug_output": (old, new)}
    st.DEBUG_OUTPUT.set("did", emitted.append, context, timers, CONFIG)

    assert json.loads(emitted[0]) == {
        "model": "lumi.plug2",  # the newer scalar
        "lumi": ["4.1.85", "4.2.85", "4.10.85", "8.0.2007"],  # unioned, natural order
        "x": 1,
    }


@pytest.mark.parametrize("old", [None, "_rubbish_", '["not", "an", "object"]'])
def test_debug_output_setter_no_old(old: Any) -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()
    new = json.dumps({"model": 2701, "bluetooth": [4119, 15]})

    context = {"debug_output": (old, new)}
    st.DEBUG_OUTPUT.set("did", emitted.append, context, timers, CONFIG)

    assert json.loads(emitted[0]) == {"model": 2701, "bluetooth": [15, 4119]}


def test_debug_output_setter_no_new() -> None:
    emitted: list[Any] = []
    timers = RecordingTimers()
    old = json.dumps({"model": 2701, "bluetooth": [15]})

    context = {"debug_output": (old, None)}
    st.DEBUG_OUTPUT.set("did", emitted.append, context, timers, CONFIG)

    assert emitted == []
