#!/usr/bin/env python3
"""Xiaomi GW3 - Test the value converters (raw wire values to engineering units)."""

import json

import pytest

from xgw3_tx import converters as cv
from xgw3_tx.converters import CONVERTERS, get_converter

from .helpers import assert_raises


@pytest.mark.parametrize(
    "raw,expected",
    [(100, 100), (55, 55), (2700, 0), (2500, 0), (3200, 100), (3300, 100), (3000, 60)],
)
def test_battery(raw: int, expected: int) -> None:
    assert cv.battery("lumi.sensor_ht")(raw) == expected


def test_battery_bad() -> None:
    convert = cv.battery("lumi.sensor_ht")

    assert convert(None) is None
    assert convert("_rubbish_") is None
    assert convert("3000") == 60


def test_enums() -> None:
    assert cv.switch("lumi.plug")("on") == 1
    assert cv.switch("lumi.plug")("off") == 0
    assert cv.switch("lumi.plug")(1) == 1  # passed through

    assert cv.contact("lumi.sensor_magnet")("close") == 0
    assert cv.contact("lumi.sensor_magnet")("open") == 1

    assert cv.run_state("lumi.curtain")("offing") == 0
    assert cv.run_state("lumi.curtain")("oning") == 1
    assert cv.run_state("lumi.curtain")("_rubbish_") == 2


def test_button_press() -> None:
    assert cv.button_2_press("lumi.sensor_switch")(2) == 1
    assert cv.button_2_press("lumi.sensor_switch")(1) == 0
    assert cv.button_multiple_press("lumi.sensor_switch")(128) == 1

    assert cv.button_1_press.__name__ == "button_1_press"


def test_scaled_values() -> None:
    assert cv.temperature("lumi.sensor_ht")(2150) == 22
    assert cv.humidity("lumi.sensor_ht")(4549) == 45
    assert cv.pressure("lumi.weather")(100450) == 1004.5

    # these models report already scaled values
    assert cv.temperature("lumi.airmonitor.acn01")(21.5) == 21.5
    assert cv.humidity("lumi.sensor_ht.agl02")(45.5) == 45.5

    assert cv.temperature("lumi.sensor_ht")(None) is None


def test_electrical() -> None:
    assert cv.voltage("lumi.sensor_ht")(3045) == 3.045
    assert cv.power("lumi.plug")(12.3456) == 12.35
    assert cv.consumption("lumi.plug")("0.004") == 0.0


def test_debug_output() -> None:
    convert = cv.debug_output("lumi.plug")

    assert convert([("4.1.85", 1), ("8.0.2007", 100)]) == json.dumps(
        {"model": "lumi.plug", "lumi": ["4.1.85", "8.0.2007"]}
    )
    assert convert("_rubbish_") is None

    convert = cv.ble_debug_output(1371)
    assert json.loads(convert([(0x1004, "2701")])) == {
        "model": 1371,
        "bluetooth": [0x1004],
    }


def test_messages_stat() -> None:
    convert = cv.messages_stat("lumi.plug")

    assert json.loads(convert({"nwk": "0x1234", "received": 1})) == {
        "nwk": "0x1234",
        "received": 1,
    }
    assert convert({"received": 1}) is None


def test_ble_converters() -> None:
    assert cv.ble_temperature(0)("2701") == 29.5
    assert cv.ble_temperature(0)("27") is None  # wrong length
    assert cv.ble_temperature(0)("zz01") is None  # not hex

    assert cv.ble_humidity(0)("7601") == 37.4
    assert cv.ble_humidity(1371)("7601") == 37  # whole percentages

    assert cv.ble_battery(1371)("64") == 100
    assert cv.ble_battery(1371)("") is None

    assert cv.ble_contact(0)("00") == 1  # NOTE: 0 is open
    assert cv.ble_contact(0)("01") == 0

    assert cv.ble_light(0)("01") == 1
    assert cv.ble_light(0)("00") == 0

    assert cv.ble_motion_light(0)("a08601") == 1
    assert cv.ble_motion_light(0)("0a") == 0
    assert cv.ble_motion_light(2691)("a08601") == 100000

    assert cv.ble_idle_time(2701)("00010000") == 256
    assert cv.ble_formaldehyde(0)("0900") == 0.09


def test_get_converter() -> None:
    assert get_converter("battery") is cv.battery
    assert get_converter("power") is cv.consumption
    assert get_converter("button_3_press") is cv.button_3_press

    assert "_none_safe" not in CONVERTERS
    assert "round_half_up" not in CONVERTERS  # not of this module

    assert_raises(KeyError, get_converter, "_rubbish_")
