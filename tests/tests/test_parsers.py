#!/usr/bin/env python3
"""Xiaomi GW3 - Test the binary-event (MiBeacon) payload parsers.

The hardwired table returns raw values; those emitted (as states) have the catalogue's
value map applied, e.g. contact: '01' -> 0 -> True (closed).
"""

from types import SimpleNamespace
from typing import Any

import pytest

from xgw3_rf.dispatcher import _decode_ble_fallback
from xgw3_tx import BleMessage, parse_payload

from .helpers import BLE_ANY_DID

# (eid, edata, pdid), [(state_name, value), ...]
TEST_BLE_EVENTS: list[tuple[tuple[int, str, int], list[tuple[str, Any]]]] = [
    ((0x1003, "ff", 0), [("link_quality", 255)]),
    ((0x1004, "2701", 0), [("temperature", 29.5)]),
    ((0x1005, "0150", 0), [("power", True), ("temperature", 80)]),
    ((0x1006, "7601", 0), [("humidity", 37.4)]),
    ((0x1007, "a08601", 0), [("illuminance", 100000)]),
    ((0x1007, "a08601", 2038), [("light", True)]),
    ((0x1008, "63", 0), [("moisture", 99)]),
    ((0x1009, "fd08", 0), [("conductivity", 2301)]),
    ((0x100A, "64", 1371), [("battery", 100)]),
    ((0x100D, "27017601", 0), [("temperature", 29.5), ("humidity", 37.4)]),
    ((0x1010, "0900", 0), [("formaldehyde", 0.09)]),
    ((0x1013, "63", 0), [("remaining", 99)]),
    ((0x1014, "01", 0), [("water_leak", True)]),
    ((0x1015, "01", 0), [("smoke", True)]),
    ((0x1016, "01", 0), [("gas", True)]),
    ((0x1017, "00010000", 0), [("idle_time", 256)]),
    ((0x1018, "01", 0), [("light", True)]),
    ((0x1019, "01", 0), [("contact", True)]),
    ((0x1019, "00", 0), [("contact", False)]),
    ((0x0F, "a08601", 0), [("occupancy", True), ("light", True)]),
    ((0x0F, "a08601", 2691), [("occupancy", True), ("illuminance", 100000)]),
]


def _fallback(eid: int, edata: str, pdid: int, debug_output: bool = False) -> list:
    gwy = SimpleNamespace(config=SimpleNamespace(debug_output=debug_output))
    msg = BleMessage(
        "log/ble", {"did": BLE_ANY_DID, "eid": eid, "edata": edata, "pdid": pdid}
    )
    decoded = _decode_ble_fallback(gwy, msg)  # type: ignore[arg-type]
    return [(s.name, v) for s, v in decoded]


@pytest.mark.parametrize(
    "event,expected", TEST_BLE_EVENTS, ids=[f"0x{e[0][0]:04X}" for e in TEST_BLE_EVENTS]
)
def test_ble_fallback(
    event: tuple[int, str, int], expected: list[tuple[str, Any]]
) -> None:
    assert _fallback(*event) == expected


def test_ble_fallback_debug_output() -> None:
    result = _fallback(0x1004, "2701", 0, debug_output=True)

    assert result[0] == ("temperature", 29.5)
    assert result[1] == ("debug_output", '{"model": 0, "bluetooth": [4100]}')


def test_parse_payload_raw() -> None:
    """Check the values before any value map (e.g. the contact is inverted)."""

    assert parse_payload(0x1004, "2701", 0) == {"temperature": 29.5}
    assert parse_payload(0x1019, "00", 0) == {"contact": 1}
    assert parse_payload(0x1019, "01", 0) == {"contact": 0}
    assert parse_payload(0x1014, "01", 0) == {"water_leak": 1}


@pytest.mark.parametrize(
    "eid,edata",
    [
        (0x1004, "27"),  # too short
        (0x1004, "270100"),  # too long
        (0x1006, "76"),
        (0x100D, "2701"),
        (0x1019, "0000"),
        (0x0F, "00000000000000"),  # 7 bytes
    ],
)
def test_parse_payload_length(eid: int, edata: str) -> None:
    assert parse_payload(eid, edata, 0) == {}


@pytest.mark.parametrize(
    "eid,edata",
    [
        (0x1001, "010203"),
        (0x1002, "01"),
        (0x100E, "01"),
        (0x1012, "01"),
        (0x10, "0102"),
    ],
)
def test_parse_payload_stateless(eid: int, edata: str) -> None:
    assert parse_payload(eid, edata, 0) == {}


def test_parse_payload_unknown() -> None:
    assert parse_payload(0xFFFF, "01", 0) == {}
