#!/usr/bin/env python3
"""Xiaomi GW3 - binary-event (MiBeacon) payload processors.

This is the hardwired table, used for devices that have no (authoritative) spec for
an event id. Each parser is gated by the exact payload length it expects, and returns
a plain dict of raw, converted values (i.e. before any value map is applied), e.g.
    {eid: 0x1019, edata: "00"} -> {"contact": 1}

A length mismatch (or an event id that carries no state) returns an empty dict.

See: https://iot.mi.com/new/doc/embedded-development/ble/object-definition
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypeAlias

from . import converters as cv
from .const import (
    PDID_CGPR1,
    PDID_NIGHT_LIGHT_2,
    SZ_BATTERY,
    SZ_CONDUCTIVITY,
    SZ_CONTACT,
    SZ_FORMALDEHYDE,
    SZ_GAS,
    SZ_HUMIDITY,
    SZ_IDLE_TIME,
    SZ_ILLUMINANCE,
    SZ_LIGHT,
    SZ_LINK_QUALITY,
    SZ_MOISTURE,
    SZ_OCCUPANCY,
    SZ_POWER,
    SZ_REMAINING,
    SZ_SMOKE,
    SZ_TEMPERATURE,
    SZ_WATER_LEAK,
)
from .helpers import hex_to_bytes

_LOGGER = logging.getLogger(__name__)

ParserT: TypeAlias = Callable[[str, int], dict[str, Any]]

MAX_MOTION_LENGTH: Final = 6  # eid 0x0F


def _length(*lengths: int) -> Callable[[ParserT], ParserT]:
    """Gate a parser by the payload lengths (in bytes) that it will accept."""

    def decorator(fnc: ParserT) -> ParserT:
        def wrapper(payload: str, pdid: int) -> dict[str, Any]:
            if len(hex_to_bytes(payload)) not in lengths:
                _LOGGER.debug(
                    f"{fnc.__name__}(): payload {payload} has an unexpected length"
                )
                return {}
            return fnc(payload, pdid)

        wrapper.__name__ = fnc.__name__
        return wrapper

    return decorator


def _result(**values: Any) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


# these carry no state (actions, locks, door events, etc.)
@_length(3)
def parser_1001(payload: str, pdid: int) -> dict[str, Any]:  # action
    return {}


@_length(1)
def parser_1002(payload: str, pdid: int) -> dict[str, Any]:  # sleep
    return {}


@_length(1)
def parser_1003(payload: str, pdid: int) -> dict[str, Any]:  # rssi
    return _result(**{SZ_LINK_QUALITY: cv.ble_link_quality(pdid)(payload)})


@_length(2)
def parser_1004(payload: str, pdid: int) -> dict[str, Any]:  # temperature
    return _result(**{SZ_TEMPERATURE: cv.ble_temperature(pdid)(payload)})


@_length(2)
def parser_1005(payload: str, pdid: int) -> dict[str, Any]:  # kettle
    return _result(
        **{
            SZ_POWER: cv.ble_power(pdid)(payload),
            SZ_TEMPERATURE: cv.ble_kettle_temperature(pdid)(payload),
        }
    )


@_length(2)
def parser_1006(payload: str, pdid: int) -> dict[str, Any]:  # humidity
    return _result(**{SZ_HUMIDITY: cv.ble_humidity(pdid)(payload)})


@_length(3)
def parser_1007(payload: str, pdid: int) -> dict[str, Any]:  # illuminance
    if pdid == PDID_NIGHT_LIGHT_2:
        return _result(**{SZ_LIGHT: cv.ble_illuminance(pdid)(payload)})
    return _result(**{SZ_ILLUMINANCE: cv.ble_illuminance(pdid)(payload)})


@_length(1)
def parser_1008(payload: str, pdid: int) -> dict[str, Any]:  # moisture
    return _result(**{SZ_MOISTURE: cv.ble_moisture(pdid)(payload)})


@_length(2)
def parser_1009(payload: str, pdid: int) -> dict[str, Any]:  # conductivity
    return _result(**{SZ_CONDUCTIVITY: cv.ble_conductivity(pdid)(payload)})


def parser_100a(payload: str, pdid: int) -> dict[str, Any]:  # battery, any length
    return _result(**{SZ_BATTERY: cv.ble_battery(pdid)(payload)})


@_length(4)
def parser_100d(payload: str, pdid: int) -> dict[str, Any]:  # temperature & humidity
    return _result(
        **{
            SZ_TEMPERATURE: cv.ble_th_temperature(pdid)(payload),
            SZ_HUMIDITY: cv.ble_th_humidity(pdid)(payload),
        }
    )


@_length(1)
def parser_100e(payload: str, pdid: int) -> dict[str, Any]:  # lock
    return {}


@_length(1)
def parser_100f(payload: str, pdid: int) -> dict[str, Any]:  # opening
    return {}


@_length(2)
def parser_1010(payload: str, pdid: int) -> dict[str, Any]:  # formaldehyde
    return _result(**{SZ_FORMALDEHYDE: cv.ble_formaldehyde(pdid)(payload)})


@_length(1)
def parser_1012(payload: str, pdid: int) -> dict[str, Any]:  # switch
    return {}


@_length(1)
def parser_1013(payload: str, pdid: int) -> dict[str, Any]:  # remaining
    return _result(**{SZ_REMAINING: cv.ble_single_byte(pdid)(payload)})


@_length(1)
def parser_1014(payload: str, pdid: int) -> dict[str, Any]:  # water leak
    return _result(**{SZ_WATER_LEAK: cv.ble_single_byte(pdid)(payload)})


@_length(1)
def parser_1015(payload: str, pdid: int) -> dict[str, Any]:  # smoke
    return _result(**{SZ_SMOKE: cv.ble_single_byte(pdid)(payload)})


@_length(1)
def parser_1016(payload: str, pdid: int) -> dict[str, Any]:  # gas
    return _result(**{SZ_GAS: cv.ble_single_byte(pdid)(payload)})


@_length(4)
def parser_1017(payload: str, pdid: int) -> dict[str, Any]:  # idle time
    return _result(**{SZ_IDLE_TIME: cv.ble_idle_time(pdid)(payload)})


@_length(1)
def parser_1018(payload: str, pdid: int) -> dict[str, Any]:  # light
    return _result(**{SZ_LIGHT: cv.ble_light(pdid)(payload)})


@_length(1)
def parser_1019(payload: str, pdid: int) -> dict[str, Any]:  # contact
    return _result(**{SZ_CONTACT: cv.ble_contact(pdid)(payload)})


@_length(5)
def parser_0006(payload: str, pdid: int) -> dict[str, Any]:  # fingerprint
    return {}


def parser_0007(payload: str, pdid: int) -> dict[str, Any]:  # door
    return {}


def parser_0008(payload: str, pdid: int) -> dict[str, Any]:  # armed
    return {}


def parser_000b(payload: str, pdid: int) -> dict[str, Any]:  # lock
    return {}


@_length(*range(MAX_MOTION_LENGTH + 1))
def parser_000f(payload: str, pdid: int) -> dict[str, Any]:  # motion (& light)
    if pdid == PDID_CGPR1:
        light = {SZ_ILLUMINANCE: cv.ble_motion_light(pdid)(payload)}
    else:
        light = {SZ_LIGHT: cv.ble_motion_light(pdid)(payload)}
    return _result(**{SZ_OCCUPANCY: cv.ble_occupancy(pdid)(payload)}, **light)


@_length(2)
def parser_0010(payload: str, pdid: int) -> dict[str, Any]:  # toothbrush
    return {}


_PAYLOAD_PARSERS: Final[dict[int, ParserT]] = {
    int(k[7:], 16): v
    for k, v in locals().items()
    if callable(v) and k.startswith("parser_") and len(k) == 11
}


def parse_payload(eid: int, edata: str, pdid: int) -> dict[str, Any]:
    """Decode a binary-event payload via the hardwired table (raw values)."""

    parser = _PAYLOAD_PARSERS.get(eid)
    if parser is None:
        _LOGGER.debug(f"No parser for eid 0x{eid:04X} (pdid {pdid}), edata {edata}")
        return {}
    return parser(edata, pdid)
