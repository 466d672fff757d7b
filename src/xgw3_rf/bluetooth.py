#!/usr/bin/env python3
"""Xiaomi GW3 - the device specification registry for the binary-event protocol.

Devices are keyed by product id (pdid). Most known products have no spec of their own,
so all their events are decoded via the hardwired table, see: xgw3_tx.parsers.

NOTE: unlike the zigbee registry, an unknown pdid resolves to an empty dict.

See: https://iot.mi.com/new/doc/embedded-development/ble/object-definition
"""

from __future__ import annotations

import logging
from typing import Any, Final

from xgw3_tx import converters as cv
from xgw3_tx.const import PDID_LYWSD03MMC, PDID_RTCGQ02LM, Eid

from .state import catalogue as st
from .zigbee import DeviceFamily, describe

_LOGGER = logging.getLogger(__name__)


# fmt: off
DEVICES: Final[tuple[DeviceFamily, ...]] = (
    DeviceFamily(  # MiBeacon, from official support: all events use the fallback
        {
            "152": ("Xiaomi", "Flower Care", "HHCCJCY01"),
            "349": ("Xiaomi", "Flower Pot", "HHCCPOT002"),
            "426": ("Xiaomi", "TH Sensor", "LYWSDCGQ/01ZM"),
            "794": ("Xiaomi", "Door Lock", "MJZNMS02LM"),
            "839": ("Xiaomi", "Qingping TH Sensor", "CGG1"),
            "903": ("Xiaomi", "ZenMeasure TH", "MHO-C401"),
            "982": ("Xiaomi", "Qingping Door Sensor", "CGH1"),
            "1034": ("Xiaomi", "Mosquito Repellent", "WX08ZM"),
            "1115": ("Xiaomi", "TH Clock", "LYWSD02MMC"),
            "1161": ("Xiaomi", "Toothbrush T500", "MES601"),
            "1249": ("Xiaomi", "Magic Cube", "XMMF01JQD"),
            "1398": ("Xiaomi", "Alarm Clock", "CGD1"),
            "1433": ("Xiaomi", "Door Lock", "MJZNMS03LM"),
            "1647": ("Xiaomi", "Qingping TH Lite", "CGDK2"),
            "1694": ("Aqara", "Door Lock N100", "ZNMS16LM"),
            "1695": ("Aqara", "Door Lock N200", "ZNMS17LM"),
            "1747": ("Xiaomi", "ZenMeasure Clock", "MHO-C303"),
            "1983": ("Yeelight", "Button S1", "YLAI003"),
            "2038": ("Xiaomi", "Night Light 2", "MJYD02YL-A"),
            "2147": ("Xiaomi", "Water Leak Sensor", "SJWS01LM"),
            "2443": ("Xiaomi", "Door Sensor 2", "MCCGQ02HL"),
            "2444": ("Xiaomi", "Door Lock", "XMZNMST02YD"),
            "2455": ("Honeywell", "Smoke Alarm", "JTYJGD03MI"),
            "2480": ("Xiaomi", "Safe Box", "BGX-5/X1-3001"),
            "2691": ("Xiaomi", "Qingping Motion Sensor", "CGPR1"),
            "2888": ("Xiaomi", "Qingping TH Sensor", "CGG1"),  # same model as 839?
        },
        (),
    ),
    DeviceFamily(
        {str(PDID_LYWSD03MMC): ("Xiaomi", "TH Sensor 2", "LYWSD03MMC")},
        (
            (Eid.BATTERY_100A, None, st.BATTERY, (cv.ble_battery,)),
            (Eid.TEMPERATURE_1004, None, st.TEMPERATURE, (cv.ble_temperature,)),
            (Eid.HUMIDITY_1006, None, st.HUMIDITY, (cv.ble_humidity,)),
        ),
    ),
    DeviceFamily(
        {str(PDID_RTCGQ02LM): ("Xiaomi", "Motion Sensor 2", "RTCGQ02LM")},
        (
            (Eid.BATTERY_100A, None, st.BATTERY, (cv.ble_battery,)),
            (Eid.IDLE_TIME_1017, None, st.IDLE_TIME, (cv.ble_idle_time,)),
            (Eid.LIGHT_1018, None, st.LIGHT, (cv.ble_light,)),
            (Eid.MOTION_0F, None, st.OCCUPANCY, (cv.ble_occupancy,)),
            (Eid.MOTION_0F, None, st.LIGHT, (cv.ble_motion_light,)),
            (None, None, st.NO_MOTION, ()),
            (None, None, st.OCCUPANCY_TIMEOUT, ()),
            (None, None, st.DEBUG_OUTPUT, (cv.ble_debug_output,)),
        ),
    ),
)
# fmt: on


def get_device(pdid: int | str) -> dict[str, Any]:
    """Return a resolved device description for a product id, or an empty dict.

    A product with no spec of its own has a spec of None.
    """

    for family in DEVICES:
        if (desc := family.models.get(str(pdid))) is not None:
            return describe(int(pdid), desc, family.spec or None)

    _LOGGER.warning(f"Unsupported bluetooth pdid: {pdid}")
    return {}
