#!/usr/bin/env python3
"""Xiaomi GW3 - the catalogue of state templates.

Each template is an unbound StateDescriptor, which the device registries bind to a wire
key and a converter chain. Variants are made via derive(), e.g. water_leak from alarm.
"""

from __future__ import annotations

from typing import Final

from ..const import (
    SZ_ALARM,
    SZ_AVAILABLE,
    SZ_BATTERY,
    SZ_BRIGHTNESS,
    SZ_CHANNEL_1,
    SZ_CHANNEL_2,
    SZ_CHANNEL_3,
    SZ_COLOR_TEMPERATURE,
    SZ_CONDUCTIVITY,
    SZ_CONTACT,
    SZ_CURTAIN_LEVEL,
    SZ_DEBUG_OUTPUT,
    SZ_DOUBLE_PRESS,
    SZ_FORMALDEHYDE,
    SZ_GAS,
    SZ_HUMIDITY,
    SZ_IDLE_TIME,
    SZ_ILLUMINANCE,
    SZ_LIGHT,
    SZ_LINK_QUALITY,
    SZ_LOAD_POWER,
    SZ_LOAD_VOLTAGE,
    SZ_LOCK_STATE,
    SZ_LONG_PRESS,
    SZ_LONG_TIMEOUT,
    SZ_MESSAGES_STAT,
    SZ_MOISTURE,
    SZ_MOTOR_ACTION,
    SZ_MULTIPLE_PRESS,
    SZ_NO_MOTION,
    SZ_OCCUPANCY,
    SZ_OCCUPANCY_TIMEOUT,
    SZ_POWER,
    SZ_PRESSURE,
    SZ_QUADRUPLE_PRESS,
    SZ_REMAINING,
    SZ_RUN_STATE,
    SZ_SINGLE_PRESS,
    SZ_SMOKE,
    SZ_SWITCH,
    SZ_TEMPERATURE,
    SZ_TRIPLE_PRESS,
    SZ_VOLTAGE,
    SZ_WATER_LEAK,
)
from .base import StateDescriptor, ValueMapT
from .setters import debug_output_setter, no_motion_setter, occupancy_setter

BOOLEAN_MAP: Final[ValueMapT] = ((0, 1), (False, True))
INVERTED_MAP: Final[ValueMapT] = ((0, 1), (True, False))


ALARM = StateDescriptor(
    SZ_ALARM, {"name": "Alarm", "role": "sensor.alarm"}, value_map=BOOLEAN_MAP
)
AVAILABLE = StateDescriptor(
    SZ_AVAILABLE,
    {"name": "Available", "role": "state", "type": "boolean", "read": True, "write": False},
    value_map=BOOLEAN_MAP,
)
BATTERY = StateDescriptor(
    SZ_BATTERY,
    {"name": "Battery percent", "role": "value.battery", "unit": "%", "min": 0, "max": 100},
)
BRIGHTNESS = StateDescriptor(
    SZ_BRIGHTNESS,
    {"name": "Light brightness", "role": "value.brightness", "unit": "lux"},
)
BUTTON = StateDescriptor(
    "button", {"name": "Button", "role": "button"}, value_map=BOOLEAN_MAP
)
CHANNEL = StateDescriptor(
    "channel", {"name": "Channel", "role": "switch"}, value_map=BOOLEAN_MAP
)
COLOR_TEMPERATURE = StateDescriptor(
    SZ_COLOR_TEMPERATURE,
    {
        "name": "Color temperature",
        "role": "level.color.temperature",
        "unit": "K",
        "min": 2200,
        "max": 6500,
    },
)
CONDUCTIVITY = StateDescriptor(
    SZ_CONDUCTIVITY,
    {"name": "Soil EC", "role": "value", "unit": "us/cm", "min": 0, "max": 5000},
)
CONTACT = StateDescriptor(  # NOTE: 0 is closed (True), 1 is open (False)
    SZ_CONTACT, {"name": "Contact", "role": "sensor.door"}, value_map=INVERTED_MAP
)
CURTAIN_LEVEL = StateDescriptor(
    SZ_CURTAIN_LEVEL,
    {"name": "Curtain level", "role": "level.curtain", "unit": "%", "min": 0, "max": 100},
)
CURTAIN_MOTOR = StateDescriptor(
    SZ_MOTOR_ACTION,
    {
        "name": "Motor action",
        "role": "state",
        "type": "number",
        "states": {0: "close", 1: "open", 2: "stop"},
    },
)
FORMALDEHYDE = StateDescriptor(
    SZ_FORMALDEHYDE, {"name": "Formaldehyde", "role": "value", "unit": "mg/m3"}
)
HUMIDITY = StateDescriptor(
    SZ_HUMIDITY,
    {"name": "Humidity", "role": "value.humidity", "unit": "%", "min": 0, "max": 100},
)
IDLE_TIME = StateDescriptor(
    SZ_IDLE_TIME, {"name": "Duration", "role": "value", "unit": "seconds"}
)
ILLUMINANCE = StateDescriptor(
    SZ_ILLUMINANCE, {"name": "Illuminance", "role": "value.brightness", "unit": "lux"}
)
LIGHT = StateDescriptor(
    SZ_LIGHT, {"name": "Light", "role": "sensor.light"}, value_map=BOOLEAN_MAP
)
LINK_QUALITY = StateDescriptor(
    SZ_LINK_QUALITY,
    {"name": "Link quality", "role": "level", "write": False, "min": 0, "max": 255},
)
LOAD_POWER = StateDescriptor(
    SZ_LOAD_POWER, {"name": "Load power", "role": "value.power", "unit": "W"}
)
LOAD_VOLTAGE = StateDescriptor(
    SZ_LOAD_VOLTAGE, {"name": "Load voltage", "role": "value.voltage", "unit": "V"}
)
LOCK_STATE = StateDescriptor(
    SZ_LOCK_STATE, {"name": "Lock state", "role": "sensor.lock"}
)
MOISTURE = StateDescriptor(
    SZ_MOISTURE,
    {"name": "Humidity percentage", "role": "value", "unit": "%", "min": 0, "max": 100},
)
NO_MOTION = StateDescriptor(
    SZ_NO_MOTION,
    {
        "name": "Time from last motion",
        "role": "state",
        "type": "number",
        "read": True,
        "write": False,
        "unit": "seconds",
    },
    depends_on=(SZ_OCCUPANCY, SZ_OCCUPANCY_TIMEOUT),
    setter=no_motion_setter,
)
OCCUPANCY = StateDescriptor(
    SZ_OCCUPANCY,
    {"name": "Occupancy", "role": "sensor.motion"},
    value_map=BOOLEAN_MAP,
    depends_on=(SZ_OCCUPANCY, SZ_OCCUPANCY_TIMEOUT),
    setter=occupancy_setter,
)
OCCUPANCY_TIMEOUT = StateDescriptor(
    SZ_OCCUPANCY_TIMEOUT,
    {"name": "Occupancy timeout", "role": "state", "type": "number", "unit": "seconds"},
)
POWER = StateDescriptor(
    SZ_POWER, {"name": "Power", "role": "switch"}, value_map=BOOLEAN_MAP
)
PRESSURE = StateDescriptor(
    SZ_PRESSURE,
    {"name": "Pressure", "role": "value.pressure", "unit": "hPa", "min": 0, "max": 10000},
)
REMAINING = StateDescriptor(
    SZ_REMAINING,
    {"name": "Remaining", "role": "value", "unit": "%", "min": 0, "max": 100},
)
RUN_STATE = StateDescriptor(
    SZ_RUN_STATE,
    {"name": "Run state", "role": "state", "type": "string", "write": False},
    value_map=((0, 1, 2), ("closing", "opening", "stop")),
)
SWITCH = StateDescriptor(
    SZ_SWITCH, {"name": "Switch state", "role": "switch"}, value_map=BOOLEAN_MAP
)
TEMPERATURE = StateDescriptor(
    SZ_TEMPERATURE,
    {"name": "Temperature", "role": "value.temperature", "unit": "°C"},
)
TIMEOUT = StateDescriptor(
    "timeout",
    {"name": "Timeout", "role": "state", "type": "number", "unit": "seconds"},
)
VOLTAGE = StateDescriptor(
    SZ_VOLTAGE, {"name": "Battery voltage", "role": "value.voltage", "unit": "V"}
)

DEBUG_OUTPUT = StateDescriptor(
    SZ_DEBUG_OUTPUT,
    {
        "name": "Debug output",
        "role": "state",
        "type": "string",
        "read": True,
        "write": False,
    },
    depends_on=(SZ_DEBUG_OUTPUT,),
    setter=debug_output_setter,
)
MESSAGES_STAT = StateDescriptor(
    SZ_MESSAGES_STAT,
    {
        "name": "Messages statistic",
        "role": "state",
        "type": "string",
        "read": True,
        "write": False,
    },
)


# the variants...
WATER_LEAK = ALARM.derive(SZ_WATER_LEAK, {"name": "Water leak detected"})
SMOKE = ALARM.derive(SZ_SMOKE, {"name": "Smoke detected"})
GAS = ALARM.derive(SZ_GAS, {"name": "Gas detected"})

CHANNEL_1 = CHANNEL.derive(SZ_CHANNEL_1, {"name": "Channel 1 state"})
CHANNEL_2 = CHANNEL.derive(SZ_CHANNEL_2, {"name": "Channel 2 state"})
CHANNEL_3 = CHANNEL.derive(SZ_CHANNEL_3, {"name": "Channel 3 state"})

SINGLE_PRESS = BUTTON.derive(SZ_SINGLE_PRESS, {"name": "Button single press"})
DOUBLE_PRESS = BUTTON.derive(SZ_DOUBLE_PRESS, {"name": "Button double press"})
TRIPLE_PRESS = BUTTON.derive(SZ_TRIPLE_PRESS, {"name": "Button triple press"})
QUADRUPLE_PRESS = BUTTON.derive(SZ_QUADRUPLE_PRESS, {"name": "Button quadruple press"})
MULTIPLE_PRESS = BUTTON.derive(SZ_MULTIPLE_PRESS, {"name": "Button multiple press"})
LONG_PRESS = BUTTON.derive(  # 16 is hold, 17 is release
    SZ_LONG_PRESS,
    {"name": "Button long press"},
    value_map=((16, 17), (True, False)),
    depends_on=(SZ_LONG_TIMEOUT,),
)
LONG_TIMEOUT = TIMEOUT.derive(SZ_LONG_TIMEOUT, {"name": "Long press timeout"})


CATALOGUE: Final[dict[str, StateDescriptor]] = {
    v.name: v for v in globals().copy().values() if isinstance(v, StateDescriptor)
}


def get_template(name: str) -> StateDescriptor:
    """Return a state template by its name (e.g. 'battery', 'water_leak')."""
    return CATALOGUE[name]
