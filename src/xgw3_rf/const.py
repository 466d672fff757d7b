#!/usr/bin/env python3
"""Xiaomi GW3 - constants for the device (upper) layer."""

from __future__ import annotations

from typing import Final

from xgw3_tx.const import (  # noqa: F401
    GATEWAY_DID_ALIAS as GATEWAY_DID_ALIAS,
    GATEWAY_MODEL as GATEWAY_MODEL,
    MIN_SUPPORTED_VERSION as MIN_SUPPORTED_VERSION,
    RE_LUMI_RESOURCE as RE_LUMI_RESOURCE,
    RE_MIOT_RESOURCE as RE_MIOT_RESOURCE,
    RE_ZIGBEE_MODEL_TAIL as RE_ZIGBEE_MODEL_TAIL,
    SZ_ALARM as SZ_ALARM,
    SZ_AVAILABLE as SZ_AVAILABLE,
    SZ_BATTERY as SZ_BATTERY,
    SZ_BRIGHTNESS as SZ_BRIGHTNESS,
    SZ_COLOR_TEMPERATURE as SZ_COLOR_TEMPERATURE,
    SZ_CONDUCTIVITY as SZ_CONDUCTIVITY,
    SZ_CONTACT as SZ_CONTACT,
    SZ_CURTAIN_LEVEL as SZ_CURTAIN_LEVEL,
    SZ_DEBUG_OUTPUT as SZ_DEBUG_OUTPUT,
    SZ_DID as SZ_DID,
    SZ_FORMALDEHYDE as SZ_FORMALDEHYDE,
    SZ_GAS as SZ_GAS,
    SZ_HUMIDITY as SZ_HUMIDITY,
    SZ_IDLE_TIME as SZ_IDLE_TIME,
    SZ_ILLUMINANCE as SZ_ILLUMINANCE,
    SZ_LIGHT as SZ_LIGHT,
    SZ_LINK_QUALITY as SZ_LINK_QUALITY,
    SZ_LOAD_POWER as SZ_LOAD_POWER,
    SZ_LOAD_VOLTAGE as SZ_LOAD_VOLTAGE,
    SZ_LOCK_STATE as SZ_LOCK_STATE,
    SZ_MESSAGES_STAT as SZ_MESSAGES_STAT,
    SZ_MOISTURE as SZ_MOISTURE,
    SZ_MOTOR_ACTION as SZ_MOTOR_ACTION,
    SZ_NO_MOTION as SZ_NO_MOTION,
    SZ_OCCUPANCY as SZ_OCCUPANCY,
    SZ_OCCUPANCY_TIMEOUT as SZ_OCCUPANCY_TIMEOUT,
    SZ_POWER as SZ_POWER,
    SZ_PRESSURE as SZ_PRESSURE,
    SZ_REMAINING as SZ_REMAINING,
    SZ_RUN_STATE as SZ_RUN_STATE,
    SZ_SMOKE as SZ_SMOKE,
    SZ_SWITCH as SZ_SWITCH,
    SZ_TEMPERATURE as SZ_TEMPERATURE,
    SZ_VOLTAGE as SZ_VOLTAGE,
    SZ_WATER_LEAK as SZ_WATER_LEAK,
    Cmd as Cmd,
    DevType as DevType,
)

__dev_mode__ = False  # NOTE: this is const.py
DEV_MODE = __dev_mode__


# derived state names (i.e. variants of the catalogue templates)
SZ_CHANNEL_1: Final = "channel_1"
SZ_CHANNEL_2: Final = "channel_2"
SZ_CHANNEL_3: Final = "channel_3"
SZ_LONG_PRESS: Final = "long_press"
SZ_LONG_TIMEOUT: Final = "long_timeout"
SZ_SINGLE_PRESS: Final = "single_press"
SZ_DOUBLE_PRESS: Final = "double_press"
SZ_TRIPLE_PRESS: Final = "triple_press"
SZ_QUADRUPLE_PRESS: Final = "quadruple_press"
SZ_MULTIPLE_PRESS: Final = "multiple_press"

# keys of a state's display metadata...
SZ_MAX: Final = "max"
SZ_MIN: Final = "min"
SZ_NAME: Final = "name"
SZ_READ: Final = "read"
SZ_ROLE: Final = "role"
SZ_STATES: Final = "states"
SZ_TYPE: Final = "type"
SZ_UNIT: Final = "unit"
SZ_WRITE: Final = "write"

META_KEYS: Final = (
    SZ_NAME,
    SZ_ROLE,
    SZ_TYPE,
    SZ_READ,
    SZ_WRITE,
    SZ_UNIT,
    SZ_MIN,
    SZ_MAX,
    SZ_STATES,
)

ROLE_STATE: Final = "state"

TYPE_BOOLEAN: Final = "boolean"
TYPE_NUMBER: Final = "number"
TYPE_STRING: Final = "string"

# keys of a device's (resolved) description...
SZ_MANUFACTURER: Final = "manufacturer"
SZ_MODEL: Final = "model"
SZ_SPEC: Final = "spec"

# keys of a device enumeration record...
SZ_FW_VERSION: Final = "fw_version"
SZ_INIT: Final = "init"
SZ_MAC: Final = "mac"
SZ_PDID: Final = "pdid"
SZ_RESET_CNT: Final = "reset_cnt"

# defaults for the timed (derived) states...
DEFAULT_OCCUPANCY_TIMEOUT: Final = 60  # seconds
DEFAULT_NO_MOTION_LIMIT: Final = 1800  # seconds

# keys of the collaborators' dumps (coordinator.info, device.info, the props dump)...
SZ_DEV_INFO: Final = "devInfo"
SZ_NWK: Final = "nwk"
SZ_PROPS: Final = "props"
SZ_SHORT_ID: Final = "shortId"
SZ_APP_VER: Final = "appVer"

BLE_AUTHED_TABLE: Final = "gateway_authed_table"
