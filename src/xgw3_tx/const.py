#!/usr/bin/env python3
"""Xiaomi GW3 - constants for the wire (lower) layer."""

from __future__ import annotations

import re
from enum import IntEnum, StrEnum
from typing import Final

__dev_mode__ = False  # NOTE: this is const.py
DEV_MODE = __dev_mode__


MIN_SUPPORTED_VERSION: Final = "1.4.7_0000"  # gateway firmware

GATEWAY_MODEL: Final = "lumi.gateway.mgl03"
GATEWAY_DID_ALIAS: Final = "lumi.0"  # how the gateway refers to itself

# bus topics (the gateway's own mosquitto)...
TOPIC_LUMI_RX: Final = "zigbee/send"  # from the devices, via the gateway
TOPIC_LUMI_TX: Final = "zigbee/recv"  # to the devices, via the gateway
TOPIC_BLE_RX: Final = "log/ble"
TOPIC_MIIO_RX: Final = "log/miio"

RE_TOPIC_STAT: Final = re.compile(r"/(MessageReceived|devicestatechange)$")
RE_TOPIC_HEARTBEAT: Final = re.compile(r"/heartbeat$")
RE_JSON_OBJECT: Final = re.compile(r"^\{.+\}$", re.DOTALL)

RE_LUMI_RESOURCE: Final = re.compile(r"^\d+\.\d+\.\d+$")  # e.g. 4.1.85
RE_MIOT_RESOURCE: Final = re.compile(r"^\d+\.\d+$")  # e.g. 2.1 (siid.piid)
RE_ZIGBEE_MODEL_TAIL: Final = re.compile(r"\.v\d$")  # e.g. lumi.sensor_ht.v1


# property-bag message keys...
SZ_CMD: Final = "cmd"
SZ_DID: Final = "did"
SZ_EIID: Final = "eiid"
SZ_ERROR_CODE: Final = "error_code"
SZ_MI_SPEC: Final = "mi_spec"
SZ_PARAMS: Final = "params"
SZ_PIID: Final = "piid"
SZ_RES_LIST: Final = "res_list"
SZ_RES_NAME: Final = "res_name"
SZ_RESULTS: Final = "results"
SZ_SIID: Final = "siid"
SZ_VALUE: Final = "value"

PARAM_LIST_KEYS: Final = (SZ_RES_LIST, SZ_PARAMS, SZ_RESULTS, SZ_MI_SPEC)

# binary-event (MiBeacon) message keys...
SZ_EDATA: Final = "edata"
SZ_EID: Final = "eid"
SZ_PDID: Final = "pdid"
SZ_SEQ: Final = "seq"

# stat message keys...
SZ_APS_COUNTER: Final = "APSCounter"
SZ_APS_PAYLOAD: Final = "APSPlayload"  # sic
SZ_DEVICE_STATE: Final = "deviceState"
SZ_EUI64: Final = "eui64"
SZ_STAT_LQI: Final = "linkQuality"
SZ_RESET_CNT: Final = "reset_cnt"
SZ_STAT_RSSI: Final = "rssi"
SZ_SOURCE_ADDRESS: Final = "sourceAddress"

DEVICE_STATE_UNRESPONSIVE: Final = 17


class Cmd(StrEnum):
    """The commands of the property-bag protocol."""

    HEARTBEAT = "heartbeat"
    READ = "read"
    READ_RSP = "read_rsp"
    REPORT = "report"
    WRITE = "write"
    WRITE_ACK = "write_ack"
    WRITE_RSP = "write_rsp"


class DevType(StrEnum):
    """The types of device known to the gateway."""

    GATEWAY = "gateway"
    LUMI = "lumi"  # zigbee, via the property-bag protocol
    BLE = "ble"  # bluetooth, via the binary-event protocol


class Eid(IntEnum):
    """The event ids of the binary-event protocol (MiBeacon)."""

    DOOR_0006 = 0x0006  # fingerprint
    DOOR_0007 = 0x0007
    ARMED_0008 = 0x0008
    LOCK_000B = 0x000B
    MOTION_0F = 0x0F
    BRUSH_10 = 0x10
    ACTION_1001 = 0x1001
    SLEEP_1002 = 0x1002
    RSSI_1003 = 0x1003
    TEMPERATURE_1004 = 0x1004
    KETTLE_1005 = 0x1005
    HUMIDITY_1006 = 0x1006
    ILLUMINANCE_1007 = 0x1007
    MOISTURE_1008 = 0x1008
    CONDUCTIVITY_1009 = 0x1009
    BATTERY_100A = 0x100A
    TEMP_HUMIDITY_100D = 0x100D
    LOCK_100E = 0x100E
    OPENING_100F = 0x100F
    FORMALDEHYDE_1010 = 0x1010
    SWITCH_1012 = 0x1012
    REMAINING_1013 = 0x1013
    WATER_LEAK_1014 = 0x1014
    SMOKE_1015 = 0x1015
    GAS_1016 = 0x1016
    IDLE_TIME_1017 = 0x1017
    LIGHT_1018 = 0x1018
    CONTACT_1019 = 0x1019


# product ids (pdid) with model-specific behaviour...
PDID_MHO_C401: Final = 903
PDID_LYWSD03MMC: Final = 1371
PDID_NIGHT_LIGHT_2: Final = 2038
PDID_CGPR1: Final = 2691
PDID_RTCGQ02LM: Final = 2701

# zigbee models that report TH values already scaled...
MODELS_PRESCALED: Final = ("lumi.airmonitor.acn01", "lumi.sensor_ht.agl02")


# canonical state names...
SZ_ALARM: Final = "alarm"
SZ_AVAILABLE: Final = "available"
SZ_BATTERY: Final = "battery"
SZ_BRIGHTNESS: Final = "brightness"
SZ_COLOR_TEMPERATURE: Final = "color_temperature"
SZ_CONDUCTIVITY: Final = "conductivity"
SZ_CONTACT: Final = "contact"
SZ_CURTAIN_LEVEL: Final = "curtain_level"
SZ_DEBUG_OUTPUT: Final = "debug_output"
SZ_FORMALDEHYDE: Final = "formaldehyde"
SZ_GAS: Final = "gas"
SZ_HUMIDITY: Final = "humidity"
SZ_IDLE_TIME: Final = "idle_time"
SZ_ILLUMINANCE: Final = "illuminance"
SZ_LIGHT: Final = "light"
SZ_LINK_QUALITY: Final = "link_quality"
SZ_LOAD_POWER: Final = "load_power"
SZ_LOAD_VOLTAGE: Final = "load_voltage"
SZ_LOCK_STATE: Final = "lock_state"
SZ_MESSAGES_STAT: Final = "messages_stat"
SZ_MOISTURE: Final = "moisture"
SZ_MOTOR_ACTION: Final = "motor_action"
SZ_NO_MOTION: Final = "no_motion"
SZ_OCCUPANCY: Final = "occupancy"
SZ_OCCUPANCY_TIMEOUT: Final = "occupancy_timeout"
SZ_POWER: Final = "power"
SZ_PRESSURE: Final = "pressure"
SZ_REMAINING: Final = "remaining"
SZ_RUN_STATE: Final = "run_state"
SZ_SMOKE: Final = "smoke"
SZ_SWITCH: Final = "switch"
SZ_TEMPERATURE: Final = "temperature"
SZ_VOLTAGE: Final = "voltage"
SZ_WATER_LEAK: Final = "water_leak"
