#!/usr/bin/env python3
"""Xiaomi GW3 - Device enumeration, from the collaborators' dumps.

The gateway keeps its devices in a number of places:
 - coordinator.info: the gateway itself (a JSON object, with its mac)
 - device.info: the zigbee devices (a JSON object, with a devInfo list)
 - the zigbee props dump: concatenated JSON objects, with "<did>.prop" keys whose
   values are JSON strings, each with a props dict (the retained values)
 - the bluetooth database: an SQLite image, with the pairing (authed) table

Each is converted to a list of enumeration records: {did, mac, type, model, ...}.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from typing import Any, Final

from xgw3_tx.helpers import reverse_mac, split_json_objects

from .const import (
    BLE_AUTHED_TABLE,
    GATEWAY_MODEL,
    SZ_APP_VER,
    SZ_DEV_INFO,
    SZ_DID,
    SZ_FW_VERSION,
    SZ_MAC,
    SZ_MODEL,
    SZ_NWK,
    SZ_PROPS,
    SZ_RESET_CNT,
    SZ_SHORT_ID,
    SZ_TYPE,
    DevType,
)

_LOGGER = logging.getLogger(__name__)


RE_TABLE_NAME: Final = re.compile(r"^\w+$")

# the positions of the columns of the pairing table...
_COL_MAC: Final = 1
_COL_PDID: Final = 2
_COL_DID: Final = 4


def read_table(image: bytes, table: str) -> list[tuple[Any, ...]]:
    """Return all the rows of a table, from an SQLite database image (as bytes)."""

    if not RE_TABLE_NAME.match(table):
        raise ValueError(f"Invalid table name: {table}")

    cx = sqlite3.connect(":memory:")
    try:
        cx.deserialize(image)
        return cx.execute(f"SELECT * FROM {table}").fetchall()
    finally:
        cx.close()


def ble_records(rows: list[tuple[Any, ...]]) -> list[dict[str, Any]]:
    """Return the enumeration records of the bluetooth devices, from the pairing rows.

    The mac is stored byte-reversed.
    """

    result = []
    for row in rows:
        try:
            mac, pdid, did = row[_COL_MAC], row[_COL_PDID], row[_COL_DID]
        except IndexError:
            _LOGGER.warning(f"Ignoring a malformed pairing row: {row}")
            continue

        result.append(
            {
                SZ_DID: str(did),
                SZ_MAC: f"0x{reverse_mac(str(mac))}",
                SZ_TYPE: DevType.BLE,
                SZ_MODEL: int(pdid),
            }
        )
    return result


def ble_records_from_image(image: bytes) -> list[dict[str, Any]]:
    return ble_records(read_table(image, BLE_AUTHED_TABLE))


def _retained_props(dump: str) -> dict[str, dict[str, Any]]:
    """Return the retained props of each device, {did: {prop: value}}."""

    merged: dict[str, Any] = {}
    for obj in split_json_objects(dump):
        merged |= obj

    result = {}
    for key, val in merged.items():
        if not key.endswith(".prop"):
            continue
        try:
            result[key[:-5]] = json.loads(val)[SZ_PROPS]
        except (json.JSONDecodeError, KeyError, TypeError) as err:
            _LOGGER.warning(f"Ignoring the invalid props of {key}: {err!r}")
    return result


def zigbee_records(device_info: str, props_dump: str) -> list[dict[str, Any]]:
    """Return the enumeration records of the zigbee devices.

    A device that is not in the props dump is skipped (with an error).
    """

    retained = _retained_props(props_dump)

    result = []
    for dev in json.loads(device_info)[SZ_DEV_INFO]:
        did = dev[SZ_DID]

        if (props := retained.get(did)) is None:
            _LOGGER.error(f"{did} is not in the gateway's database (it is ignored)")
            continue

        result.append(
            {
                SZ_DID: did,
                SZ_MAC: dev[SZ_MAC],
                SZ_NWK: dev.get(SZ_SHORT_ID),
                SZ_TYPE: DevType.LUMI,
                SZ_MODEL: dev[SZ_MODEL],
                SZ_FW_VERSION: str(dev.get(SZ_APP_VER, "")),
                SZ_PROPS: props,
                SZ_RESET_CNT: props.get(SZ_RESET_CNT),
            }
        )
    return result


def gateway_record(coordinator_info: str, did: str, fw_version: str) -> dict[str, Any]:
    """Return the enumeration record of the gateway itself."""

    return {
        SZ_DID: did,
        SZ_MAC: json.loads(coordinator_info)[SZ_MAC],
        SZ_TYPE: DevType.GATEWAY,
        SZ_MODEL: GATEWAY_MODEL,
        SZ_FW_VERSION: fw_version,
    }
