#!/usr/bin/env python3
"""Xiaomi GW3 - Test the device enumeration, from the gateway's dumps."""

import json
import sqlite3

import pytest

from xgw3_rf import Gateway
from xgw3_rf.database import (
    ble_records,
    ble_records_from_image,
    gateway_record,
    read_table,
    zigbee_records,
)

from .helpers import FakeHost

COORDINATOR_INFO = json.dumps({"mac": "0x50ec50abcdef", "panId": "0x1a2b"})

DEVICE_INFO = json.dumps(
    {
        "devInfo": [
            {
                "did": "lumi.158d0001000001",
                "mac": "0x00158d0001000001",
                "shortId": "0x6b3a",
                "model": "lumi.plug",
                "appVer": 32,
            },
            {
                "did": "lumi.158d0003000003",
                "mac": "0x00158d0003000003",
                "model": "lumi.sensor_ht.v1",
            },
            {  # not in the props dump
                "did": "lumi.158d00ffffffff",
                "mac": "0x00158d00ffffffff",
                "model": "lumi.plug",
            },
        ]
    }
)

PROPS_DUMP = "".join(  # as concatenated objects, with JSON strings as values
    json.dumps(obj)
    for obj in (
        {
            "lumi.158d0001000001.prop": json.dumps(
                {"props": {"neutral_0": "on", "load_power": 12.5}}
            ),
            "lumi.158d0001000001.model": "lumi.plug",
        },
        {
            "lumi.158d0003000003.prop": json.dumps(
                {"props": {"temperature": 2150, "reset_cnt": 3}}
            ),
        },
        {"lumi.158d0004000004.prop": "_rubbish_"},
    )
)


def _image(*rows: tuple) -> bytes:
    """Return an SQLite database image, with a pairing table."""

    cx = sqlite3.connect(":memory:")
    try:
        cx.execute(
            "CREATE TABLE gateway_authed_table (_id INTEGER PRIMARY KEY,"
            " mac TEXT, product_id INTEGER, token TEXT, did TEXT)"
        )
        cx.executemany("INSERT INTO gateway_authed_table VALUES (?, ?, ?, ?, ?)", rows)
        cx.commit()
        return cx.serialize()
    finally:
        cx.close()


def test_read_table() -> None:
    image = _image((1, "aaaaaa38c1a4", 1371, "00", "blt.3.1371aaaaaaaa"))

    assert read_table(image, "gateway_authed_table") == [
        (1, "aaaaaa38c1a4", 1371, "00", "blt.3.1371aaaaaaaa")
    ]

    with pytest.raises(ValueError):
        read_table(image, "gateway_authed_table; DROP TABLE x")


def test_ble_records() -> None:
    image = _image(
        (1, "aaaaaa38c1a4", 1371, "00", "blt.3.1371aaaaaaaa"),
        (2, "bbbbbb38c1a4", "2701", "00", "blt.3.2701bbbbbbbb"),
    )

    assert ble_records_from_image(image) == [
        {
            "did": "blt.3.1371aaaaaaaa",
            "mac": "0xa4c138aaaaaa",  # the byte order is reversed
            "type": "ble",
            "model": 1371,
        },
        {
            "did": "blt.3.2701bbbbbbbb",
            "mac": "0xa4c138bbbbbb",
            "type": "ble",
            "model": 2701,
        },
    ]


def test_ble_records_malformed() -> None:
    assert ble_records([(1, "aaaaaa38c1a4")]) == []


def test_zigbee_records() -> None:
    records = zigbee_records(DEVICE_INFO, PROPS_DUMP)

    assert [r["did"] for r in records] == ["lumi.158d0001000001", "lumi.158d0003000003"]

    assert records[0] == {
        "did": "lumi.158d0001000001",
        "mac": "0x00158d0001000001",
        "nwk": "0x6b3a",
        "type": "lumi",
        "model": "lumi.plug",
        "fw_version": "32",
        "props": {"neutral_0": "on", "load_power": 12.5},
        "reset_cnt": None,
    }
    assert records[1]["reset_cnt"] == 3
    assert records[1]["fw_version"] == ""


def test_gateway_record() -> None:
    assert gateway_record(COORDINATOR_INFO, "123456789", "1.5.0_0102") == {
        "did": "123456789",
        "mac": "0x50ec50abcdef",
        "type": "gateway",
        "model": "lumi.gateway.mgl03",
        "fw_version": "1.5.0_0102",
    }


def test_enumeration() -> None:
    """The records are the enumeration of a gateway."""

    host = FakeHost()
    gwy = Gateway({}, emit=host.emit, ensure_state=host.ensure_state)

    gwy.add_devices(
        [gateway_record(COORDINATOR_INFO, "123456789", "1.5.0_0102")]
        + zigbee_records(DEVICE_INFO, PROPS_DUMP)
        + ble_records_from_image(
            _image((1, "aaaaaa38c1a4", 1371, "00", "blt.3.1371aaaaaaaa"))
        )
    )

    assert gwy.topic == "gw/50EC50ABCDEF/"
    assert len(gwy.devices) == 4
    assert host.values("lumi.158d0001000001") == {"switch": True, "load_power": 12.5}
    assert gwy.get_device("lumi.158d0003000003").stat.reset_cnt == 3
    assert gwy.get_device("blt.3.1371aaaaaaaa").model == "LYWSD03MMC"
