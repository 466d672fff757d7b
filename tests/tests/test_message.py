#!/usr/bin/env python3
"""Xiaomi GW3 - Test the bus messages (validation, and their key/value pairs)."""

import json

import pytest

from xgw3_tx import BleMessage, LumiMessage, StatMessage, message_factory
from xgw3_tx import exceptions as exc

from .helpers import PLUG_DID, assert_raises, ble_msg, lumi_msg


def test_lumi_pairs() -> None:
    msg = LumiMessage.from_json(
        "zigbee/send",
        json.dumps(
            {
                "cmd": "report",
                "did": PLUG_DID,
                "params": [
                    {"res_name": "4.1.85", "value": "on"},
                    {"res_name": "0.12.85", "value": 12.5, "error_code": 0},
                    {"res_name": "8.0.2007", "error_code": -5, "value": 0},  # dropped
                    {"res_name": "8.0.2008"},  # dropped, no value
                ],
                "mi_spec": [
                    {"siid": 2, "piid": 1, "value": True},
                    {"siid": 5, "eiid": 1, "value": 1},
                    {"_rubbish_": 1, "value": 1},  # dropped, no key
                ],
            }
        ),
    )

    assert msg.cmd == "report"
    assert msg.did == PLUG_DID
    assert msg.pairs == [
        ("4.1.85", "on"),
        ("0.12.85", 12.5),
        ("2.1", True),
        ("5.1", 1),
    ]


def test_lumi_heartbeat() -> None:
    """A heartbeat's (only) param is processed as if it were a report."""

    msg = message_factory(
        "zigbee/send",
        json.dumps(
            {
                "cmd": "heartbeat",
                "params": [
                    {
                        "did": PLUG_DID,
                        "res_list": [{"res_name": "8.0.2007", "value": 99}],
                    }
                ],
            }
        ),
    )

    assert isinstance(msg, LumiMessage)
    assert msg.did == PLUG_DID
    assert msg.pairs == [("8.0.2007", 99)]

    assert_raises(
        exc.MessageInvalid,
        message_factory,
        "zigbee/send",
        '{"cmd": "heartbeat", "params": []}',
    )


def test_lumi_gateway_alias() -> None:
    msg = message_factory("zigbee/send", '{"cmd": "write_rsp", "results": []}')
    assert msg is not None and msg.did == "lumi.0"


def test_ble_message() -> None:
    msg = message_factory("log/ble", ble_msg("blt.3.abc", 0x1004, "2701", 1371, seq=7))

    assert isinstance(msg, BleMessage)
    assert (msg.did, msg.eid, msg.edata, msg.pdid, msg.seq) == (
        "blt.3.abc",
        0x1004,
        "2701",
        1371,
        7,
    )
    assert msg.pairs == [(0x1004, "2701")]
    assert str(msg) == "log/ble blt.3.abc 0x1004 2701 (1371)"


def test_ble_message_invalid() -> None:
    assert_raises(
        exc.PayloadInvalid, message_factory, "log/ble", ble_msg("blt.3.a", 4100, "xyz")
    )
    assert_raises(
        exc.MessageInvalid, message_factory, "log/ble", '{"eid": 4100, "edata": "01"}'
    )


def test_stat_message() -> None:
    msg = message_factory(
        "log/z3/MessageReceived",
        json.dumps({"eui64": "0x00158D0001000001", "sourceAddress": "0x1234"}),
    )

    assert isinstance(msg, StatMessage)
    assert msg.did == PLUG_DID
    assert msg.pairs == []


@pytest.mark.parametrize(
    "topic", ["log/miio", "gw/50EC50ABCDEF/heartbeat", "_rubbish_/topic"]
)
def test_ignored_topics(topic: str) -> None:
    assert message_factory(topic, '{"cmd": "report"}') is None


@pytest.mark.parametrize(
    "payload",
    ["", "[1, 2]", "report", '{"cmd": "report"', "{not json}", '{"did": "x"}'],
)
def test_invalid_payloads(payload: str) -> None:
    assert_raises(exc.MessageInvalid, message_factory, "zigbee/send", payload)


def test_bytes_payload() -> None:
    msg = message_factory("zigbee/send", lumi_msg(PLUG_DID).encode())
    assert isinstance(msg, LumiMessage)
    assert msg.pairs == []
