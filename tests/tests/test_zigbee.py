#!/usr/bin/env python3
"""Xiaomi GW3 - Test the device specification registry (property-bag protocol)."""

from typing import Any

import pytest

from xgw3_rf import exceptions as exc
from xgw3_rf.schemas import SCH_EXTERNAL_DEVICES
from xgw3_rf.zigbee import DEVICES, external_families, get_device, resolve_families

from .helpers import assert_raises

ALL_MODELS = sorted(m for f in DEVICES for m in f.models)

EXTERNAL_DEVICES: list[dict[str, Any]] = [
    {
        "lumi.sensor_custom": ["Acme", "TH Sensor", "ACME01"],
        "lumi.sensor_custom2": ["Acme", "TH Sensor 2"],
        "spec": [
            ["0.1.85", "temperature", "temperature", ["temperature"]],
            [
                "4.1.85",
                "neutral_0",
                "switch",
                {"state": "relay", "meta": {"name": "Relay"}},
                ["switch"],
            ],
            [None, None, "occupancy_timeout"],
        ],
    },
    {
        "lumi.plug": ["Acme", "Plug"],  # a built-in model
        "spec": [],
    },
]


def _names(desc: dict[str, Any]) -> list[str]:
    return [state.name for _, _, state in desc["spec"]]


def _decode(desc: dict[str, Any], *pairs: tuple[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for _, _, state in desc["spec"]:
        result |= state.decode(list(pairs))
    return result


def test_get_device() -> None:
    desc = get_device("lumi.sensor_ht")

    assert desc["manufacturer"] == "Xiaomi"
    assert desc["name"] == "Xiaomi TH Sensor"
    assert desc["model"] == "WSDCGQ01LM"  # the market model
    assert _names(desc) == [
        "available",
        "link_quality",
        "temperature",
        "humidity",
        "voltage",
        "battery",
        "debug_output",
        "messages_stat",
    ]

    res, prop, state = desc["spec"][2]
    assert (res, prop, state.resource) == ("0.1.85", "temperature", "0.1.85")


def test_get_device_model_tail() -> None:
    assert get_device("lumi.sensor_ht.v1")["model"] == "WSDCGQ01LM"
    assert get_device("lumi.plug.v3")["model"] == "ZNCZ02LM"


def test_get_device_unknown() -> None:
    """Check scenario: an unknown model is still described, but with no spec."""

    assert get_device("lumi.unknown.xyz") == {
        "name": "Zigbee",
        "model": "lumi.unknown.xyz",
        "spec": [],
    }
    assert get_device("lumi.unknown.v1")["model"] == "lumi.unknown"


@pytest.mark.parametrize("model", ALL_MODELS)
def test_unique_state_names(model: str) -> None:
    names = _names(get_device(model))
    assert len(names) == len(set(names))


def test_bound_per_device() -> None:
    """Each device has its own (logically equivalent) descriptors."""

    spec_1 = get_device("lumi.plug")["spec"]
    spec_2 = get_device("lumi.plug")["spec"]

    assert [s.name for *_, s in spec_1] == [s.name for *_, s in spec_2]
    assert all(s1 is not s2 for (*_, s1), (*_, s2) in zip(spec_1, spec_2))


def test_decode_switch() -> None:
    desc = get_device("lumi.plug")

    assert _decode(desc, ("4.1.85", "on"), ("0.12.85", 21.3)) == {
        "available": True,
        "switch": True,
        "load_power": 21.3,
        "debug_output": '{"model": "lumi.plug", "lumi": ["4.1.85", "0.12.85"]}',
    }


def test_decode_sensors() -> None:
    desc = get_device("lumi.weather")

    result = _decode(desc, ("0.1.85", 2150), ("0.2.85", 4551), ("0.3.85", 100450))
    assert (result["temperature"], result["humidity"], result["pressure"]) == (
        22,
        46,
        1004.5,
    )

    result = _decode(desc, ("8.0.2008", 3045))
    assert (result["voltage"], result["battery"]) == (3.045, 69)


def test_decode_miot() -> None:
    """These models report already-scaled values, via MIoT resources."""

    desc = get_device("lumi.airmonitor.acn01")
    assert _decode(desc, ("3.1", 21.5), ("3.2", 45.5))["temperature"] == 21.5

    desc = get_device("lumi.sensor_ht.agl02")
    result = _decode(desc, ("2.1", 21.5), ("2.2", 45), ("3.1", 99))
    assert (result["temperature"], result["humidity"], result["battery"]) == (
        21.5,
        45,
        99,
    )


def test_decode_buttons() -> None:
    desc = get_device("lumi.sensor_switch")

    result = _decode(desc, ("13.1.85", 2))
    assert result["single_press"] is False
    assert result["double_press"] is True
    assert "long_press" not in result  # 2 is not in its value map

    result = _decode(desc, ("13.1.85", 16))
    assert result["long_press"] is True
    assert "long_timeout" not in result  # synthetic


def test_decode_contact() -> None:
    desc = get_device("lumi.sensor_magnet.aq2")

    assert _decode(desc, ("3.1.85", "close"))["contact"] is True
    assert _decode(desc, ("3.1.85", "open"))["contact"] is False


def test_decode_curtain() -> None:
    desc = get_device("lumi.curtain")

    assert _decode(desc, ("14.4.85", 1))["run_state"] == "opening"
    assert _decode(desc, ("1.1.85", 55))["curtain_level"] == 55


def test_decode_unknown_resource() -> None:
    desc = get_device("lumi.sensor_ht")

    result = _decode(desc, ("99.99.99", 1))
    assert "temperature" not in result and "humidity" not in result


def test_external_devices() -> None:
    external = external_families(EXTERNAL_DEVICES)

    desc = get_device("lumi.sensor_custom", external)
    assert desc["model"] == "ACME01"
    assert _names(desc) == ["temperature", "relay", "occupancy_timeout"]

    relay = desc["spec"][1][2]
    assert relay.meta["name"] == "Relay"
    assert relay.meta["role"] == "switch"
    assert _decode(desc, ("4.1.85", "on"), ("0.1.85", 2150)) == {
        "relay": True,
        "temperature": 22,
    }

    assert get_device("lumi.sensor_custom2", external)["model"] == "lumi.sensor_custom2"

    # the built-in definitions take precedence
    assert get_device("lumi.plug", external)["name"] == "Xiaomi Plug"

    assert external_families(None) == []


@pytest.mark.parametrize(
    "definition",
    [
        {"lumi.x": ["Acme", "X"], "spec": [["0.1.85", None, "_rubbish_"]]},
        {"lumi.x": ["Acme", "X"], "spec": [["0.1.85", None, "battery", ["_rubbish_"]]]},
        {"lumi.x": ["Acme", "X"], "spec": [["0.1.85", None]]},
        {"lumi.x": ["Acme"], "spec": []},
        {"spec": []},
        {"lumi.x": ["Acme", "X"], "spec": [["0.1.85", None, "switch", {"x": 1}]]},
    ],
)
def test_external_devices_invalid(definition: dict[str, Any]) -> None:
    assert_raises(exc.SpecInvalid, external_families, [definition])


def test_external_devices_validated() -> None:
    """Definitions that are already validated (e.g. in the config) resolve as is."""

    external = resolve_families(SCH_EXTERNAL_DEVICES(EXTERNAL_DEVICES))

    desc = get_device("lumi.sensor_custom", external)
    assert _names(desc) == ["temperature", "relay", "occupancy_timeout"]
    assert _decode(desc, ("4.1.85", "on")) == {"relay": True}
