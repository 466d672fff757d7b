#!/usr/bin/env python3
"""Xiaomi GW3 - the device specification registry for the property-bag protocol.

Each family of models shares one spec, a sequence of rows:
    (resource, prop, template, converters)

 - resource: a lumi resource (e.g. '4.1.85'), or a MIoT one (e.g. '2.1'), or None
 - prop: the device property name, (informational only)
 - template: a state template from the catalogue (or a derived variant)
 - converters: a chain of converter factories, resolved per model at bind time

A row with no resource decodes the whole message, and one with no converters is
synthetic (it is emitted only via dependency expansion).

See: https://github.com/Koenkk/zigbee-herdsman-converters
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Final, NamedTuple, TypeAlias

import voluptuous as vol

from xgw3_tx import converters as cv
from xgw3_tx.converters import ConverterFactoryT, get_converter

from . import exceptions as exc
from .const import (
    GATEWAY_MODEL,
    RE_ZIGBEE_MODEL_TAIL,
    SZ_MANUFACTURER,
    SZ_MODEL,
    SZ_NAME,
    SZ_SPEC,
)
from .schemas import (
    SCH_EXTERNAL_DEVICES,
    SZ_DEPENDS_ON,
    SZ_META,
    SZ_STATE,
    SZ_VALUE_MAP,
)
from .state import catalogue as st
from .state.base import StateDescriptor

_LOGGER = logging.getLogger(__name__)


SpecRowT: TypeAlias = tuple[
    str | int | None, str | None, StateDescriptor, Sequence[ConverterFactoryT]
]
BoundRowT: TypeAlias = tuple[str | int | None, str | None, StateDescriptor]

UNKNOWN_NAME: Final = "Zigbee"


class DeviceFamily(NamedTuple):
    """A group of models that share a spec: {model: (brand, name, market_model)}."""

    models: dict[str, tuple[str, ...]]
    spec: tuple[SpecRowT, ...]


def bind_spec(model: Any, spec: Iterable[SpecRowT]) -> list[BoundRowT]:
    """Bind each row's template to its resource, and to its converters (for a model)."""
    return [
        (res, prop, template.bind(res, [f(model) for f in factories]))
        for res, prop, template, factories in spec
    ]


def describe(
    model: Any, desc: Sequence[str], spec: Iterable[SpecRowT] | None
) -> dict[str, Any]:
    """Return a resolved device: {manufacturer, name, model, spec}.

    The model is the market model, if there is one.
    """
    return {
        SZ_MANUFACTURER: desc[0],
        SZ_NAME: f"{desc[0]} {desc[1]}",
        SZ_MODEL: desc[2] if len(desc) > 2 else str(model),
        SZ_SPEC: None if spec is None else bind_spec(model, spec),
    }


# rows common to most models...
_ALIVE: Final[SpecRowT] = (None, "alive", st.AVAILABLE, (cv.available,))
_LQI: Final[SpecRowT] = ("8.0.2007", "lqi", st.LINK_QUALITY, (cv.default,))
_LOAD_POWER: Final[SpecRowT] = ("0.12.85", "load_power", st.LOAD_POWER, (cv.default,))

_BATTERY: Final[tuple[SpecRowT, ...]] = (
    ("8.0.2008", "voltage", st.VOLTAGE, (cv.voltage,)),
    ("8.0.2008", "voltage", st.BATTERY, (cv.battery,)),
)
_TAIL: Final[tuple[SpecRowT, ...]] = (
    (None, None, st.DEBUG_OUTPUT, (cv.debug_output,)),
    (None, None, st.MESSAGES_STAT, (cv.messages_stat,)),
)

_PRESS: Final[dict[int, SpecRowT]] = {
    1: ("13.1.85", None, st.SINGLE_PRESS, (cv.button_1_press,)),
    2: ("13.1.85", None, st.DOUBLE_PRESS, (cv.button_2_press,)),
    3: ("13.1.85", None, st.TRIPLE_PRESS, (cv.button_3_press,)),
    4: ("13.1.85", None, st.QUADRUPLE_PRESS, (cv.button_4_press,)),
    128: ("13.1.85", None, st.MULTIPLE_PRESS, (cv.button_multiple_press,)),
}
_LONG_PRESS: Final[tuple[SpecRowT, ...]] = (
    ("13.1.85", None, st.LONG_PRESS, (cv.default,)),  # 16 is hold, 17 is release
    (None, None, st.LONG_TIMEOUT, ()),
)


def _channels(*keys: tuple[str, str]) -> tuple[SpecRowT, ...]:
    """Return the rows of a multi-channel switch, from its (resource, prop) pairs."""
    channels = (st.CHANNEL_1, st.CHANNEL_2, st.CHANNEL_3)
    return tuple(
        (res, prop, channels[idx], (cv.default,)) for idx, (res, prop) in enumerate(keys)
    )


def _spec(*rows: SpecRowT | tuple[SpecRowT, ...]) -> tuple[SpecRowT, ...]:
    """Return a spec from rows & groups of rows, ending with the diagnostic rows."""
    result: list[SpecRowT] = []
    for row in rows:
        if isinstance(row[0], tuple):
            result.extend(row)  # type: ignore[arg-type]
        else:
            result.append(row)  # type: ignore[arg-type]
    return tuple(result) + _TAIL


# fmt: off
DEVICES: Final[tuple[DeviceFamily, ...]] = (
    DeviceFamily(  # the gateway itself
        {GATEWAY_MODEL: ("Xiaomi", "Gateway 3", "ZNDMWG03LM")},
        (),
    ),
    DeviceFamily(  # on/off, power measurement
        {
            "lumi.plug": ("Xiaomi", "Plug", "ZNCZ02LM"),
            "lumi.plug.mitw01": ("Xiaomi", "Plug TW", "ZNCZ03LM"),
            "lumi.plug.maus01": ("Xiaomi", "Plug US", "ZNCZ12LM"),
            "lumi.ctrl_86plug": ("Aqara", "Socket", "QBCZ11LM"),
        },
        _spec(
            _ALIVE, _LQI, _LOAD_POWER,
            ("4.1.85", "neutral_0", st.SWITCH, (cv.switch,)),
        ),
    ),
    DeviceFamily(
        {"lumi.plug.mmeu01": ("Xiaomi", "Plug EU", "ZNCZ04LM")},
        _spec(
            _ALIVE, _LQI,
            ("0.11.85", "load_voltage", st.LOAD_VOLTAGE, (cv.default,)),
            _LOAD_POWER,
            ("4.1.85", "neutral_0", st.SWITCH, (cv.switch,)),
        ),
    ),
    DeviceFamily(
        {"lumi.ctrl_86plug.aq1": ("Aqara", "Socket", "QBCZ11LM")},
        _spec(
            _ALIVE, _LQI, _LOAD_POWER,
            ("4.1.85", "channel_0", st.SWITCH, (cv.switch,)),
        ),
    ),
    DeviceFamily(
        {
            "lumi.ctrl_ln1": ("Aqara", "Single Wall Switch", "QBKG11LM"),
            "lumi.ctrl_ln1.aq1": ("Aqara", "Single Wall Switch", "QBKG11LM"),
            "lumi.switch.b1nacn02": ("Aqara", "Single Wall Switch D1", "QBKG23LM"),
        },
        _spec(
            _ALIVE, _LQI, _LOAD_POWER,
            ("4.1.85", "neutral_0", st.SWITCH, (cv.switch,)),
        ),
    ),
    DeviceFamily(  # dual channel on/off, power measurement
        {
            "lumi.relay.c2acn01": ("Aqara", "Relay", "LLKZMK11LM"),
            "lumi.ctrl_ln2": ("Aqara", "Double Wall Switch", "QBKG12LM"),
            "lumi.ctrl_ln2.aq1": ("Aqara", "Double Wall Switch", "QBKG12LM"),
            "lumi.switch.b2nacn02": ("Aqara", "Double Wall Switch D1", "QBKG24LM"),
        },
        _spec(
            _ALIVE, _LQI, _LOAD_POWER,
            _channels(("4.1.85", "channel_0"), ("4.2.85", "channel_1")),
        ),
    ),
    DeviceFamily(
        {"lumi.ctrl_neutral1": ("Aqara", "Single Wall Switch", "QBKG04LM")},
        _spec(_ALIVE, _LQI, ("4.1.85", "neutral_0", st.SWITCH, (cv.switch,))),
    ),
    DeviceFamily(  # on/off
        {"lumi.switch.b1lacn02": ("Aqara", "Single Wall Switch D1", "QBKG21LM")},
        _spec(_ALIVE, _LQI, ("4.1.85", "channel_0", st.SWITCH, (cv.switch,))),
    ),
    DeviceFamily(  # dual channel on/off
        {"lumi.ctrl_neutral2": ("Aqara", "Double Wall Switch", "QBKG03LM")},
        _spec(
            _ALIVE, _LQI,
            _channels(("4.1.85", "neutral_0"), ("4.2.85", "neutral_1")),
        ),
    ),
    DeviceFamily(
        {"lumi.switch.b2lacn02": ("Aqara", "Double Wall Switch D1", "QBKG22LM")},
        _spec(
            _ALIVE, _LQI,
            _channels(("4.1.85", "channel_0"), ("4.2.85", "channel_1")),
        ),
    ),
    DeviceFamily(  # triple channel on/off, no neutral wire
        {"lumi.switch.l3acn3": ("Aqara", "Triple Wall Switch D1", "QBKG25LM")},
        _spec(
            _ALIVE, _LQI,
            _channels(
                ("4.1.85", "neutral_0"), ("4.2.85", "neutral_1"), ("4.3.85", "neutral_2")
            ),
        ),
    ),
    DeviceFamily(  # triple channel on/off, with neutral wire
        {"lumi.switch.n3acn3": ("Aqara", "Triple Wall Switch D1", "QBKG26LM")},
        _spec(
            _ALIVE, _LQI, _LOAD_POWER,
            _channels(
                ("4.1.85", "channel_0"), ("4.2.85", "channel_1"), ("4.3.85", "channel_2")
            ),
        ),
    ),
    DeviceFamily(  # cube action, no retain
        {
            "lumi.sensor_cube": ("Aqara", "Cube", "MFKZQ01LM"),
            "lumi.sensor_cube.aqgl01": ("Aqara", "Cube", "MFKZQ01LM"),
        },
        _spec(_ALIVE, _LQI, _BATTERY),
    ),
    DeviceFamily(  # light with brightness and color temp
        {
            "lumi.light.aqcn02": ("Aqara", "Bulb", "ZNLDP12LM"),
            "lumi.light.cwopcn02": ("Aqara", "Opple MX650", "XDD12LM"),
            "lumi.light.cwopcn03": ("Aqara", "Opple MX480", "XDD13LM"),
            "ikea.light.led1545g12": ("IKEA", "Bulb E27 980 lm", "LED1545G12"),
            "ikea.light.led1546g12": ("IKEA", "Bulb E27 950 lm", "LED1546G12"),
            "ikea.light.led1536g5": ("IKEA", "Bulb E14 400 lm", "LED1536G5"),
            "ikea.light.led1537r6": ("IKEA", "Bulb GU10 400 lm", "LED1537R6"),
        },
        _spec(
            _ALIVE, _LQI,
            ("4.1.85", "power_status", st.SWITCH, (cv.switch,)),
            ("14.1.85", "light_level", st.BRIGHTNESS, (cv.default,)),
            ("14.2.85", "colour_temperature", st.COLOR_TEMPERATURE, (cv.default,)),
        ),
    ),
    DeviceFamily(  # light with brightness
        {
            "ikea.light.led1623g12": ("IKEA", "Bulb E27 1000 lm", "LED1623G12"),
            "ikea.light.led1650r5": ("IKEA", "Bulb GU10 400 lm", "LED1650R5"),
            "ikea.light.led1649c5": ("IKEA", "Bulb E14", "LED1649C5"),
        },
        _spec(
            _ALIVE, _LQI,
            ("4.1.85", "power_status", st.SWITCH, (cv.switch,)),
            ("14.1.85", "light_level", st.BRIGHTNESS, (cv.default,)),
        ),
    ),
    DeviceFamily(  # button action, no retain
        {"lumi.sensor_switch": ("Xiaomi", "Button", "WXKG01LM")},
        _spec(
            _ALIVE, _LQI,
            _PRESS[1], _PRESS[2], _PRESS[3], _PRESS[4], _PRESS[128], _LONG_PRESS,
            _BATTERY,
        ),
    ),
    DeviceFamily(  # not all versions support triple, quadruple, hold & release
        {
            "lumi.sensor_switch.aq2": ("Aqara", "Button", "WXKG11LM"),
            "lumi.remote.b1acn01": ("Aqara", "Button", "WXKG11LM"),
        },
        _spec(_ALIVE, _LQI, _PRESS[1], _PRESS[2], _PRESS[3], _BATTERY),
    ),
    DeviceFamily(
        {"lumi.sensor_switch.aq3": ("Aqara", "Shake Button", "WXKG12LM")},
        _spec(_ALIVE, _LQI, _PRESS[1], _PRESS[2], _LONG_PRESS, _BATTERY),
    ),
    DeviceFamily(
        {"lumi.sensor_86sw1": ("Aqara", "Single Wall Button", "WXKG03LM")},
        _spec(_ALIVE, _LQI, _PRESS[1], _BATTERY),
    ),
    DeviceFamily(
        {
            "lumi.remote.b186acn01": ("Aqara", "Single Wall Button", "WXKG03LM"),
            "lumi.remote.b186acn02": ("Aqara", "Single Wall Button D1", "WXKG06LM"),
        },
        _spec(_ALIVE, _LQI, _PRESS[1], _PRESS[2], _LONG_PRESS, _BATTERY),
    ),
    DeviceFamily(  # multi button action, no retain
        {
            "lumi.sensor_86sw2": ("Aqara", "Double Wall Button", "WXKG02LM"),
            "lumi.remote.b286acn01": ("Aqara", "Double Wall Button", "WXKG02LM"),
            "lumi.sensor_86sw2.es1": ("Aqara", "Double Wall Button", "WXKG02LM"),
            "lumi.remote.b286acn02": ("Aqara", "Double Wall Button D1", "WXKG07LM"),
            "lumi.remote.b286opcn01": ("Aqara", "Opple Two Button", "WXCJKG11LM"),
            "lumi.remote.b486opcn01": ("Aqara", "Opple Four Button", "WXCJKG12LM"),
            "lumi.remote.b686opcn01": ("Aqara", "Opple Six Button", "WXCJKG13LM"),
        },
        _spec(_ALIVE, _LQI, _BATTERY),
    ),
    DeviceFamily(  # temperature and humidity sensor
        {"lumi.sensor_ht": ("Xiaomi", "TH Sensor", "WSDCGQ01LM")},
        _spec(
            _ALIVE, _LQI,
            ("0.1.85", "temperature", st.TEMPERATURE, (cv.temperature,)),
            ("0.2.85", "humidity", st.HUMIDITY, (cv.humidity,)),
            _BATTERY,
        ),
    ),
    DeviceFamily(  # temperature, humidity and pressure sensor
        {"lumi.weather": ("Aqara", "TH Sensor", "WSDCGQ11LM")},
        _spec(
            _ALIVE, _LQI,
            ("0.1.85", "temperature", st.TEMPERATURE, (cv.temperature,)),
            ("0.2.85", "humidity", st.HUMIDITY, (cv.humidity,)),
            ("0.3.85", "pressure", st.PRESSURE, (cv.pressure,)),
            _BATTERY,
        ),
    ),
    DeviceFamily(  # MIoT, the values are already scaled
        {"lumi.sensor_ht.agl02": ("Aqara", "TH Sensor", "WSDCGQ12LM")},
        _spec(
            ("2.1", "2.1", st.TEMPERATURE, (cv.temperature,)),
            ("2.2", "2.2", st.HUMIDITY, (cv.humidity,)),
            ("2.3", "2.3", st.PRESSURE, (cv.pressure,)),
            ("3.1", "3.1", st.BATTERY, (cv.battery,)),
        ),
    ),
    DeviceFamily(  # door window sensor
        {
            "lumi.sensor_magnet": ("Xiaomi", "Door Sensor", "MCCGQ01LM"),
            "lumi.sensor_magnet.aq2": ("Aqara", "Door Sensor", "MCCGQ11LM"),
        },
        _spec(
            _ALIVE, _LQI, ("3.1.85", "status", st.CONTACT, (cv.contact,)), _BATTERY
        ),
    ),
    DeviceFamily(  # motion sensor
        {"lumi.sensor_motion": ("Xiaomi", "Motion Sensor", "RTCGQ01LM")},
        _spec(_ALIVE, _LQI, ("3.1.85", None, st.OCCUPANCY, (cv.default,)), _BATTERY),
    ),
    DeviceFamily(  # motion sensor with illuminance
        {"lumi.sensor_motion.aq2": ("Aqara", "Motion Sensor", "RTCGQ11LM")},
        _spec(
            _ALIVE, _LQI,
            ("0.4.85", "illumination", st.ILLUMINANCE, (cv.default,)),
            ("3.1.85", None, st.OCCUPANCY, (cv.default,)),
            _BATTERY,
            (None, None, st.NO_MOTION, ()),
            (None, None, st.OCCUPANCY_TIMEOUT, ()),
        ),
    ),
    DeviceFamily(
        {"lumi.sensor_wleak.aq1": ("Aqara", "Water Leak Sensor", "SJCGQ11LM")},
        _spec(
            _ALIVE, _LQI, ("3.1.85", "alarm", st.WATER_LEAK, (cv.default,)), _BATTERY
        ),
    ),
    DeviceFamily(
        {"lumi.vibration.aq1": ("Aqara", "Vibration Sensor", "DJT11LM")},
        _spec(_ALIVE, _LQI, _BATTERY),
    ),
    DeviceFamily(
        {"lumi.sen_ill.mgl01": ("Xiaomi", "Light Sensor", "GZCGQ01LM")},
        _spec(
            _ALIVE,
            ("2.1", "2.1", st.ILLUMINANCE, (cv.default,)),
            ("3.1", "3.1", st.BATTERY, (cv.battery,)),
        ),
    ),
    DeviceFamily(
        {"lumi.sensor_smoke": ("Honeywell", "Smoke Sensor", "JTYJ-GD-01LM/BW")},
        _spec(
            _ALIVE, _LQI, ("13.1.85", "alarm", st.SMOKE, (cv.default,)), _BATTERY
        ),
    ),
    DeviceFamily(  # mains powered, there is no 'alive'
        {"lumi.sensor_natgas": ("Honeywell", "Gas Sensor", "JTQJ-BF-01LM/BW")},
        _spec(_LQI, ("13.1.85", "alarm", st.GAS, (cv.default,))),
    ),
    DeviceFamily(
        {
            "lumi.curtain": ("Aqara", "Curtain", "ZNCLDJ11LM"),
            "lumi.curtain.aq2": ("Aqara", "Roller Shade", "ZNGZDJ11LM"),
        },
        _spec(
            _ALIVE, _LQI,
            ("1.1.85", "curtain_level", st.CURTAIN_LEVEL, (cv.default,)),
            ("14.2.85", None, st.CURTAIN_MOTOR, (cv.default,)),
            ("14.4.85", "run_state", st.RUN_STATE, (cv.default,)),
        ),
    ),
    DeviceFamily(
        {"lumi.curtain.hagl04": ("Aqara", "Curtain B1", "ZNCLDJ12LM")},
        _spec(
            _ALIVE, _LQI,
            ("1.1.85", "curtain_level", st.CURTAIN_LEVEL, (cv.default,)),
            ("14.2.85", None, st.CURTAIN_MOTOR, (cv.default,)),
            ("14.4.85", "run_state", st.RUN_STATE, (cv.default,)),
            _BATTERY,
        ),
    ),
    DeviceFamily(
        {
            "lumi.lock.aq1": ("Aqara", "Door Lock S1", "ZNMS11LM"),
            "lumi.lock.acn02": ("Aqara", "Door Lock S2", "ZNMS12LM"),
            "lumi.lock.acn03": ("Aqara", "Door Lock S2 Pro", "ZNMS12LM"),
        },
        _spec(
            _ALIVE, _LQI,
            ("13.20.85", "lock_state", st.LOCK_STATE, (cv.default,)),
            _BATTERY,
        ),
    ),
    DeviceFamily(  # thermostats, only link metadata for now
        {
            "lumi.airrtc.tcpecn02": ("Aqara", "Thermostat S2", "KTWKQ03ES"),
            "lumi.airrtc.vrfegl01": ("Xiaomi", "VRF Air Conditioning"),
        },
        _spec(_ALIVE, _LQI),
    ),
    DeviceFamily(  # no neutral
        {"lumi.switch.l0agl1": ("Aqara", "Relay T1", "SSM-U02")},
        _spec(("2.1", "2.1", st.SWITCH, (cv.switch,))),
    ),
    DeviceFamily(  # with neutral
        {
            "lumi.switch.n0agl1": ("Aqara", "Relay T1", "SSM-U01"),
            "lumi.plug.maeu01": ("Aqara", "Plug", "SP-EUC01"),
        },
        _spec(
            ("2.1", "2.1", st.SWITCH, (cv.switch,)),
            ("3.2", "3.2", st.LOAD_POWER, (cv.default,)),
        ),
    ),
    DeviceFamily(
        {"lumi.airmonitor.acn01": ("Aqara", "TVOC Air Quality Monitor", "VOCKQJK11LM")},
        _spec(
            ("3.1", "3.1", st.TEMPERATURE, (cv.temperature,)),
            ("3.2", "3.2", st.HUMIDITY, (cv.humidity,)),
            ("4.1", "4.1", st.ALARM, (cv.default,)),  # tvoc_level
            ("4.2", "4.2", st.BATTERY, (cv.battery,)),
        ),
    ),
    DeviceFamily(
        {"lumi.switch.b1lc04": ("Aqara", "Single Wall Switch E1", "QBKG38LM")},
        _spec(("2.1", "2.1", st.SWITCH, (cv.switch,))),
    ),
    DeviceFamily(
        {"lumi.switch.b2lc04": ("Aqara", "Double Wall Switch E1", "QBKG39LM")},
        _spec(_channels(("2.1", "2.1"), ("3.1", "3.1"))),
    ),
)
# fmt: on


def _external_row(row: tuple[Any, ...]) -> SpecRowT:
    """Resolve an external spec row (names) to a spec row (objects)."""

    resource, prop, template_name, overrides, converter_names = row

    try:
        template = st.get_template(template_name)
        factories = tuple(get_converter(n) for n in converter_names)
    except KeyError as err:
        raise exc.SpecInvalid(f"Unknown template or converter: {err}") from err

    if overrides:
        kwargs: dict[str, Any] = {}
        if SZ_VALUE_MAP in overrides:
            kwargs[SZ_VALUE_MAP] = tuple(overrides[SZ_VALUE_MAP])
        if SZ_DEPENDS_ON in overrides:
            kwargs[SZ_DEPENDS_ON] = overrides[SZ_DEPENDS_ON]
        template = template.derive(
            overrides.get(SZ_STATE), overrides.get(SZ_META), **kwargs
        )

    return resource, prop, template, factories


def external_families(definitions: list[dict[str, Any]] | None) -> list[DeviceFamily]:
    """Validate & resolve external device definitions, or raise SpecInvalid.

    e.g. [{"lumi.sensor_ht.v2": ["Xiaomi", "TH Sensor", "WSDCGQ01LM"],
           "spec": [["0.1.85", "temperature", "temperature", ["temperature"]]]}]
    """

    if not definitions:
        return []

    try:
        definitions = SCH_EXTERNAL_DEVICES(definitions)
    except vol.Invalid as err:
        raise exc.SpecInvalid(f"Invalid external device definition: {err}") from err

    return resolve_families(definitions)  # type: ignore[arg-type]


def resolve_families(definitions: list[dict[str, Any]]) -> list[DeviceFamily]:
    """Resolve external device definitions that have already been validated.

    The spec rows are the normalised five-tuples of SCH_EXTERNAL_DEVICES. Raise
    SpecInvalid if a template or converter name is unknown.
    """

    return [
        DeviceFamily(
            {
                RE_ZIGBEE_MODEL_TAIL.sub("", k): tuple(v)
                for k, v in defn.items()
                if k != SZ_SPEC
            },
            tuple(_external_row(r) for r in defn[SZ_SPEC]),
        )
        for defn in definitions
    ]


def get_device(
    model: str, external: Iterable[DeviceFamily] | None = None
) -> dict[str, Any]:
    """Return a resolved device description for a zigbee model.

    The built-in definitions are searched before the external ones (the first match
    wins). An unknown model is given a minimal description, with an empty spec.
    """

    model = RE_ZIGBEE_MODEL_TAIL.sub("", str(model))

    for family in (*DEVICES, *(external or ())):
        if model in family.models:
            return describe(model, family.models[model], family.spec)

    _LOGGER.warning(f"Unsupported zigbee model: {model} (it will have no states)")
    return {SZ_NAME: UNKNOWN_NAME, SZ_MODEL: model, SZ_SPEC: []}
