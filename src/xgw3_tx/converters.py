#!/usr/bin/env python3
"""Xiaomi GW3 - value converters (raw wire value -> engineering units).

Each converter is a factory: `(model) -> (raw) -> value | None`. The factory is called
once per device model (at bind time), and the function it returns is called for every
message. A converter returns None when the raw value has the wrong shape (e.g. the
wrong number of bytes), which means 'no value', and is never an error.

The `model` is a zigbee model (e.g. 'lumi.sensor_ht') for the property-bag protocol,
or a product id (e.g. 1371) for the binary-event (MiBeacon) protocol.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Final, TypeAlias

from .const import (
    MODELS_PRESCALED,
    PDID_CGPR1,
    PDID_LYWSD03MMC,
    PDID_MHO_C401,
    PDID_NIGHT_LIGHT_2,
)
from .helpers import bytes_to_int, hex_to_bytes, is_hex, round_half_up

ConverterT: TypeAlias = Callable[[Any], Any]
ConverterFactoryT: TypeAlias = Callable[[Any], ConverterT]

LIGHT_THRESHOLD: Final = 100  # lux, for binarized light fields


def _none_safe(fnc: ConverterT) -> ConverterT:
    """Return None for a None (absent) raw value, rather than converting it."""

    def wrapper(val: Any) -> Any:
        return None if val is None else fnc(val)

    return wrapper


def _as_number(val: Any) -> float | int | None:
    """Return a numeric value as is, or a numeric string as a number."""
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int | float):
        return val
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


########################################################################################
# property-bag protocol (lumi, miot)


def default(model: Any) -> ConverterT:
    return lambda val: val


def available(model: Any) -> ConverterT:
    """Any message from a device means it is available."""
    return lambda val: 1


def battery(model: Any) -> ConverterT:
    """Convert a battery voltage (mV) to a percentage, or pass a percentage through."""

    @_none_safe
    def convert(val: Any) -> int | float | None:
        if (val := _as_number(val)) is None:
            return None
        if val <= 100:
            return val
        if val <= 2700:
            return 0
        if val >= 3200:
            return 100
        return round_half_up((val - 2700) / 5)

    return convert


def _button_press(presses: int) -> ConverterFactoryT:
    def factory(model: Any) -> ConverterT:
        return lambda val: 1 if val == presses else 0

    factory.__name__ = f"button_{presses}_press"
    return factory


button_1_press = _button_press(1)
button_2_press = _button_press(2)
button_3_press = _button_press(3)
button_4_press = _button_press(4)
button_multiple_press = _button_press(128)


def consumption(model: Any) -> ConverterT:
    @_none_safe
    def convert(val: Any) -> float | None:
        return None if (val := _as_number(val)) is None else round(val, 2)

    return convert


power = consumption


def contact(model: Any) -> ConverterT:
    """Convert 'close'/'open' to 0/1, otherwise pass the value through."""
    return lambda val: {"close": 0, "open": 1}.get(val, val)


def switch(model: Any) -> ConverterT:
    """Convert 'on'/'off' to 1/0, otherwise pass the value through."""
    return lambda val: {"on": 1, "off": 0}.get(val, val)


def run_state(model: Any) -> ConverterT:
    return lambda val: {"offing": 0, "oning": 1}.get(val, 2)


def _scaled_by_100(rounded: bool) -> ConverterFactoryT:
    def factory(model: Any) -> ConverterT:
        if model in MODELS_PRESCALED:
            return lambda val: val

        @_none_safe
        def convert(val: Any) -> float | int | None:
            if (val := _as_number(val)) is None:
                return None
            return round_half_up(val / 100) if rounded else val / 100

        return convert

    return factory


humidity = _scaled_by_100(rounded=True)
pressure = _scaled_by_100(rounded=False)
temperature = _scaled_by_100(rounded=True)


def voltage(model: Any) -> ConverterT:
    """Convert mV to V, to 3 decimal places."""

    @_none_safe
    def convert(val: Any) -> float | None:
        return None if (val := _as_number(val)) is None else round(val / 1000, 3)

    return convert


def debug_output(model: Any) -> ConverterT:
    """Summarise a message's (key, value) pairs as a JSON string of its keys."""

    def convert(val: Any) -> str | None:
        if not isinstance(val, list):
            return None
        return json.dumps({"model": model, "lumi": [k for k, *_ in val]})

    return convert


def messages_stat(model: Any) -> ConverterT:
    """Serialise a device's link statistics (they always include a nwk)."""

    def convert(val: Any) -> str | None:
        if not isinstance(val, dict) or "nwk" not in val:
            return None
        return json.dumps(val)

    return convert


########################################################################################
# binary-event protocol (MiBeacon), where the raw value is a hex string (edata)


def _edata(fnc: Callable[[bytes], Any]) -> ConverterT:
    """Convert hex edata to bytes before conversion; non-hex edata has no value."""

    def wrapper(val: Any) -> Any:
        return fnc(hex_to_bytes(val)) if is_hex(val) else None

    return wrapper


def ble_battery(pdid: Any) -> ConverterT:
    return _edata(lambda data: data[0] if data else None)


ble_link_quality = ble_battery
ble_moisture = ble_battery


def ble_temperature(pdid: Any) -> ConverterT:
    return _edata(lambda data: bytes_to_int(data) / 10 if len(data) == 2 else None)


def ble_humidity(pdid: Any) -> ConverterT:
    if pdid in (PDID_MHO_C401, PDID_LYWSD03MMC):  # these report whole percentages
        return _edata(
            lambda data: bytes_to_int(data) // 10 if len(data) == 2 else None
        )
    return _edata(lambda data: bytes_to_int(data) / 10 if len(data) == 2 else None)


def ble_power(pdid: Any) -> ConverterT:  # eid 0x1005, byte 0
    return _edata(lambda data: data[0] if len(data) == 2 else None)


def ble_kettle_temperature(pdid: Any) -> ConverterT:  # eid 0x1005, byte 1
    return _edata(lambda data: data[1] if len(data) == 2 else None)


def ble_illuminance(pdid: Any) -> ConverterT:  # eid 0x1007
    def convert(data: bytes) -> int | None:
        if len(data) != 3:
            return None
        value = bytes_to_int(data)
        if pdid == PDID_NIGHT_LIGHT_2:
            return 1 if value >= LIGHT_THRESHOLD else 0
        return value

    return _edata(convert)


def ble_conductivity(pdid: Any) -> ConverterT:
    return _edata(lambda data: bytes_to_int(data) if len(data) == 2 else None)


def ble_th_temperature(pdid: Any) -> ConverterT:  # eid 0x100D, first 2 bytes
    return _edata(lambda data: bytes_to_int(data[:2]) / 10 if len(data) == 4 else None)


def ble_th_humidity(pdid: Any) -> ConverterT:  # eid 0x100D, last 2 bytes
    return _edata(lambda data: bytes_to_int(data[-2:]) / 10 if len(data) == 4 else None)


def ble_formaldehyde(pdid: Any) -> ConverterT:
    return _edata(lambda data: bytes_to_int(data) / 100 if len(data) == 2 else None)


def ble_single_byte(pdid: Any) -> ConverterT:  # remaining, and the alarms
    return _edata(lambda data: data[0] if len(data) == 1 else None)


def ble_idle_time(pdid: Any) -> ConverterT:
    return _edata(lambda data: bytes_to_int(data) if len(data) == 4 else None)


def ble_light(pdid: Any) -> ConverterT:  # eid 0x1018
    return _edata(lambda data: (1 if data[0] else 0) if len(data) == 1 else None)


def ble_contact(pdid: Any) -> ConverterT:  # eid 0x1019, NOTE: 0 is open
    return _edata(lambda data: {0: 1, 1: 0}.get(data[0]) if len(data) == 1 else None)


def ble_occupancy(pdid: Any) -> ConverterT:  # eid 0x0F, any such event is motion
    return lambda val: 1


def ble_motion_light(pdid: Any) -> ConverterT:  # eid 0x0F
    def convert(data: bytes) -> int | None:
        if not 0 < len(data) <= 6:
            return None
        value = bytes_to_int(data)
        if pdid == PDID_CGPR1:  # reports illuminance, rather than light
            return value
        return 1 if value >= LIGHT_THRESHOLD else 0  # type: ignore[operator]

    return _edata(convert)


def ble_debug_output(pdid: Any) -> ConverterT:
    def convert(val: Any) -> str | None:
        if not isinstance(val, list):
            return None
        return json.dumps({"model": pdid, "bluetooth": [k for k, *_ in val]})

    return convert


CONVERTERS: Final[dict[str, ConverterFactoryT]] = {
    k: v
    for k, v in locals().items()
    if callable(v) and not k.startswith("_") and getattr(v, "__module__", "") == __name__
}


def get_converter(name: str) -> ConverterFactoryT:
    """Return a converter factory by its name (as used by external device specs)."""
    return CONVERTERS[name]
