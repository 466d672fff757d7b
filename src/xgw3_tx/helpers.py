#!/usr/bin/env python3
"""Xiaomi GW3 - Message/Wire layer - Helper functions."""

from __future__ import annotations

import json
import math
import re
from datetime import datetime as dt
from typing import Any, Final, TypeAlias

from .const import MIN_SUPPORTED_VERSION

HexStr: TypeAlias = str  # an even number of hex characters, e.g. "2701"

RE_MIIO_MSG: Final = re.compile(r"msg:(.+) length:([0-9]+) bytes")
RE_MIIO_JSON: Final = re.compile(r"\{.+\}")
RE_HEX_PAIR: Final = re.compile(r"[\da-fA-F]{2}")
RE_DIGITS: Final = re.compile(r"(\d+)")
RE_EUI64_PREFIX: Final = re.compile(r"^0x0*")


def dt_now() -> dt:
    """Return the current datetime as a local/aware datetime object."""
    return dt.now().astimezone()


def dt_str() -> str:
    """Return the current datetime as an isoformat string, with a UTC offset."""
    return dt_now().isoformat(timespec="seconds")


def hex_to_bytes(value: HexStr) -> bytes:
    """Convert a hex string to bytes, e.g. '2701' -> b"\\x27\\x01"."""
    if not isinstance(value, str):
        raise TypeError(f"Invalid value: {value}, is not a string")
    return bytes.fromhex(value)


def is_hex(value: Any) -> bool:
    """Return True if the value is a (possibly empty) string of hex byte pairs."""
    if not isinstance(value, str) or len(value) % 2:
        return False
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True


def bytes_to_int(data: bytes, signed: bool = True) -> int | None:
    """Convert up to 8 bytes of little-endian data to an int.

    Returns None if there is no data to convert, or too much of it.
    """
    if not 0 < len(data) <= 8:
        return None
    return int.from_bytes(data, "little", signed=signed)


def hex_to_int(value: HexStr, signed: bool = True) -> int | None:
    """Convert a little-endian hex string to an int (signed, by default)."""
    return bytes_to_int(hex_to_bytes(value), signed=signed)


def round_half_up(value: float) -> int:
    """Round a number to the nearest int, with halves rounded up (not to even)."""
    return math.floor(value + 0.5)


def reverse_mac(mac: str) -> str:
    """Reverse the byte order of a mac (as hex), e.g. '112233' -> '332211'."""
    return "".join(reversed(RE_HEX_PAIR.findall(mac)))


def did_from_eui64(eui64: str) -> str:
    """Return the (lumi) did of a zigbee device from its eui64.

    e.g. '0x00158D0001234567' -> 'lumi.158d0001234567'
    """
    return f"lumi.{RE_EUI64_PREFIX.sub('', eui64).lower()}"


def natural_sort_key(value: Any) -> list[int | str]:
    """Return a key that sorts strings with embedded numbers in natural order.

    e.g. '4.2.85' < '4.10.85', and '1.4.7_0000' < '1.4.10_0000'.
    """
    return [
        int(part) if part.isdigit() else part.lower()
        for part in RE_DIGITS.split(str(value))
    ]


def is_supported_firmware(version: str, minimum: str = MIN_SUPPORTED_VERSION) -> bool:
    """Return True if the gateway's firmware version is not older than the minimum."""
    return natural_sort_key(version) >= natural_sort_key(minimum)


def decode_miio_json(raw: str, search: str) -> list[dict[str, Any]]:
    """Extract the JSON objects containing a search string from a miio log line.

    The line is either of the form `... msg:{...} length:123 bytes`, or has one or
    more JSON objects embedded in it (possibly concatenated, as '}{').
    """

    if search not in raw:
        return []

    if match := RE_MIIO_MSG.search(raw):
        raw = match[1][: int(match[2])]
    elif match := RE_MIIO_JSON.search(raw):
        raw = match[0]
    else:
        return []

    items = raw.replace("}{", "}\n{", 1).split("\n")
    return [json.loads(item) for item in items if search in item]


def split_json_objects(raw: str) -> list[dict[str, Any]]:
    """Split a string of concatenated JSON objects, e.g. '{"a": 1}{"b": 2}'."""

    decoder = json.JSONDecoder()
    result = []

    idx = 0
    raw = raw.strip()
    while idx < len(raw):
        obj, end = decoder.raw_decode(raw, idx)
        result.append(obj)
        idx = end
        while idx < len(raw) and raw[idx].isspace():
            idx += 1
    return result
