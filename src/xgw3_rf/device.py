#!/usr/bin/env python3
"""Xiaomi GW3 - the runtime devices (gateway, zigbee & bluetooth).

A device holds its resolved spec (its state descriptors), the last-known values of its
states, and (for zigbee devices) its link statistics.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from xgw3_tx.const import (
    DEVICE_STATE_UNRESPONSIVE,
    SZ_APS_COUNTER,
    SZ_APS_PAYLOAD,
    SZ_DEVICE_STATE,
    SZ_RESET_CNT,
    SZ_SOURCE_ADDRESS,
    SZ_STAT_LQI,
    SZ_STAT_RSSI,
)
from xgw3_tx.helpers import dt_str

from .const import SZ_DID, DevType
from .state import StateDescriptor

_LOGGER = logging.getLogger(__name__)


class DeviceStat:
    """The link statistics of a zigbee device, from the gateway's frame metadata.

    Missed frames are estimated from the gaps in two sequence numbers, that of the APS
    layer and that of the ZCL frame (the lesser gap is used).
    """

    def __init__(self, reset_cnt: int | None = 0) -> None:
        self.reset_cnt = reset_cnt

        self.nwk: str = ""
        self.received: int = 0
        self.missed: int = 0
        self.last_missed: int = 0
        self.unresponsive: int = 0
        self.lqi: int = 0
        self.rssi: int = 0
        self.last_seen: str = ""

        self._last_aps_seq: int | None = None
        self._last_zcl_seq: int | None = None

    def __repr__(self) -> str:
        return f"DeviceStat({self.as_dict()})"

    def as_dict(self) -> dict[str, Any]:
        return {
            "nwk": self.nwk,
            "received": self.received,
            "missed": self.missed,
            "unresponsive": self.unresponsive,
            "lqi": self.lqi,
            "rssi": self.rssi,
            "last_seen": self.last_seen,
        }

    def update(self, data: dict[str, Any]) -> None:
        """Update the statistics from a stat message (MessageReceived, etc.)."""

        if SZ_SOURCE_ADDRESS in data:
            self._update_received(data)

        elif SZ_RESET_CNT in data:
            self.reset_cnt = data[SZ_RESET_CNT]

        elif data.get(SZ_DEVICE_STATE) == DEVICE_STATE_UNRESPONSIVE:
            self.unresponsive += 1

    def _update_received(self, data: dict[str, Any]) -> None:
        self.nwk = data[SZ_SOURCE_ADDRESS]
        self.lqi = data.get(SZ_STAT_LQI, 0)
        self.rssi = data.get(SZ_STAT_RSSI, 0)
        self.received += 1
        self.last_seen = dt_str()

        try:
            aps_seq = int(str(data[SZ_APS_COUNTER]), 0)  # e.g. '0x1A', or 26
            zcl_seq = _zcl_sequence(data[SZ_APS_PAYLOAD])
        except (KeyError, TypeError, ValueError) as err:
            _LOGGER.warning(f"{self.nwk}: Unable to get the sequence numbers: {err!r}")
            return

        if self._last_aps_seq is not None and zcl_seq != 0:
            self.last_missed = min(
                (aps_seq - self._last_aps_seq - 1) & 0xFF,
                (zcl_seq - self._last_zcl_seq - 1) & 0xFF,  # type: ignore[operator]
            )
            self.missed += self.last_missed

        self._last_aps_seq = aps_seq
        self._last_zcl_seq = zcl_seq


def _zcl_sequence(payload: str) -> int:
    """Return the ZCL sequence number of an APS payload, e.g. '0x18ab0a...' -> 0xab.

    A manufacturer-specific frame has a 2-byte manufacturer code before the sequence.
    """

    manufacturer_specific = int(payload[2:4], 16) & 0x04
    return int(payload[8:10] if manufacturer_specific else payload[4:6], 16)


class Device:
    """A device known to the gateway (including the gateway itself)."""

    def __init__(
        self,
        did: str,
        *,
        mac: str = "",
        dev_type: DevType | str = DevType.LUMI,
        model: str = "",
        name: str = "",
        fw_version: str = "",
        spec: Iterable[StateDescriptor] | None = None,
        reset_cnt: int | None = 0,
    ) -> None:
        self.did = did
        self.mac = mac
        self.type = DevType(dev_type)
        self.model = model
        self.name = name
        self.fw_version = fw_version

        self.spec: list[StateDescriptor] = list(spec or [])
        self.states: dict[str, Any] = {}  # state_name: last-known value
        self.seq: int | None = None  # of the last binary-event message

        self.stat = DeviceStat(reset_cnt)

    def __repr__(self) -> str:
        return f"{self.did} ({self.type}): {self.model}"

    def __str__(self) -> str:
        return f"{self.did} ({self.model})"

    @property
    def id(self) -> str:
        """Return the device's id for the host (its mac, without the 0x)."""
        return self.mac[2:] if self.mac.startswith("0x") else self.mac

    def get_state(self, name: str) -> StateDescriptor | None:
        """Return the state descriptor with the given name, or None."""
        return next((s for s in self.spec if s.name == name), None)

    def as_dict(self) -> dict[str, Any]:
        return {
            SZ_DID: self.did,
            "mac": self.mac,
            "type": str(self.type),
            "model": self.model,
            "name": self.name,
            "fw_version": self.fw_version,
            "states": [s.name for s in self.spec],
        }
