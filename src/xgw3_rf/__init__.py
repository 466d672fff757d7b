#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

Works with (amongst others):
- zigbee devices, via the property-bag protocol (lumi & MIoT resources)
- bluetooth devices, via the binary-event protocol (MiBeacon)
"""

from __future__ import annotations

import logging

from xgw3_tx import BleMessage, LumiMessage, StatMessage  # noqa: F401

from .device import Device, DeviceStat  # noqa: F401
from .gateway import Gateway  # noqa: F401
from .state import StateDescriptor  # noqa: F401
from .version import VERSION  # noqa: F401

from .const import (  # noqa: F401, isort: skip, pylint: disable=unused-import
    Cmd,
    DevType,
)


_LOGGER = logging.getLogger(__name__)


class GracefulExit(SystemExit):
    code = 1
