#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

The message (lower) layer: the wire formats, and how to decode them.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING, Any

from .const import (
    GATEWAY_DID_ALIAS,
    GATEWAY_MODEL,
    MIN_SUPPORTED_VERSION,
    TOPIC_BLE_RX,
    TOPIC_LUMI_RX,
    TOPIC_LUMI_TX,
    TOPIC_MIIO_RX,
    Cmd,
    DevType,
    Eid,
)
from .converters import CONVERTERS, get_converter
from .logger import set_msg_logging
from .message import MSG_LOGGER, BleMessage, LumiMessage, StatMessage, message_factory
from .parsers import parse_payload
from .version import VERSION

if TYPE_CHECKING:
    from logging import Logger


__all__ = [
    "VERSION",
    #
    "GATEWAY_DID_ALIAS",
    "GATEWAY_MODEL",
    "MIN_SUPPORTED_VERSION",
    "TOPIC_BLE_RX",
    "TOPIC_LUMI_RX",
    "TOPIC_LUMI_TX",
    "TOPIC_MIIO_RX",
    #
    "Cmd",
    "DevType",
    "Eid",
    #
    "MSG_LOGGER",
    "BleMessage",
    "LumiMessage",
    "StatMessage",
    "message_factory",
    #
    "CONVERTERS",
    "get_converter",
    "parse_payload",
    "set_msg_logging",
    "set_msg_logging_config",
]


async def set_msg_logging_config(**config: Any) -> Logger:
    """Set up the message log (to a file and/or the console).

    Runs in an executor, as opening the log file is a blocking call.
    """
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, partial(set_msg_logging, MSG_LOGGER, **config))
    return MSG_LOGGER
