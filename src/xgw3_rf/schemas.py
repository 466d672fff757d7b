#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

Schema processor for upper layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final

import voluptuous as vol

from xgw3_tx.schemas import (  # noqa: F401
    SZ_FILE_NAME,
    SZ_MESSAGE_LOG,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
    sch_message_log_dict_factory,
)

from .const import (
    DEFAULT_NO_MOTION_LIMIT,
    DEFAULT_OCCUPANCY_TIMEOUT,
    META_KEYS,
    SZ_SPEC,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/3: External device definitions (property-bag protocol)
SZ_DEPENDS_ON: Final = "depends_on"
SZ_META: Final = "meta"
SZ_STATE: Final = "state"
SZ_VALUE_MAP: Final = "value_map"


def _equal_lengths(node_value: list[list[Any]]) -> list[list[Any]]:
    if len(node_value[0]) != len(node_value[1]):
        raise vol.Invalid("The value map has sequences of unequal length")
    return node_value


SCH_VALUE_MAP = vol.All(vol.ExactSequence([list, list]), _equal_lengths)

SCH_STATE_OVERRIDES = vol.Schema(
    {
        vol.Optional(SZ_STATE): str,  # the state name, e.g. channel_1
        vol.Optional(SZ_META): {vol.In(META_KEYS): object},
        vol.Optional(SZ_VALUE_MAP): SCH_VALUE_MAP,
        vol.Optional(SZ_DEPENDS_ON): [str],
    },
    extra=vol.PREVENT_EXTRA,
)


def NormaliseSpecRow() -> Callable[[list[Any]], tuple[Any, ...]]:
    """Convert a spec row to a tuple of five: the overrides & converters are optional.

    [resource, prop, template] ->
        (resource, prop, template, {}, [])
    [resource, prop, template, [converters]] ->
        (resource, prop, template, {}, [converters])
    """

    def normalise_spec_row(node_value: list[Any]) -> tuple[Any, ...]:
        resource, prop, template, *rest = node_value

        overrides: dict[str, Any] = {}
        converters: list[str] = []

        if rest and isinstance(rest[0], dict):
            overrides = rest.pop(0)
        if rest:
            converters = rest.pop(0)
        if rest:
            raise vol.Invalid(f"Too many elements in spec row: {node_value}")

        return (
            vol.Any(None, str)(resource),
            vol.Any(None, str)(prop),
            vol.Schema(str)(template),
            SCH_STATE_OVERRIDES(overrides),
            vol.Schema([str])(converters),
        )

    return normalise_spec_row


SCH_SPEC_ROW = vol.All(list, vol.Length(min=3, max=5), NormaliseSpecRow())

SCH_MODEL_DESC = vol.All([str], vol.Length(min=2, max=3))  # brand, name, market?


def _has_models(node_value: dict[str, Any]) -> dict[str, Any]:
    if not set(node_value) - {SZ_SPEC}:
        raise vol.Invalid("The device definition has no models")
    return node_value


SCH_EXTERNAL_DEVICE = vol.All(
    vol.Schema(
        {
            vol.Optional(SZ_SPEC, default=[]): [SCH_SPEC_ROW],
            str: SCH_MODEL_DESC,  # model: [brand, name, market model]
        }
    ),
    _has_models,
)
SCH_EXTERNAL_DEVICES = vol.Schema([SCH_EXTERNAL_DEVICE])


#
# 2/3: Gateway (decoder/state) configuration
SZ_CONFIG: Final = "config"
SZ_DEBUG_OUTPUT: Final = "debug_output"
SZ_DEFAULT_OCCUPANCY_TIMEOUT: Final = "default_occupancy_timeout"
SZ_EXTERNAL_DEVICES: Final = "external_devices"
SZ_MSG_RECEIVED_STAT: Final = "msg_received_stat"
SZ_NO_MOTION_LIMIT: Final = "no_motion_limit"

SCH_GATEWAY_DICT = {
    vol.Optional(SZ_DEBUG_OUTPUT, default=False): bool,
    vol.Optional(SZ_MSG_RECEIVED_STAT, default=False): bool,
    vol.Optional(
        SZ_DEFAULT_OCCUPANCY_TIMEOUT, default=DEFAULT_OCCUPANCY_TIMEOUT
    ): vol.All(int, vol.Range(min=1)),
    vol.Optional(SZ_NO_MOTION_LIMIT, default=DEFAULT_NO_MOTION_LIMIT): vol.All(
        int, vol.Range(min=1)
    ),
}
SCH_GATEWAY_CONFIG = vol.Schema(SCH_GATEWAY_DICT, extra=vol.REMOVE_EXTRA)


#
# 3/3: the Global (gateway) Schema
SCH_GLOBAL_CONFIG = (
    vol.Schema(
        {
            # Gateway Configuraton, incl. message_log...
            vol.Optional(SZ_CONFIG, default={}): SCH_GATEWAY_DICT,
            vol.Optional(SZ_EXTERNAL_DEVICES, default=[]): SCH_EXTERNAL_DEVICES,
        },
        extra=vol.PREVENT_EXTRA,
    )
).extend(sch_message_log_dict_factory(default_backups=0))
