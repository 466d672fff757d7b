#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

Schema processor for the message (lower) layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypedDict

import voluptuous as vol

from .const import (
    SZ_CMD,
    SZ_DID,
    SZ_EDATA,
    SZ_EID,
    SZ_EIID,
    SZ_ERROR_CODE,
    SZ_EUI64,
    SZ_MI_SPEC,
    SZ_PARAMS,
    SZ_PDID,
    SZ_PIID,
    SZ_RES_LIST,
    SZ_RES_NAME,
    SZ_RESULTS,
    SZ_SEQ,
    SZ_SIID,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/2: Inbound (bus) messages
SCH_PARAM_RECORD = vol.Schema(
    {
        vol.Optional(SZ_RES_NAME): str,
        vol.Optional(SZ_SIID): vol.Coerce(int),
        vol.Optional(SZ_PIID): vol.Coerce(int),
        vol.Optional(SZ_EIID): vol.Coerce(int),
        vol.Optional(SZ_ERROR_CODE): int,
    },
    extra=vol.ALLOW_EXTRA,  # the value, and others (e.g. arguments)
)

SCH_LUMI_MESSAGE = vol.Schema(
    {
        vol.Required(SZ_CMD): str,
        vol.Optional(SZ_DID): str,
        vol.Optional(SZ_RES_LIST): [SCH_PARAM_RECORD],
        vol.Optional(SZ_PARAMS): [vol.Any(SCH_PARAM_RECORD, dict)],
        vol.Optional(SZ_RESULTS): [SCH_PARAM_RECORD],
        vol.Optional(SZ_MI_SPEC): [SCH_PARAM_RECORD],
    },
    extra=vol.ALLOW_EXTRA,  # e.g. id, time, rssi, zseq
)

SCH_BLE_MESSAGE = vol.Schema(
    {
        vol.Required(SZ_DID): str,
        vol.Required(SZ_EID): vol.Coerce(int),
        vol.Required(SZ_EDATA): str,  # hex, see: BleMessage
        vol.Optional(SZ_PDID, default=0): vol.Coerce(int),
        vol.Optional(SZ_SEQ, default=None): vol.Any(None, int),
    },
    extra=vol.ALLOW_EXTRA,
)

SCH_STAT_MESSAGE = vol.Schema(
    {vol.Required(SZ_EUI64): str},
    extra=vol.ALLOW_EXTRA,
)


#
# 2/2: Message log configuration
SZ_FILE_NAME: Final = "file_name"
SZ_MESSAGE_LOG: Final = "message_log"
SZ_ROTATE_BACKUPS: Final = "rotate_backups"
SZ_ROTATE_BYTES: Final = "rotate_bytes"


class MsgLogConfigT(TypedDict):
    file_name: str
    rotate_backups: int
    rotate_bytes: int | None


def sch_message_log_dict_factory(
    default_backups: int = 0,
) -> dict[vol.Required, vol.Any]:
    """Return a message log dict with a configurable default rotation policy.

    usage:

    SCH_MESSAGE_LOG_7 = vol.Schema(
        sch_message_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
    )
    """

    SCH_MESSAGE_LOG_CONFIG = vol.Schema(
        {
            vol.Optional(SZ_ROTATE_BACKUPS, default=default_backups): vol.Any(
                None, int
            ),
            vol.Optional(SZ_ROTATE_BYTES): vol.Any(None, int),
        },
        extra=vol.PREVENT_EXTRA,
    )

    SCH_MESSAGE_LOG_NAME = str

    def NormaliseMessageLog(rotate_backups: int = 0) -> Callable[..., Any]:
        def normalise_message_log(node_value: str | MsgLogConfigT) -> MsgLogConfigT:
            if isinstance(node_value, str):
                return {
                    SZ_FILE_NAME: node_value,
                    SZ_ROTATE_BACKUPS: rotate_backups,
                    SZ_ROTATE_BYTES: None,
                }
            return node_value

        return normalise_message_log

    return {  # SCH_MESSAGE_LOG_DICT
        vol.Required(SZ_MESSAGE_LOG, default=None): vol.Any(
            None,
            vol.All(
                SCH_MESSAGE_LOG_NAME,
                NormaliseMessageLog(rotate_backups=default_backups),
            ),
            SCH_MESSAGE_LOG_CONFIG.extend(
                {vol.Required(SZ_FILE_NAME): SCH_MESSAGE_LOG_NAME}
            ),
        )
    }


SCH_MESSAGE_LOG = vol.Schema(
    sch_message_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
)
