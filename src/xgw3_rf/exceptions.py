#!/usr/bin/env python3
"""Xiaomi GW3 - exceptions above the message/wire layer."""

from __future__ import annotations

from xgw3_tx.exceptions import (
    Gw3Exception as Gw3Exception,
    MessageInvalid as MessageInvalid,
    ParamInvalid as ParamInvalid,
    PayloadInvalid as PayloadInvalid,
)


class _Gw3UpperError(Gw3Exception):
    """A failure in the upper layer (device table, specs, commands)."""


########################################################################################
# Errors above the message layer, incl. device lookup & state processing


class DeviceNotFound(_Gw3UpperError):
    """The message refers to a did that is not in the device table."""

    HINT = "the device may have been paired after startup"


class CommandInvalid(_Gw3UpperError):
    """The command has no writable state, or no encodable resource."""


class SpecInvalid(_Gw3UpperError):
    """An (external) device definition is malformed."""

    HINT = "check the external_devices configuration"
