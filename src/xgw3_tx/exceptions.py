#!/usr/bin/env python3
"""Xiaomi GW3 - exceptions within the message/wire layer."""

from __future__ import annotations


class _Gw3BaseException(Exception):
    """Base class for all xgw3_tx exceptions."""

    pass


class Gw3Exception(_Gw3BaseException):
    """Base class for all xgw3_tx exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class _Gw3LowerError(Gw3Exception):
    """A failure in the lower layer (message, payload, param record)."""


########################################################################################
# Errors at/below the message layer, incl. payload processing


class MessageInvalid(_Gw3LowerError):
    """The bus message is corrupt/not internally consistent."""


class PayloadInvalid(MessageInvalid):
    """The message's payload (e.g. edata) cannot be decoded."""

    HINT = "the payload should be a hex string"


class ParamInvalid(MessageInvalid):
    """The param record has no resolvable key (res_name, siid.piid, siid.eiid)."""
