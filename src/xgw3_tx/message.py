#!/usr/bin/env python3
"""Xiaomi GW3 - Decode/validate a bus message (a JSON payload on a topic).

There are three kinds of inbound message:
 - the property-bag protocol (zigbee/send): a cmd, and lists of param records
 - the binary-event protocol (log/ble): a MiBeacon event, as {did, eid, edata, ...}
 - link statistics (.../MessageReceived): zigbee frame metadata, keyed by eui64
"""

from __future__ import annotations

import json
import logging
from datetime import datetime as dt
from typing import Any, TypeAlias

import voluptuous as vol

from . import exceptions as exc
from .const import (
    GATEWAY_DID_ALIAS,
    PARAM_LIST_KEYS,
    RE_JSON_OBJECT,
    RE_TOPIC_HEARTBEAT,
    RE_TOPIC_STAT,
    SZ_CMD,
    SZ_DID,
    SZ_EDATA,
    SZ_EID,
    SZ_EIID,
    SZ_ERROR_CODE,
    SZ_EUI64,
    SZ_PARAMS,
    SZ_PDID,
    SZ_PIID,
    SZ_RES_NAME,
    SZ_SEQ,
    SZ_SIID,
    SZ_VALUE,
    TOPIC_BLE_RX,
    TOPIC_LUMI_RX,
    TOPIC_MIIO_RX,
    Cmd,
)
from .helpers import did_from_eui64, dt_now, is_hex
from .schemas import SCH_BLE_MESSAGE, SCH_LUMI_MESSAGE, SCH_STAT_MESSAGE

__all__ = ["MSG_LOGGER", "BleMessage", "LumiMessage", "StatMessage", "message_factory"]


_LOGGER = logging.getLogger(__name__)
MSG_LOGGER = logging.getLogger(f"{__name__}_log")  # the message log


KeyValT: TypeAlias = tuple[Any, Any]  # (res_name | siid.piid | eid, value | edata)


class MessageBase:
    """The Message class; will raise MessageInvalid for invalid msgs."""

    SCHEMA: vol.Schema

    def __init__(self, topic: str, data: dict[str, Any], dtm: dt | None = None) -> None:
        """Create a message from a (decoded) bus payload.

        Will raise MessageInvalid if it is invalid.
        """

        self.topic = topic
        self.dtm: dt = dtm or dt_now()

        try:
            self._data: dict[str, Any] = self.SCHEMA(data)
        except vol.Invalid as err:
            MSG_LOGGER.warning("%s", err, extra={"topic": topic})
            raise exc.MessageInvalid(f"{self!r}: {err}") from err

        MSG_LOGGER.info(json.dumps(self._data), extra={"topic": topic})

    def __repr__(self) -> str:
        """Return an unambiguous string representation of this object."""
        return f"{self.__class__.__name__}({self.topic})"

    def __str__(self) -> str:
        """Return a brief readable string representation of this object."""
        return f"{self.topic} {json.dumps(self._data)}"

    @classmethod
    def from_json(cls, topic: str, payload: str | bytes, **kwargs: Any) -> MessageBase:
        """Create a message from a raw bus payload (a JSON object)."""
        return cls(topic, _loads(payload), **kwargs)

    @property
    def did(self) -> str:
        return self._data[SZ_DID]  # type: ignore[no-any-return]

    @property
    def pairs(self) -> list[KeyValT]:
        """Return the message's (key, value) pairs, to be decoded by a device spec."""
        raise NotImplementedError


class LumiMessage(MessageBase):
    """A message of the property-bag protocol (lumi & miot resources)."""

    SCHEMA = SCH_LUMI_MESSAGE

    def __init__(self, topic: str, data: dict[str, Any], dtm: dt | None = None) -> None:
        super().__init__(topic, data, dtm=dtm)

        self.cmd: str = self._data[SZ_CMD]

        # a heartbeat's (only) param is a message of its own
        if self.cmd == Cmd.HEARTBEAT:
            try:
                self._body: dict[str, Any] = self._data[SZ_PARAMS][0]
            except (IndexError, KeyError) as err:
                raise exc.MessageInvalid(f"{self!r}: heartbeat has no params") from err
        else:
            self._body = self._data

    @property
    def did(self) -> str:
        """Return the did of the device (NB: the gateway calls itself 'lumi.0')."""
        return self._body.get(SZ_DID, self._data.get(SZ_DID, GATEWAY_DID_ALIAS))  # type: ignore[no-any-return]

    @property
    def pairs(self) -> list[KeyValT]:
        """Return the (key, value) pairs from all the param lists of the message.

        Records with a (non-zero) error code, or without a value, are dropped.
        """

        result = []
        for key in PARAM_LIST_KEYS:
            for param in self._body.get(key) or []:
                if param.get(SZ_ERROR_CODE, 0) != 0:
                    continue
                try:
                    prop = _param_key(param)
                except exc.ParamInvalid as err:
                    _LOGGER.warning(f"{self!r}: {err}")
                    continue
                if SZ_VALUE in param:
                    result.append((prop, param[SZ_VALUE]))
        return result


class BleMessage(MessageBase):
    """A message of the binary-event protocol (MiBeacon)."""

    SCHEMA = SCH_BLE_MESSAGE

    def __init__(self, topic: str, data: dict[str, Any], dtm: dt | None = None) -> None:
        super().__init__(topic, data, dtm=dtm)

        self.eid: int = self._data[SZ_EID]
        self.edata: str = self._data[SZ_EDATA]
        if not is_hex(self.edata):
            raise exc.PayloadInvalid(f"{self!r}: edata={self.edata!r}")

        self.pdid: int = self._data[SZ_PDID]
        self.seq: int | None = self._data[SZ_SEQ]

    def __str__(self) -> str:
        return f"{self.topic} {self.did} 0x{self.eid:04X} {self.edata} ({self.pdid})"

    @property
    def pairs(self) -> list[KeyValT]:
        return [(self.eid, self.edata)]


class StatMessage(MessageBase):
    """A message of zigbee link statistics (frame metadata), keyed by eui64."""

    SCHEMA = SCH_STAT_MESSAGE

    @property
    def did(self) -> str:
        return did_from_eui64(self._data[SZ_EUI64])

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    @property
    def pairs(self) -> list[KeyValT]:
        return []


def _loads(payload: str | bytes) -> dict[str, Any]:
    """Return the JSON object of a bus payload, or raise MessageInvalid."""

    if isinstance(payload, bytes | bytearray):
        payload = payload.decode(errors="replace")

    if not RE_JSON_OBJECT.match(payload.strip()):
        raise exc.MessageInvalid(f"Payload is not a JSON object: {payload[:80]}")

    try:
        result = json.loads(payload)
    except json.JSONDecodeError as err:
        raise exc.MessageInvalid(f"Payload is not valid JSON: {err}") from err

    if not isinstance(result, dict):
        raise exc.MessageInvalid(f"Payload is not a JSON object: {payload[:80]}")
    return result


def _param_key(param: dict[str, Any]) -> str:
    """Return the key of a param record: a res_name, or siid.piid, or siid.eiid."""

    if SZ_RES_NAME in param:
        return param[SZ_RES_NAME]  # type: ignore[no-any-return]
    if SZ_PIID in param:
        return f"{param.get(SZ_SIID)}.{param[SZ_PIID]}"
    if SZ_EIID in param:
        return f"{param.get(SZ_SIID)}.{param[SZ_EIID]}"
    raise exc.ParamInvalid(f"Unsupported param: {param}")


def message_factory(
    topic: str, payload: str | bytes, dtm: dt | None = None
) -> MessageBase | None:
    """Return a message of the appropriate class for the topic.

    Returns None for topics that carry nothing of interest (e.g. log/miio), and raises
    MessageInvalid if the payload is not a valid message.
    """

    if topic == TOPIC_LUMI_RX:
        return LumiMessage.from_json(topic, payload, dtm=dtm)
    if topic == TOPIC_BLE_RX:
        return BleMessage.from_json(topic, payload, dtm=dtm)
    if RE_TOPIC_STAT.search(topic):
        return StatMessage.from_json(topic, payload, dtm=dtm)
    if topic == TOPIC_MIIO_RX or RE_TOPIC_HEARTBEAT.search(topic):
        return None

    _LOGGER.debug(f"Ignoring a message with an unrouted topic: {topic}")
    return None
