#!/usr/bin/env python3
"""Xiaomi GW3 - Decode/process a message (its pairs into states), and apply them.

There is a decode path for each kind of message (property-bag, binary-event & stat),
each of which results in a list of (state descriptor, value) for a single device. The
states are then applied via their setters, with a context of old & new values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from xgw3_tx import converters as cv
from xgw3_tx.message import BleMessage, LumiMessage, MessageBase, StatMessage
from xgw3_tx.parsers import parse_payload

from . import exceptions as exc
from .const import GATEWAY_DID_ALIAS, SZ_DID, SZ_MESSAGES_STAT, Cmd
from .state import CATALOGUE, StateDescriptor
from .state import catalogue as st

if TYPE_CHECKING:
    from xgw3_tx.message import KeyValT

    from . import Gateway
    from .device import Device
    from .state import ContextT

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_FORCE_LOG_MESSAGES: Final[bool] = False  # useful for dev/test
_DBG_INCREASE_LOG_LEVELS: Final[bool] = False  # set True for developer-friendly spam

_LOGGER = logging.getLogger(__name__)


__all__ = ["apply_states", "decode_pairs", "process_msg"]


DecodedT: TypeAlias = list[tuple[StateDescriptor, Any]]  # (state, new value)


def decode_pairs(spec: Sequence[StateDescriptor], pairs: list[KeyValT]) -> DecodedT:
    """Reduce a device's spec over a message's (key, value) pairs.

    Every state decodes the entire list of pairs (a bound state will pick out its own
    key). Any state that depends upon a decoded state is included too, without a value
    of its own, so that (e.g.) its timers are restarted.
    """

    values: dict[str, Any] = {}
    for state in spec:
        values |= state.decode(pairs)

    names = set(values) | {s.name for s in spec if set(s.depends_on) & set(values)}

    result: DecodedT = []
    for state in spec:  # in spec order, and a state name only once
        if state.name in names:
            names.discard(state.name)
            result.append((state, values.get(state.name)))
    return result


def _get_device(gwy: Gateway, did: str) -> Device:
    try:
        return gwy.device_by_did[did]
    except KeyError:
        raise exc.DeviceNotFound(f"Unknown device: {did}") from None


def _decode_lumi(gwy: Gateway, msg: LumiMessage) -> tuple[Device, DecodedT] | None:
    """Decode a property-bag message (note the gateway calls itself 'lumi.0')."""

    if msg.cmd == Cmd.WRITE_ACK:
        return None

    if msg.cmd == Cmd.WRITE_RSP and msg.did != GATEWAY_DID_ALIAS:
        return None  # the device will also report the new value

    if msg.cmd not in (Cmd.HEARTBEAT, Cmd.REPORT, Cmd.READ_RSP, Cmd.WRITE_RSP):
        _LOGGER.warning(f"{msg!r} < Unsupported cmd: {msg.cmd}")
        return None

    did = gwy.gateway_did if msg.did == GATEWAY_DID_ALIAS else msg.did

    if did not in gwy.device_by_did:  # e.g. paired after startup
        _LOGGER.info(f"{msg!r} < Ignoring a message from an unknown device: {did}")
        return None

    device = gwy.device_by_did[did]
    return device, decode_pairs(device.spec, msg.pairs)


def _decode_ble_fallback(gwy: Gateway, msg: BleMessage) -> DecodedT:
    """Decode a binary-event message via the hardwired table (for any pdid)."""

    result: DecodedT = [
        (CATALOGUE[k], CATALOGUE[k].map_left(v))
        for k, v in parse_payload(msg.eid, msg.edata, msg.pdid).items()
        if k in CATALOGUE
    ]

    if gwy.config.debug_output:
        state = st.DEBUG_OUTPUT.bind(None, [cv.ble_debug_output(msg.pdid)])
        result += [(state, v) for v in state.decode(msg.pairs).values()]

    return result


def _decode_ble(gwy: Gateway, msg: BleMessage) -> tuple[Device, DecodedT] | None:
    """Decode a binary-event message, dropping any retransmissions (by seq)."""

    device = _get_device(gwy, msg.did)

    if msg.seq is not None and msg.seq == device.seq:
        _LOGGER.debug(f"{msg!r} < Ignoring a retransmission (seq={msg.seq})")
        return None
    device.seq = msg.seq

    return device, (
        decode_pairs(device.spec, msg.pairs) or _decode_ble_fallback(gwy, msg)
    )


def _decode_stat(gwy: Gateway, msg: StatMessage) -> tuple[Device, DecodedT] | None:
    """Update a zigbee device's link statistics, and decode them as messages_stat."""

    if (device := gwy.device_by_did.get(msg.did)) is None:
        _LOGGER.debug(f"{msg!r} < Ignoring stats for an unknown device: {msg.did}")
        return None

    device.stat.update(msg.data)

    if (state := device.get_state(SZ_MESSAGES_STAT)) is None:
        return device, []

    value = state.normalize_left(device.stat.as_dict() | {SZ_DID: msg.did})
    return device, [(state, value)]


def build_context(
    states: dict[str, Any], decoded: Iterable[tuple[Any, Any]]
) -> ContextT:
    """Return the context: {state_name: (old_value, new_value)} for all the states.

    A state without a (non-None) new value has only its old value.
    """

    context: ContextT = {k: (v, None) for k, v in states.items()}
    for state, val in decoded:
        if val is not None:
            context[state.name] = (states.get(state.name), val)
    return context


def apply_states(gwy: Gateway, device: Device, decoded: DecodedT) -> None:
    """Apply the decoded states of a device, via each state's setter."""

    context = build_context(device.states, decoded)

    for state, _ in decoded:
        gwy._ensure_state(device, state)

    for state, _ in decoded:
        state.set(
            device.did,
            gwy._emitter(device, state.name),
            context,
            gwy._timers,
            gwy.config,
        )


def _decode(gwy: Gateway, msg: MessageBase) -> tuple[Device, DecodedT] | None:
    if isinstance(msg, LumiMessage):
        return _decode_lumi(gwy, msg)
    if isinstance(msg, BleMessage):
        return _decode_ble(gwy, msg)
    if isinstance(msg, StatMessage):
        return _decode_stat(gwy, msg) if gwy.config.msg_received_stat else None
    raise NotImplementedError(f"{msg!r} < Unsupported message class")


def process_msg(gwy: Gateway, msg: MessageBase) -> None:
    """Decode the message's pairs as states and apply them (the failures are logged).

    A failure is isolated to its message: it will not affect subsequent messages.
    """

    def log_msg(msg: MessageBase, decoded: DecodedT) -> None:
        if _DBG_FORCE_LOG_MESSAGES:
            _LOGGER.warning(msg)
        elif decoded:
            _LOGGER.info(f"{msg} < {', '.join(f'{s}={v}' for s, v in decoded)}")
        else:
            _LOGGER.debug(msg)

    try:
        if (result := _decode(gwy, msg)) is None:
            return
        device, decoded = result
        apply_states(gwy, device, decoded)

    except exc.DeviceNotFound as err:  # e.g. paired after startup
        _LOGGER.error("%r < %s(%s)", msg, err.__class__.__name__, err)

    except (AssertionError, exc.Gw3Exception, NotImplementedError) as err:
        (_LOGGER.error if _DBG_INCREASE_LOG_LEVELS else _LOGGER.warning)(
            "%r < %s(%s)", msg, err.__class__.__name__, err
        )

    except (AttributeError, LookupError, TypeError, ValueError) as err:
        _LOGGER.exception("%r < %s(%s)", msg, err.__class__.__name__, err)

    else:
        log_msg(msg, decoded)
