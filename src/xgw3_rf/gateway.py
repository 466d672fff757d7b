#!/usr/bin/env python3
"""Xiaomi GW3 - the gateway (i.e. the runtime boundary with the host).

The gateway owns the device table, routes the bus messages to the decoder, and calls
back the host to persist the states (emit/ensure_state) and to publish commands.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Callable, Iterable
from datetime import datetime as dt
from types import SimpleNamespace
from typing import Any

from xgw3_tx import message_factory, set_msg_logging_config
from xgw3_tx.const import TOPIC_LUMI_TX
from xgw3_tx.helpers import is_supported_firmware

from . import bluetooth, exceptions as exc, zigbee
from .const import (
    MIN_SUPPORTED_VERSION,
    SZ_DEBUG_OUTPUT,
    SZ_DID,
    SZ_FW_VERSION,
    SZ_MAC,
    SZ_MESSAGES_STAT,
    SZ_MODEL,
    SZ_NAME,
    SZ_PROPS,
    SZ_RESET_CNT,
    SZ_SPEC,
    SZ_TYPE,
    DevType,
)
from .device import Device
from .dispatcher import process_msg
from .schemas import (
    SCH_GATEWAY_CONFIG,
    SCH_GLOBAL_CONFIG,
    SZ_CONFIG,
    SZ_EXTERNAL_DEVICES,
    SZ_MESSAGE_LOG,
)
from .state import EmitT, StateDescriptor
from .timers import TimerRegistry

_LOGGER = logging.getLogger(__name__)


# the host's callbacks, each may be a coroutine function
EmitCallbackT = Callable[[str, str, Any], Any]  # (did, state_name, value)
EnsureStateCallbackT = Callable[[str, str, dict[str, Any]], Any]  # (did, name, meta)
PublishCallbackT = Callable[[str, str], Any]  # (topic, payload)


class Gateway:
    """The gateway class."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        emit: EmitCallbackT | None = None,
        ensure_state: EnsureStateCallbackT | None = None,
        publish: PublishCallbackT | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        **kwargs: Any,
    ) -> None:
        if kwargs.pop("debug_mode", None):
            _LOGGER.setLevel(logging.DEBUG)

        schema = SCH_GLOBAL_CONFIG({SZ_CONFIG: config or {}, **kwargs})

        self.config = SimpleNamespace(**SCH_GATEWAY_CONFIG(schema[SZ_CONFIG]))
        self._message_log: dict[str, Any] | None = schema[SZ_MESSAGE_LOG]
        self._external = zigbee.resolve_families(schema[SZ_EXTERNAL_DEVICES])

        self._emit_cb = emit
        self._ensure_state_cb = ensure_state
        self._publish_cb = publish

        self._loop = loop
        self._timers = TimerRegistry(loop)
        self._tasks: set[asyncio.Task[Any]] = set()

        self.devices: list[Device] = []
        self.device_by_did: dict[str, Device] = {}

        self.gateway_did: str = ""
        self.topic: str = ""  # e.g. gw/50EC50ABCDEF/

    def __repr__(self) -> str:
        return f"Gateway(did={self.gateway_did}, devices={len(self.devices)})"

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    async def start(self) -> None:
        """Start the Gateway (i.e. its message log)."""

        if self._message_log:
            await set_msg_logging_config(**self._message_log)

    async def stop(self) -> None:
        """Stop the Gateway and tidy up (cancel all the timers, first)."""

        self._timers.cancel_all()

        if tasks := [t for t in self._tasks if not t.done()]:
            await asyncio.gather(*tasks, return_exceptions=True)

    ####################################################################################
    # the device table (enumeration)

    def _resolve(self, dev_type: DevType, model: Any) -> dict[str, Any]:
        """Return a device description, with a spec that may be empty (but not None)."""

        if dev_type == DevType.BLE:
            desc = bluetooth.get_device(model) or {SZ_MODEL: str(model)}
        else:
            desc = zigbee.get_device(model, self._external)
        return desc | {SZ_SPEC: desc.get(SZ_SPEC) or []}

    def _is_excluded(self, state: StateDescriptor) -> bool:
        if state.name == SZ_DEBUG_OUTPUT:
            return not self.config.debug_output
        if state.name == SZ_MESSAGES_STAT:
            return not self.config.msg_received_stat
        return False

    def add_device(self, record: dict[str, Any]) -> Device:
        """Add a device from its enumeration record, {did, mac, type, model, ...}.

        An unsupported model is still added, but with an empty spec.
        """

        dev_type = DevType(record[SZ_TYPE])
        desc = self._resolve(dev_type, record[SZ_MODEL])

        rows = [r for r in desc[SZ_SPEC] if not self._is_excluded(r[2])]
        props = record.get(SZ_PROPS) or {}

        device = Device(
            record[SZ_DID],
            mac=record.get(SZ_MAC, ""),
            dev_type=dev_type,
            model=desc.get(SZ_MODEL, str(record[SZ_MODEL])),
            name=desc.get(SZ_NAME, ""),
            fw_version=record.get(SZ_FW_VERSION, ""),
            spec=[state for _, _, state in rows],
            reset_cnt=record.get(SZ_RESET_CNT) or props.get(SZ_RESET_CNT),
        )

        if device.did in self.device_by_did:
            self.devices.remove(self.device_by_did[device.did])
        self.devices.append(device)
        self.device_by_did[device.did] = device

        if dev_type == DevType.GATEWAY:
            self._setup_gateway(device)
            return device

        for state in device.spec:
            self._ensure_state(device, state)

        for _, prop, state in rows:  # the initial values, from the retained props
            if prop is None or prop not in props:
                continue
            if (val := state.normalize_left(props[prop])) is not None:
                self._emitter(device, state.name)(val)

        return device

    def _setup_gateway(self, device: Device) -> None:
        self.gateway_did = device.did
        self.topic = f"gw/{device.mac[2:].upper()}/"

        if not is_supported_firmware(device.fw_version):
            _LOGGER.error(
                f"The gateway's firmware ({device.fw_version}) is not supported"
                f" (it should be {MIN_SUPPORTED_VERSION}, or later)"
            )

    def add_devices(self, records: Iterable[dict[str, Any]]) -> list[Device]:
        """Add the devices of an enumeration (a list of records)."""

        result = [self.add_device(r) for r in records]

        lumi = [d for d in result if d.type == DevType.LUMI]
        ble = [d for d in result if d.type == DevType.BLE]

        _LOGGER.info(f"Loaded devices: lumi - {len(lumi)}, ble - {len(ble)}")
        for device in lumi + ble:
            _LOGGER.debug(f"{device.type.upper()}: {device.model} - DID: {device.did}")

        return result

    def get_device(self, did: str) -> Device:
        """Return a device by its did, or raise DeviceNotFound."""

        try:
            return self.device_by_did[did]
        except KeyError:
            raise exc.DeviceNotFound(f"Unknown device: {did}") from None

    def restore_states(self, did: str, values: dict[str, Any]) -> dict[str, Any]:
        """Restore a device's last-known state values, as persisted by the host.

        The values become the 'old' values of the context (they are not emitted).
        Unknown states, and None values, are ignored. Return the restored values.
        """

        device = self.get_device(did)

        restored = {
            k: v
            for k, v in values.items()
            if v is not None and device.get_state(k) is not None
        }
        if ignored := set(values) - set(restored):
            _LOGGER.debug(f"{device!r}: ignoring state(s): {sorted(ignored)}")

        device.states.update(restored)
        return restored

    ####################################################################################
    # the inbound path

    def handle_message(
        self, topic: str, payload: str | bytes, dtm: dt | None = None
    ) -> None:
        """Process a bus message (its failures are logged, and not raised)."""

        try:
            msg = message_factory(topic, payload, dtm=dtm)
        except exc.MessageInvalid as err:
            _LOGGER.warning(f"{topic} < {err.__class__.__name__}({err})")
            return

        if msg is not None:
            process_msg(self, msg)

    ####################################################################################
    # the host's callbacks

    def _call(self, fnc: Callable[..., Any] | None, *args: Any) -> None:
        """Call a host callback, scheduling its result if it is awaitable.

        A failure of the callback is logged, and not raised.
        """

        if fnc is None:
            return

        try:
            result = fnc(*args)
        except Exception as err:  # e.g. a failed write by the host
            _LOGGER.exception(f"Host callback failed: {args} < {err!r}")
            return

        if inspect.isawaitable(result):
            task = self.loop.create_task(result)  # type: ignore[arg-type]
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and (err := task.exception()):
            _LOGGER.error(f"Host callback task failed: {err!r}", exc_info=err)

    def _ensure_state(self, device: Device, state: StateDescriptor) -> None:
        self._call(self._ensure_state_cb, device.did, state.name, state.state_object)

    def _emitter(self, device: Device, name: str) -> EmitT:
        """Return a callback that will emit a new value of a device's state."""

        def emit(val: Any) -> None:
            device.states[name] = val
            self._call(self._emit_cb, device.did, name, val)

        return emit

    ####################################################################################
    # the outbound (command) path

    def send_command(self, did: str, states: dict[str, Any]) -> dict[str, Any]:
        """Send new values of a device's states, as a write command (if any).

        A state without a wire key (e.g. occupancy_timeout) is stored locally, rather
        than sent, for any type of device. Only the property-bag (lumi) devices can be
        sent to.
        """

        device = self.get_device(did)

        wired: dict[str, tuple[StateDescriptor, Any]] = {}
        for name, val in states.items():
            if (state := device.get_state(name)) is None:
                _LOGGER.warning(f"{device!r}: has no state: {name}")
            elif state.resource is None:
                self._emitter(device, name)(val)
            else:
                wired[name] = (state, val)

        if wired and device.type != DevType.LUMI:
            raise exc.CommandInvalid(
                f"{device!r}: is not a zigbee (lumi) device,"
                f" so cannot send: {list(wired)}"
            )

        payload: dict[str, Any] = {"cmd": "write", SZ_DID: device.did}

        for name, (state, val) in wired.items():
            if not state.writable:
                _LOGGER.warning(f"{device!r}: state is read-only: {name}")
                continue

            if (params := state.encode(val)) is None:
                _LOGGER.warning(f"{device!r}: unable to encode {name}={val!r}")
                continue

            for key, items in params.items():
                payload[key] = payload.get(key, []) + items

        if len(payload) > 2:
            self._call(self._publish_cb, TOPIC_LUMI_TX, json.dumps(payload))
        return payload
