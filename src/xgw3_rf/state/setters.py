#!/usr/bin/env python3
"""Xiaomi GW3 - state setters: how a state's new value is applied (emitted).

A setter is invoked with the state's descriptor, the device's did, an emit callback
(for that state), the context, the timer registry and the gateway's config. The
context maps every state name of the device to its (old_value, new_value).

Setters are idempotent under replay: a timer is replaced rather than added to.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from xgw3_tx.const import RE_JSON_OBJECT
from xgw3_tx.helpers import natural_sort_key

if TYPE_CHECKING:
    from types import SimpleNamespace

    from ..timers import TimerRegistry
    from .base import ContextT, EmitT, StateDescriptor


_LOGGER = logging.getLogger(__name__)


def default_setter(
    state: StateDescriptor,
    did: str,
    emit: EmitT,
    context: ContextT,
    timers: TimerRegistry,
    config: SimpleNamespace,
) -> None:
    """Emit the state's new value, if it has one."""

    _, val = context.get(state.name, (None, None))
    if val is not None:
        emit(val)


def _timeout(state: StateDescriptor, context: ContextT, config: SimpleNamespace) -> Any:
    # the timeout is a local-only state, so only ever has an 'old' (stored) value
    timeout, _ = context.get(state.depends_on[1], (None, None))
    return timeout or config.default_occupancy_timeout


def occupancy_setter(
    state: StateDescriptor,
    did: str,
    emit: EmitT,
    context: ContextT,
    timers: TimerRegistry,
    config: SimpleNamespace,
) -> None:
    """Emit occupancy, and (re)start a timer to clear it after the timeout."""

    _, val = context.get(state.depends_on[0], (None, None))

    if val:
        timers.call_later(
            (did, state.name), _timeout(state, context, config), lambda: emit(False)
        )
    if val is not None:
        emit(val)


def no_motion_setter(
    state: StateDescriptor,
    did: str,
    emit: EmitT,
    context: ContextT,
    timers: TimerRegistry,
    config: SimpleNamespace,
) -> None:
    """On occupancy, emit 0, then the seconds since, every timeout (up to a limit)."""

    _, val = context.get(state.depends_on[0], (None, None))
    if not val:
        return

    timeout = _timeout(state, context, config)
    counter = timeout

    def tick() -> bool:
        nonlocal counter

        emit(counter)
        if counter > config.no_motion_limit:
            return False
        counter += timeout
        return True

    timers.call_every((did, state.name), timeout, tick)
    emit(0)


def _json_object(val: Any) -> dict[str, Any]:
    if not isinstance(val, str) or not RE_JSON_OBJECT.match(val):
        return {}
    try:
        result = json.loads(val)
    except json.JSONDecodeError as err:
        _LOGGER.debug(f"Ignoring an invalid JSON value: {val!r} ({err})")
        return {}
    return result if isinstance(result, dict) else {}


def debug_output_setter(
    state: StateDescriptor,
    did: str,
    emit: EmitT,
    context: ContextT,
    timers: TimerRegistry,
    config: SimpleNamespace,
) -> None:
    """Merge the new value into the old one (both are JSON objects), and emit that.

    Newer scalars take precedence, while lists are unioned (and naturally sorted).
    """

    old_val, new_val = context.get(state.name, (None, None))
    if new_val is None:
        return

    old, new = _json_object(old_val), _json_object(new_val)
    result = old | new

    for key, val in new.items():
        if isinstance(val, list) and isinstance(old.get(key, []), list):
            result[key] = sorted(
                {json.dumps(v): v for v in old.get(key, []) + val}.values(),
                key=natural_sort_key,
            )

    emit(json.dumps(result))
