#!/usr/bin/env python3
"""Xiaomi GW3 - the state descriptor: one named, typed property of a device.

A descriptor is first created as a (unbound) template, see: catalogue.py. The device
registries then bind a copy of it, for each device model, to a wire key (a resource
such as '4.1.85' or '2.1', or an event id such as 0x1004) and to a chain of
converters, each already resolved for that model.

A bound descriptor with no wire key (resource is None) takes the whole message (all
its pairs) as its raw value. One with no converters at all is synthetic: it never
decodes a value of its own, and is emitted only by dependency expansion.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from ..const import (
    META_KEYS,
    RE_LUMI_RESOURCE,
    RE_MIOT_RESOURCE,
    ROLE_STATE,
    SZ_READ,
    SZ_ROLE,
    SZ_TYPE,
    SZ_WRITE,
    TYPE_BOOLEAN,
    TYPE_NUMBER,
    TYPE_STRING,
)
from .setters import default_setter

if TYPE_CHECKING:
    from types import SimpleNamespace

    from xgw3_tx.converters import ConverterT

    from ..timers import TimerRegistry


_LOGGER = logging.getLogger(__name__)


RE_ROLE_BOOLEAN: Final = re.compile(r"^(sensor|indicator|button|switch)")
RE_ROLE_NUMBER: Final = re.compile(r"^(value|level)")
RE_ROLE_READ: Final = re.compile(r"^(state|sensor|indicator|value|level|switch)(\.\w*)*$")
RE_ROLE_WRITE: Final = re.compile(r"^(state|button|level|switch)(\.\w*)*$")


ValueMapT: TypeAlias = tuple[Sequence[Any], Sequence[Any]]  # (outer, canonical)
ContextT: TypeAlias = dict[str, tuple[Any, Any]]  # state_name: (old_value, new_value)
EmitT: TypeAlias = Callable[[Any], None]  # emit a new value for *this* state
SetterT: TypeAlias = Callable[
    ["StateDescriptor", str, EmitT, ContextT, "TimerRegistry", "SimpleNamespace"], None
]
WireKeyT: TypeAlias = str | int | None  # resource (str), or eid (int)


_UNSET: Final[Any] = object()


def _index(seq: Sequence[Any], val: Any) -> int | None:
    """Return the index of val in seq, matching on type as well (so True is not 1)."""
    for idx, item in enumerate(seq):
        if item == val and type(item) is type(val):
            return idx
    for idx, item in enumerate(seq):  # e.g. 1.0 == 1
        if item == val and not isinstance(item, bool) and not isinstance(val, bool):
            return idx
    return None


class StateDescriptor:
    """A named, typed device property: its metadata, value map, and behaviour."""

    def __init__(
        self,
        name: str,
        meta: Mapping[str, Any] | None = None,
        *,
        value_map: ValueMapT | None = None,
        depends_on: Iterable[str] = (),
        setter: SetterT | None = None,
        resource: WireKeyT = None,
        converters: Sequence[ConverterT] | None = None,
    ) -> None:
        if meta and (bad := set(meta) - set(META_KEYS)):
            raise ValueError(f"{name}: invalid metadata keys: {sorted(bad)}")
        if value_map is not None and len(value_map[0]) != len(value_map[1]):
            raise ValueError(f"{name}: the value map has sequences of unequal length")

        self.name = name
        self.meta: dict[str, Any] = dict(meta or {})
        self.value_map = value_map
        self.depends_on: tuple[str, ...] = tuple(depends_on)

        self.resource = resource
        self._converters: tuple[ConverterT, ...] = tuple(converters or ())

        self._setter: SetterT = setter or default_setter

    def __repr__(self) -> str:
        if self.resource is None:
            return f"StateDescriptor({self.name})"
        return f"StateDescriptor({self.name}, resource={self.resource!r})"

    def __str__(self) -> str:
        return self.name

    def derive(
        self,
        name: str | None = None,
        meta: Mapping[str, Any] | None = None,
        *,
        value_map: ValueMapT | None = _UNSET,
        depends_on: Iterable[str] = _UNSET,
    ) -> StateDescriptor:
        """Return a (renamed) variant of this template, e.g. water_leak from alarm.

        The metadata is merged (the new values take precedence), whilst the value map
        and dependencies are replaced only if they are given.
        """

        return StateDescriptor(
            name or self.name,
            self.meta | dict(meta or {}),
            value_map=self.value_map if value_map is _UNSET else value_map,
            depends_on=self.depends_on if depends_on is _UNSET else depends_on,
            setter=self._setter,
        )

    def bind(
        self, resource: WireKeyT, converters: Sequence[ConverterT] | None
    ) -> StateDescriptor:
        """Return a copy of this template, bound to a wire key and a converter chain."""

        return StateDescriptor(
            self.name,
            self.meta,
            value_map=self.value_map,
            depends_on=self.depends_on,
            setter=self._setter,
            resource=resource,
            converters=converters,
        )

    @property
    def is_synthetic(self) -> bool:
        """Return True if this state has no value of its own (e.g. a timer)."""
        return not self._converters

    @property
    def writable(self) -> bool:
        return bool(self.state_object[SZ_WRITE])

    def map_left(self, val: Any) -> Any:
        """Map an outer (protocol) value to a canonical value, via the value map."""

        if self.value_map is None:
            return val
        outer, canonical = self.value_map
        idx = _index(outer, val)
        return None if idx is None else canonical[idx]

    def normalize_left(self, val: Any) -> Any:
        """Convert a raw value to a canonical value: converters, then the value map."""

        if not self._converters:
            return None
        for fnc in self._converters:
            val = fnc(val)
        return self.map_left(val)

    def normalize_right(self, val: Any) -> Any:
        """Convert a canonical value to an outer (protocol) value, via the value map."""

        if self.value_map is None:
            return val
        outer, canonical = self.value_map
        idx = _index(canonical, val)
        return None if idx is None else outer[idx]

    def decode(self, pairs: Sequence[tuple[Any, Any]]) -> dict[str, Any]:
        """Return {name: value} from a message's (key, value) pairs, or an empty dict.

        A bound state will decode only the pairs with its own key (the last one wins),
        an unbound state will decode all the pairs, as a whole.
        """

        if self.resource is None:
            value = self.normalize_left(list(pairs))
        else:
            value = None
            for key, raw in pairs:
                if key == self.resource:
                    value = self.normalize_left(raw)

        return {} if value is None else {self.name: value}

    def encode(self, value: Any) -> dict[str, list[dict[str, Any]]] | None:
        """Return the params of a write command for this state, or None.

        Lumi resources (e.g. 4.1.85) are written as params, MIoT resources (e.g. 2.1)
        as mi_spec.
        """

        if not isinstance(self.resource, str):
            return None

        raw = self.normalize_right(value)

        if RE_LUMI_RESOURCE.match(self.resource):
            return {"params": [{"res_name": self.resource, "value": raw}]}

        if RE_MIOT_RESOURCE.match(self.resource):
            siid, piid = (int(x) for x in self.resource.split("."))
            return {"mi_spec": [{"siid": siid, "piid": piid, "value": raw}]}

        return None

    def set(
        self,
        did: str,
        emit: EmitT,
        context: ContextT,
        timers: TimerRegistry,
        config: SimpleNamespace,
    ) -> None:
        """Apply this state's (new) value, as found in the context, via its setter."""
        self._setter(self, did, emit, context, timers, config)

    @property
    def state_object(self) -> dict[str, Any]:
        """Return the state's display metadata, with defaults derived from its role."""

        role = self.meta.get(SZ_ROLE) or ROLE_STATE

        if RE_ROLE_BOOLEAN.match(role):
            type_ = TYPE_BOOLEAN
        elif RE_ROLE_NUMBER.match(role):
            type_ = TYPE_NUMBER
        else:
            type_ = TYPE_STRING

        result = {k: self.meta.get(k) for k in META_KEYS}
        result[SZ_ROLE] = role

        for key, default in (
            (SZ_TYPE, type_),
            (SZ_READ, bool(RE_ROLE_READ.match(role))),
            (SZ_WRITE, bool(RE_ROLE_WRITE.match(role))),
        ):
            result[key] = default if self.meta.get(key) is None else self.meta[key]

        return result
