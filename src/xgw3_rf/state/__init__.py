#!/usr/bin/env python3
"""Xiaomi GW3 - the state descriptors (and their templates) of devices."""

from __future__ import annotations

from .base import ContextT, EmitT, StateDescriptor
from .catalogue import CATALOGUE, get_template
from .setters import (
    debug_output_setter,
    default_setter,
    no_motion_setter,
    occupancy_setter,
)

__all__ = [
    "CATALOGUE",
    "ContextT",
    "EmitT",
    "StateDescriptor",
    "debug_output_setter",
    "default_setter",
    "get_template",
    "no_motion_setter",
    "occupancy_setter",
]
