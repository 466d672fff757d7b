#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus.

    The runtime layer (device specs, states, devices, the gateway).
"""

__version__ = "0.3.2"
VERSION = __version__
