#!/usr/bin/env python3
"""Xiaomi GW3 - a decoder for the Xiaomi Gateway 3 local message bus."""

__version__ = "0.3.2"
VERSION = __version__
