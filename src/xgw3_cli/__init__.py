#!/usr/bin/env python3
"""A CLI for the xgw3_rf library."""

from __future__ import annotations
