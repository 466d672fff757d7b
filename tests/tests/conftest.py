#!/usr/bin/env python3
"""Fixtures for testing."""

from collections.abc import AsyncGenerator

import pytest

from xgw3_rf import Gateway

from .helpers import FakeHost, make_gwy


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
async def gwy(host: FakeHost) -> AsyncGenerator[Gateway, None]:  # NOTE: async
    """Return a gateway with the test devices (and a known, minimal config)."""
    gwy = make_gwy(host)
    host.clear()
    try:
        yield gwy
    finally:
        await gwy.stop()
