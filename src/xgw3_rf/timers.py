#!/usr/bin/env python3
"""Xiaomi GW3 - the timer registry, used by the timed (derived) states.

Timers are keyed by (device_id, state_name), so a new trigger for the same device/state
replaces (cancels) any pending timer, rather than having them overlap.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeAlias

_LOGGER = logging.getLogger(__name__)


TimerKeyT: TypeAlias = tuple[str, str]  # (device_id, state_name)


class TimerRegistry:
    """A registry of single-shot and repeating timers, for a single event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handles: dict[TimerKeyT, asyncio.TimerHandle] = {}

    def __repr__(self) -> str:
        return f"TimerRegistry({sorted(self._handles)})"

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _register(self, key: TimerKeyT, handle: asyncio.TimerHandle) -> None:
        # the prior handle is cancelled, and the new one stored, in one step
        if old := self._handles.get(key):
            old.cancel()
        self._handles[key] = handle

    def call_later(
        self, key: TimerKeyT, delay: float, fnc: Callable[[], Any]
    ) -> asyncio.TimerHandle:
        """Call fnc once, after delay seconds, replacing any timer with the same key."""

        def callback() -> None:
            del self._handles[key]
            fnc()

        handle = self.loop.call_later(delay, callback)
        self._register(key, handle)
        _LOGGER.debug(f"Timer {key} set for {delay}s")
        return handle

    def call_every(
        self, key: TimerKeyT, interval: float, fnc: Callable[[], bool]
    ) -> asyncio.TimerHandle:
        """Call fnc every interval seconds, replacing any timer with the same key.

        The timer is cancelled once fnc returns False.
        """

        def callback() -> None:
            try:
                again = fnc()
            except Exception:  # the handle has already fired
                self._handles.pop(key, None)
                raise

            if again:
                self._register(key, self.loop.call_later(interval, callback))
            else:
                self._handles.pop(key, None)
                _LOGGER.debug(f"Timer {key} has expired")

        handle = self.loop.call_later(interval, callback)
        self._register(key, handle)
        _LOGGER.debug(f"Timer {key} set for every {interval}s")
        return handle

    def cancel(self, key: TimerKeyT) -> bool:
        """Cancel a timer, returning True if there was one to cancel."""

        if handle := self._handles.pop(key, None):
            handle.cancel()
            return True
        return False

    def cancel_all(self) -> None:
        """Cancel all the timers (e.g. at shutdown)."""

        for handle in self._handles.values():
            handle.cancel()
        if self._handles:
            _LOGGER.debug(f"Cancelled {len(self._handles)} timer(s)")
        self._handles.clear()
