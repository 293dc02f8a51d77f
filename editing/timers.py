"""
Edit Timers
Debounce and repeating timers on top of the running asyncio loop.

Callbacks may be plain functions or coroutine functions; coroutines are
wrapped in a task. Cancelling a timer only prevents future firing, a task
that has already started runs to completion.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional


class DebounceTimer:
    """Single-shot timer that restarts on every schedule() call."""

    def __init__(self, delay_ms: int):
        self.delay_ms = delay_ms
        self._handle: Optional[asyncio.TimerHandle] = None
        self.last_task: Optional[asyncio.Task] = None

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], Any], delay_ms: Optional[int] = None) -> None:
        """(Re)start the timer so that callback fires after the delay."""
        self.cancel()
        delay = self.delay_ms if delay_ms is None else delay_ms
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay / 1000.0, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, callback: Callable[[], Any]) -> None:
        self._handle = None
        result = callback()
        if inspect.isawaitable(result):
            self.last_task = asyncio.ensure_future(result)


class RepeatingTimer:
    """Fires a callback every interval until stopped.

    The next tick is scheduled only after the previous callback (and its
    coroutine, if any) has finished, so ticks never overlap.
    """

    def __init__(self, interval_s: float, callback: Callable[[], Any]):
        self.interval_s = interval_s
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._running = False
        self.last_task: Optional[asyncio.Task] = None

    @property
    def is_active(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start (or restart) the timer from a full interval."""
        self.stop()
        self._running = True
        self._schedule_next()

    def stop(self) -> None:
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule_next(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval_s, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._running:
            return
        result = self.callback()
        if inspect.isawaitable(result):
            self.last_task = asyncio.ensure_future(result)
            self.last_task.add_done_callback(self._after_tick)
        else:
            self._after_tick(None)

    def _after_tick(self, _task) -> None:
        if self._running and self._handle is None:
            self._schedule_next()
