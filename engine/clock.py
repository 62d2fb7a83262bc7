"""Timer services used by every deferred callback in the engine.

All engine timing goes through a :class:`Clock`. Callbacks run on the thread
that drives the clock, so the engine never sees two callbacks at once.

* :class:`ManualClock` keeps virtual time that only moves when
  :meth:`ManualClock.advance` is called. Tests and the arena use it.
* :class:`PolledClock` is a manual clock slaved to ``time.monotonic`` for
  renderers that poll (Streamlit reruns).
* :class:`AsyncioClock` delegates to an asyncio event loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, when: float) -> None:
        self.when = when
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Clock:
    """Base interface for timer services."""

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError


class ManualClock(Clock):
    """Virtual time; callbacks fire in due order while :meth:`advance` runs."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, TimerHandle, Callback]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        if delay < 0:
            delay = 0.0
        handle = TimerHandle(self._now + delay)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle, callback))
        return handle

    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards.")
        self.advance_to(self._now + seconds)

    def advance_to(self, target: float) -> None:
        """Fire every callback due at or before ``target``, including new ones."""
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, min(when, target))
            handle.cancel()
            callback()
        self._now = max(self._now, target)

    def run_until_idle(self, limit: float = 3600.0) -> None:
        """Fire callbacks until nothing is scheduled or ``limit`` seconds pass."""
        deadline = self._now + limit
        while True:
            live = [entry for entry in self._queue if not entry[2].cancelled]
            if not live:
                return
            next_when = min(entry[0] for entry in live)
            if next_when > deadline:
                return
            self.advance_to(next_when)


class PolledClock(ManualClock):
    """Manual clock that catches up with the wall clock on every :meth:`poll`."""

    def __init__(self, source: Callable[[], float] = time.monotonic) -> None:
        self._source = source
        super().__init__(start=source())

    def poll(self) -> None:
        self.advance_to(self._source())


class _AsyncioTimerHandle(TimerHandle):
    def __init__(self, when: float, handle: asyncio.TimerHandle) -> None:
        super().__init__(when)
        self._handle = handle

    def cancel(self) -> None:
        super().cancel()
        self._handle.cancel()


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        delay = max(0.0, delay)
        handle = self._loop.call_later(delay, callback)
        return _AsyncioTimerHandle(self._loop.time() + delay, handle)
