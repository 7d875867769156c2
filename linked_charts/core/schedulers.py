from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple


class Scheduler(ABC):
    """
    Runs a continuation once a visual transition has finished.

    Charts never block on a transition: they hand the remaining lifecycle events
    to a scheduler and return.
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """
        :param delay: seconds until the transition is over
        :param callback: continuation firing the deferred events
        """
        raise NotImplementedError()


class ImmediateScheduler(Scheduler):
    """
    Runs each continuation right away.

    The default for server-side rendering: the figure is complete once the draw
    step returns, and the browser plays the transition after receiving it, so
    there is nothing left to wait for on the server.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        callback()


class DeferredScheduler(Scheduler):
    """
    Queue of continuations driven by an explicit clock.

    For hosts that want terminal events after the figure has been shipped: the
    host calls 'flush()' at that point (see the Dash bridge). Tests drive it
    step by step with 'advance()'.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []

    @property
    def now(self) -> float:
        return self._now

    def pending(self) -> int:
        return len(self._queue)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self._now + max(delay, 0.0), next(self._seq), callback))

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run every continuation that became due, in
        due-time order (ties in scheduling order).
        :return: number of continuations run
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
            ran += 1
        self._now = target
        return ran

    def flush(self) -> int:
        """Run everything that is queued, including continuations queued while flushing."""
        ran = 0
        while self._queue:
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
            ran += 1
        return ran


class AsyncioScheduler(Scheduler):
    """Schedules continuations on the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(max(delay, 0.0), callback)


# Process-wide default used by charts that are not given a scheduler.
default_scheduler = ImmediateScheduler()
