"""
Schedulers for the delay before a synthetic move is committed.

The session hands a callback and a delay to a scheduler and keeps the
returned handle so it can cancel the move if the game changes first.
"""
import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...


class MoveScheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledHandle: ...


class AsyncioScheduler:
    """Runs callbacks through `loop.call_later`; the handle is an asyncio.TimerHandle."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay, callback):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by an explicit clock.

    Nothing runs until `advance` or `run_pending` is called. Callbacks that
    schedule further callbacks are honored in the same call when those fall
    due.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualHandle]] = []
        self._counter = itertools.count()

    def schedule(self, delay, callback):
        handle = ManualHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Moves the clock forward and fires what fell due. Returns how many callbacks ran."""
        deadline = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        self.now = deadline
        return fired

    def run_pending(self) -> int:
        """Fires everything queued, including callbacks scheduled while firing."""
        fired = 0
        while self._queue:
            due, _, handle = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        return fired
