"""Delayed-task scheduler driven by a :class:`Clock`.

Stands in for the host's timer service: a task is a plain callable plus
arguments due at an absolute ``clock.elapsed()`` time.  Periodic work is
expressed by a task re-scheduling itself, so nothing fires for an entry
once it stops doing so.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from navstrike.core.clock import Clock, SimClock

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A callable due at ``due`` seconds of clock elapsed time.

    Ordering is ``(due, seq)`` so tasks due at the same instant run in the
    order they were scheduled.
    """

    due: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(default=(), compare=False)


class Scheduler:
    """Min-heap of pending tasks.

    Not thread-safe; all calls are expected on the session's control thread.
    Exceptions raised by a task are logged and do not stop other tasks.
    """

    def __init__(self, clock: Clock):
        self._clock = clock
        self._heap: list[ScheduledTask] = []
        self._seq = itertools.count()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def pending(self) -> int:
        return len(self._heap)

    def next_due(self) -> float | None:
        """Elapsed time of the earliest pending task, or None if idle."""
        return self._heap[0].due if self._heap else None

    def call_at(self, due: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        task = ScheduledTask(due=float(due), seq=next(self._seq), callback=callback, args=args)
        heapq.heappush(self._heap, task)
        return task

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Schedule *callback(*args)* to run *delay* seconds from now.

        Raises:
            ValueError: If *delay* is negative.
        """
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        return self.call_at(self._clock.elapsed() + delay, callback, *args)

    def run_due(self) -> int:
        """Run every task due at or before the current clock time.

        Tasks scheduled while running are picked up in the same call if they
        are already due.  Returns the number of tasks run.
        """
        now = self._clock.elapsed()
        ran = 0
        while self._heap and self._heap[0].due <= now:
            task = heapq.heappop(self._heap)
            self._run(task)
            ran += 1
        return ran

    def advance(self, dt: float) -> int:
        """Step a :class:`SimClock` forward by *dt*, firing tasks on time.

        The clock is moved to each task's due time before the task runs, so
        a task observes the time it was scheduled for and tasks it schedules
        inside the window also fire.

        Raises:
            TypeError: If the scheduler is not driven by a SimClock.
        """
        if not isinstance(self._clock, SimClock):
            raise TypeError("advance() requires a SimClock")
        if dt < 0:
            raise ValueError(f"advance() requires dt >= 0, got {dt}")
        end = self._clock.elapsed() + dt
        ran = 0
        while self._heap and self._heap[0].due <= end:
            task = heapq.heappop(self._heap)
            if task.due > self._clock.elapsed():
                self._clock.set_elapsed(task.due)
            self._run(task)
            ran += 1
        self._clock.set_elapsed(end)
        return ran

    def cancel_all(self) -> None:
        self._heap.clear()

    def _run(self, task: ScheduledTask) -> None:
        try:
            task.callback(*task.args)
        except Exception:
            logger.exception("Scheduled task %r failed", task.callback)
