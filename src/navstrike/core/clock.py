"""Scenario clocks.

The engine reads time only through :meth:`Clock.elapsed` (mission seconds,
used for TTI scheduling and log stamps) and :meth:`Clock.now` (the epoch
timestamp carried on launch events).
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> float:
        """Current time as epoch seconds."""
        ...

    def elapsed(self) -> float:
        """Mission seconds since the clock started."""
        ...


class SystemClock:
    """Monotonic wall clock for running against a live host."""

    def __init__(self):
        self._start_time = time.monotonic()
        self._epoch_offset = time.time() - self._start_time

    def now(self) -> float:
        return time.monotonic() + self._epoch_offset

    def elapsed(self) -> float:
        return time.monotonic() - self._start_time


class SimClock:
    """Deterministic mission clock driven by the scheduler.

    Time only moves on :meth:`step` or :meth:`set_elapsed`; the scheduler
    uses the latter to land exactly on each TTI check's due time.
    """

    def __init__(self, start_epoch: float = 1_000_000.0):
        self._start_epoch = start_epoch
        self._elapsed = 0.0

    def now(self) -> float:
        return self._start_epoch + self._elapsed

    def elapsed(self) -> float:
        return self._elapsed

    def step(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"SimClock.step() requires dt >= 0, got {dt}")
        self._elapsed += dt

    def set_elapsed(self, elapsed: float) -> None:
        """Jump to *elapsed* mission seconds.

        Raises:
            ValueError: If *elapsed* is negative.
        """
        if elapsed < 0:
            raise ValueError(
                f"SimClock.set_elapsed() requires elapsed >= 0, got {elapsed}"
            )
        self._elapsed = elapsed


def format_mission_time(elapsed: float) -> str:
    """Render mission seconds as ``T+HH:MM:SS`` (negative values clamp to zero)."""
    total = max(0, int(elapsed))
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"T+{hours:02d}:{minutes:02d}:{seconds:02d}"


def create_clock(config: dict | None = None) -> SystemClock | SimClock:
    """Create a clock from the ``navstrike.time`` config section.

    ``mode: simulated`` gives a :class:`SimClock` starting at ``start_epoch``;
    anything else (or no section) gives a :class:`SystemClock`.
    """
    if config is None:
        return SystemClock()
    if config.get("mode", "realtime") == "simulated":
        return SimClock(start_epoch=config.get("start_epoch", 1_000_000.0))
    return SystemClock()
