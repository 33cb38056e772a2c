"""Time-to-impact tracking for in-flight munitions.

Every enrolled munition gets its own recurring check, first run one
update interval after enrollment.  A check either reports a fresh TTI and
schedules the next one, or resolves the entry (impacted, lost, or not
closing on its target), removes it, and schedules nothing further.
"""

from __future__ import annotations

import itertools
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Hashable

import numpy as np

from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Audience, TrackOutcome
from navstrike.strike.interfaces import Telemetry
from navstrike.strike.notifications import Notifier
from navstrike.utils.vectors import as_vec3, closing_speed, distance
from navstrike.utils.logging import strike_context

logger = logging.getLogger(__name__)


@dataclass
class TrackedMunition:
    """One weapon under TTI observation."""

    munition_id: int
    handle: Hashable
    target_position: np.ndarray
    audience: Audience
    enrolled_at: float = 0.0
    state: TrackOutcome = TrackOutcome.ACTIVE
    last_tti_s: float | None = None
    tti_history: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "munition_id": self.munition_id,
            "target_position": self.target_position.tolist(),
            "audience": self.audience.value if self.audience else None,
            "state": self.state.value,
            "last_tti_s": None if self.last_tti_s is None else round(self.last_tti_s, 1),
        }


class TTITracker:
    """Owns the set of tracked munitions, keyed by the host object handle."""

    def __init__(
        self,
        telemetry: Telemetry,
        scheduler: Scheduler,
        notifier: Notifier,
        update_interval_s: float = 10.0,
    ):
        if update_interval_s <= 0:
            raise ValueError(f"update_interval_s must be > 0, got {update_interval_s}")
        self._telemetry = telemetry
        self._scheduler = scheduler
        self._notifier = notifier
        self._interval = update_interval_s
        self._tracked: dict[Hashable, TrackedMunition] = {}
        self._ids = itertools.count(1)
        self._outcomes: Counter[TrackOutcome] = Counter()

    @property
    def active(self) -> list[TrackedMunition]:
        return list(self._tracked.values())

    @property
    def outcomes(self) -> dict[TrackOutcome, int]:
        """How many entries have reached each terminal state so far."""
        return dict(self._outcomes)

    def get(self, handle: Hashable) -> TrackedMunition | None:
        return self._tracked.get(handle)

    def __len__(self) -> int:
        return len(self._tracked)

    def __contains__(self, handle: Hashable) -> bool:
        return handle in self._tracked

    def enroll(
        self,
        handle: Hashable,
        target_position: np.ndarray,
        audience: Audience,
    ) -> TrackedMunition:
        """Start tracking *handle* against a copy of *target_position*."""
        existing = self._tracked.get(handle)
        if existing is not None:
            logger.warning(
                "Weapon %r already tracked as missile %d", handle, existing.munition_id,
            )
            return existing

        entry = TrackedMunition(
            munition_id=next(self._ids),
            handle=handle,
            target_position=np.array(target_position, dtype=float),
            audience=audience,
            enrolled_at=self._scheduler.clock.elapsed(),
        )
        self._tracked[handle] = entry
        self._scheduler.call_later(self._interval, self.update, handle)
        return entry

    def update(self, handle: Hashable) -> TrackOutcome | None:
        """Run one TTI recomputation for *handle*.

        Returns the entry's state after the check, or None when the handle
        is no longer tracked.
        """
        entry = self._tracked.get(handle)
        if entry is None:
            return None
        with strike_context(missile=entry.munition_id):
            return self._check(entry, handle)

    def _check(self, entry: TrackedMunition, handle: Hashable) -> TrackOutcome:
        tag = f"Missile {entry.munition_id}"
        try:
            exists = self._telemetry.object_exists(handle)
            if exists:
                position = as_vec3(self._telemetry.get_position(handle))
                raw_velocity = self._telemetry.get_velocity(handle)
                velocity = None if raw_velocity is None else as_vec3(raw_velocity)
        except Exception:
            logger.exception("Telemetry read failed for %s", tag)
            return self._resolve(entry, TrackOutcome.LOST, f"{tag}: Unable to retrieve telemetry.")

        if not exists:
            return self._resolve(entry, TrackOutcome.LOST, f"{tag}: No longer exists.")

        if velocity is None:
            return self._resolve(entry, TrackOutcome.LOST, f"{tag}: Unable to retrieve velocity.")

        dist = distance(position, entry.target_position)
        if dist == 0:
            return self._resolve(entry, TrackOutcome.IMPACTED, f"{tag}: Has reached its target.")

        speed = closing_speed(position, velocity, entry.target_position, dist)
        if speed > 0:
            tti = dist / speed
            entry.last_tti_s = tti
            entry.tti_history.append(tti)
            self._notifier.notify(entry.audience, f"{tag}: TTI {tti:.1f} seconds")
            self._scheduler.call_later(self._interval, self.update, handle)
            return TrackOutcome.ACTIVE

        return self._resolve(entry, TrackOutcome.UNRESOLVABLE, f"{tag}: Unable to calculate TTI.")

    def _resolve(self, entry: TrackedMunition, outcome: TrackOutcome, message: str) -> TrackOutcome:
        entry.state = outcome
        del self._tracked[entry.handle]
        self._outcomes[outcome] += 1
        logger.debug("Missile %d resolved: %s", entry.munition_id, outcome.value)
        self._notifier.notify(entry.audience, message)
        return outcome
