"""Resolves operator map markers into strike targets."""

from __future__ import annotations

import logging
import re

from navstrike.core.types import Target
from navstrike.strike.interfaces import MarkerSource
from navstrike.utils.vectors import as_vec3

logger = logging.getLogger(__name__)


class TargetResolver:
    """Filters host markers to ``<prefix><digits>`` labels (case-insensitive).

    Targets are returned in the order the host lists its markers.
    """

    def __init__(self, source: MarkerSource, prefix: str = "NSGT"):
        self._source = source
        self._prefix = prefix
        self._pattern = re.compile(rf"^{re.escape(prefix)}\d+$", re.IGNORECASE | re.ASCII)

    @property
    def prefix(self) -> str:
        return self._prefix

    def matches(self, label: str) -> bool:
        return self._pattern.fullmatch(label) is not None

    def resolve(self) -> list[Target]:
        try:
            markers = list(self._source.list_pending_markers())
        except Exception:
            logger.exception("Marker query failed")
            return []

        targets = []
        for handle, label, coordinate in markers:
            if not isinstance(label, str) or not self.matches(label):
                continue
            try:
                position = as_vec3(coordinate)
            except (ValueError, KeyError, TypeError):
                logger.warning("Marker %r has no usable coordinate; skipped", label)
                continue
            targets.append(Target(handle=handle, label=label, position=position))
        return targets

    def consume(self, targets: list[Target]) -> None:
        """Remove each used marker from the map, once."""
        for target in targets:
            try:
                self._source.consume_marker(target.handle)
            except Exception:
                logger.exception("Failed to remove marker %r", target.label)
