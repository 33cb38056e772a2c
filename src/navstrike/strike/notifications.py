"""Routes engine messages to the host's notification sink."""

from __future__ import annotations

import logging

from navstrike.core.types import Audience
from navstrike.strike.interfaces import NotificationSink
from navstrike.utils.logging import strike_context

logger = logging.getLogger(__name__)


class Notifier:
    """Logs every message and forwards it to the sink.

    With ``broadcast=True`` every message goes to everyone regardless of
    the requested audience.  A failing sink is logged; the caller never
    sees the exception.
    """

    def __init__(
        self,
        sink: NotificationSink,
        duration_s: float = 10.0,
        broadcast: bool = False,
    ):
        self._sink = sink
        self._duration_s = duration_s
        self._broadcast = broadcast

    def notify(self, audience: Audience, text: str) -> None:
        if self._broadcast:
            audience = None
        with strike_context(audience=audience.value if audience else "all"):
            logger.info(text)
        try:
            self._sink.notify(audience, text, duration_s=self._duration_s)
        except Exception:
            logger.exception("Notification sink failed for %r", text)
