"""Structured logging for NAVSTRIKE.

Module loggers stay plain ``logging.getLogger(__name__)``; structlog renders
their records.  Strike context (session, faction, ship, missile) is carried
in structlog contextvars so every line logged while a command is being
handled names the ship it concerns, and the scenario clock stamps each line
with mission time instead of wall time when one is supplied.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

from navstrike.core.clock import Clock, format_mission_time

# Context keys rendered ahead of the message in console mode
STRIKE_CONTEXT_KEYS = ("session", "faction", "ship", "missile", "audience")


@contextmanager
def strike_context(**fields: Any) -> Iterator[None]:
    """Bind strike fields to every log line emitted inside the block.

    ``None`` values are skipped.  Faction enums are logged by value.
    """
    bound = {
        key: getattr(value, "value", value)
        for key, value in fields.items()
        if value is not None
    }
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def mission_time_stamper(clock: Clock):
    """Processor adding ``t=T+HH:MM:SS`` read from the scenario clock."""

    def add_mission_time(logger, method_name, event_dict):
        event_dict.setdefault("t", format_mission_time(clock.elapsed()))
        return event_dict

    return add_mission_time


def _strike_prefix(logger, method_name, event_dict):
    """Fold bound strike fields into a ``[faction/ship]`` console prefix."""
    parts = [str(event_dict.pop(key)) for key in STRIKE_CONTEXT_KEYS if key in event_dict]
    if parts:
        event_dict["event"] = f"[{'/'.join(parts)}] {event_dict.get('event', '')}"
    return event_dict


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_json: bool = False,
    clock: Clock | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to a log file. ``None`` disables file logging.
        log_json: If True, render log lines as JSON with strike context as
            separate keys; otherwise strike context becomes a message prefix.
        clock: Scenario clock.  When given, lines carry mission time.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if clock is not None:
        shared_processors.append(mission_time_stamper(clock))
    else:
        shared_processors.append(structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False))
    shared_processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        render_chain = [structlog.processors.JSONRenderer()]
    else:
        render_chain = [_strike_prefix, structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(file_path), encoding="utf-8"))

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *render_chain,
        ],
    )

    root = logging.getLogger("navstrike")
    for h in list(root.handlers):
        h.close()
    root.handlers.clear()
    root.setLevel(numeric_level)
    for h in handlers:
        h.setLevel(numeric_level)
        h.setFormatter(formatter)
        root.addHandler(h)
    root.propagate = False


def setup_logging_from_config(
    system: Mapping[str, Any] | None,
    clock: Clock | None = None,
    **overrides: Any,
) -> None:
    """Apply the ``navstrike.system`` section, letting non-None overrides win.

    Accepted overrides: ``log_level``, ``log_file``, ``log_json``.
    """
    options = {"log_level": "INFO", "log_file": None, "log_json": False}
    options.update({k: v for k, v in (system or {}).items() if k in options})
    options.update({k: v for k, v in overrides.items() if v is not None and v is not False})
    setup_logging(
        str(options["log_level"]),
        log_file=options["log_file"],
        log_json=bool(options["log_json"]),
        clock=clock,
    )
