"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import structlog

from navstrike.core.clock import SimClock
from navstrike.core.types import Faction
from navstrike.strike.notifications import Notifier
from navstrike.utils.logging import setup_logging, setup_logging_from_config, strike_context


def _close_file_handlers():
    root = logging.getLogger("navstrike")
    for handler in list(root.handlers):
        handler.flush()
        if isinstance(handler, logging.FileHandler):
            handler.close()
            root.removeHandler(handler)


class TestSetupLogging:
    def test_console_output(self, capfd):
        setup_logging("DEBUG")
        logging.getLogger("navstrike.test_console").info("hello console")
        out = capfd.readouterr().out
        assert "hello console" in out

    def test_log_level_propagation(self):
        setup_logging("WARNING")
        assert logging.getLogger("navstrike").level == logging.WARNING

    def test_unknown_level_defaults_to_info(self):
        setup_logging("CHATTY")
        assert logging.getLogger("navstrike").level == logging.INFO

    def test_json_mode(self, capfd):
        setup_logging("INFO", log_json=True)
        logging.getLogger("navstrike.test_json").info("json test")
        out = capfd.readouterr().out
        assert "json test" in out
        for line in out.strip().splitlines():
            if "json test" in line:
                data = json.loads(line)
                assert data["event"] == "json test"
                break

    def test_file_logging(self, tmp_path):
        log_path = tmp_path / "sub" / "navstrike.log"
        setup_logging("INFO", log_file=str(log_path))
        logging.getLogger("navstrike.test_file").info("file test message")
        for handler in logging.getLogger("navstrike").handlers:
            handler.flush()
        assert log_path.exists()
        assert "file test message" in log_path.read_text()
        _close_file_handlers()

    def test_repeated_setup_no_duplicate_handlers(self):
        setup_logging("INFO")
        count1 = len(logging.getLogger("navstrike").handlers)
        setup_logging("INFO")
        count2 = len(logging.getLogger("navstrike").handlers)
        assert count2 == count1 == 1

    def test_does_not_propagate(self):
        setup_logging("INFO")
        assert logging.getLogger("navstrike").propagate is False


def _json_lines(out):
    return [json.loads(line) for line in out.strip().splitlines() if line.startswith("{")]


class TestStrikeContext:
    def test_binds_and_clears(self):
        with strike_context(faction=Faction.BLUE, ship="Bunker Hill", missile=None):
            assert structlog.contextvars.get_contextvars() == {
                "faction": "blue",
                "ship": "Bunker Hill",
            }
        assert "ship" not in structlog.contextvars.get_contextvars()

    def test_nested_blocks_stack(self):
        with strike_context(session=1, ship="Bunker Hill"):
            with strike_context(missile=3):
                ctx = structlog.contextvars.get_contextvars()
                assert (ctx["session"], ctx["ship"], ctx["missile"]) == (1, "Bunker Hill", 3)
            assert "missile" not in structlog.contextvars.get_contextvars()

    def test_json_lines_carry_context(self, capfd):
        setup_logging("INFO", log_json=True)
        with strike_context(faction=Faction.RED, ship="Nakhimov"):
            logging.getLogger("navstrike.test_ctx").info("salvo away")
        data = _json_lines(capfd.readouterr().out)[-1]
        assert data["event"] == "salvo away"
        assert data["faction"] == "red"
        assert data["ship"] == "Nakhimov"

    def test_console_prefix(self, capfd):
        setup_logging("INFO")
        with strike_context(faction=Faction.BLUE, ship="Bunker Hill"):
            logging.getLogger("navstrike.test_ctx").info("salvo away")
        assert "[blue/Bunker Hill] salvo away" in capfd.readouterr().out

    def test_notifier_tags_audience(self, capfd):
        setup_logging("INFO", log_json=True)
        Notifier(MagicMock()).notify(Faction.BLUE, "Missile 1: TTI 80.0 seconds")
        Notifier(MagicMock(), broadcast=True).notify(Faction.RED, "Ship Nakhimov is online.")
        lines = _json_lines(capfd.readouterr().out)
        assert [(d["audience"], d["event"]) for d in lines] == [
            ("blue", "Missile 1: TTI 80.0 seconds"),
            ("all", "Ship Nakhimov is online."),
        ]


class TestMissionTime:
    def test_lines_stamped_from_clock(self, capfd):
        clock = SimClock()
        clock.step(75.0)
        setup_logging("INFO", log_json=True, clock=clock)
        logging.getLogger("navstrike.test_time").info("tick")
        assert _json_lines(capfd.readouterr().out)[-1]["t"] == "T+00:01:15"


class TestSetupFromConfig:
    def test_system_section_applied(self):
        setup_logging_from_config({"log_level": "WARNING", "name": "NAVSTRIKE"})
        assert logging.getLogger("navstrike").level == logging.WARNING

    def test_cli_overrides_win(self):
        setup_logging_from_config({"log_level": "WARNING"}, log_level="DEBUG", log_file=None)
        assert logging.getLogger("navstrike").level == logging.DEBUG

    def test_missing_section_defaults(self):
        setup_logging_from_config(None)
        assert logging.getLogger("navstrike").level == logging.INFO
