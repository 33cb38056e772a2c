"""NAVSTRIKE CLI entry point.

Runs the configured scenario against the in-memory simulated host.

Usage:
    python -m navstrike                          # Default config
    python -m navstrike --config custom.yaml     # Custom config
    python -m navstrike --duration 120           # Override scenario length
    python -m navstrike --scenario saturation    # Run config/scenarios/saturation.yaml
"""

from __future__ import annotations

import argparse
import sys
import time

from omegaconf import OmegaConf

from navstrike.core.bus import EventBus
from navstrike.core.clock import SimClock, create_clock, format_mission_time
from navstrike.core.config import NavStrikeConfig
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import parse_faction
from navstrike.host.simulated import SimHostConfig, SimulatedHost
from navstrike.strike.session import StrikeSession
from navstrike.utils.logging import setup_logging_from_config


def build_session(cfg) -> tuple[StrikeSession, SimulatedHost, Scheduler]:
    """Wire clock, scheduler, bus, simulated host and session from config."""
    root = cfg.navstrike
    time_cfg = root.get("time", None)
    clock = create_clock(OmegaConf.to_container(time_cfg) if time_cfg is not None else None)
    scheduler = Scheduler(clock)
    bus = EventBus()
    host = SimulatedHost(SimHostConfig.from_omegaconf(root.get("scenario", None)), scheduler, bus)
    session = StrikeSession.from_config(root.get("strike", None), host, scheduler, bus=bus)
    return session, host, scheduler


def schedule_orders(session: StrikeSession, scheduler: Scheduler, orders) -> int:
    """Queue scenario operator commands at their scenario times."""
    count = 0
    for order in orders or []:
        command = order.get("command", "fire")
        action = session.fire if command == "fire" else session.check_status
        scheduler.call_at(
            float(order.get("at_s", 0.0)),
            action,
            parse_faction(order["faction"]),
            str(order["ship"]),
        )
        count += 1
    return count


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="navstrike",
        description="NAVSTRIKE - Naval Strike Group missile management",
    )
    parser.add_argument(
        "--config",
        "-c",
        default="config/default.yaml",
        help="Path to configuration YAML file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--duration",
        "-d",
        type=float,
        default=None,
        help="Override scenario duration in seconds",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        default=False,
        help="Validate config against Pydantic schema before starting",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to log file (default: no file logging)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=False,
        help="Output logs as JSON instead of human-readable",
    )
    parser.add_argument(
        "--scenario",
        "-s",
        default=None,
        help="Named scenario under <config dir>/scenarios/ to run",
    )
    args = parser.parse_args()

    config = NavStrikeConfig(args.config)
    try:
        config.load(validate=args.validate_config, scenario=args.scenario)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: Config validation failed:\n{e}", file=sys.stderr)
        return 1

    if args.duration is not None:
        config.override("navstrike.scenario.duration_s", args.duration)

    scenario = config.section("scenario")
    duration = float(scenario.get("duration_s", 600.0))
    step = float(scenario.get("step_s", 1.0))

    try:
        session, host, scheduler = build_session(config.cfg)
        schedule_orders(session, scheduler, scenario.get("orders", []))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging_from_config(
        config.section("system"),
        clock=scheduler.clock,
        log_level=args.log_level,
        log_file=args.log_file,
        log_json=args.log_json,
    )

    session.start()

    if isinstance(scheduler.clock, SimClock):
        host.run(duration, step)
    else:
        deadline = scheduler.clock.elapsed() + duration
        while scheduler.clock.elapsed() < deadline:
            time.sleep(step)
            host.step(step)
            scheduler.run_due()

    session.stop()

    print(f"\n{'=' * 60}")
    print(f"  NAVSTRIKE summary after {duration:.0f} s")
    print(f"{'=' * 60}")
    for n in host.notifications:
        who = n.audience.value.upper() if n.audience else "ALL"
        print(f"  {format_mission_time(n.time)}  [{who:4s}] {n.text}")
    print()
    status = session.status()
    for faction, assets in status["assets"].items():
        for a in assets:
            print(f"  [{faction.upper():4s}] {a['name']:<28s} inventory {a['remaining_inventory']:>3d}")
    print(f"  In flight: {len(status['in_flight'])}")
    for outcome, n in sorted(status["resolved"].items()):
        print(f"  {outcome:<14s} {n}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
