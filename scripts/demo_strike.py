"""NAVSTRIKE salvo demo.

Puts a blue cruiser and a red cruiser on the simulated host, designates a
spread of NSGT targets, fires two salvos from the cruiser and prints the
message timeline each faction sees as the missiles fly out.

Run:
    python scripts/demo_strike.py
    python scripts/demo_strike.py --targets 14 --duration 200 --verbose
"""

from __future__ import annotations

import argparse
import sys

import numpy as np

from navstrike.core.bus import EventBus
from navstrike.core.clock import SimClock
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Faction
from navstrike.host.simulated import SimHostConfig, SimulatedHost, SimUnit
from navstrike.strike.config import StrikeConfig
from navstrike.strike.session import StrikeSession
from navstrike.utils.logging import setup_logging


# ---------------------------------------------------------------------------
# Scenario definition
# ---------------------------------------------------------------------------


def build_units() -> list[SimUnit]:
    return [
        SimUnit("CG-52 Bunker Hill", Faction.BLUE, np.zeros(3), ["BGM_109B", "RIM_66"]),
        SimUnit("Admiral Nakhimov", Faction.RED, np.array([60000.0, 0.0, 30000.0]), ["3M-54T"]),
    ]


def build_markers(n: int) -> list[tuple[str, np.ndarray]]:
    """A fan of targets 8-14 km out, plus one non-strike marker."""
    markers = []
    for i in range(n):
        bearing = np.radians(-30.0 + 60.0 * i / max(n - 1, 1))
        rng = 8000.0 + 6000.0 * i / max(n - 1, 1)
        markers.append(
            (f"NSGT{i + 1}", np.array([rng * np.cos(bearing), 0.0, rng * np.sin(bearing)]))
        )
    markers.append(("RECON", np.array([4000.0, 0.0, 0.0])))
    return markers


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> int:
    parser = argparse.ArgumentParser(description="NAVSTRIKE salvo demo")
    parser.add_argument("--targets", type=int, default=12, help="Number of NSGT markers")
    parser.add_argument("--duration", type=float, default=120.0, help="Seconds to simulate")
    parser.add_argument("--verbose", action="store_true", help="Show engine log lines")
    args = parser.parse_args()

    setup_logging("INFO" if args.verbose else "WARNING")

    clock = SimClock()
    scheduler = Scheduler(clock)
    bus = EventBus()
    host = SimulatedHost(
        SimHostConfig(
            munition_speed_mps=250.0,
            launch_delay_s=2.0,
            units=build_units(),
            markers=build_markers(args.targets),
        ),
        scheduler,
        bus,
    )
    session = StrikeSession(
        StrikeConfig(),
        discovery=host,
        markers=host,
        tasking=host,
        telemetry=host,
        sink=host,
        scheduler=scheduler,
        bus=bus,
    )
    session.start()

    ship = "CG-52 Bunker Hill"
    scheduler.call_at(0.0, session.check_status, Faction.BLUE, ship)
    scheduler.call_at(5.0, session.fire, Faction.BLUE, ship)
    scheduler.call_at(15.0, session.fire, Faction.BLUE, ship)
    scheduler.call_at(20.0, session.fire, Faction.RED, "Admiral Nakhimov")
    scheduler.call_at(30.0, session.check_status, Faction.BLUE, ship)

    host.run(args.duration, 1.0)
    session.stop()

    print(f"\n{'=' * 64}")
    print(f"  NAVSTRIKE salvo demo: {args.targets} targets, {args.duration:.0f} s")
    print(f"{'=' * 64}")
    for n in host.notifications:
        who = n.audience.value.upper() if n.audience else "ALL"
        print(f"  t={n.time:6.1f}s  [{who:4s}] {n.text}")

    status = session.status()
    print(f"\n  Markers left: {[m.label for m in host.markers]}")
    print(f"  In flight:    {len(status['in_flight'])}")
    for outcome, count in sorted(status["resolved"].items()):
        print(f"  {outcome:<13s} {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
