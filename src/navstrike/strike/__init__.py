"""Strike management: launch authorization, target assignment, TTI tracking.

Provides the naval standoff-strike engine: a registry of launch-capable
ships with finite inventories, capped salvo authorization against operator
map markers, LIFO matching of observed launches to their targets, and a
per-munition time-to-impact loop driven by live telemetry.
"""

from navstrike.strike.config import StrikeConfig
from navstrike.strike.registry import Asset, AssetRegistry
from navstrike.strike.markers import TargetResolver
from navstrike.strike.notifications import Notifier
from navstrike.strike.authorization import LaunchAuthorizer
from navstrike.strike.tracking import TrackedMunition, TTITracker
from navstrike.strike.assignment import LaunchAssigner
from navstrike.strike.session import StrikeSession

__all__ = [
    "Asset",
    "AssetRegistry",
    "LaunchAssigner",
    "LaunchAuthorizer",
    "Notifier",
    "StrikeConfig",
    "StrikeSession",
    "TTITracker",
    "TargetResolver",
    "TrackedMunition",
]
