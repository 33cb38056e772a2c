"""Host adapters for the strike engine."""

from navstrike.host.simulated import (
    FireCommand,
    SimHostConfig,
    SimMunition,
    SimNotification,
    SimUnit,
    SimulatedHost,
)

__all__ = [
    "FireCommand",
    "SimHostConfig",
    "SimMunition",
    "SimNotification",
    "SimUnit",
    "SimulatedHost",
]
