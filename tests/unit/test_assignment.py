"""Unit tests for binding launch events to queued targets."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from navstrike.core.bus import WEAPON_LAUNCHED
from navstrike.core.types import Faction, LaunchEvent
from navstrike.strike.assignment import LaunchAssigner
from navstrike.strike.notifications import Notifier
from navstrike.strike.registry import Asset, AssetRegistry
from navstrike.strike.tracking import TTITracker


@pytest.fixture
def sink():
    return MagicMock()


@pytest.fixture
def registry():
    discovery = MagicMock()
    discovery.unit_exists.return_value = True
    reg = AssetRegistry(discovery)
    reg.register(Asset("Bunker Hill", Faction.BLUE, remaining_inventory=20))
    reg.register(Asset("Nakhimov", Faction.RED, remaining_inventory=20))
    return reg


@pytest.fixture
def tracker(scheduler, sink):
    return TTITracker(MagicMock(), scheduler, Notifier(sink))


@pytest.fixture
def assigner(registry, tracker, sink):
    return LaunchAssigner(registry, tracker, Notifier(sink))


def _messages(sink):
    return [c.args[1] for c in sink.notify.call_args_list]


A = np.array([1000.0, 0.0, 0.0])
B = np.array([2000.0, 0.0, 0.0])


class TestOnLaunch:
    def test_lifo_matching(self, assigner, registry, sink):
        ship = registry.lookup(Faction.BLUE, "Bunker Hill")
        ship.push_target(A)
        ship.push_target(B)

        first = assigner.on_launch(LaunchEvent("Bunker Hill", "w1", Faction.BLUE))
        second = assigner.on_launch(LaunchEvent("Bunker Hill", "w2", Faction.BLUE))

        np.testing.assert_allclose(first.target_position, B)
        np.testing.assert_allclose(second.target_position, A)
        assert (first.munition_id, second.munition_id) == (1, 2)
        assert _messages(sink) == [
            "Ship Bunker Hill fired Missile 1.",
            "Ship Bunker Hill fired Missile 2.",
        ]
        assert ship.pending_targets == []

    def test_audience_is_ship_faction(self, assigner, registry, sink):
        registry.lookup(Faction.RED, "Nakhimov").push_target(A)
        entry = assigner.on_launch(LaunchEvent("Nakhimov", "r1", Faction.RED))
        assert entry.audience == Faction.RED
        assert sink.notify.call_args.args[0] == Faction.RED

    def test_empty_queue(self, assigner, tracker, sink):
        assert assigner.on_launch(LaunchEvent("Bunker Hill", "w1", Faction.BLUE)) is None
        assert _messages(sink) == ["Ship Bunker Hill: No target position found for tracking."]
        assert len(tracker) == 0

    def test_empty_queue_does_not_consume_id(self, assigner, registry):
        assigner.on_launch(LaunchEvent("Bunker Hill", "w1", Faction.BLUE))
        registry.lookup(Faction.BLUE, "Bunker Hill").push_target(A)
        entry = assigner.on_launch(LaunchEvent("Bunker Hill", "w2", Faction.BLUE))
        assert entry.munition_id == 1

    def test_repeated_handle_keeps_queue(self, assigner, registry, tracker, sink):
        ship = registry.lookup(Faction.BLUE, "Bunker Hill")
        ship.push_target(A)
        ship.push_target(B)

        first = assigner.on_launch(LaunchEvent("Bunker Hill", "w1", Faction.BLUE))
        again = assigner.on_launch(LaunchEvent("Bunker Hill", "w1", Faction.BLUE))

        assert again is first
        assert len(tracker) == 1
        assert len(ship.pending_targets) == 1
        np.testing.assert_allclose(ship.pending_targets[0], A)
        assert _messages(sink) == ["Ship Bunker Hill fired Missile 1."]

        nxt = assigner.on_launch(LaunchEvent("Bunker Hill", "w2", Faction.BLUE))
        np.testing.assert_allclose(nxt.target_position, A)
        assert nxt.munition_id == 2

    def test_untracked_unit_ignored(self, assigner, tracker, sink):
        assert assigner.on_launch(LaunchEvent("Kirov", "k1", Faction.RED)) is None
        sink.notify.assert_not_called()
        assert len(tracker) == 0

    def test_missing_unit_name_ignored(self, assigner, sink):
        assert assigner.on_launch(LaunchEvent("", "w1", Faction.BLUE)) is None
        sink.notify.assert_not_called()

    def test_unknown_faction_searches_all(self, assigner, registry):
        registry.lookup(Faction.RED, "Nakhimov").push_target(A)
        entry = assigner.on_launch(LaunchEvent("Nakhimov", "r1"))
        assert entry is not None
        assert entry.audience == Faction.RED


class TestBusAdapter:
    def test_subscribed_handler_enrolls(self, assigner, registry, tracker, bus):
        registry.lookup(Faction.BLUE, "Bunker Hill").push_target(A)
        bus.subscribe(WEAPON_LAUNCHED, assigner.handle_bus_event)
        bus.publish(
            WEAPON_LAUNCHED,
            unit_name="Bunker Hill", weapon="w1", faction=Faction.BLUE, timestamp=5.0,
        )
        assert "w1" in tracker

    def test_extra_fields_tolerated(self, assigner, registry, tracker):
        registry.lookup(Faction.BLUE, "Bunker Hill").push_target(A)
        assigner.handle_bus_event(unit_name="Bunker Hill", weapon="w1", salvo=3)
        assert "w1" in tracker

    def test_missing_weapon_ignored(self, assigner, registry, sink):
        registry.lookup(Faction.BLUE, "Bunker Hill").push_target(A)
        assigner.handle_bus_event(unit_name="Bunker Hill")
        sink.notify.assert_not_called()
        assert len(registry.lookup(Faction.BLUE, "Bunker Hill").pending_targets) == 1
