"""Tests for core data types."""

import numpy as np
import pytest

from navstrike.core.types import Faction, Target, TrackOutcome, parse_faction


class TestParseFaction:
    @pytest.mark.parametrize("value", ["blue", "BLUE", "Blue", Faction.BLUE])
    def test_blue(self, value):
        assert parse_faction(value) is Faction.BLUE

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown faction"):
            parse_faction("neutral")


class TestTrackOutcome:
    def test_terminal_states(self):
        assert not TrackOutcome.ACTIVE.is_terminal
        assert TrackOutcome.IMPACTED.is_terminal
        assert TrackOutcome.LOST.is_terminal
        assert TrackOutcome.UNRESOLVABLE.is_terminal


class TestTarget:
    def test_to_dict(self):
        t = Target(handle=7, label="NSGT7", position=np.array([1.0, 2.0, 3.0]))
        assert t.to_dict() == {"handle": 7, "label": "NSGT7", "position": [1.0, 2.0, 3.0]}
