"""Pytest configuration and shared fixtures."""

import pytest

from racegammon.core.config import (
    DiceBagConfig,
    DiceOutcomeConfig,
    DrawMode,
    RulesetConfig,
    StartingLayout,
    StonePlacement,
    hitting_ruleset,
)
from racegammon.core.state import MatchState
from racegammon.core.types import Side


@pytest.fixture
def rules():
    """Default blocking ruleset (24 cells, home 6, 15 stones)."""
    return RulesetConfig().validated()


@pytest.fixture
def hit_rules():
    """Ruleset where single stones are hit and only pairs block."""
    return hitting_ruleset()


@pytest.fixture
def make_state():
    """Build a MatchState from {cell: count} maps per side.

    Stones not placed start on the side's head cell.
    """
    def _make(rules, first=None, second=None):
        placements = []
        for side, cells in ((Side.FIRST, first or {}), (Side.SECOND, second or {})):
            for cell, count in cells.items():
                placements.append(StonePlacement(side=side, cell=cell, count=count))
        return MatchState(rules, StartingLayout(placements=tuple(placements)))
    return _make


@pytest.fixture
def fixed_bag():
    """Sequential bag that always grants the given pips."""
    def _bag(*dice):
        label = "-".join(str(d) for d in dice)
        return DiceBagConfig(
            draw_mode=DrawMode.SEQUENTIAL,
            outcomes=(DiceOutcomeConfig(label=label, weight=1, dice=tuple(dice)),),
        )
    return _bag
