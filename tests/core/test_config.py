"""Tests for ruleset, dice bag and match configuration."""

import pytest

from racegammon.core.config import (
    DiceBagConfig,
    DiceOutcomeConfig,
    DrawMode,
    FirstTurnAllowance,
    HeadRuleConfig,
    MatchConfig,
    RulesetConfig,
    hitting_ruleset,
)
from racegammon.core.types import Side


class TestRulesetValidation:
    """Tests for clamping ruleset values."""

    def test_defaults_are_valid(self):
        """Default ruleset is unchanged by validation."""
        rules = RulesetConfig()
        assert rules.validated() == rules

    def test_board_and_home_clamped(self):
        """Board size has a floor and home size never exceeds the board."""
        rules = RulesetConfig(board_size=1, home_size=50).validated()
        assert rules.board_size == 2
        assert rules.home_size == 2

        rules = RulesetConfig(home_size=0).validated()
        assert rules.home_size == 1

    def test_start_cells_wrapped(self):
        """Start cells are wrapped onto the board."""
        rules = RulesetConfig(start_cell_first=30, start_cell_second=-1).validated()
        assert rules.start_cell(Side.FIRST) == 6
        assert rules.start_cell(Side.SECOND) == 23

    def test_directions_normalised(self):
        """Directions become +1 or -1."""
        rules = RulesetConfig(move_dir_first=0, move_dir_second=-5).validated()
        assert rules.move_dir(Side.FIRST) == 1
        assert rules.move_dir(Side.SECOND) == -1

    def test_limits_clamped(self):
        """Turn limits, stones and dice ranges are clamped."""
        rules = RulesetConfig(
            max_turns=0,
            total_stones_per_side=0,
            die_min=4,
            die_max=2,
            max_passes_in_a_row=-3,
        ).validated()
        assert rules.max_turns == 1
        assert rules.total_stones_per_side == 1
        assert rules.die_min == 4
        assert rules.die_max == 4
        assert rules.max_passes_in_a_row == 0

    def test_head_rules_clamped(self):
        """Negative head caps and allowances become zero."""
        head = HeadRuleConfig(
            max_head_moves_per_turn=-1,
            first_turn_allowances=(FirstTurnAllowance(6, 6, -2),),
        )
        rules = RulesetConfig(head_rules=head).validated()
        assert rules.head_rules.max_head_moves_per_turn == 0
        assert rules.head_rules.first_turn_allowance(6, 6) == 0

    def test_hitting_ruleset(self):
        """Hitting preset flips both collision flags."""
        rules = hitting_ruleset(max_turns=50)
        assert rules.allow_hit_single_stone
        assert not rules.block_if_opponent_any_stone
        assert rules.max_turns == 50


class TestHeadRules:
    """Tests for first-turn allowance lookup."""

    def test_default_allowances(self):
        """Default table grants two head moves on 6-6, 4-4 and 3-3."""
        head = HeadRuleConfig()
        assert head.first_turn_allowance(6, 6) == 2
        assert head.first_turn_allowance(4, 4) == 2
        assert head.first_turn_allowance(3, 3) == 2
        assert head.first_turn_allowance(5, 5) is None
        assert head.first_turn_allowance(1, 2) is None

    def test_unordered_pair(self):
        """Allowances match either die order."""
        head = HeadRuleConfig(first_turn_allowances=(FirstTurnAllowance(3, 6, 3),))
        assert head.first_turn_allowance(6, 3) == 3
        assert head.first_turn_allowance(3, 6) == 3

    def test_invalid_allowance_key(self):
        """Allowances keyed by a non-positive die are rejected."""
        with pytest.raises(AssertionError):
            FirstTurnAllowance(0, 6, 2)


class TestDiceBagSanitizing:
    """Tests for DiceBagConfig.sanitized."""

    def test_clamps_outcomes(self):
        """Weights, pip values and pip counts are clamped."""
        bag = DiceBagConfig(
            draw_mode=DrawMode.SHUFFLED,
            outcomes=(
                DiceOutcomeConfig("empty", 3, ()),
                DiceOutcomeConfig("wild", 0, (9, 0, 3, 3, 3, 3, 3, 3)),
            ),
        )
        clean = bag.sanitized(RulesetConfig())
        assert clean.draw_mode == DrawMode.SHUFFLED
        assert len(clean.outcomes) == 1
        outcome = clean.outcomes[0]
        assert outcome.label == "wild"
        assert outcome.weight == 1
        assert outcome.dice == (6, 1, 3, 3, 3, 3)

    def test_empty_bag_gets_default(self):
        """A bag with nothing usable falls back to one die_max die."""
        clean = DiceBagConfig().sanitized(RulesetConfig(die_max=5))
        assert clean.outcomes == (DiceOutcomeConfig("Default", 1, (5,)),)

    def test_invalid_draw_mode(self):
        """Draw mode must be a DrawMode."""
        with pytest.raises(AssertionError):
            DiceBagConfig(draw_mode="random")


class TestMatchConfig:
    """Tests for MatchConfig.create."""

    def test_create_validates(self):
        """Rules are validated and missing bags get the default outcome."""
        config = MatchConfig.create(RulesetConfig(max_turns=0), None, None)
        assert config.rules.max_turns == 1
        assert config.bag(Side.FIRST).outcomes[0].dice == (6,)
        assert config.bag(Side.SECOND).outcomes[0].dice == (6,)

    def test_create_requires_rules(self):
        """Missing rules are a programming error."""
        with pytest.raises(ValueError):
            MatchConfig.create(None, None, None)
