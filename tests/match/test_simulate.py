"""Tests for headless match simulation."""

from racegammon.core.config import MatchConfig, RulesetConfig
from racegammon.core.dice import standard_bag
from racegammon.core.types import MatchEndReason, MatchResult, Side
from racegammon.match.simulate import (
    MatchSummary,
    compute_match_statistics,
    play_match,
    play_matches,
)


def standard_config(**overrides):
    return MatchConfig.create(RulesetConfig(**overrides), standard_bag(), standard_bag())


class TestPlayMatch:
    """Tests for running bot matches."""

    def test_match_finishes(self):
        """A bot match always reaches a result."""
        summary = play_match(standard_config(), seed=1)
        assert summary.finished
        assert summary.seed == 1
        assert summary.turns >= 1
        assert summary.ticks > 0
        assert len(summary.records) > 0
        assert summary.records[-1].end_reason != MatchEndReason.NONE

    def test_reproducible(self):
        """Same seed, same match."""
        summary1 = play_match(standard_config(), seed=9)
        summary2 = play_match(standard_config(), seed=9)
        assert summary1.result == summary2.result
        assert summary1.records == summary2.records

    def test_tick_bound(self):
        """Running out of ticks leaves the match unfinished."""
        summary = play_match(standard_config(), seed=1, max_ticks=1)
        assert not summary.finished
        assert summary.ticks == 1

    def test_turn_limit(self):
        """Short matches end by timeout."""
        summary = play_match(standard_config(max_turns=4), seed=2)
        assert summary.result.reason == MatchEndReason.TIMEOUT
        assert summary.turns == 4

    def test_play_matches_uses_consecutive_seeds(self):
        """Batch seeds count up from the first one."""
        summaries = play_matches(standard_config(max_turns=10), num_matches=3, seed=40)
        assert [s.seed for s in summaries] == [40, 41, 42]


class TestMatchStatistics:
    """Tests for compute_match_statistics."""

    def test_statistics(self):
        """Wins, timeouts and average turns are tallied."""
        summaries = [
            MatchSummary(1, MatchResult(Side.FIRST, MatchEndReason.WIN), 50, 0, ()),
            MatchSummary(2, MatchResult(Side.SECOND, MatchEndReason.WIN), 60, 0, ()),
            MatchSummary(3, MatchResult(Side.FIRST, MatchEndReason.TIMEOUT), 120, 0, ()),
            MatchSummary(4, None, 10, 0, ()),
        ]
        stats = compute_match_statistics(summaries)

        assert stats['total_matches'] == 4
        assert stats['unfinished'] == 1
        assert stats['first_wins'] == 2
        assert stats['second_wins'] == 1
        assert stats['first_win_rate'] == 0.5
        assert stats['timeouts'] == 1
        assert stats['no_moves'] == 0
        assert stats['avg_turns'] == 60.0

    def test_empty(self):
        """No matches, no rates."""
        stats = compute_match_statistics([])
        assert stats['total_matches'] == 0
        assert stats['first_win_rate'] == 0.0
        assert stats['avg_turns'] == 0.0
