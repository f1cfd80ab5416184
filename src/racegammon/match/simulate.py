"""Headless bot-vs-bot matches.

Drives a ``TurnRunner`` with ``tick`` until the match ends, the way a UI
driver would, but without any pacing.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from racegammon.agents.strategies import StrategyFactory, easy_strategy
from racegammon.core.config import MatchConfig, StartingLayout
from racegammon.core.types import MatchEndReason, MatchResult, Side
from racegammon.match.log import MoveRecord
from racegammon.match.runner import TurnRunner


@dataclass
class MatchSummary:
    """Result of a completed (or abandoned) match."""
    seed: int
    result: Optional[MatchResult]
    turns: int
    ticks: int
    records: Tuple[MoveRecord, ...]

    @property
    def finished(self) -> bool:
        return self.result is not None


def play_match(
    config: MatchConfig,
    seed: int,
    strategy_factory: StrategyFactory = easy_strategy,
    layout: Optional[StartingLayout] = None,
    max_ticks: int = 100_000,
) -> MatchSummary:
    """Play one match between two bots.

    Args:
        config: Rules and dice bags
        seed: Session seed
        strategy_factory: Builds the bot for each side
        layout: Optional starting layout
        max_ticks: Safety bound on driver steps

    Returns:
        MatchSummary; ``result`` is None only if ``max_ticks`` ran out
    """
    runner = TurnRunner(strategy_factory=strategy_factory)
    runner.init(config, seed=seed, layout=layout)

    ticks = 0
    while not runner.is_finished and ticks < max_ticks:
        runner.tick()
        ticks += 1

    return MatchSummary(
        seed=seed,
        result=runner.result,
        turns=runner.state.turn_index + 1,
        ticks=ticks,
        records=runner.log.records,
    )


def play_matches(
    config: MatchConfig,
    num_matches: int,
    seed: int = 0,
    strategy_factory: StrategyFactory = easy_strategy,
) -> List[MatchSummary]:
    """Play ``num_matches`` matches with consecutive seeds starting at ``seed``."""
    return [
        play_match(config, seed + i, strategy_factory=strategy_factory)
        for i in range(num_matches)
    ]


def compute_match_statistics(summaries: List[MatchSummary]) -> dict:
    """Compute statistics from a batch of matches.

    Args:
        summaries: List of match summaries

    Returns:
        Dictionary of statistics
    """
    total = len(summaries)
    finished = [s for s in summaries if s.finished]
    first_wins = sum(1 for s in finished if s.result.winner == Side.FIRST)
    second_wins = sum(1 for s in finished if s.result.winner == Side.SECOND)
    timeouts = sum(1 for s in finished if s.result.reason == MatchEndReason.TIMEOUT)
    no_moves = sum(1 for s in finished if s.result.reason == MatchEndReason.NO_MOVES)

    return {
        'total_matches': total,
        'unfinished': total - len(finished),
        'first_wins': first_wins,
        'second_wins': second_wins,
        'first_win_rate': first_wins / total if total > 0 else 0.0,
        'timeouts': timeouts,
        'no_moves': no_moves,
        'avg_turns': float(np.mean([s.turns for s in summaries])) if summaries else 0.0,
    }
