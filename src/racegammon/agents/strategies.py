"""Move-choice strategies for bot-driven sides.

A strategy makes two decisions each step of a turn:
1. Which remaining die to play (among dice proven to have a legal move)
2. Which legal move to make with that die

Strategies only ever see moves the engine already generated as legal.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from racegammon.core.moves import apply_move, resolve_move_cells
from racegammon.core.state import MatchState, pip_count
from racegammon.core.types import BearOff, Move

DieChooser = Callable[[MatchState, Sequence[int], List[int]], int]
MoveChooser = Callable[[MatchState, List[Move]], Move]


# ==============================================================================
# STRATEGY BASE CLASS
# ==============================================================================


@dataclass
class Strategy:
    """A pluggable bot.

    Attributes:
        name: Strategy name for identification
        choose_die_fn: (state, remaining_dice, candidate_indices) -> index into remaining_dice
        choose_move_fn: (state, legal_moves) -> one of legal_moves
    """
    name: str
    choose_die_fn: DieChooser
    choose_move_fn: MoveChooser

    def choose_die_index(self, state: MatchState, remaining_dice: Sequence[int], candidates: List[int]) -> int:
        return self.choose_die_fn(state, remaining_dice, candidates)

    def choose_move(self, state: MatchState, legal_moves: List[Move]) -> Move:
        return self.choose_move_fn(state, legal_moves)


StrategyFactory = Callable[[Optional[int]], Strategy]


def _is_hit(state: MatchState, move: Move) -> bool:
    _, to_cell = resolve_move_cells(state, move)
    if to_cell is None:
        return False
    return state.stones_at(state.current_side.opponent(), to_cell) == 1


# ==============================================================================
# RANDOM
# ==============================================================================


def random_strategy(seed: Optional[int] = None) -> Strategy:
    """Pick a playable die and a legal move uniformly at random."""
    rng = np.random.default_rng(seed)

    def choose_die(state, remaining_dice, candidates):
        return candidates[int(rng.integers(0, len(candidates)))]

    def choose_move(state, legal_moves):
        return legal_moves[int(rng.integers(0, len(legal_moves)))]

    return Strategy(name="Random", choose_die_fn=choose_die, choose_move_fn=choose_move)


# ==============================================================================
# EASY
# ==============================================================================


def easy_strategy(seed: Optional[int] = None) -> Strategy:
    """Simple bot: bear off when possible, otherwise hit, otherwise random.

    Die choice is random among playable dice.
    """
    rng = np.random.default_rng(seed)

    def choose_die(state, remaining_dice, candidates):
        return candidates[int(rng.integers(0, len(candidates)))]

    def choose_move(state, legal_moves):
        bear_offs = [m for m in legal_moves if isinstance(m, BearOff)]
        if bear_offs:
            return bear_offs[0]

        hits = [m for m in legal_moves if _is_hit(state, m)]
        if hits:
            return hits[int(rng.integers(0, len(hits)))]

        return legal_moves[int(rng.integers(0, len(legal_moves)))]

    return Strategy(name="Easy", choose_die_fn=choose_die, choose_move_fn=choose_move)


# ==============================================================================
# GREEDY PIP COUNT
# ==============================================================================


def greedy_strategy(seed: Optional[int] = None) -> Strategy:
    """Play the largest playable die, then the move leaving the lowest pip count.

    Ties on pip count prefer hitting moves, then the earliest move generated.
    ``seed`` is accepted for factory compatibility and unused.
    """
    def choose_die(state, remaining_dice, candidates):
        return max(candidates, key=lambda i: remaining_dice[i])

    def choose_move(state, legal_moves):
        best_move = legal_moves[0]
        best_score = None
        for move in legal_moves:
            after = state.copy()
            apply_move(after, move)
            score = (pip_count(after, state.current_side), not _is_hit(state, move))
            if best_score is None or score < best_score:
                best_score = score
                best_move = move
        return best_move

    return Strategy(name="Greedy", choose_die_fn=choose_die, choose_move_fn=choose_move)
