"""Move generation and move application.

This module implements the rules of the race:
- Bar precedence: a side with stones on the bar may only re-enter
- Blocking and hitting on the destination cell
- Head-move limits on the start cell
- Bear-off gating, including oversized bear-offs from the rearmost stone

Generation is pure. Application mutates the given ``MatchState`` in place and
leaves it untouched when the move turns out to be illegal.
"""

import logging
from typing import List, Optional, Tuple

from racegammon.core.config import RulesetConfig
from racegammon.core.path import (
    classify_move,
    home_cells,
    is_in_home,
    pips_to_bear_off,
)
from racegammon.core.state import MatchState
from racegammon.core.types import (
    ApplyResult,
    BearOff,
    Cell,
    EnterFromBar,
    Move,
    MoveClassification,
    MoveStone,
    Side,
)

logger = logging.getLogger(__name__)

BEAR_OFF_CLASSES = (MoveClassification.EXACT_BEAR_OFF, MoveClassification.OVERSHOOT)


# ==============================================================================
# HELPERS
# ==============================================================================

def entry_cells(rules: RulesetConfig, side: Side) -> List[Cell]:
    """Cells a side re-enters on, indexed by ``die - 1``.

    Entry runs against the opponent's home stretch: the opponent's home cells
    in reverse order, so a 1 lands on the opponent home cell farthest along
    the opponent's path and the largest die lands on the nearest one.
    """
    return list(reversed(home_cells(rules, side.opponent())))


def entry_cell(rules: RulesetConfig, side: Side, die: int) -> Optional[Cell]:
    """Entry cell for a die value, or None if the die has no entry door."""
    cells = entry_cells(rules, side)
    if die < 1 or die > len(cells):
        return None
    return cells[die - 1]


def can_enter_cell(state: MatchState, side: Side, cell: Cell) -> bool:
    """Check whether ``side`` may land on ``cell``.

    A cell is open if the opponent has no stone there. An occupied cell is
    closed outright under ``block_if_opponent_any_stone``; otherwise it is
    open only for a single opponent stone with hitting enabled.
    """
    rules = state.rules
    opponent_count = state.stones_at(side.opponent(), cell)
    if opponent_count <= 0:
        return True
    if rules.block_if_opponent_any_stone:
        return False
    return opponent_count == 1 and rules.allow_hit_single_stone


def all_stones_in_home(state: MatchState, side: Side) -> bool:
    """True when every stone of ``side`` still in play sits in its home zone."""
    if state.bar(side) > 0:
        return False
    on_board = 0
    for cell in state.occupied_cells(side):
        if not is_in_home(state.rules, side, cell):
            return False
        on_board += state.stones_at(side, cell)
    return on_board + state.borne_off(side) == state.rules.total_stones_per_side


def _farthest_home_distance(state: MatchState, side: Side) -> int:
    """Largest pips-to-bear-off among the side's occupied home cells."""
    distances = [
        pips_to_bear_off(state.rules, side, cell)
        for cell in state.occupied_cells(side)
        if is_in_home(state.rules, side, cell)
    ]
    return max(distances, default=0)


def can_bear_off(state: MatchState, side: Side, from_cell: Cell, pips: int) -> bool:
    """Bear-off eligibility for one stone, assuming all stones are home.

    An exact die always works. A larger die only works from the rearmost
    occupied home cell.
    """
    if not is_in_home(state.rules, side, from_cell):
        return False
    distance = pips_to_bear_off(state.rules, side, from_cell)
    if pips == distance:
        return True
    if pips > distance:
        return distance == _farthest_home_distance(state, side)
    return False


def is_head_cell(rules: RulesetConfig, side: Side, cell: Optional[Cell]) -> bool:
    return cell is not None and cell == rules.start_cell(side)


def _hit_if_blot(state: MatchState, side: Side, cell: Cell) -> bool:
    opponent = side.opponent()
    if state.stones_at(opponent, cell) != 1:
        return False
    state.remove_stone(opponent, cell)
    state.add_to_bar(opponent)
    logger.debug("%s hits %s on cell %d", side, opponent, cell)
    return True


# ==============================================================================
# MOVE GENERATION
# ==============================================================================

def generate_legal_moves(
    state: MatchState,
    die_value: int,
    head_moves_used: int = 0,
    head_move_limit: int = 1,
) -> List[Move]:
    """Generate every legal single-die move for the side to move.

    Args:
        state: Current match state
        die_value: Pip value of the die being played
        head_moves_used: Head moves already made this turn
        head_move_limit: Head moves allowed this turn

    Returns:
        Legal moves in increasing cell order (at most one bar entry when the
        side has stones on the bar)
    """
    if state is None:
        raise ValueError("state must not be None")

    moves: List[Move] = []
    if state.is_finished or die_value <= 0:
        return moves

    rules = state.rules
    side = state.current_side

    if state.bar(side) > 0:
        target = entry_cell(rules, side, die_value)
        if target is not None and can_enter_cell(state, side, target):
            moves.append(EnterFromBar(die_value))
        return moves

    head_blocked = (
        rules.head_rules.restrict_head_moves and head_moves_used >= head_move_limit
    )
    all_home = all_stones_in_home(state, side)

    for cell in state.occupied_cells(side):
        if head_blocked and is_head_cell(rules, side, cell):
            continue

        classification, to_cell = classify_move(rules, side, cell, die_value)

        if classification in BEAR_OFF_CLASSES:
            if all_home and can_bear_off(state, side, cell, die_value):
                moves.append(BearOff(cell, die_value))
        elif classification == MoveClassification.NORMAL:
            if can_enter_cell(state, side, to_cell):
                moves.append(MoveStone(cell, die_value))

    return moves


def is_legal_move(
    state: MatchState,
    move: Move,
    head_moves_used: int = 0,
    head_move_limit: int = 1,
) -> bool:
    """Check a move against the generated legal set for its die."""
    return move in generate_legal_moves(state, move.pips, head_moves_used, head_move_limit)


# ==============================================================================
# MOVE APPLICATION
# ==============================================================================

def apply_move(state: MatchState, move: Move) -> ApplyResult:
    """Apply a move for the side to move (mutates ``state``).

    Every precondition is checked again here, so a stale or hand-built move
    is rejected as ILLEGAL without touching the state.

    Args:
        state: Match state to update
        move: Move to apply

    Returns:
        OK, ILLEGAL, or FINISHED when the move bore off the side's last stone
    """
    if state is None:
        raise ValueError("state must not be None")
    if state.is_finished:
        return ApplyResult.ILLEGAL

    side = state.current_side

    if isinstance(move, MoveStone):
        return _apply_move_stone(state, side, move)
    if isinstance(move, EnterFromBar):
        return _apply_enter_from_bar(state, side, move)
    if isinstance(move, BearOff):
        return _apply_bear_off(state, side, move)
    return ApplyResult.ILLEGAL


def _apply_move_stone(state: MatchState, side: Side, move: MoveStone) -> ApplyResult:
    rules = state.rules
    if state.bar(side) > 0:
        return ApplyResult.ILLEGAL
    if not 0 <= move.from_cell < rules.board_size:
        return ApplyResult.ILLEGAL
    if state.stones_at(side, move.from_cell) <= 0:
        return ApplyResult.ILLEGAL

    classification, to_cell = classify_move(rules, side, move.from_cell, move.pips)
    if classification != MoveClassification.NORMAL:
        return ApplyResult.ILLEGAL
    if not can_enter_cell(state, side, to_cell):
        return ApplyResult.ILLEGAL

    state.remove_stone(side, move.from_cell)
    _hit_if_blot(state, side, to_cell)
    state.add_stone(side, to_cell)
    return ApplyResult.OK


def _apply_enter_from_bar(state: MatchState, side: Side, move: EnterFromBar) -> ApplyResult:
    if state.bar(side) <= 0:
        return ApplyResult.ILLEGAL

    target = entry_cell(state.rules, side, move.pips)
    if target is None or not can_enter_cell(state, side, target):
        return ApplyResult.ILLEGAL

    _hit_if_blot(state, side, target)
    state.remove_from_bar(side)
    state.add_stone(side, target)
    return ApplyResult.OK


def _apply_bear_off(state: MatchState, side: Side, move: BearOff) -> ApplyResult:
    rules = state.rules
    if not 0 <= move.from_cell < rules.board_size:
        return ApplyResult.ILLEGAL
    if state.stones_at(side, move.from_cell) <= 0:
        return ApplyResult.ILLEGAL
    if not all_stones_in_home(state, side):
        return ApplyResult.ILLEGAL

    classification, _ = classify_move(rules, side, move.from_cell, move.pips)
    if classification not in BEAR_OFF_CLASSES:
        return ApplyResult.ILLEGAL
    if not can_bear_off(state, side, move.from_cell, move.pips):
        return ApplyResult.ILLEGAL

    state.remove_stone(side, move.from_cell)
    state.add_borne_off(side)

    if state.borne_off(side) >= rules.total_stones_per_side:
        state.finish(side)
        return ApplyResult.FINISHED
    return ApplyResult.OK


def resolve_move_cells(state: MatchState, move: Move) -> Tuple[Optional[Cell], Optional[Cell]]:
    """Origin and destination cells of a move, before it is applied.

    Bear-offs have no destination; bar entries have no origin.
    """
    side = state.current_side
    if isinstance(move, EnterFromBar):
        return None, entry_cell(state.rules, side, move.pips)
    if not 0 <= move.from_cell < state.rules.board_size:
        return None, None

    classification, to_cell = classify_move(state.rules, side, move.from_cell, move.pips)
    if isinstance(move, BearOff) or classification != MoveClassification.NORMAL:
        return move.from_cell, None
    return move.from_cell, to_cell
