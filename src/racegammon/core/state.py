"""Match state and state queries.

``MatchState`` is the authoritative, mutable record of one match: stone counts
per cell for each side, bar and borne-off counts, whose turn it is and the
dice outcome in play. It only offers primitive mutations; legality lives in
``racegammon.core.moves``.

Callers must check ``is_finished`` before mutating occupancy: a finished state
does not reject further changes by itself.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from racegammon.core.config import RulesetConfig, StartingLayout
from racegammon.core.path import pips_to_bear_off
from racegammon.core.types import EMPTY_OUTCOME, Cell, DiceOutcome, Side


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only copy of a match state for observers."""
    turn_index: int
    current_side: Side
    stones_first: Tuple[int, ...]
    stones_second: Tuple[int, ...]
    bar: Tuple[int, int]
    borne_off: Tuple[int, int]
    turns_taken: Tuple[int, int]
    outcome: DiceOutcome
    is_finished: bool
    winner: Optional[Side]

    def stones(self, side: Side) -> Tuple[int, ...]:
        return self.stones_first if side == Side.FIRST else self.stones_second


class MatchState:
    """Occupancy, bar, borne-off and turn counters for one match.

    Attributes:
        rules: Validated ruleset the state was built for
        layout: Optional starting layout applied on every reset
    """

    def __init__(self, rules: RulesetConfig, layout: Optional[StartingLayout] = None):
        if rules is None:
            raise ValueError("rules must not be None")
        self.rules = rules.validated()
        self.layout = layout

        size = self.rules.board_size
        self._stones_first: NDArray[np.int32] = np.zeros(size, dtype=np.int32)
        self._stones_second: NDArray[np.int32] = np.zeros(size, dtype=np.int32)
        self._bar: NDArray[np.int32] = np.zeros(2, dtype=np.int32)
        self._borne_off: NDArray[np.int32] = np.zeros(2, dtype=np.int32)
        self._turns_taken: NDArray[np.int32] = np.zeros(2, dtype=np.int32)

        self.turn_index = 0
        self.current_side = Side.FIRST
        self.current_outcome: DiceOutcome = EMPTY_OUTCOME
        self.is_finished = False
        self.winner: Optional[Side] = None

        self.reset()

    # --------------------------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------------------------

    def reset(self) -> None:
        """Put every stone back in its starting place and clear all counters."""
        self._stones_first[:] = 0
        self._stones_second[:] = 0
        self._bar[:] = 0
        self._borne_off[:] = 0
        self._turns_taken[:] = 0

        for side in Side:
            self._place_starting_stones(side)

        self.turn_index = 0
        self.current_side = Side.FIRST
        self.current_outcome = EMPTY_OUTCOME
        self.is_finished = False
        self.winner = None

    def _place_starting_stones(self, side: Side) -> None:
        total = self.rules.total_stones_per_side
        cells = self._cells(side)
        placed = 0

        if self.layout is not None:
            for placement in self.layout.placements:
                if placement.side != side or placement.count <= 0:
                    continue
                count = min(placement.count, total - placed)
                if count <= 0:
                    break
                cells[placement.cell % self.rules.board_size] += count
                placed += count

        # Whatever the layout does not place starts on the head.
        cells[self.rules.start_cell(side)] += total - placed

    def advance_turn(self) -> None:
        """Hand the turn to the other side."""
        self._turns_taken[self.current_side.index] += 1
        self.turn_index += 1
        self.current_side = self.current_side.opponent()

    def copy(self) -> "MatchState":
        """Create a deep copy (used by strategies to look ahead)."""
        clone = MatchState.__new__(MatchState)
        clone.rules = self.rules
        clone.layout = self.layout
        clone._stones_first = self._stones_first.copy()
        clone._stones_second = self._stones_second.copy()
        clone._bar = self._bar.copy()
        clone._borne_off = self._borne_off.copy()
        clone._turns_taken = self._turns_taken.copy()
        clone.turn_index = self.turn_index
        clone.current_side = self.current_side
        clone.current_outcome = self.current_outcome
        clone.is_finished = self.is_finished
        clone.winner = self.winner
        return clone

    def finish(self, winner: Side) -> None:
        self.is_finished = True
        self.winner = winner

    def set_current_outcome(self, outcome: DiceOutcome) -> None:
        self.current_outcome = outcome

    # --------------------------------------------------------------------------
    # Occupancy
    # --------------------------------------------------------------------------

    def _cells(self, side: Side) -> NDArray[np.int32]:
        return self._stones_first if side == Side.FIRST else self._stones_second

    def stones_by_cell(self, side: Side) -> NDArray[np.int32]:
        """Read-only view of a side's per-cell stone counts."""
        view = self._cells(side).view()
        view.flags.writeable = False
        return view

    def stones_at(self, side: Side, cell: Cell) -> int:
        return int(self._cells(side)[cell % self.rules.board_size])

    def add_stone(self, side: Side, cell: Cell) -> None:
        self._cells(side)[cell % self.rules.board_size] += 1

    def remove_stone(self, side: Side, cell: Cell) -> bool:
        """Remove one stone; returns False (and changes nothing) if the cell is empty."""
        cells = self._cells(side)
        cell = cell % self.rules.board_size
        if cells[cell] <= 0:
            return False
        cells[cell] -= 1
        return True

    def occupied_cells(self, side: Side) -> Tuple[Cell, ...]:
        return tuple(int(c) for c in np.flatnonzero(self._cells(side)))

    def stones_on_board(self, side: Side) -> int:
        return int(self._cells(side).sum())

    # --------------------------------------------------------------------------
    # Bar and borne-off
    # --------------------------------------------------------------------------

    def bar(self, side: Side) -> int:
        return int(self._bar[side.index])

    def add_to_bar(self, side: Side, count: int = 1) -> None:
        if count > 0:
            self._bar[side.index] += count

    def remove_from_bar(self, side: Side, count: int = 1) -> bool:
        """Take stones off the bar; returns False if there are not enough."""
        if count <= 0 or self._bar[side.index] < count:
            return False
        self._bar[side.index] -= count
        return True

    def borne_off(self, side: Side) -> int:
        return int(self._borne_off[side.index])

    def add_borne_off(self, side: Side) -> None:
        self._borne_off[side.index] += 1

    def turns_taken(self, side: Side) -> int:
        return int(self._turns_taken[side.index])

    # --------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------

    def is_consistent(self) -> bool:
        """Check stone conservation for both sides."""
        total = self.rules.total_stones_per_side
        return all(
            self.stones_on_board(side) + self.bar(side) + self.borne_off(side) == total
            for side in Side
        )

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            turn_index=self.turn_index,
            current_side=self.current_side,
            stones_first=tuple(int(c) for c in self._stones_first),
            stones_second=tuple(int(c) for c in self._stones_second),
            bar=(self.bar(Side.FIRST), self.bar(Side.SECOND)),
            borne_off=(self.borne_off(Side.FIRST), self.borne_off(Side.SECOND)),
            turns_taken=(self.turns_taken(Side.FIRST), self.turns_taken(Side.SECOND)),
            outcome=self.current_outcome,
            is_finished=self.is_finished,
            winner=self.winner,
        )

    def __str__(self) -> str:
        return state_to_string(self)


def pip_count(state: MatchState, side: Side) -> int:
    """Total pips a side still needs to bear every stone off.

    Stones on the bar count a full lap of the board.

    Args:
        state: Current match state
        side: Which side

    Returns:
        Total pip count (0 once every stone is borne off)
    """
    total = state.bar(side) * state.rules.board_size
    for cell in state.occupied_cells(side):
        total += pips_to_bear_off(state.rules, side, cell) * state.stones_at(side, cell)
    return total


def state_to_string(state: MatchState) -> str:
    """One-line debug rendering of a state.

    Example:
        T3 P:second  Off first:0 second:1  Bar first:1 second:0  first: 0(14) 5(1)  second: 12(13)
    """
    parts = [
        f"T{state.turn_index} P:{state.current_side}",
        f"Off first:{state.borne_off(Side.FIRST)} second:{state.borne_off(Side.SECOND)}",
        f"Bar first:{state.bar(Side.FIRST)} second:{state.bar(Side.SECOND)}",
    ]
    for side in Side:
        cells = " ".join(f"{c}({state.stones_at(side, c)})" for c in state.occupied_cells(side))
        parts.append(f"{side}: {cells}".rstrip())
    return "  ".join(parts)
