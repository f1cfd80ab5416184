"""Core type definitions for the race engine.

This module defines the small value types shared by every layer: sides,
moves, path classification, apply results and dice outcomes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


# ==============================================================================
# SIDES
# ==============================================================================

Cell = int  # absolute board cell, 0 <= cell < board_size


class Side(Enum):
    """The two players. ``index`` addresses per-side arrays."""
    FIRST = "first"
    SECOND = "second"

    @property
    def index(self) -> int:
        return 0 if self == Side.FIRST else 1

    def opponent(self) -> "Side":
        """Return the opponent side."""
        return Side.SECOND if self == Side.FIRST else Side.FIRST

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# MOVES
# ==============================================================================

@dataclass(frozen=True)
class MoveStone:
    """Move a stone forward from an absolute cell by ``pips``."""
    from_cell: Cell
    pips: int

    def __str__(self) -> str:
        return f"Move({self.from_cell}, {self.pips})"


@dataclass(frozen=True)
class BearOff:
    """Remove a stone from ``from_cell`` using a die of ``pips``."""
    from_cell: Cell
    pips: int

    def __str__(self) -> str:
        return f"BearOff({self.from_cell}, {self.pips})"


@dataclass(frozen=True)
class EnterFromBar:
    """Bring a hit stone back onto the board using a die of ``pips``."""
    pips: int

    def __str__(self) -> str:
        return f"Enter({self.pips})"


Move = Union[MoveStone, BearOff, EnterFromBar]


def move_from_cell(move: Move) -> Optional[Cell]:
    """Origin cell of a move, or None for a bar entry."""
    if isinstance(move, EnterFromBar):
        return None
    return move.from_cell


# ==============================================================================
# PATH AND RESULTS
# ==============================================================================

@dataclass(frozen=True)
class PathInfo:
    """Geometry of one side's path around the board.

    Attributes:
        board_size: Number of cells on the loop
        start_cell: Absolute cell where the side's stones start (its head)
        direction: +1 or -1, the physical direction of travel
        home_size: Number of cells in the home zone at the end of the path
    """
    board_size: int
    start_cell: Cell
    direction: int
    home_size: int

    @property
    def bear_off_progress(self) -> int:
        return self.board_size

    @property
    def home_start_progress(self) -> int:
        return self.board_size - self.home_size


class MoveClassification(Enum):
    """Where a prospective move lands on the progress scale."""
    INVALID = "invalid"
    NORMAL = "normal"
    EXACT_BEAR_OFF = "exact_bear_off"
    OVERSHOOT = "overshoot"


class ApplyResult(Enum):
    """Outcome of applying a move to a match state."""
    OK = "ok"
    ILLEGAL = "illegal"
    FINISHED = "finished"

    @property
    def applied(self) -> bool:
        return self != ApplyResult.ILLEGAL


class MatchEndReason(Enum):
    """Why a match ended (NONE while it is running)."""
    NONE = "none"
    WIN = "win"
    TIMEOUT = "timeout"
    NO_MOVES = "no_moves"


@dataclass(frozen=True)
class MatchResult:
    """Terminal result of a match."""
    winner: Side
    reason: MatchEndReason


# ==============================================================================
# DICE
# ==============================================================================

@dataclass(frozen=True)
class DiceOutcome:
    """One labelled draw from a dice bag.

    Attributes:
        label: Name of the outcome as configured
        dice: Pip values granted for the turn, in play order
    """
    label: str = ""
    dice: Tuple[int, ...] = ()

    def __str__(self) -> str:
        if not self.dice:
            return "-"
        return ", ".join(str(d) for d in self.dice)


EMPTY_OUTCOME = DiceOutcome(label="Empty", dice=())
