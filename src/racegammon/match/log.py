"""Move records and the per-match log."""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from racegammon.core.types import (
    ApplyResult,
    Cell,
    DiceOutcome,
    MatchEndReason,
    Move,
    Side,
)


@dataclass(frozen=True)
class MoveRecord:
    """Immutable log entry for one resolved move (or a terminal transition).

    Attributes:
        turn_index: Turn the record belongs to
        side: Side that acted
        move: Move applied, None for a timeout / deadlock entry
        from_cell: Origin cell, None for bar entries
        to_cell: Destination cell, None for bear-offs
        pips: Die value used
        outcome: Dice outcome drawn for the turn
        remaining_dice: Dice still unused after this move
        result: Result of applying the move, None when no move was applied
        end_reason: Why the match ended, NONE while it continues
        winner: Winner if the match is decided
    """
    turn_index: int
    side: Side
    move: Optional[Move]
    from_cell: Optional[Cell]
    to_cell: Optional[Cell]
    pips: Optional[int]
    outcome: DiceOutcome
    remaining_dice: Tuple[int, ...]
    result: Optional[ApplyResult]
    end_reason: MatchEndReason = MatchEndReason.NONE
    winner: Optional[Side] = None

    def __str__(self) -> str:
        what = str(self.move) if self.move is not None else "-"
        text = f"T{self.turn_index} {self.side} {what} [{self.outcome}]"
        if self.end_reason != MatchEndReason.NONE:
            text += f" -> {self.end_reason.value} ({self.winner})"
        return text


class MatchLog:
    """Append-only list of move records."""

    def __init__(self):
        self._records: List[MoveRecord] = []

    @property
    def records(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._records)

    @property
    def last(self) -> Optional[MoveRecord]:
        return self._records[-1] if self._records else None

    def add(self, record: MoveRecord) -> None:
        self._records.append(record)

    def get(self, index: int) -> Optional[MoveRecord]:
        """Record at ``index`` or None when out of range (no negative indexing)."""
        if index < 0 or index >= len(self._records):
            return None
        return self._records[index]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)
