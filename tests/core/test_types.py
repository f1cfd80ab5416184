"""Tests for core type definitions."""

import pytest

from racegammon.core.types import (
    ApplyResult,
    BearOff,
    DiceOutcome,
    EMPTY_OUTCOME,
    EnterFromBar,
    MoveStone,
    PathInfo,
    Side,
    move_from_cell,
)


class TestSide:
    """Tests for Side enum."""

    def test_opponent(self):
        """Test opponent() method."""
        assert Side.FIRST.opponent() == Side.SECOND
        assert Side.SECOND.opponent() == Side.FIRST

    def test_index(self):
        """Test array index of each side."""
        assert Side.FIRST.index == 0
        assert Side.SECOND.index == 1

    def test_string_representation(self):
        """Test string conversion."""
        assert str(Side.FIRST) == "first"
        assert str(Side.SECOND) == "second"


class TestMoves:
    """Tests for the move variants."""

    def test_value_equality(self):
        """Moves compare by kind and payload."""
        assert MoveStone(3, 4) == MoveStone(3, 4)
        assert MoveStone(3, 4) != MoveStone(3, 5)
        assert MoveStone(3, 4) != BearOff(3, 4)
        assert EnterFromBar(2) == EnterFromBar(2)

    def test_moves_are_hashable(self):
        """Moves can be used in sets."""
        moves = {MoveStone(1, 2), MoveStone(1, 2), BearOff(20, 4), EnterFromBar(3)}
        assert len(moves) == 3

    def test_moves_are_immutable(self):
        """Moves are frozen."""
        move = MoveStone(1, 2)
        with pytest.raises(AttributeError):
            move.pips = 3

    def test_move_from_cell(self):
        """Bar entries have no origin cell."""
        assert move_from_cell(MoveStone(7, 2)) == 7
        assert move_from_cell(BearOff(20, 4)) == 20
        assert move_from_cell(EnterFromBar(3)) is None

    def test_string_representation(self):
        """Test readable move strings."""
        assert str(MoveStone(3, 4)) == "Move(3, 4)"
        assert str(BearOff(20, 6)) == "BearOff(20, 6)"
        assert str(EnterFromBar(2)) == "Enter(2)"


class TestPathInfo:
    """Tests for PathInfo."""

    def test_progress_bounds(self):
        """Home starts board_size - home_size in, bear-off is at board_size."""
        info = PathInfo(board_size=24, start_cell=0, direction=1, home_size=6)
        assert info.home_start_progress == 18
        assert info.bear_off_progress == 24


class TestApplyResult:
    """Tests for ApplyResult."""

    def test_applied(self):
        """Only ILLEGAL is a rejection."""
        assert ApplyResult.OK.applied
        assert ApplyResult.FINISHED.applied
        assert not ApplyResult.ILLEGAL.applied


class TestDiceOutcome:
    """Tests for DiceOutcome."""

    def test_string_representation(self):
        """Empty outcomes print as a dash."""
        assert str(DiceOutcome("3-5", (3, 5))) == "3, 5"
        assert str(EMPTY_OUTCOME) == "-"
