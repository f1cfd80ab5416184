"""Tests for path geometry."""

import pytest

from racegammon.core.config import RulesetConfig
from racegammon.core.path import (
    cell_to_progress,
    classify_move,
    home_cells,
    is_in_home,
    path_info,
    pips_to_bear_off,
    progress_to_cell,
)
from racegammon.core.types import MoveClassification, Side


class TestProgressCoordinate:
    """Tests for cell <-> progress conversion."""

    @pytest.mark.parametrize("side", list(Side))
    def test_round_trip(self, rules, side):
        """Progress and cell conversions are inverse for every cell."""
        info = path_info(rules, side)
        for cell in range(rules.board_size):
            assert progress_to_cell(info, cell_to_progress(info, cell)) == cell

    def test_start_cell_is_progress_zero(self, rules):
        """Each side's head is progress 0."""
        assert cell_to_progress(path_info(rules, Side.FIRST), 0) == 0
        assert cell_to_progress(path_info(rules, Side.SECOND), 12) == 0

    def test_second_side_moves_backwards(self, rules):
        """The second side walks down through the cell numbers and wraps."""
        info = path_info(rules, Side.SECOND)
        assert progress_to_cell(info, 1) == 11
        assert progress_to_cell(info, 12) == 0
        assert progress_to_cell(info, 13) == 23


class TestHomeZone:
    """Tests for home zone queries."""

    def test_home_cells(self, rules):
        """Home cells are listed in increasing progress order."""
        assert home_cells(rules, Side.FIRST) == [18, 19, 20, 21, 22, 23]
        assert home_cells(rules, Side.SECOND) == [18, 17, 16, 15, 14, 13]

    def test_is_in_home(self, rules):
        """Home membership follows the progress coordinate."""
        assert is_in_home(rules, Side.FIRST, 18)
        assert is_in_home(rules, Side.FIRST, 23)
        assert not is_in_home(rules, Side.FIRST, 17)
        assert not is_in_home(rules, Side.FIRST, 0)
        assert is_in_home(rules, Side.SECOND, 13)
        assert not is_in_home(rules, Side.SECOND, 19)

    def test_pips_to_bear_off(self, rules):
        """Last home cell is one pip from off, the head a full lap."""
        assert pips_to_bear_off(rules, Side.FIRST, 23) == 1
        assert pips_to_bear_off(rules, Side.FIRST, 18) == 6
        assert pips_to_bear_off(rules, Side.FIRST, 0) == 24
        assert pips_to_bear_off(rules, Side.SECOND, 13) == 1
        assert pips_to_bear_off(rules, Side.SECOND, 18) == 6

    def test_small_board(self):
        """Geometry holds on a custom board."""
        rules = RulesetConfig(board_size=10, home_size=3, start_cell_first=2,
                              start_cell_second=7, move_dir_second=1).validated()
        assert home_cells(rules, Side.FIRST) == [9, 0, 1]
        assert home_cells(rules, Side.SECOND) == [4, 5, 6]


class TestClassifyMove:
    """Tests for move classification."""

    def test_invalid(self, rules):
        """Non-positive pips and off-board cells are invalid."""
        assert classify_move(rules, Side.FIRST, 0, 0)[0] == MoveClassification.INVALID
        assert classify_move(rules, Side.FIRST, 0, -2)[0] == MoveClassification.INVALID
        assert classify_move(rules, Side.FIRST, -1, 3)[0] == MoveClassification.INVALID
        assert classify_move(rules, Side.FIRST, 24, 3)[0] == MoveClassification.INVALID

    def test_normal(self, rules):
        """Normal moves report the landing cell."""
        assert classify_move(rules, Side.FIRST, 0, 3) == (MoveClassification.NORMAL, 3)
        assert classify_move(rules, Side.SECOND, 12, 3) == (MoveClassification.NORMAL, 9)
        assert classify_move(rules, Side.SECOND, 2, 5) == (MoveClassification.NORMAL, 21)

    def test_exact_bear_off(self, rules):
        """Landing exactly on board_size is an exact bear-off."""
        classification, _ = classify_move(rules, Side.FIRST, 18, 6)
        assert classification == MoveClassification.EXACT_BEAR_OFF
        classification, _ = classify_move(rules, Side.SECOND, 13, 1)
        assert classification == MoveClassification.EXACT_BEAR_OFF

    def test_overshoot(self, rules):
        """Going past board_size is an overshoot."""
        classification, to_cell = classify_move(rules, Side.FIRST, 19, 6)
        assert classification == MoveClassification.OVERSHOOT
        assert to_cell == 19
