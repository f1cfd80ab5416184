"""Path geometry.

Each side walks the same closed loop of cells, but from its own start cell and
in its own physical direction. Everything here works in a per-side
"progress" coordinate:

    progress 0              the side's start (head) cell
    progress board_size-1   the last cell before leaving the board
    progress board_size     borne off

    cell = (start + direction * progress) mod board_size

so one formula serves both sides and no other module needs to branch on
direction.
"""

from typing import List, Tuple

from racegammon.core.config import RulesetConfig
from racegammon.core.types import Cell, MoveClassification, PathInfo, Side


def path_info(rules: RulesetConfig, side: Side) -> PathInfo:
    """Get the path geometry for a side."""
    if rules is None:
        raise ValueError("rules must not be None")
    return PathInfo(
        board_size=rules.board_size,
        start_cell=rules.start_cell(side),
        direction=rules.move_dir(side),
        home_size=rules.home_size,
    )


def _wrap(index: int, board_size: int) -> int:
    # Python's % already returns a non-negative result for a positive modulus.
    return index % board_size


def cell_to_progress(info: PathInfo, cell: Cell) -> int:
    """Convert an absolute cell to the side's progress (0..board_size-1)."""
    return _wrap((cell - info.start_cell) * info.direction, info.board_size)


def progress_to_cell(info: PathInfo, progress: int) -> Cell:
    """Convert a progress value back to an absolute cell."""
    return _wrap(info.start_cell + info.direction * progress, info.board_size)


def home_cells(rules: RulesetConfig, side: Side) -> List[Cell]:
    """Cells of a side's home zone, ordered by increasing progress.

    The first entry is the home cell nearest the start, the last entry is the
    cell one pip away from bearing off.
    """
    info = path_info(rules, side)
    if info.board_size <= 0 or info.home_size <= 0:
        return []
    return [
        progress_to_cell(info, info.home_start_progress + i)
        for i in range(info.home_size)
    ]


def is_in_home(rules: RulesetConfig, side: Side, cell: Cell) -> bool:
    """Check whether a cell lies in a side's home zone."""
    info = path_info(rules, side)
    progress = cell_to_progress(info, cell)
    return info.home_start_progress <= progress < info.bear_off_progress


def pips_to_bear_off(rules: RulesetConfig, side: Side, cell: Cell) -> int:
    """Exact die value that would bear a stone off from ``cell``."""
    info = path_info(rules, side)
    return info.bear_off_progress - cell_to_progress(info, cell)


def classify_move(
    rules: RulesetConfig,
    side: Side,
    from_cell: Cell,
    pips: int,
) -> Tuple[MoveClassification, Cell]:
    """Classify where moving ``pips`` from ``from_cell`` would land.

    Args:
        rules: Validated ruleset
        side: Side that moves
        from_cell: Absolute origin cell
        pips: Die value

    Returns:
        (classification, to_cell). ``to_cell`` is the landing cell for a
        NORMAL move and ``from_cell`` otherwise.
    """
    if rules is None or pips <= 0:
        return MoveClassification.INVALID, from_cell

    info = path_info(rules, side)
    if from_cell < 0 or from_cell >= info.board_size:
        return MoveClassification.INVALID, from_cell

    target = cell_to_progress(info, from_cell) + pips

    if target < info.bear_off_progress:
        return MoveClassification.NORMAL, progress_to_cell(info, target)
    if target == info.bear_off_progress:
        return MoveClassification.EXACT_BEAR_OFF, from_cell
    return MoveClassification.OVERSHOOT, from_cell
