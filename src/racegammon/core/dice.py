"""Dice bags and standard dice tables.

A dice bag holds a weighted population of outcomes (each outcome repeated
``weight`` times) and hands them out without replacement. When the population
runs out it is rebuilt, and reshuffled in SHUFFLED mode, so every outcome
appears exactly ``weight`` times per cycle.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from racegammon.core.config import DiceBagConfig, DiceOutcomeConfig, DrawMode
from racegammon.core.types import EMPTY_OUTCOME, DiceOutcome

logger = logging.getLogger(__name__)

Roll = Tuple[int, int]


# ==============================================================================
# STANDARD TWO-DICE TABLES
# ==============================================================================

def all_dice_rolls(faces: int = 6) -> List[Roll]:
    """Generate every unordered two-dice roll.

    (2,3) and (3,2) are the same roll, so six faces give 21 rolls:
    6 doubles and 15 non-doubles.

    Returns:
        Rolls with die1 <= die2, sorted
    """
    return [(d1, d2) for d1 in range(1, faces + 1) for d2 in range(d1, faces + 1)]


def is_doubles(roll: Roll) -> bool:
    return roll[0] == roll[1]


def dice_values(roll: Roll) -> List[int]:
    """Pip values a roll grants: four for doubles, two otherwise.

    Examples:
        >>> dice_values((3, 5))
        [3, 5]
        >>> dice_values((4, 4))
        [4, 4, 4, 4]
    """
    if is_doubles(roll):
        return [roll[0]] * 4
    return [roll[0], roll[1]]


def dice_to_string(roll: Roll) -> str:
    """Readable roll label, e.g. '3-5' or 'Double 4s'."""
    if is_doubles(roll):
        return f"Double {roll[0]}s"
    return f"{roll[0]}-{roll[1]}"


def standard_outcomes(faces: int = 6) -> Tuple[DiceOutcomeConfig, ...]:
    """Bag outcomes equivalent to rolling two fair dice.

    Doubles get weight 1 and non-doubles weight 2, so one full bag cycle of
    36 draws matches the 1/36 vs 1/18 probabilities of real dice.
    """
    return tuple(
        DiceOutcomeConfig(
            label=dice_to_string(roll),
            weight=1 if is_doubles(roll) else 2,
            dice=tuple(dice_values(roll)),
        )
        for roll in all_dice_rolls(faces)
    )


def single_die_outcomes(faces: int = 6) -> Tuple[DiceOutcomeConfig, ...]:
    """One outcome per face, each granting a single die."""
    return tuple(
        DiceOutcomeConfig(label=f"d{face}", weight=1, dice=(face,))
        for face in range(1, faces + 1)
    )


def standard_bag(draw_mode: DrawMode = DrawMode.SHUFFLED, faces: int = 6) -> DiceBagConfig:
    return DiceBagConfig(draw_mode=draw_mode, outcomes=standard_outcomes(faces))


# ==============================================================================
# DICE BAG
# ==============================================================================

class DiceBag:
    """Weighted without-replacement outcome generator for one side.

    Attributes:
        config: Bag definition (outcomes, weights and draw mode)
    """

    def __init__(self, config: DiceBagConfig, seed: Optional[int] = None):
        if config is None:
            raise ValueError("config must not be None")
        self.config = config
        self._rng = np.random.default_rng(seed)
        self._items: NDArray[np.int64] = np.zeros(0, dtype=np.int64)
        self._cursor = 0
        self.reset()

    @property
    def draw_mode(self) -> DrawMode:
        return self.config.draw_mode

    @property
    def remaining_count(self) -> int:
        return max(0, len(self._items) - self._cursor)

    @property
    def total_count(self) -> int:
        return len(self._items)

    def reset(self) -> None:
        """Rebuild (and reshuffle) the population and rewind the cursor."""
        self._rebuild()

    def draw(self) -> DiceOutcome:
        """Draw the next outcome, refilling the bag first if it is exhausted.

        An empty outcome list yields an empty outcome instead of failing.
        """
        if not self.config.outcomes:
            return EMPTY_OUTCOME

        if self.total_count == 0 or self._cursor >= self.total_count:
            self._rebuild()

        index = int(self._items[self._cursor])
        self._cursor += 1
        outcome = self.config.outcomes[index]
        return DiceOutcome(label=outcome.label, dice=tuple(outcome.dice))

    def _rebuild(self) -> None:
        weights = [max(1, outcome.weight) for outcome in self.config.outcomes]
        self._items = np.repeat(np.arange(len(weights), dtype=np.int64), weights)
        if self.config.draw_mode == DrawMode.SHUFFLED:
            self._rng.shuffle(self._items)
        self._cursor = 0
        logger.debug("Dice bag rebuilt: %d items (%s)", self.total_count, self.draw_mode.value)
