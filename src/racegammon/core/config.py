"""Ruleset, dice bag and match configuration.

Configuration is authored by designers and tests, so out-of-range values are
clamped into their valid bounds instead of failing a session. Use
``RulesetConfig.validated()`` and ``DiceBagConfig.sanitized()`` (or
``MatchConfig.create`` which calls both) before handing a config to the engine.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from racegammon.core.types import Cell, Side


MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 256
MAX_STONES_PER_SIDE = 99
MAX_TURNS_LIMIT = 9999
MAX_DIE_VALUE = 99
MAX_PIPS_PER_OUTCOME = 6


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


# ==============================================================================
# HEAD RULES
# ==============================================================================

@dataclass(frozen=True)
class FirstTurnAllowance:
    """Extra head moves granted on a side's first turn for a specific roll.

    The pair (die_a, die_b) is unordered: (6, 3) matches a roll of 3-6.
    """
    die_a: int
    die_b: int
    allowance: int

    def __post_init__(self):
        assert self.die_a >= 1 and self.die_b >= 1, (
            f"Allowance keyed by invalid dice: {self.die_a}-{self.die_b}"
        )

    def matches(self, die_a: int, die_b: int) -> bool:
        return sorted((self.die_a, self.die_b)) == sorted((die_a, die_b))


DEFAULT_FIRST_TURN_ALLOWANCES = (
    FirstTurnAllowance(6, 6, 2),
    FirstTurnAllowance(4, 4, 2),
    FirstTurnAllowance(3, 3, 2),
)


@dataclass(frozen=True)
class HeadRuleConfig:
    """Limits on moves that leave a side's start (head) cell.

    Attributes:
        restrict_head_moves: If False, head moves are unlimited
        max_head_moves_per_turn: Default cap on head moves per turn
        first_turn_allowances: Special caps for a side's very first turn
    """
    restrict_head_moves: bool = True
    max_head_moves_per_turn: int = 1
    first_turn_allowances: Tuple[FirstTurnAllowance, ...] = DEFAULT_FIRST_TURN_ALLOWANCES

    def first_turn_allowance(self, die_a: int, die_b: int) -> Optional[int]:
        """Look up the first-turn cap for a roll, or None if not listed."""
        for entry in self.first_turn_allowances:
            if entry.matches(die_a, die_b):
                return entry.allowance
        return None

    def validated(self) -> "HeadRuleConfig":
        return replace(
            self,
            max_head_moves_per_turn=max(0, int(self.max_head_moves_per_turn)),
            first_turn_allowances=tuple(
                replace(entry, allowance=max(0, int(entry.allowance)))
                for entry in self.first_turn_allowances
            ),
        )


# ==============================================================================
# RULESET
# ==============================================================================

@dataclass(frozen=True)
class RulesetConfig:
    """Rules of one match.

    Defaults describe the standard long race: a 24-cell loop, 6-cell home
    zones, 15 stones per side starting on opposite heads and moving in
    opposite physical directions, with any opponent stone blocking a cell.
    """

    # Board
    board_size: int = 24
    home_size: int = 6
    total_stones_per_side: int = 15

    # Paths
    start_cell_first: Cell = 0
    start_cell_second: Cell = 12
    move_dir_first: int = 1
    move_dir_second: int = -1

    # Collision rules
    allow_hit_single_stone: bool = False
    block_if_opponent_any_stone: bool = True

    # Dice range used to clamp bag outcomes
    die_min: int = 1
    die_max: int = 6

    # Match limits
    max_turns: int = 120
    max_passes_in_a_row: int = 0  # 0 disables the deadlock guard
    random_seed: int = 12345

    head_rules: HeadRuleConfig = field(default_factory=HeadRuleConfig)

    verbose_log: bool = False

    def start_cell(self, side: Side) -> Cell:
        return self.start_cell_first if side == Side.FIRST else self.start_cell_second

    def move_dir(self, side: Side) -> int:
        return self.move_dir_first if side == Side.FIRST else self.move_dir_second

    def validated(self) -> "RulesetConfig":
        """Return a copy with every field clamped into its valid range."""
        board_size = _clamp(self.board_size, MIN_BOARD_SIZE, MAX_BOARD_SIZE)
        die_min = _clamp(self.die_min, 1, MAX_DIE_VALUE)
        die_max = _clamp(self.die_max, die_min, MAX_DIE_VALUE)
        head_rules = self.head_rules if self.head_rules is not None else HeadRuleConfig()

        return replace(
            self,
            board_size=board_size,
            home_size=_clamp(self.home_size, 1, board_size),
            total_stones_per_side=_clamp(self.total_stones_per_side, 1, MAX_STONES_PER_SIDE),
            start_cell_first=int(self.start_cell_first) % board_size,
            start_cell_second=int(self.start_cell_second) % board_size,
            move_dir_first=-1 if self.move_dir_first < 0 else 1,
            move_dir_second=-1 if self.move_dir_second < 0 else 1,
            die_min=die_min,
            die_max=die_max,
            max_turns=_clamp(self.max_turns, 1, MAX_TURNS_LIMIT),
            max_passes_in_a_row=max(0, int(self.max_passes_in_a_row)),
            head_rules=head_rules.validated(),
        )


def hitting_ruleset(**overrides) -> RulesetConfig:
    """Ruleset where single stones can be hit and only pairs block."""
    overrides.setdefault("allow_hit_single_stone", True)
    overrides.setdefault("block_if_opponent_any_stone", False)
    return RulesetConfig(**overrides).validated()


# ==============================================================================
# DICE BAGS
# ==============================================================================

class DrawMode(Enum):
    """How a dice bag orders its population."""
    SEQUENTIAL = "sequential"
    SHUFFLED = "shuffled"


@dataclass(frozen=True)
class DiceOutcomeConfig:
    """One configured bag outcome.

    Attributes:
        label: Display name
        weight: How many copies of the outcome the bag population holds
        dice: Pip values granted when drawn
    """
    label: str
    weight: int
    dice: Tuple[int, ...]


@dataclass(frozen=True)
class DiceBagConfig:
    """A weighted outcome list and the order it is drawn in."""
    draw_mode: DrawMode = DrawMode.SEQUENTIAL
    outcomes: Tuple[DiceOutcomeConfig, ...] = ()

    def __post_init__(self):
        assert isinstance(self.draw_mode, DrawMode), f"Unknown draw mode: {self.draw_mode}"

    def sanitized(self, rules: RulesetConfig) -> "DiceBagConfig":
        """Clamp outcomes into the ruleset's die range.

        Outcomes without pips are dropped, weights are raised to at least 1,
        and at most six pips are kept per outcome. If nothing usable is left
        the bag falls back to a single outcome of one ``die_max`` die.
        """
        low = min(rules.die_min, rules.die_max)
        high = max(rules.die_min, rules.die_max)

        outcomes = []
        for outcome in self.outcomes:
            if outcome is None or not outcome.dice:
                continue
            dice = tuple(_clamp(d, low, high) for d in outcome.dice[:MAX_PIPS_PER_OUTCOME])
            outcomes.append(DiceOutcomeConfig(
                label=outcome.label or "",
                weight=max(1, int(outcome.weight)),
                dice=dice,
            ))

        if not outcomes:
            outcomes.append(DiceOutcomeConfig(label="Default", weight=1, dice=(high,)))

        return DiceBagConfig(draw_mode=self.draw_mode, outcomes=tuple(outcomes))


# ==============================================================================
# STARTING LAYOUT
# ==============================================================================

@dataclass(frozen=True)
class StonePlacement:
    """Put ``count`` stones of ``side`` on ``cell`` at match start."""
    side: Side
    cell: Cell
    count: int


@dataclass(frozen=True)
class StartingLayout:
    """Named starting position, an alternative to stacking every stone on the head."""
    layout_id: str = "custom"
    placements: Tuple[StonePlacement, ...] = ()


# ==============================================================================
# MATCH
# ==============================================================================

@dataclass(frozen=True)
class MatchConfig:
    """Everything a runner needs to start a match.

    A bag of None means that side draws empty outcomes and never moves.
    """
    rules: RulesetConfig
    bag_first: Optional[DiceBagConfig] = None
    bag_second: Optional[DiceBagConfig] = None

    def bag(self, side: Side) -> Optional[DiceBagConfig]:
        return self.bag_first if side == Side.FIRST else self.bag_second

    @staticmethod
    def create(
        rules: RulesetConfig,
        bag_first: Optional[DiceBagConfig],
        bag_second: Optional[DiceBagConfig],
    ) -> "MatchConfig":
        """Validate the rules and sanitize both bags (missing bags get the default outcome)."""
        if rules is None:
            raise ValueError("rules must not be None")
        rules = rules.validated()
        return MatchConfig(
            rules=rules,
            bag_first=(bag_first or DiceBagConfig()).sanitized(rules),
            bag_second=(bag_second or DiceBagConfig()).sanitized(rules),
        )
