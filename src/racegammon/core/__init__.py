"""Core game logic and data structures."""

from racegammon.core.types import (
    ApplyResult,
    BearOff,
    Cell,
    DiceOutcome,
    EnterFromBar,
    MatchEndReason,
    MatchResult,
    Move,
    MoveClassification,
    MoveStone,
    PathInfo,
    Side,
)
from racegammon.core.config import (
    DiceBagConfig,
    DiceOutcomeConfig,
    DrawMode,
    FirstTurnAllowance,
    HeadRuleConfig,
    MatchConfig,
    RulesetConfig,
    StartingLayout,
    StonePlacement,
)
from racegammon.core.state import MatchState, StateSnapshot
from racegammon.core.dice import DiceBag

__all__ = [
    "ApplyResult",
    "BearOff",
    "Cell",
    "DiceOutcome",
    "EnterFromBar",
    "MatchEndReason",
    "MatchResult",
    "Move",
    "MoveClassification",
    "MoveStone",
    "PathInfo",
    "Side",
    "DiceBagConfig",
    "DiceOutcomeConfig",
    "DrawMode",
    "FirstTurnAllowance",
    "HeadRuleConfig",
    "MatchConfig",
    "RulesetConfig",
    "StartingLayout",
    "StonePlacement",
    "MatchState",
    "StateSnapshot",
    "DiceBag",
]
