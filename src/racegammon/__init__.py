"""
Race Backgammon - rules engine for a two-player dice race on a closed loop.
"""

__version__ = "0.1.0"

# Core exports
from racegammon.core.types import (
    Side,
    Move,
    MoveStone,
    BearOff,
    EnterFromBar,
    ApplyResult,
    MatchEndReason,
    MatchResult,
)
from racegammon.core.config import RulesetConfig, MatchConfig

__all__ = [
    "Side",
    "Move",
    "MoveStone",
    "BearOff",
    "EnterFromBar",
    "ApplyResult",
    "MatchEndReason",
    "MatchResult",
    "RulesetConfig",
    "MatchConfig",
]
