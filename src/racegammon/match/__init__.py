"""Match orchestration: turn runner, move log, events and simulation."""

from racegammon.match.events import (
    MATCH_ENDED,
    MATCH_STARTED,
    MOVE_APPLIED,
    TURN_STARTED,
    MatchEvents,
)
from racegammon.match.log import MatchLog, MoveRecord
from racegammon.match.runner import TurnRunner
from racegammon.match.simulate import (
    MatchSummary,
    play_match,
    play_matches,
    compute_match_statistics,
)

__all__ = [
    "MATCH_ENDED",
    "MATCH_STARTED",
    "MOVE_APPLIED",
    "TURN_STARTED",
    "MatchEvents",
    "MatchLog",
    "MoveRecord",
    "TurnRunner",
    "MatchSummary",
    "play_match",
    "play_matches",
    "compute_match_statistics",
]
