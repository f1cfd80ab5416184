"""Turn runner: drives one match from first roll to result.

The runner owns the match state, one dice bag and one bot strategy per side,
and the move log. It is a synchronous state machine:

    init/reset -> begin turn -> (tick | try_apply_human_move)* -> end turn -> ...
                                                     -> match ended (win / timeout / no moves)

Nothing here blocks or schedules; an external driver calls ``tick`` (bots) or
``try_apply_human_move`` (humans) whenever it wants the match to progress.
"""

import logging
import sys
from typing import List, Optional, Tuple

from racegammon.agents.strategies import Strategy, StrategyFactory, easy_strategy
from racegammon.core.config import MatchConfig, RulesetConfig, StartingLayout
from racegammon.core.dice import DiceBag
from racegammon.core.moves import (
    generate_legal_moves,
    apply_move,
    is_head_cell,
    is_legal_move,
    resolve_move_cells,
)
from racegammon.core.path import home_cells
from racegammon.core.state import MatchState, StateSnapshot
from racegammon.core.types import (
    EMPTY_OUTCOME,
    DiceOutcome,
    MatchEndReason,
    MatchResult,
    Move,
    Side,
    move_from_cell,
)
from racegammon.match.events import (
    MATCH_ENDED,
    MATCH_STARTED,
    MOVE_APPLIED,
    TURN_STARTED,
    MatchEvents,
)
from racegammon.match.log import MatchLog, MoveRecord

logger = logging.getLogger(__name__)

UNLIMITED_HEAD_MOVES = sys.maxsize

# Per-side seed offsets, so each bag and bot has its own reproducible stream.
BAG_SEED_OFFSETS = {Side.FIRST: 1000, Side.SECOND: 2000}
BOT_SEED_OFFSETS = {Side.FIRST: 100, Side.SECOND: 200}

# Side declared the winner when a match is cut short.
TIE_BREAK_WINNER = Side.FIRST


class TurnRunner:
    """Orchestrates a single match.

    Attributes:
        events: Listener registry (match_started, turn_started, move_applied, match_ended)
        log: Records of every resolved move
        state: Match state, None until ``init`` is called
    """

    def __init__(self, strategy_factory: StrategyFactory = easy_strategy):
        self.events = MatchEvents()
        self.log = MatchLog()
        self.state: Optional[MatchState] = None
        self.config: Optional[MatchConfig] = None

        self._strategy_factory = strategy_factory
        self._seed = 0
        self._bags = {}
        self._bots = {}
        self._result: Optional[MatchResult] = None

        self._current_outcome: DiceOutcome = EMPTY_OUTCOME
        self._remaining_dice: List[int] = []
        self._used_dice: List[int] = []
        self._selected_die_index: Optional[int] = None
        self._head_moves_used = 0
        self._head_move_limit = UNLIMITED_HEAD_MOVES
        self._moved_this_turn = False
        self._passes_in_a_row = 0

    # --------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------

    @property
    def rules(self) -> Optional[RulesetConfig]:
        return self.state.rules if self.state is not None else None

    @property
    def current_outcome(self) -> DiceOutcome:
        return self._current_outcome

    @property
    def remaining_dice(self) -> Tuple[int, ...]:
        return tuple(self._remaining_dice)

    @property
    def used_dice(self) -> Tuple[int, ...]:
        return tuple(self._used_dice)

    @property
    def selected_die_index(self) -> Optional[int]:
        return self._selected_die_index

    @property
    def is_waiting_for_die_selection(self) -> bool:
        return len(self._remaining_dice) > 1 and self._selected_die_index is None

    @property
    def head_moves_used(self) -> int:
        return self._head_moves_used

    @property
    def head_move_limit(self) -> int:
        return self._head_move_limit

    @property
    def bag_remaining(self) -> int:
        bag = self._current_bag()
        return bag.remaining_count if bag is not None else 0

    @property
    def bag_total(self) -> int:
        bag = self._current_bag()
        return bag.total_count if bag is not None else 0

    @property
    def result(self) -> Optional[MatchResult]:
        return self._result

    @property
    def is_finished(self) -> bool:
        return self.state is not None and self.state.is_finished

    def snapshot(self) -> StateSnapshot:
        self._require_init()
        return self.state.snapshot()

    def legal_moves(self, die_value: int) -> List[Move]:
        """Legal moves for a die value under this turn's head-move counters."""
        self._require_init()
        return generate_legal_moves(
            self.state, die_value, self._head_moves_used, self._head_move_limit
        )

    def has_any_legal_move(self) -> bool:
        """True if some remaining die has at least one legal move."""
        if self.state is None or not self._remaining_dice:
            return False
        return any(self.legal_moves(die) for die in set(self._remaining_dice))

    def has_legal_move_for_selected_die(self) -> bool:
        if self.state is None or not self._remaining_dice:
            return False
        index = self._resolve_selected_die_index()
        if index is None:
            return False
        return bool(self.legal_moves(self._remaining_dice[index]))

    # --------------------------------------------------------------------------
    # Commands
    # --------------------------------------------------------------------------

    def init(
        self,
        config: MatchConfig,
        seed: Optional[int] = None,
        layout: Optional[StartingLayout] = None,
    ) -> None:
        """Start a new match.

        Args:
            config: Rules and per-side dice bags
            seed: Session seed (defaults to ``rules.random_seed``)
            layout: Optional starting layout (defaults to every stone on its head)
        """
        if config is None or config.rules is None:
            raise ValueError("config with rules is required")

        rules = config.rules.validated()
        self.config = config
        self._seed = rules.random_seed if seed is None else int(seed)

        self._bags = {}
        for side in Side:
            bag_config = config.bag(side)
            if bag_config is not None:
                self._bags[side] = DiceBag(bag_config, seed=self._seed + BAG_SEED_OFFSETS[side])

        self.state = MatchState(rules, layout)
        self._start_match()

    def reset(self) -> None:
        """Restart the current match from its starting position."""
        self._require_init()
        self.state.reset()
        for bag in self._bags.values():
            bag.reset()
        self._start_match()

    def tick(self) -> bool:
        """Advance a bot-driven match by one step.

        One step either applies one move or ends the current turn.

        Returns:
            False if the match is already finished, True otherwise
        """
        self._require_init()
        if self.state.is_finished:
            return False

        if not self._remaining_dice or not self._try_apply_bot_move():
            self._end_turn()
        return True

    def try_apply_human_move(self, move: Move) -> bool:
        """Apply a move chosen by a human for the selected die.

        The die is the explicitly selected one, or the only remaining die.
        A selected die with no legal move does not end the turn: callers check
        ``has_legal_move_for_selected_die`` and call ``end_turn_if_no_moves``.

        Returns:
            True if the move was applied, False if it was rejected (no change)
        """
        self._require_init()
        if self.state.is_finished or move is None:
            return False

        index = self._resolve_selected_die_index()
        if index is None:
            return False

        die_value = self._remaining_dice[index]
        if move.pips != die_value:
            return False
        if not is_legal_move(self.state, move, self._head_moves_used, self._head_move_limit):
            return False

        self._selected_die_index = index
        return self._apply_current_move(move)

    def select_die_index(self, index: int) -> bool:
        self._require_init()
        if self.state.is_finished:
            return False
        if index < 0 or index >= len(self._remaining_dice):
            return False
        self._selected_die_index = index
        return True

    def ensure_selected_die(self) -> bool:
        """Make sure a valid die is selected, defaulting to the first one."""
        self._require_init()
        if self.state.is_finished:
            return False
        if not self._remaining_dice:
            self._selected_die_index = None
            return False
        index = self._selected_die_index
        if index is None or not 0 <= index < len(self._remaining_dice):
            self._selected_die_index = 0
        return True

    def end_turn_if_no_moves(self) -> bool:
        """End the turn when no remaining die can be played."""
        self._require_init()
        if self.state.is_finished or self.has_any_legal_move():
            return False
        self._end_turn()
        return True

    # --------------------------------------------------------------------------
    # Turn flow
    # --------------------------------------------------------------------------

    def _require_init(self) -> None:
        if self.state is None:
            raise RuntimeError("TurnRunner is not initialized. Call init first.")

    def _start_match(self) -> None:
        self._bots = {
            side: self._strategy_factory(self._seed + BOT_SEED_OFFSETS[side])
            for side in Side
        }
        self.log.clear()
        self._result = None
        self._passes_in_a_row = 0

        logger.info("Match started (seed=%d)", self._seed)
        self._log_home_zones()
        self.events.emit(MATCH_STARTED, state=self.state)

        self._begin_turn()
        if not self.has_any_legal_move():
            self._end_turn()

    def _current_bag(self) -> Optional[DiceBag]:
        if self.state is None:
            return None
        return self._bags.get(self.state.current_side)

    def _begin_turn(self) -> None:
        if self.state.is_finished:
            return

        bag = self._current_bag()
        self._current_outcome = bag.draw() if bag is not None else EMPTY_OUTCOME
        self.state.set_current_outcome(self._current_outcome)

        self._remaining_dice = list(self._current_outcome.dice)
        self._used_dice = []
        self._selected_die_index = 0 if self._remaining_dice else None
        self._head_moves_used = 0
        self._head_move_limit = self._calculate_head_move_limit(self.state.current_side)
        self._moved_this_turn = False

        logger.debug(
            "Turn %d: %s rolled [%s] (head limit %s)",
            self.state.turn_index, self.state.current_side, self._current_outcome,
            "-" if self._head_move_limit == UNLIMITED_HEAD_MOVES else self._head_move_limit,
        )
        self.events.emit(TURN_STARTED, state=self.state)

    def _end_turn(self) -> None:
        """Hand over to the next side, skipping turns that have no legal move."""
        while not self.state.is_finished:
            if self._moved_this_turn:
                self._passes_in_a_row = 0
            else:
                self._passes_in_a_row += 1

            limit = self.state.rules.max_passes_in_a_row
            if limit > 0 and self._passes_in_a_row >= limit:
                self._finish_early(MatchEndReason.NO_MOVES)
                return
            if self.state.turn_index + 1 >= self.state.rules.max_turns:
                self._finish_early(MatchEndReason.TIMEOUT)
                return

            self.state.advance_turn()
            self._begin_turn()
            if self.has_any_legal_move():
                return

    def _calculate_head_move_limit(self, side: Side) -> int:
        head_rules = self.state.rules.head_rules
        if not head_rules.restrict_head_moves:
            return UNLIMITED_HEAD_MOVES

        if self.state.turns_taken(side) == 0:
            dice = self._current_outcome.dice
            die_a = dice[0] if dice else self.state.rules.die_min
            die_b = dice[1] if len(dice) > 1 else die_a
            allowance = head_rules.first_turn_allowance(die_a, die_b)
            if allowance is not None:
                return allowance

        return head_rules.max_head_moves_per_turn

    def _try_apply_bot_move(self) -> bool:
        candidates = [
            i for i, die in enumerate(self._remaining_dice) if self.legal_moves(die)
        ]
        if not candidates:
            return False

        bot: Strategy = self._bots[self.state.current_side]
        index = bot.choose_die_index(self.state, self.remaining_dice, candidates)
        if index not in candidates:
            logger.warning("Strategy %s chose unplayable die index %s", bot.name, index)
            return False

        self._selected_die_index = index
        legal = self.legal_moves(self._remaining_dice[index])
        move = bot.choose_move(self.state, legal)
        if move not in legal:
            logger.warning("Strategy %s chose illegal move %s", bot.name, move)
            return False

        return self._apply_current_move(move)

    def _apply_current_move(self, move: Move) -> bool:
        side = self.state.current_side
        from_cell, to_cell = resolve_move_cells(self.state, move)

        result = apply_move(self.state, move)
        end_reason = MatchEndReason.NONE

        if result.applied:
            self._consume_selected_die(move.pips)
            if is_head_cell(self.state.rules, side, move_from_cell(move)):
                self._head_moves_used += 1
            self._moved_this_turn = True
            if self.state.is_finished:
                end_reason = MatchEndReason.WIN

        record = self._build_record(side, move, from_cell, to_cell, move.pips, result, end_reason)
        self.log.add(record)
        logger.debug("Applied %s", record)
        self.events.emit(MOVE_APPLIED, record=record)

        if not result.applied:
            return False

        if self.state.is_finished:
            self._announce_result(MatchResult(winner=self.state.winner, reason=MatchEndReason.WIN))
            return True

        if not self._remaining_dice or not self.has_any_legal_move():
            self._end_turn()
        return True

    def _consume_selected_die(self, pips: int) -> None:
        index = self._resolve_selected_die_index()
        if index is None and pips in self._remaining_dice:
            index = self._remaining_dice.index(pips)
        if index is not None:
            self._used_dice.append(self._remaining_dice.pop(index))
        self._selected_die_index = 0 if self._remaining_dice else None

    def _resolve_selected_die_index(self) -> Optional[int]:
        index = self._selected_die_index
        if index is not None and 0 <= index < len(self._remaining_dice):
            return index
        if len(self._remaining_dice) == 1:
            return 0
        return None

    def _finish_early(self, reason: MatchEndReason) -> None:
        side = self.state.current_side
        self.state.finish(TIE_BREAK_WINNER)
        record = self._build_record(side, None, None, None, None, None, reason)
        self.log.add(record)
        self._announce_result(MatchResult(winner=TIE_BREAK_WINNER, reason=reason))

    def _announce_result(self, result: MatchResult) -> None:
        self._result = result
        logger.info(
            "Match ended on turn %d: %s wins (%s)",
            self.state.turn_index, result.winner, result.reason.value,
        )
        self.events.emit(MATCH_ENDED, result=result)

    def _build_record(self, side, move, from_cell, to_cell, pips, result, end_reason) -> MoveRecord:
        return MoveRecord(
            turn_index=self.state.turn_index,
            side=side,
            move=move,
            from_cell=from_cell,
            to_cell=to_cell,
            pips=pips,
            outcome=self._current_outcome,
            remaining_dice=self.remaining_dice,
            result=result,
            end_reason=end_reason,
            winner=self.state.winner,
        )

    def _log_home_zones(self) -> None:
        if not self.state.rules.verbose_log:
            return
        for side in Side:
            logger.info("Home zone %s: %s", side, home_cells(self.state.rules, side))
