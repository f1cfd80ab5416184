from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

MATCH_STARTED = "match_started"
TURN_STARTED = "turn_started"
MOVE_APPLIED = "move_applied"
MATCH_ENDED = "match_ended"

MATCH_EVENTS = (MATCH_STARTED, TURN_STARTED, MOVE_APPLIED, MATCH_ENDED)


class MatchEvents:
    """Synchronous listener registry for one runner.

    Handlers run in subscription order, inside the call that changed the
    state, so observers see notifications in exactly the order the changes
    happened. On init and reset, match_started is emitted before the first
    turn_started. Payloads are passed as keyword arguments:

    - match_started(state=MatchState)
    - turn_started(state=MatchState)
    - move_applied(record=MoveRecord)
    - match_ended(result=MatchResult)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[..., Any]]] = {}

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a handler for an event (registering twice is a no-op)."""
        if event not in MATCH_EVENTS:
            raise ValueError(f"Unknown match event: {event}")
        handlers = self._handlers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Subscribed handler %s to event '%s'", handler, event)

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(event)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        logger.debug("Unsubscribed handler %s from event '%s'", handler, event)
        if not handlers:
            del self._handlers[event]

    def clear(self) -> None:
        self._handlers.clear()

    def emit(self, event: str, **payload: Any) -> None:
        """Call every handler for ``event``; handler errors propagate to the caller."""
        handlers = list(self._handlers.get(event, []))
        if not handlers:
            return
        logger.debug("Emitting '%s' to %d handlers", event, len(handlers))
        for handler in handlers:
            handler(**payload)
