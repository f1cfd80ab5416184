"""Bot strategies."""

from racegammon.agents.strategies import (
    Strategy,
    StrategyFactory,
    random_strategy,
    easy_strategy,
    greedy_strategy,
)

__all__ = [
    "Strategy",
    "StrategyFactory",
    "random_strategy",
    "easy_strategy",
    "greedy_strategy",
]
