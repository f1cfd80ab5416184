"""Command-line entrypoint for race-backgammon.

Runs headless bot-vs-bot matches and prints their results, which is handy for
checking a ruleset or dice bag setup without any front end.
"""

from __future__ import annotations

import argparse
import logging

from racegammon import __version__
from racegammon.agents import easy_strategy, greedy_strategy, random_strategy
from racegammon.core.config import MatchConfig, RulesetConfig, hitting_ruleset
from racegammon.core.dice import standard_bag
from racegammon.match.simulate import compute_match_statistics, play_matches

STRATEGIES = {
    "easy": easy_strategy,
    "greedy": greedy_strategy,
    "random": random_strategy,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="racegammon",
        description="Play bot-vs-bot race backgammon matches",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"race-backgammon {__version__}",
    )
    parser.add_argument("--seed", type=int, default=12345, help="Seed of the first match")
    parser.add_argument("--games", type=int, default=1, help="Number of matches to play")
    parser.add_argument("--max-turns", type=int, default=120, help="Turn limit before timeout")
    parser.add_argument(
        "--hits",
        action="store_true",
        help="Allow hitting single stones instead of blocking on any stone",
    )
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="easy")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv=None) -> int:
    """CLI entrypoint used by the `racegammon` console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.hits:
        rules = hitting_ruleset(max_turns=args.max_turns, random_seed=args.seed)
    else:
        rules = RulesetConfig(max_turns=args.max_turns, random_seed=args.seed)
    config = MatchConfig.create(rules, standard_bag(), standard_bag())

    summaries = play_matches(
        config,
        num_matches=max(1, args.games),
        seed=args.seed,
        strategy_factory=STRATEGIES[args.strategy],
    )
    for summary in summaries:
        if summary.result is None:
            print(f"seed {summary.seed}: unfinished after {summary.ticks} ticks")
        else:
            print(
                f"seed {summary.seed}: {summary.result.winner} wins "
                f"({summary.result.reason.value}) in {summary.turns} turns"
            )

    stats = compute_match_statistics(summaries)
    print(
        f"first {stats['first_wins']} / second {stats['second_wins']} "
        f"(timeouts {stats['timeouts']}), avg turns {stats['avg_turns']:.1f}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
