"""
Command-line interface for exact blackjack expectations.

Subcommands:
    exact-ev deck [DECK] [--removal]
    exact-ev advise PLAYER DEALER [--deck DECK]
    exact-ev sample --out PATH --count N --remaining N [--seed S]
    exact-ev batch --samples PATH --data PATH [--workers N] [--max-decks N]
    exact-ev chart DECK [--plot PATH] [--expectation PATH]

DECK is a 10-digit count string (ace first, tens last; an 11th digit makes
the tens count two digits). PLAYER and DEALER are hand strings with '0' for
a ten-valued card, e.g. ``exact-ev advise 88 0``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from exact_ev.analysis.batch import BatchConfig, run_batch
from exact_ev.analysis.heat_maps import (
    build_action_grid,
    build_expectation_grid,
    plot_action_heatmap,
    plot_expectation_heatmap,
)
from exact_ev.analysis.sampler import sample_shoes
from exact_ev.analysis.shoe_io import write_deck_samples
from exact_ev.analysis.strategy_report import (
    format_action_table,
    format_removal_effects,
    format_strategy_chart,
)
from exact_ev.engine.cards import parse_hand
from exact_ev.engine.deck import FULL_SHOE, Deck
from exact_ev.engine.game_state import GameState
from exact_ev.solvers.exact_dp import (
    SearchContext,
    action_expectations,
    best_action,
    deck_expectation,
    removal_effects,
)

logger = logging.getLogger(__name__)


def _shoe(deck_str: Optional[str]) -> Deck:
    return Deck.from_str(deck_str) if deck_str else FULL_SHOE


# ─── Subcommand handlers ─────────────────────────────────────────────────────


def _cmd_deck(args: argparse.Namespace) -> int:
    deck = _shoe(args.deck)
    ctx = SearchContext()
    logger.info("Evaluating %s", deck)
    if args.removal:
        baseline = deck_expectation(deck, ctx)
        effects = removal_effects(deck, ctx, baseline)
        print(format_removal_effects(baseline, effects))
    else:
        ev = deck_expectation(deck, ctx)
        print(f"{deck}")
        print(f"Expectation: {ev:+.6f}  ({ev * 100:+.3f}%)")
    return 0


def _cmd_advise(args: argparse.Namespace) -> int:
    state = GameState.deal(parse_hand(args.player), parse_hand(args.dealer), _shoe(args.deck))
    ctx = SearchContext()
    evs = action_expectations(state, ctx)
    print(format_action_table(state, evs, best_action(state, ctx)))
    return 0


def _cmd_sample(args: argparse.Namespace) -> int:
    rng = np.random.default_rng(args.seed)
    decks = sample_shoes(rng, args.count, args.remaining)
    written = write_deck_samples(args.out, decks)
    logger.info("Wrote %d samples of %d cards to %s", written, args.remaining, args.out)
    return 0


def _cmd_batch(args: argparse.Namespace) -> int:
    config = BatchConfig(
        samples_path=args.samples,
        data_path=args.data,
        workers=args.workers,
        max_decks=args.max_decks,
        seed=args.seed,
    )
    evaluated = run_batch(config)
    print(f"Evaluated {evaluated} shoe(s); results in {config.data_path}")
    return 0


def _cmd_chart(args: argparse.Namespace) -> int:
    deck = Deck.from_str(args.deck)
    ctx = SearchContext()
    grid = build_action_grid(deck, ctx)
    print(format_strategy_chart(grid))
    if args.plot is not None:
        plot_action_heatmap(grid, f"Best action for {deck}", show=False, save_path=str(args.plot))
        logger.info("Saved heat map to %s", args.plot)
    if args.expectation is not None:
        ev_grid = build_expectation_grid(deck, ctx)
        plot_expectation_heatmap(ev_grid, f"Optimal expectation for {deck}", show=False,
                                 save_path=str(args.expectation))
        logger.info("Saved expectation heat map to %s", args.expectation)
    return 0


# ─── Parser ──────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="exact-ev",
        description="Exact-composition blackjack expectations",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log at DEBUG level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    deck = sub.add_parser("deck", help="Expected return of one round from a shoe")
    deck.add_argument("deck", nargs="?", help="Deck string (default: full 8-deck shoe)")
    deck.add_argument(
        "--removal",
        action="store_true",
        help="Also report the effect of removing one card of each rank",
    )
    deck.set_defaults(handler=_cmd_deck)

    advise = sub.add_parser("advise", help="Expectation of every legal action")
    advise.add_argument("player", help="Player hand string, e.g. 88")
    advise.add_argument("dealer", help="Dealer hand string, e.g. 0")
    advise.add_argument("--deck", help="Shoe before the deal (default: full 8-deck shoe)")
    advise.set_defaults(handler=_cmd_advise)

    sample = sub.add_parser("sample", help="Write random shoe compositions")
    sample.add_argument("--out", type=Path, required=True, help="Samples CSV to write")
    sample.add_argument("--count", type=int, required=True, help="Number of samples")
    sample.add_argument("--remaining", type=int, required=True,
                        help="Cards left in each sampled shoe")
    sample.add_argument("--seed", type=int, default=None, help="Random seed")
    sample.set_defaults(handler=_cmd_sample)

    batch = sub.add_parser("batch", help="Compute advantages of sampled shoes")
    batch.add_argument("--samples", type=Path, required=True, help="Samples CSV")
    batch.add_argument("--data", type=Path, required=True, help="Advantage CSV to append to")
    batch.add_argument("--workers", type=int, default=1, help="Worker processes (default: 1)")
    batch.add_argument("--max-decks", type=int, default=None,
                       help="Stop after this many shoes (default: all)")
    batch.add_argument("--seed", type=int, default=None, help="Seed for the evaluation order")
    batch.set_defaults(handler=_cmd_batch)

    chart = sub.add_parser("chart", help="Best-action chart for every pair and up-card")
    chart.add_argument("deck", help="Deck string")
    chart.add_argument("--plot", type=Path, default=None, help="Save a heat map PNG here")
    chart.add_argument("--expectation", type=Path, default=None,
                       help="Save an expectation heat map PNG here")
    chart.set_defaults(handler=_cmd_chart)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``exact-ev`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
