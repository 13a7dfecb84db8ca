"""
Batch driver: evaluate sampled shoes and persist their exact advantage.

Each pass picks shoes from the samples file that have no row in the
advantage file yet (in random order), computes ``deck_expectation`` for
each, and appends ``(counts, advantage)`` as soon as a result is ready, so
an interrupted run loses at most the shoes still in flight.

With ``workers > 1`` shoes are evaluated in a ``multiprocessing.Pool``;
every evaluation owns its own deck and memo table, and only the parent
process writes to the advantage file.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from multiprocessing import Pool
from pathlib import Path
from typing import Iterable, Iterator

import numpy as np

from exact_ev.engine.deck import Deck
from exact_ev.solvers.exact_dp import deck_expectation

from .sampler import uncomputed_decks
from .shoe_io import append_advantage, read_computed_decks, read_deck_samples

logger = logging.getLogger(__name__)


@dataclass
class BatchConfig:
    """Settings for one batch run.

    Attributes:
        samples_path: CSV of candidate shoe compositions.
        data_path:    CSV the advantages are appended to (created if missing).
        workers:      Worker processes; 1 evaluates in-process.
        max_decks:    Stop after this many shoes (None = until exhausted).
        seed:         Seed for the evaluation order.
    """

    samples_path: Path
    data_path: Path
    workers: int = 1
    max_decks: int | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        self.samples_path = Path(self.samples_path)
        self.data_path = Path(self.data_path)
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}.")
        if self.max_decks is not None and self.max_decks < 0:
            raise ValueError(f"max_decks must be >= 0, got {self.max_decks}.")


def _evaluate(deck: Deck) -> tuple[Deck, float, float]:
    """Worker entry point: return ``(deck, advantage, seconds)``."""
    start = time.perf_counter()
    advantage = deck_expectation(deck)
    return deck, advantage, time.perf_counter() - start


def pending_decks(
    samples: list[Deck],
    computed: set[Deck],
    rng: np.random.Generator,
    limit: int | None = None,
) -> list[Deck]:
    """Return uncomputed samples in random order, at most ``limit`` of them."""
    order = uncomputed_decks(samples, computed)
    rng.shuffle(order)
    return order if limit is None else order[:limit]


def _record(results: Iterable[tuple[Deck, float, float]], data_path: Path) -> int:
    count = 0
    for deck, advantage, seconds in results:
        append_advantage(data_path, deck, advantage)
        count += 1
        logger.info("The advantage of %s is %+.6f (%.1f seconds)", deck, advantage, seconds)
    return count


def _evaluate_in_process(decks: list[Deck]) -> Iterator[tuple[Deck, float, float]]:
    for deck in decks:
        logger.debug("Computing the advantage of %s", deck)
        yield _evaluate(deck)


def run_batch(config: BatchConfig) -> int:
    """Evaluate pending shoes and append their advantages.

    Returns:
        Number of shoes evaluated and written.

    Raises:
        FileNotFoundError: If the samples file does not exist.
    """
    samples = read_deck_samples(config.samples_path)
    computed = read_computed_decks(config.data_path)
    rng = np.random.default_rng(config.seed)
    decks = pending_decks(samples, computed, rng, config.max_decks)

    logger.info(
        "%d samples, %d already computed, evaluating %d with %d worker(s)",
        len(samples), len(computed), len(decks), config.workers,
    )
    if not decks:
        return 0

    if config.workers == 1:
        return _record(_evaluate_in_process(decks), config.data_path)

    with Pool(processes=config.workers) as pool:
        return _record(pool.imap_unordered(_evaluate, decks), config.data_path)
