"""
Random shoe compositions for batch advantage studies.

Two sources:
    sample_shoe            — deal ``shoe.size - cards_remaining`` cards at
                             random from a full shoe and keep what is left
                             (multivariate hypergeometric draw)
    random_uncomputed_deck — pick uniformly among pre-generated samples that
                             have no computed advantage yet
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from exact_ev.engine.deck import FULL_SHOE, Deck


def sample_shoe(
    rng: np.random.Generator,
    cards_remaining: int,
    shoe: Deck = FULL_SHOE,
) -> Deck:
    """Return a random composition of ``cards_remaining`` cards from ``shoe``.

    Every subset of the shoe is equally likely, so rank counts follow the
    multivariate hypergeometric distribution.

    Raises:
        ValueError: If ``cards_remaining`` is negative or exceeds the shoe.

    Examples:
        >>> rng = np.random.default_rng(0)
        >>> sample_shoe(rng, 52).size
        52
    """
    if not 0 <= cards_remaining <= shoe.size:
        raise ValueError(
            f"cards_remaining must be in [0, {shoe.size}], got {cards_remaining}."
        )
    counts = rng.multivariate_hypergeometric(shoe.as_array(), cards_remaining)
    return Deck.from_array(counts)


def sample_shoes(
    rng: np.random.Generator,
    count: int,
    cards_remaining: int,
    shoe: Deck = FULL_SHOE,
) -> list[Deck]:
    """Draw ``count`` independent shoe samples (duplicates allowed)."""
    return [sample_shoe(rng, cards_remaining, shoe) for _ in range(count)]


def uncomputed_decks(samples: Sequence[Deck], computed: set[Deck]) -> list[Deck]:
    """Return the distinct samples that have no computed advantage, in file order."""
    seen: set[Deck] = set()
    pending: list[Deck] = []
    for deck in samples:
        if deck in computed or deck in seen:
            continue
        seen.add(deck)
        pending.append(deck)
    return pending


def random_uncomputed_deck(
    samples: Sequence[Deck],
    computed: set[Deck],
    rng: np.random.Generator,
) -> Deck:
    """Pick a sample uniformly among those not yet computed.

    Raises:
        LookupError: If every sample has already been computed.
    """
    pending = uncomputed_decks(samples, computed)
    if not pending:
        raise LookupError("Every sampled shoe already has a computed advantage.")
    return pending[int(rng.integers(len(pending)))]
