"""
Shared pytest fixtures for exact expectation tests.

Provides small helpers for building hands and hand-sized decks. Solver
tests use decks of a handful of cards so exhaustive enumeration stays fast;
only cheap queries (stand/dealer on near-final hands) touch the full shoe.
"""

from __future__ import annotations

import pytest

from exact_ev.engine.cards import parse_hand
from exact_ev.engine.deck import FULL_SHOE, Deck


def hand(hand_str: str) -> tuple[int, ...]:
    """Build a hand tuple from a digit string ('0' = ten).

    Examples:
        >>> hand('055')
        (10, 5, 5)
    """
    return parse_hand(hand_str)


def deck_of(counts: dict[int, int]) -> Deck:
    """Build a deck holding only the given ``{rank: count}`` cards.

    Examples:
        >>> deck_of({9: 1, 10: 1}).size
        2
    """
    values = [0] * 10
    for rank, count in counts.items():
        values[rank - 1] = count
    return Deck(tuple(values))


@pytest.fixture
def full_shoe() -> Deck:
    """Return the eight-deck starting shoe."""
    return FULL_SHOE


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand
