"""
Finite shoe composition: exact per-rank counts with draw/replace operations.

A Deck is an immutable, hashable value holding ten counts (ace first, tens
last) and the redundant total ``size``. Every mutation returns a new Deck,
so recursive searches copy the shoe by value instead of drawing and undoing
cards in place, and any Deck can key a memoisation table.

    counts[rank - 1] = cards of that rank remaining
    size             = sum(counts)

Numpy arrays are accepted and produced at I/O boundaries (``from_array`` /
``as_array``); the hot path works on plain tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .cards import NUM_RANKS, RANK_TEN, deck_to_str, is_valid_rank, parse_deck, rank_index


class InvariantViolation(ValueError):
    """A draw/replace bookkeeping rule was broken (a logic defect, not input)."""


@dataclass(frozen=True)
class Deck:
    """Remaining shoe composition.

    Attributes:
        counts: Ten non-negative counts, index 0 = aces, index 9 = tens.
        size:   Total cards remaining (always ``sum(counts)``).
    """

    counts: tuple[int, ...]
    size: int = field(init=False)

    def __post_init__(self) -> None:
        counts = tuple(int(c) for c in self.counts)
        if len(counts) != NUM_RANKS:
            raise ValueError(f"A deck needs {NUM_RANKS} rank counts, got {len(counts)}.")
        if any(c < 0 for c in counts):
            raise ValueError(f"Rank counts must be non-negative, got {counts}.")
        object.__setattr__(self, "counts", counts)
        object.__setattr__(self, "size", sum(counts))

    # ─── Construction ────────────────────────────────────────────────────────

    @classmethod
    def from_array(cls, array: np.ndarray) -> Deck:
        """Build a Deck from any length-10 integer array.

        Examples:
            >>> Deck.from_array(np.array([4] * 9 + [16])).size
            52
        """
        return cls(tuple(int(c) for c in np.asarray(array).ravel()))

    @classmethod
    def from_str(cls, deck_str: str) -> Deck:
        """Build a Deck from its compact digit-string encoding."""
        return cls(parse_deck(deck_str))

    def as_array(self) -> np.ndarray:
        """Return the counts as an int64 numpy array of shape (10,)."""
        return np.array(self.counts, dtype=np.int64)

    def to_str(self) -> str:
        return deck_to_str(self.counts)

    # ─── Queries ─────────────────────────────────────────────────────────────

    def count(self, rank: int) -> int:
        """Return how many cards of ``rank`` remain."""
        return self.counts[rank_index(rank)]

    @property
    def ten_count(self) -> int:
        return self.counts[rank_index(RANK_TEN)]

    def card_prob(self, rank: int, exclude_tens: bool = False) -> float:
        """Probability that the next card drawn is ``rank``.

        Args:
            rank:         Rank 1–10.
            exclude_tens: Condition on the next card not being a ten (the
                          dealer's hole card after a lost insurance bet).
                          Rank 10 then has probability 0 and every other rank
                          is renormalised over the non-ten cards.

        Returns:
            The conditional probability, or 0.0 when no card can be drawn.

        Examples:
            >>> deck = Deck((0, 4, 4, 4, 4, 4, 4, 4, 4, 16))
            >>> deck.card_prob(2)
            0.08333333333333333
            >>> deck.card_prob(2, exclude_tens=True)
            0.125
            >>> deck.card_prob(10, exclude_tens=True)
            0.0
        """
        if exclude_tens:
            if rank == RANK_TEN:
                return 0.0
            denominator = self.size - self.ten_count
        else:
            denominator = self.size
        if denominator == 0:
            return 0.0
        return self.count(rank) / denominator

    # ─── Value-returning mutations ───────────────────────────────────────────

    def draw(self, rank: int) -> Deck:
        """Return the deck with one card of ``rank`` removed.

        Raises:
            InvariantViolation: If ``rank`` is not 1–10 or none are left.

        Examples:
            >>> Deck((1, 4, 4, 4, 4, 4, 4, 4, 4, 16)).draw(1).counts[0]
            0
        """
        if not is_valid_rank(rank):
            raise InvariantViolation(f"Rank {rank} is outside 1-10.")
        i = rank_index(rank)
        if self.counts[i] == 0:
            raise InvariantViolation(f"Cannot draw rank {rank}: none remain in {self.counts}.")
        counts = list(self.counts)
        counts[i] -= 1
        return Deck(tuple(counts))

    def replace(self, rank: int) -> Deck:
        """Return the deck with one card of ``rank`` put back."""
        if not is_valid_rank(rank):
            raise InvariantViolation(f"Rank {rank} is outside 1-10.")
        counts = list(self.counts)
        counts[rank_index(rank)] += 1
        return Deck(tuple(counts))

    def draw_to(self, hand: tuple[int, ...], rank: int) -> tuple[Deck, tuple[int, ...]]:
        """Draw ``rank`` and append it to ``hand``.

        Returns:
            (new_deck, new_hand).
        """
        return self.draw(rank), hand + (rank,)

    def replace_from(self, hand: tuple[int, ...], rank: int) -> tuple[Deck, tuple[int, ...]]:
        """Take one ``rank`` out of ``hand`` and return it to the deck.

        The last matching card is removed so earlier cards keep their order.

        Raises:
            InvariantViolation: If ``rank`` is not in ``hand``.

        Returns:
            (new_deck, new_hand).
        """
        if rank not in hand:
            raise InvariantViolation(f"Cannot replace rank {rank}: not in hand {hand}.")
        i = len(hand) - 1 - hand[::-1].index(rank)
        return self.replace(rank), hand[:i] + hand[i + 1:]

    def remove_cards(self, *hands: tuple[int, ...]) -> Deck:
        """Return the deck with every card of the given hands drawn.

        Used to reconstruct the live shoe once a round has been dealt.

        Raises:
            InvariantViolation: If a card is not available.
        """
        deck = self
        for hand in hands:
            for rank in hand:
                deck = deck.draw(rank)
        return deck

    def __str__(self) -> str:
        return f"Deck({', '.join(str(c) for c in self.counts)}; size={self.size})"


def standard_shoe(num_decks: int = 8) -> Deck:
    """Return an N-deck shoe: 4N of each rank 1–9 and 16N ten-valued cards.

    Examples:
        >>> standard_shoe(1).size
        52
        >>> standard_shoe(8).counts[9]
        128
    """
    if num_decks < 1:
        raise ValueError(f"A shoe needs at least one deck, got {num_decks}.")
    return Deck((4 * num_decks,) * 9 + (16 * num_decks,))


FULL_SHOE: Deck = standard_shoe(8)
"""Eight-deck shoe (416 cards): the starting composition and the shoe split
hands are re-dealt from."""
