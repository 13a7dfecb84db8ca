"""
Hand valuation: totals, soft aces, and the stand/terminal rules.

Ace valuation:
    Every ace counts 1. If the hard sum is below 12 and the hand holds at
    least one ace, one ace is promoted to 11 (+10). Two promoted aces would
    always bust, so a single adjustment covers every legal hand.

All functions take tuples of ranks (1–10).
"""

from __future__ import annotations

from .cards import RANK_ACE

MAX_HAND_SIZE: int = 6
"""A hand stops drawing at six cards (six-card Charlie)."""

DEALER_STAND_TOTAL: int = 17


def min_hand_value(hand: tuple[int, ...]) -> int:
    """Return the hard total with every ace counted as 1.

    Examples:
        >>> min_hand_value((10, 1))
        11
        >>> min_hand_value(())
        0
    """
    return sum(hand)


def hand_value(hand: tuple[int, ...]) -> int:
    """Return the best total, promoting one ace to 11 when it does not bust.

    Examples:
        >>> hand_value((10, 10))
        20
        >>> hand_value((10, 10, 1))
        21
        >>> hand_value((1,))
        11
        >>> hand_value((1, 1))
        12
        >>> hand_value(())
        0
    """
    total = sum(hand)
    if total < 12 and RANK_ACE in hand:
        return total + 10
    return total


def is_soft(hand: tuple[int, ...]) -> bool:
    """Return True if an ace is currently counted as 11.

    Examples:
        >>> is_soft((1, 6))
        True
        >>> is_soft((1, 6, 10))
        False
    """
    return hand_value(hand) != min_hand_value(hand)


def dealer_stands(hand: tuple[int, ...]) -> bool:
    """Return True once the dealer must stop drawing.

    The dealer stands on any 17 (soft 17 included) or on six cards.

    Examples:
        >>> dealer_stands((10, 7))
        True
        >>> dealer_stands((10, 6))
        False
        >>> dealer_stands((1, 1, 1, 1, 2, 2))
        True
    """
    return len(hand) == MAX_HAND_SIZE or hand_value(hand) >= DEALER_STAND_TOTAL


def cannot_hit(hand: tuple[int, ...]) -> bool:
    """Return True when the player has no decision left.

    A hand is terminal at six cards or once its hard total reaches 21
    (any further card would bust, or it already has).
    """
    return len(hand) == MAX_HAND_SIZE or min_hand_value(hand) >= 21
