"""
Head-to-head settlement of a finished player hand against the dealer.

Payout convention (player's perspective, units of the original bet):
    +N  = player wins N units
    -N  = player loses N units
     0  = push

Settlement priority:
    1. Player bust     → -1 (even if the dealer also busts)
    2. Player natural  → push against a dealer natural, else +1.5 (3:2)
    3. Score comparison (see score.py) → +1 / -1 / 0
"""

from __future__ import annotations

from .score import Score

NATURAL_PAYOUT: float = 1.5
SURRENDER_PAYOUT: float = -0.5
INSURANCE_COST: float = 0.5
"""Side-bet stake as a fraction of the main bet."""


def hand_expectation(player_score: Score, dealer_score: Score) -> float:
    """Return the player's payout for one (player, dealer) score pair.

    Examples:
        >>> hand_expectation(Score.value(11), Score.value(10))
        1.0
        >>> hand_expectation(Score.value(10), Score.value(10))
        0.0
        >>> hand_expectation(Score.value(21), Score.six_card_charlie(16))
        -1.0
    """
    if player_score.is_bust:
        return -1.0
    if player_score.is_natural:
        return 0.0 if dealer_score.is_natural else NATURAL_PAYOUT
    if player_score > dealer_score:
        return 1.0
    if dealer_score > player_score:
        return -1.0
    return 0.0
