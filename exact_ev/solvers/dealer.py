"""
Exact distribution of the dealer's final score for a known shoe.

Fixed dealer strategy: draw until the total reaches 17 (soft 17 stands) or
the hand holds six cards. Every card is drawn without replacement from the
exact remaining composition, so the result is the exact distribution, not
an infinite-deck approximation.

Lost-insurance conditioning: when insurance was taken and lost, the
dealer's hole card is known not to be a ten. While the dealer holds only
the up-card, the next draw (the hole card) is therefore renormalised over
the non-ten cards.
"""

from __future__ import annotations

from exact_ev.engine.cards import NON_TEN_RANKS, RANKS
from exact_ev.engine.deck import Deck
from exact_ev.engine.hand import dealer_stands
from exact_ev.engine.score import Score, score


def next_card_isnt_ten(dealer_hand: tuple[int, ...], failed_insurance: bool) -> bool:
    """Return True if the dealer's next card is the hole card and cannot be a ten."""
    return len(dealer_hand) == 1 and failed_insurance


def dealer_scores(
    deck: Deck,
    dealer_hand: tuple[int, ...],
    failed_insurance: bool = False,
    memo: dict | None = None,
) -> dict[Score, float]:
    """Return ``{final dealer Score: probability}`` for the dealer's hand.

    Args:
        deck:             Remaining shoe (the dealer draws from it).
        dealer_hand:      Dealer's cards so far, up-card first.
        failed_insurance: If True, the hole card is known not to be a ten.
        memo:             Optional cache shared across calls within one search.
                          Keys are prefixed with ``'dealer'``.

    Returns:
        Probabilities over every reachable final Score. They sum to 1.0 for
        any deck that can complete the hand, and the mapping is empty when
        no card can be drawn at all.

    Examples:
        >>> dealer_scores(Deck((0,) * 9 + (10,)), (10, 6))
        {Bust: 1.0}
        >>> dealer_scores(Deck((0, 0, 0, 0, 1, 0, 0, 0, 0, 1)), (10, 5))
        {Value(20): 0.5, Bust: 0.5}
    """
    if memo is None:
        memo = {}

    if dealer_stands(dealer_hand):
        return {score(dealer_hand): 1.0}

    key = ("dealer", deck.counts, tuple(sorted(dealer_hand)), failed_insurance)
    if key in memo:
        return memo[key]

    exclude_tens = next_card_isnt_ten(dealer_hand, failed_insurance)
    candidates = NON_TEN_RANKS if exclude_tens else RANKS

    result: dict[Score, float] = {}
    for rank in candidates:
        draw_prob = deck.card_prob(rank, exclude_tens)
        if draw_prob == 0.0:
            continue
        next_deck, next_hand = deck.draw_to(dealer_hand, rank)
        sub_dist = dealer_scores(next_deck, next_hand, failed_insurance, memo)
        for final_score, prob in sub_dist.items():
            result[final_score] = result.get(final_score, 0.0) + draw_prob * prob

    memo[key] = result
    return result
