"""
Game state for one player hand against the dealer, and action eligibility.

A GameState is an immutable snapshot: the player's cards, the dealer's
cards, the remaining shoe, and three flags that gate later decisions:

    failed_insurance  — we are inside the branch where insurance was taken
                        and lost, so the dealer's hole card is known not to
                        be a ten. Disables every further side decision.
    is_split          — this hand came from a split. Disables re-splitting
                        and insurance.
    first_split_hand  — the earlier of two split hands. Disables surrender.

Eligibility (checked before an action's expectation is computed):
    insurance  dealer shows exactly one ace, player holds two cards,
               insurance not already lost, not a split hand
    surrender  player holds two cards, not the first split hand,
               insurance not already lost
    double     player holds two cards, insurance not already lost
    split      player holds a pair, not already split, insurance not lost
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .cards import RANK_ACE, hand_to_str
from .deck import FULL_SHOE, Deck
from .hand import cannot_hit, hand_value


class PreconditionViolation(ValueError):
    """An action was evaluated on a state where it is not legal."""


class Action(Enum):
    """Player decisions, valued by their display name."""

    STAND = "Stand"
    HIT = "Hit"
    DOUBLE = "Double"
    SPLIT = "Split"
    INSURANCE = "Insurance"
    SURRENDER = "Surrender"


# ─── State ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a hand in progress.

    Frozen (hashable) so it can be used as a key in memoisation tables.
    """
    player: tuple[int, ...]
    dealer: tuple[int, ...]
    deck: Deck
    failed_insurance: bool = False
    is_split: bool = False
    first_split_hand: bool = False

    @classmethod
    def deal(
        cls,
        player: tuple[int, ...],
        dealer: tuple[int, ...],
        shoe: Deck = FULL_SHOE,
    ) -> GameState:
        """Build a state whose deck is ``shoe`` minus the dealt cards.

        Raises:
            InvariantViolation: If the shoe cannot supply those cards.

        Examples:
            >>> GameState.deal((10, 6), (7,)).deck.size
            413
        """
        return cls(
            player=tuple(player),
            dealer=tuple(dealer),
            deck=shoe.remove_cards(tuple(player), tuple(dealer)),
        )

    def key(self) -> tuple:
        """Order-independent memo key.

        Valuation, scoring and every eligibility rule depend only on the
        multiset of cards in each hand, so hands are sorted.
        """
        return (
            self.deck.counts,
            tuple(sorted(self.player)),
            tuple(sorted(self.dealer)),
            self.failed_insurance,
            self.is_split,
            self.first_split_hand,
        )

    def with_player_card(self, rank: int) -> GameState:
        """Draw ``rank`` from the deck into the player's hand."""
        deck, player = self.deck.draw_to(self.player, rank)
        return replace(self, deck=deck, player=player)

    def with_dealer_card(self, rank: int) -> GameState:
        """Draw ``rank`` from the deck into the dealer's hand."""
        deck, dealer = self.deck.draw_to(self.dealer, rank)
        return replace(self, deck=deck, dealer=dealer)

    def __str__(self) -> str:
        flags = [name for name in ("failed_insurance", "is_split", "first_split_hand")
                 if getattr(self, name)]
        return (
            f"Player: {hand_to_str(self.player)} ({hand_value(self.player)}) | "
            f"Dealer: {hand_to_str(self.dealer)} ({hand_value(self.dealer)}) | "
            f"Shoe: {self.deck.size} cards"
            + (f" | {', '.join(flags)}" if flags else "")
        )


# ─── Eligibility predicates ──────────────────────────────────────────────────

def can_insurance(state: GameState) -> bool:
    return (
        state.dealer == (RANK_ACE,)
        and len(state.player) == 2
        and not state.failed_insurance
        and not state.is_split
    )


def can_surrender(state: GameState) -> bool:
    return (
        len(state.player) == 2
        and not state.first_split_hand
        and not state.failed_insurance
    )


def can_double(state: GameState) -> bool:
    return len(state.player) == 2 and not state.failed_insurance


def can_split(state: GameState) -> bool:
    return (
        len(state.player) == 2
        and state.player[0] == state.player[1]
        and not state.is_split
        and not state.failed_insurance
    )


def can_hit(state: GameState) -> bool:
    return not cannot_hit(state.player)


def legal_actions(state: GameState) -> list[Action]:
    """Return every action available in ``state``, stand first.

    Examples:
        >>> [a.value for a in legal_actions(GameState.deal((8, 8), (6,)))]
        ['Stand', 'Hit', 'Double', 'Split', 'Surrender']
    """
    actions = [Action.STAND]
    if not can_hit(state):
        return actions
    actions.append(Action.HIT)
    if can_double(state):
        actions.append(Action.DOUBLE)
    if can_split(state):
        actions.append(Action.SPLIT)
    if can_insurance(state):
        actions.append(Action.INSURANCE)
    if can_surrender(state):
        actions.append(Action.SURRENDER)
    return actions
