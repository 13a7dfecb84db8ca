"""
Exact-composition expectation solver for every player decision.

Values are expected returns in units of the original bet, computed by
exhaustive enumeration of every future card sequence from the exact
remaining shoe (no infinite-deck approximation, no sampling).

Decision tree for one hand:
    expectation(state) = max over legal actions of
        stand      settle against the exact dealer distribution
        hit        draw each rank, continue optimally (all actions reopen)
        double     draw exactly one card, stand, payout doubled
        split      re-deal each half of the pair from a full shoe, x2
        insurance  (1 - P(ten)) * (expectation | hole card not a ten - 0.5)
        surrender  -0.5 flat
    Terminal hands (six cards, or hard total >= 21) can only stand.

Shoe aggregate:
    deck_expectation(deck) weights every starting pair and dealer up-card by
    its exact draw probability and sums the optimal expectations.

States are immutable; every draw produces a new GameState, so sibling
branches never observe each other's cards. A SearchContext carries the
memo table for one shoe and the shoe that split hands are re-dealt from.
Split halves never see the live shoe, so their entries live in a separate
table that can be shared across every shoe evaluated with the same
``full_shoe``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from exact_ev.engine.cards import RANK_ACE, RANK_TEN, RANKS
from exact_ev.engine.deck import FULL_SHOE, Deck
from exact_ev.engine.game_state import (
    Action,
    GameState,
    PreconditionViolation,
    can_double,
    can_hit,
    can_insurance,
    can_split,
    can_surrender,
    legal_actions,
)
from exact_ev.engine.rules import INSURANCE_COST, SURRENDER_PAYOUT, hand_expectation
from exact_ev.engine.score import score
from exact_ev.solvers.dealer import dealer_scores

logger = logging.getLogger(__name__)


# ─── Search context ──────────────────────────────────────────────────────────


@dataclass
class SearchContext:
    """Per-shoe configuration and memoisation.

    Attributes:
        full_shoe:  Composition each split hand is re-dealt from.
        memo:       Cache keyed by prefixed state keys (``'opt'``, ``'hit'``,
                    ``'double'``, ``'dealer'``). Reuse one context across
                    related queries on the same shoe to share work.
        split_memo: Cache for split halves, which depend only on
                    ``full_shoe`` and may be shared between shoes.
    """

    full_shoe: Deck = FULL_SHOE
    memo: dict = field(default_factory=dict)
    split_memo: dict = field(default_factory=dict)

    def for_shoe(self) -> SearchContext:
        """Return a context with an empty memo and the same split cache."""
        return SearchContext(full_shoe=self.full_shoe, split_memo=self.split_memo)

    def for_split(self) -> SearchContext:
        return SearchContext(full_shoe=self.full_shoe, memo=self.split_memo,
                             split_memo=self.split_memo)


def _context(ctx: SearchContext | None) -> SearchContext:
    return ctx if ctx is not None else SearchContext()


# ─── Single actions ──────────────────────────────────────────────────────────


def stand_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of standing now.

    A bust hand loses outright; otherwise the player's score is settled
    against every final dealer score, weighted by its exact probability.

    Examples:
        >>> stand_expectation(GameState((1, 10), (10, 10), FULL_SHOE))
        1.5
    """
    ctx = _context(ctx)
    player_score = score(state.player)
    if player_score.is_bust:
        return -1.0

    dist = dealer_scores(state.deck, state.dealer, state.failed_insurance, ctx.memo)
    return sum(
        prob * hand_expectation(player_score, dealer_score)
        for dealer_score, prob in dist.items()
    )


def hit_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of taking one card and then playing optimally.

    Raises:
        PreconditionViolation: If the player's hand is already bust.
    """
    if score(state.player).is_bust:
        raise PreconditionViolation(f"Cannot hit a bust hand {state.player}.")
    ctx = _context(ctx)

    key = ("hit", state.key())
    if key in ctx.memo:
        return ctx.memo[key]

    ev = 0.0
    for rank in RANKS:
        draw_prob = state.deck.card_prob(rank)
        if draw_prob == 0.0:
            continue
        ev += draw_prob * expectation(state.with_player_card(rank), ctx)

    ctx.memo[key] = ev
    return ev


def double_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of doubling: exactly one more card, then stand, at 2x.

    Raises:
        PreconditionViolation: If doubling is not allowed (see can_double).
    """
    if not can_double(state):
        raise PreconditionViolation(f"Cannot double in state: {state}.")
    ctx = _context(ctx)

    key = ("double", state.key())
    if key in ctx.memo:
        return ctx.memo[key]

    ev = 0.0
    for rank in RANKS:
        draw_prob = state.deck.card_prob(rank)
        if draw_prob == 0.0:
            continue
        ev += draw_prob * stand_expectation(state.with_player_card(rank), ctx)

    ev *= 2.0
    ctx.memo[key] = ev
    return ev


def insurance_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of taking insurance against a dealer ace.

    A player natural is a certain 1.0. When the shoe holds nothing but tens
    there is no continuation to evaluate and the value is 0.0. Otherwise the
    hand continues in the world where the side bet lost (hole card is not a
    ten) and the side-bet stake is charged against that continuation.

    Raises:
        PreconditionViolation: Unless the dealer shows exactly one ace, the
            player holds two cards and the hand is not a split hand.
    """
    if not (state.dealer == (RANK_ACE,) and len(state.player) == 2 and not state.is_split):
        raise PreconditionViolation(f"Insurance is not offered in state: {state}.")
    ctx = _context(ctx)

    if score(state.player).is_natural:
        return 1.0
    if state.deck.size == state.deck.ten_count:
        return 0.0

    p_not_ten = 1.0 - state.deck.card_prob(RANK_TEN)
    lost_bet = replace(state, failed_insurance=True)
    return p_not_ten * (expectation(lost_bet, ctx) - INSURANCE_COST)


def split_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of splitting a pair.

    Each half is modelled as an independent single-card hand dealt from a
    fresh ``ctx.full_shoe`` (not the live shoe) which must draw before it
    can stand. The two halves are identical, hence the factor of 2.

    Raises:
        PreconditionViolation: Unless the player holds a pair, has not split
            already and has not lost insurance.
    """
    if not can_split(state):
        raise PreconditionViolation(f"Cannot split in state: {state}.")
    ctx = _context(ctx)

    half = replace(state, player=state.player[:1], deck=ctx.full_shoe, is_split=True)
    return 2.0 * hit_expectation(half, ctx.for_split())


# ─── Optimal play ────────────────────────────────────────────────────────────


def expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of the best legal decision in ``state``.

    Stand is always evaluated. A terminal hand returns it directly;
    otherwise insurance, surrender, double and split are added when
    eligible, and hit always is.

    Examples:
        >>> expectation(GameState((10, 10, 10), (10, 10), FULL_SHOE))
        -1.0
    """
    ctx = _context(ctx)
    key = ("opt", state.key())
    if key in ctx.memo:
        return ctx.memo[key]

    best = stand_expectation(state, ctx)
    if not can_hit(state):
        ctx.memo[key] = best
        return best

    if can_insurance(state):
        best = max(best, insurance_expectation(state, ctx))
    if can_surrender(state):
        best = max(best, SURRENDER_PAYOUT)
    if can_double(state):
        best = max(best, double_expectation(state, ctx))
    if can_split(state):
        best = max(best, split_expectation(state, ctx))
    best = max(best, hit_expectation(state, ctx))

    ctx.memo[key] = best
    return best


def action_expectations(
    state: GameState,
    ctx: SearchContext | None = None,
) -> dict[Action, float]:
    """Return the expected return of every legal action in ``state``.

    Keys follow ``legal_actions`` order (stand first).
    """
    ctx = _context(ctx)
    evaluators = {
        Action.STAND: stand_expectation,
        Action.HIT: hit_expectation,
        Action.DOUBLE: double_expectation,
        Action.SPLIT: split_expectation,
        Action.INSURANCE: insurance_expectation,
    }
    result: dict[Action, float] = {}
    for action in legal_actions(state):
        if action is Action.SURRENDER:
            result[action] = SURRENDER_PAYOUT
        else:
            result[action] = evaluators[action](state, ctx)
    return result


def best_action(state: GameState, ctx: SearchContext | None = None) -> Action:
    """Return the best of Stand, Hit, Double and Split.

    Candidates are checked in that order and a later one must be strictly
    better to win, so ties favour the earlier action. Hit is skipped on a
    terminal hand; Double and Split only when eligible.
    """
    ctx = _context(ctx)
    best, best_ev = Action.STAND, stand_expectation(state, ctx)

    candidates = []
    if can_hit(state):
        candidates.append((Action.HIT, hit_expectation))
    if can_double(state):
        candidates.append((Action.DOUBLE, double_expectation))
    if can_split(state):
        candidates.append((Action.SPLIT, split_expectation))

    for action, evaluate in candidates:
        ev = evaluate(state, ctx)
        if ev > best_ev:
            best, best_ev = action, ev
    return best


# ─── Shoe aggregate ──────────────────────────────────────────────────────────


def player_hand_expectation(state: GameState, ctx: SearchContext | None = None) -> float:
    """Expected return of a dealt player hand, averaged over the dealer's card."""
    ctx = _context(ctx)
    ev = 0.0
    for rank in RANKS:
        draw_prob = state.deck.card_prob(rank)
        if draw_prob == 0.0:
            continue
        ev += draw_prob * expectation(state.with_dealer_card(rank), ctx)
    return ev


def starting_hands(deck: Deck):
    """Yield ``(weight, state)`` for every unordered two-card starting hand.

    Ranks come out as ``rank1 <= rank2``; ``weight`` is the exact probability
    of receiving that pair in either order.
    """
    empty = GameState(player=(), dealer=(), deck=deck)
    for rank1 in RANKS:
        prob1 = deck.card_prob(rank1)
        if prob1 == 0.0:
            continue
        first = empty.with_player_card(rank1)
        for rank2 in range(rank1, RANK_TEN + 1):
            prob2 = first.deck.card_prob(rank2)
            if prob2 == 0.0:
                continue
            weight = prob1 * prob2 if rank1 == rank2 else 2.0 * prob1 * prob2
            yield weight, first.with_player_card(rank2)


def deck_expectation(deck: Deck, ctx: SearchContext | None = None) -> float:
    """Expected return per unit bet of one round dealt from ``deck``.

    Assumes optimal play on every hand. This is the composition-dependent
    player advantage of the shoe (negative = house edge).
    """
    ctx = _context(ctx)
    total = 0.0
    for weight, state in starting_hands(deck):
        hand_ev = player_hand_expectation(state, ctx)
        logger.debug("Expectation for %s,%s: %.6f", state.player[0], state.player[1], hand_ev)
        total += weight * hand_ev
    return total


def removal_effects(
    deck: Deck,
    ctx: SearchContext | None = None,
    baseline: float | None = None,
) -> dict[int, float]:
    """Change in shoe expectation when one card of each rank is removed.

    Each reduced shoe is evaluated with its own memo table (see
    SearchContext.for_shoe); only the split cache is carried across.

    Args:
        deck:     Shoe to analyse.
        ctx:      Context for ``deck`` itself.
        baseline: deck_expectation(deck) if the caller already has it.

    Returns:
        ``{rank: deck_expectation(deck minus rank) - baseline}`` for every
        rank still present in the shoe.
    """
    ctx = _context(ctx)
    if baseline is None:
        baseline = deck_expectation(deck, ctx)
    effects: dict[int, float] = {}
    for rank in RANKS:
        if deck.count(rank) == 0:
            continue
        reduced = deck.draw(rank)
        effects[rank] = deck_expectation(reduced, ctx.for_shoe()) - baseline
        logger.debug("Removing %s: %+.6f", rank, effects[rank])
    return effects
