"""
Tests for exact_ev/solvers/exact_dp.py — per-action and optimal expectations.

Expected values are worked out by hand on decks of a few cards, where every
branch of the enumeration can be followed explicitly.
"""

from __future__ import annotations

import pytest

from exact_ev.engine.deck import FULL_SHOE, Deck, standard_shoe
from exact_ev.engine.game_state import (
    Action,
    GameState,
    PreconditionViolation,
    can_double,
    can_hit,
    can_split,
    legal_actions,
)
from exact_ev.solvers.exact_dp import (
    SearchContext,
    action_expectations,
    best_action,
    deck_expectation,
    double_expectation,
    expectation,
    hit_expectation,
    insurance_expectation,
    player_hand_expectation,
    removal_effects,
    split_expectation,
    stand_expectation,
    starting_hands,
)
from tests.conftest import deck_of, hand

ONE_OF_EACH = Deck((1,) * 10)


def state(player: str, dealer: str, deck: Deck, **flags) -> GameState:
    return GameState(hand(player), hand(dealer), deck, **flags)


# ─── Stand ────────────────────────────────────────────────────────────────────


class TestStandExpectation:
    def test_natural_vs_full_shoe(self):
        assert stand_expectation(state('10', '00', FULL_SHOE)) == pytest.approx(1.5)

    def test_bust_loses_regardless(self):
        assert stand_expectation(state('000', '1', FULL_SHOE)) == -1.0

    def test_win_or_push(self):
        ev = stand_expectation(state('00', '0', deck_of({9: 1, 10: 1})))
        assert ev == pytest.approx(0.5)

    def test_dealer_may_bust(self):
        ev = stand_expectation(state('00', '05', deck_of({5: 3, 10: 1})))
        assert ev == pytest.approx(0.25)

    def test_dealer_six_card_charlie(self):
        ev = stand_expectation(state('00', '1', deck_of({1: 4, 2: 1})))
        assert ev == pytest.approx(-1.0)

    def test_failed_insurance_hole_card(self):
        ev = stand_expectation(state('00', '1', deck_of({8: 1, 10: 1}), failed_insurance=True))
        assert ev == pytest.approx(1.0)


# ─── Double ───────────────────────────────────────────────────────────────────


class TestDoubleExpectation:
    def test_forced_bust_doubled(self):
        ev = double_expectation(state('00', '00', deck_of({10: 1})))
        assert ev == pytest.approx(-2.0)

    def test_forced_win_doubled(self):
        ev = double_expectation(state('55', '09', deck_of({10: 1})))
        assert ev == pytest.approx(2.0)

    def test_even(self):
        ev = double_expectation(state('55', '0', deck_of({9: 1, 10: 1})))
        assert ev == pytest.approx(0.0)

    def test_rejects_three_cards(self):
        with pytest.raises(PreconditionViolation):
            double_expectation(state('235', '0', deck_of({10: 1})))

    def test_rejects_failed_insurance(self):
        with pytest.raises(PreconditionViolation):
            double_expectation(state('55', '1', deck_of({10: 1}), failed_insurance=True))


# ─── Hit ──────────────────────────────────────────────────────────────────────


class TestHitExpectation:
    def test_forced_bust(self):
        ev = hit_expectation(state('00', '00', deck_of({10: 1})))
        assert ev == pytest.approx(-1.0)

    def test_reaches_twenty(self):
        ev = hit_expectation(state('55', '09', deck_of({10: 10})))
        assert ev == pytest.approx(1.0)

    def test_continues_optimally(self):
        """15 loses standing to 17, so the hit must continue to hit again."""
        ev = hit_expectation(state('55', '07', deck_of({5: 3})))
        assert ev == pytest.approx(1.0)

    def test_not_doubled(self):
        s = state('55', '09', deck_of({10: 10}))
        assert double_expectation(s) == pytest.approx(2.0 * hit_expectation(s))

    def test_rejects_bust(self):
        with pytest.raises(PreconditionViolation):
            hit_expectation(state('000', '0', FULL_SHOE))

    def test_precondition_is_value_error(self):
        with pytest.raises(ValueError):
            hit_expectation(state('000', '0', FULL_SHOE))


# ─── Insurance ────────────────────────────────────────────────────────────────


class TestInsuranceExpectation:
    def test_natural_is_certain(self):
        assert insurance_expectation(state('10', '1', FULL_SHOE)) == 1.0

    def test_only_tens_left(self):
        assert insurance_expectation(state('00', '1', deck_of({10: 10}))) == 0.0

    def test_lost_bet_charged(self):
        ev = insurance_expectation(state('06', '1', deck_of({9: 4})))
        assert ev == pytest.approx(-1.5)

    def test_weighted_by_non_ten_probability(self):
        ev = insurance_expectation(state('55', '1', deck_of({8: 2, 10: 2})))
        assert ev == pytest.approx(-0.25)

    def test_state_flag_untouched(self):
        s = state('06', '1', deck_of({9: 4}))
        insurance_expectation(s)
        assert not s.failed_insurance

    def test_rejects_ten_up(self):
        with pytest.raises(PreconditionViolation):
            insurance_expectation(state('00', '0', FULL_SHOE))

    def test_rejects_three_cards(self):
        with pytest.raises(PreconditionViolation):
            insurance_expectation(state('032', '1', FULL_SHOE))

    def test_rejects_split_hand(self):
        with pytest.raises(PreconditionViolation):
            insurance_expectation(state('00', '1', FULL_SHOE, is_split=True))


# ─── Split ────────────────────────────────────────────────────────────────────


class TestSplitExpectation:
    def test_twice_one_card_hand_from_full_shoe(self):
        shoe = deck_of({8: 2, 9: 1, 10: 3})
        ctx = SearchContext(full_shoe=shoe)
        ev = split_expectation(state('88', '0', deck_of({10: 2})), ctx)
        half = GameState(hand('8'), hand('0'), shoe, is_split=True)
        assert ev == pytest.approx(2.0 * hit_expectation(half, SearchContext(full_shoe=shoe)))

    def test_ignores_live_shoe(self):
        shoe = deck_of({8: 2, 9: 1, 10: 3})
        a = split_expectation(state('88', '0', deck_of({10: 2})), SearchContext(full_shoe=shoe))
        b = split_expectation(state('88', '0', deck_of({2: 5})), SearchContext(full_shoe=shoe))
        assert a == pytest.approx(b)

    def test_tens_against_ten(self):
        shoe = deck_of({10: 4})
        ev = split_expectation(state('00', '0', deck_of({10: 1})), SearchContext(full_shoe=shoe))
        assert ev == pytest.approx(0.0)

    def test_rejects_three_cards(self):
        with pytest.raises(PreconditionViolation):
            split_expectation(state('332', '0', FULL_SHOE))

    def test_rejects_unpaired(self):
        with pytest.raises(PreconditionViolation):
            split_expectation(state('23', '0', FULL_SHOE))

    def test_rejects_resplit(self):
        with pytest.raises(PreconditionViolation):
            split_expectation(state('22', '0', FULL_SHOE, is_split=True))

    def test_rejects_failed_insurance(self):
        with pytest.raises(PreconditionViolation):
            split_expectation(state('22', '1', FULL_SHOE, failed_insurance=True))


# ─── Optimal play ─────────────────────────────────────────────────────────────


class TestExpectation:
    def test_terminal_returns_stand(self):
        assert expectation(state('000', '00', FULL_SHOE)) == -1.0

    def test_hard_21_three_cards_stands(self):
        s = state('092', '00', FULL_SHOE)
        assert expectation(s) == pytest.approx(stand_expectation(s))

    def test_at_least_stand(self):
        s = state('06', '7', ONE_OF_EACH.remove_cards(hand('06'), hand('7')))
        assert expectation(s) >= stand_expectation(s) - 1e-12

    def test_surrender_floor(self):
        """Two-card 16 against a certain dealer 20: surrender is best."""
        s = state('06', '00', deck_of({10: 5}))
        assert expectation(s) == pytest.approx(-0.5)

    def test_no_surrender_on_three_cards(self):
        s = state('042', '00', deck_of({10: 5}))
        assert expectation(s) == pytest.approx(-1.0)

    def test_max_of_actions(self):
        s = state('46', '0', deck_of({9: 1, 10: 1}))
        evs = action_expectations(s)
        assert expectation(s) == pytest.approx(max(evs.values()))

    def test_memo_reuse(self):
        ctx = SearchContext()
        s = state('46', '07', deck_of({5: 3}))
        first = expectation(s, ctx)
        assert ("opt", s.key()) in ctx.memo
        assert expectation(s, ctx) == first


class TestActionExpectations:
    def test_keys_follow_legal_actions(self):
        s = state('06', '1', deck_of({9: 4}))
        assert list(action_expectations(s)) == legal_actions(s)

    def test_surrender_is_half_loss(self):
        s = state('06', '0', deck_of({9: 1, 10: 1}))
        assert action_expectations(s)[Action.SURRENDER] == -0.5

    def test_values(self):
        s = state('46', '0', deck_of({9: 1, 10: 1}))
        evs = action_expectations(s)
        assert evs[Action.STAND] == pytest.approx(-1.0)
        assert evs[Action.DOUBLE] == pytest.approx(0.0)


class TestBestAction:
    def test_stand_on_nineteen(self):
        assert best_action(state('09', '0', deck_of({9: 1, 10: 1}))) is Action.STAND

    def test_hit_when_standing_loses(self):
        assert best_action(state('46', '07', deck_of({5: 3}))) is Action.HIT

    def test_double_on_sure_win(self):
        assert best_action(state('46', '09', deck_of({10: 1}))) is Action.DOUBLE

    def test_tie_prefers_earlier(self):
        """Stand and hit both lose for certain; stand is checked first."""
        s = state('23', '08', deck_of({10: 3}))
        assert best_action(s) is Action.STAND

    def test_terminal_hand(self):
        assert best_action(state('000', '0', FULL_SHOE)) is Action.STAND

    def test_only_eligible_actions(self):
        deck = ONE_OF_EACH
        for player in ('23', '45', '234', '91'):
            for up in ('6', '0'):
                s = GameState.deal(hand(player), hand(up), deck)
                action = best_action(s)
                assert action in (Action.STAND, Action.HIT, Action.DOUBLE, Action.SPLIT)
                if action is Action.HIT:
                    assert can_hit(s)
                if action is Action.DOUBLE:
                    assert can_double(s)
                if action is Action.SPLIT:
                    assert can_split(s)


# ─── Shoe aggregate ───────────────────────────────────────────────────────────


class TestStartingHands:
    def test_weights_sum_to_one(self):
        total = sum(weight for weight, _ in starting_hands(standard_shoe(1)))
        assert total == pytest.approx(1.0)

    def test_ordered_pairs(self):
        for _, s in starting_hands(standard_shoe(1)):
            assert s.player[0] <= s.player[1]

    def test_fifty_five_pairs_from_full_shoe(self):
        assert len(list(starting_hands(FULL_SHOE))) == 55

    def test_skips_unavailable_pairs(self):
        pairs = [s.player for _, s in starting_hands(ONE_OF_EACH)]
        assert len(pairs) == 45
        assert all(a != b for a, b in pairs)

    def test_cards_removed(self):
        for _, s in starting_hands(ONE_OF_EACH):
            assert s.deck.size == 8


class TestDeckExpectation:
    def test_all_tens_pushes(self):
        deck = deck_of({10: 4})
        assert deck_expectation(deck, SearchContext(full_shoe=deck)) == pytest.approx(0.0)

    def test_weighted_sum_of_hands(self):
        ctx = SearchContext()
        expected = sum(
            weight * player_hand_expectation(s, ctx) for weight, s in starting_hands(ONE_OF_EACH)
        )
        assert deck_expectation(ONE_OF_EACH, ctx) == pytest.approx(expected)

    def test_bounded(self):
        ev = deck_expectation(ONE_OF_EACH)
        assert -2.0 <= ev <= 2.0

    def test_removal_effects_keys(self):
        deck = Deck((1, 1, 1, 1, 1, 0, 0, 0, 0, 1))
        effects = removal_effects(deck)
        assert sorted(effects) == [1, 2, 3, 4, 5, 10]

    def test_removal_effect_value(self):
        deck = Deck((1, 1, 1, 1, 1, 0, 0, 0, 0, 1))
        baseline = deck_expectation(deck)
        effects = removal_effects(deck)
        assert effects[10] == pytest.approx(deck_expectation(deck.draw(10)) - baseline)

    def test_removal_effects_given_baseline(self):
        deck = Deck((1, 1, 1, 1, 1, 0, 0, 0, 0, 1))
        effects = removal_effects(deck, baseline=0.0)
        assert effects[10] == pytest.approx(deck_expectation(deck.draw(10)))

    def test_removal_effects_memo_holds_one_shoe(self):
        deck = deck_of({2: 2, 10: 2})
        ctx = SearchContext(full_shoe=deck)
        removal_effects(deck, ctx)
        single = SearchContext(full_shoe=deck)
        deck_expectation(deck, single)
        assert ctx.memo.keys() == single.memo.keys()
        assert ctx.split_memo


class TestSearchContext:
    def test_for_shoe(self):
        ctx = SearchContext(full_shoe=ONE_OF_EACH)
        ctx.memo["entry"] = 1.0
        other = ctx.for_shoe()
        assert other.memo == {}
        assert other.full_shoe == ONE_OF_EACH
        assert other.split_memo is ctx.split_memo

    def test_split_halves_use_split_memo(self):
        ctx = SearchContext(full_shoe=deck_of({2: 2, 10: 2}))
        split_expectation(state('22', '0', deck_of({10: 1})), ctx)
        assert not ctx.memo
        assert ctx.split_memo
