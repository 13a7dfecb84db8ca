"""Tests for exact_ev/engine/rules.py — settlement of finished hands."""

from __future__ import annotations

from exact_ev.engine.rules import (
    INSURANCE_COST,
    NATURAL_PAYOUT,
    SURRENDER_PAYOUT,
    hand_expectation,
)
from exact_ev.engine.score import BUST, NATURAL, Score


class TestConstants:
    def test_payouts(self):
        assert NATURAL_PAYOUT == 1.5
        assert SURRENDER_PAYOUT == -0.5
        assert INSURANCE_COST == 0.5


class TestHandExpectation:
    def test_player_bust_loses_to_dealer_bust(self):
        assert hand_expectation(BUST, BUST) == -1.0

    def test_natural_pays_three_to_two(self):
        assert hand_expectation(NATURAL, Score.value(21)) == 1.5

    def test_natural_beats_charlie(self):
        assert hand_expectation(NATURAL, Score.six_card_charlie(21)) == 1.5

    def test_natural_push(self):
        assert hand_expectation(NATURAL, NATURAL) == 0.0

    def test_value_beats_bust(self):
        assert hand_expectation(Score.value(12), BUST) == 1.0

    def test_value_loses_to_natural(self):
        assert hand_expectation(Score.value(21), NATURAL) == -1.0

    def test_push(self):
        assert hand_expectation(Score.value(18), Score.value(18)) == 0.0

    def test_higher_wins(self):
        assert hand_expectation(Score.value(19), Score.value(18)) == 1.0

    def test_lower_loses(self):
        assert hand_expectation(Score.value(17), Score.value(18)) == -1.0

    def test_charlie_beats_21(self):
        assert hand_expectation(Score.six_card_charlie(15), Score.value(21)) == 1.0

    def test_charlie_loses_to_natural(self):
        assert hand_expectation(Score.six_card_charlie(21), NATURAL) == -1.0

    def test_antisymmetric_between_plain_scores(self):
        scores = [BUST, Score.value(17), Score.value(20), Score.six_card_charlie(18)]
        for p in scores[1:]:
            for d in scores[1:]:
                assert hand_expectation(p, d) == -hand_expectation(d, p)
