"""Tests for exact_ev/engine/hand.py — totals, soft aces, stop rules."""

from __future__ import annotations

from exact_ev.engine.hand import (
    cannot_hit,
    dealer_stands,
    hand_value,
    is_soft,
    min_hand_value,
)
from tests.conftest import hand


class TestHandValue:
    def test_hard(self):
        assert hand_value(hand('00')) == 20

    def test_single_ace(self):
        assert hand_value(hand('1')) == 11

    def test_two_aces(self):
        assert hand_value(hand('11')) == 12

    def test_soft_21(self):
        assert hand_value(hand('10')) == 21

    def test_ace_demoted(self):
        assert hand_value(hand('001')) == 21

    def test_empty(self):
        assert hand_value(()) == 0

    def test_min_value_counts_aces_as_one(self):
        assert min_hand_value(hand('16')) == 7


class TestSoftness:
    def test_soft(self):
        assert is_soft(hand('16'))

    def test_hard_with_ace(self):
        assert not is_soft(hand('160'))

    def test_no_ace(self):
        assert not is_soft(hand('88'))


class TestDealerStands:
    def test_hard_17(self):
        assert dealer_stands(hand('07'))

    def test_soft_17(self):
        assert dealer_stands(hand('16'))

    def test_16(self):
        assert not dealer_stands(hand('06'))

    def test_six_cards(self):
        assert dealer_stands(hand('111122'))

    def test_up_card_only(self):
        assert not dealer_stands(hand('0'))


class TestCannotHit:
    def test_hard_21(self):
        assert cannot_hit(hand('0092'))

    def test_soft_21_can_still_hit(self):
        """Soft 21 is below hard 21, so the hand is not terminal."""
        assert not cannot_hit(hand('10'))

    def test_bust(self):
        assert cannot_hit(hand('000'))

    def test_six_cards(self):
        assert cannot_hit(hand('222222'))

    def test_twenty(self):
        assert not cannot_hit(hand('00'))
