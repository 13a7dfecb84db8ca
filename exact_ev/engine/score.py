"""
Terminal classification of a finished hand.

Score hierarchy (weakest to strongest):
    1. Bust              — total > 21
    2. Value(total)      — any other hand, ranked by total
    3. SixCardCharlie(t) — six cards totalling ≤ 21, beats every Value
    4. Natural           — two cards totalling 21, beats everything else

Scores compare by tier first and by total within a tier. Bust and Natural
carry no total, so all Busts are equal and all Naturals are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .hand import MAX_HAND_SIZE, hand_value


class ScoreKind(IntEnum):
    BUST = 0
    VALUE = 1
    SIX_CARD_CHARLIE = 2
    NATURAL = 3


@dataclass(frozen=True, order=True)
class Score:
    """A hand's terminal score; ordered, hashable, usable as a dict key."""

    kind: ScoreKind
    total: int = 0

    @classmethod
    def value(cls, total: int) -> Score:
        return cls(ScoreKind.VALUE, total)

    @classmethod
    def six_card_charlie(cls, total: int) -> Score:
        return cls(ScoreKind.SIX_CARD_CHARLIE, total)

    @property
    def is_bust(self) -> bool:
        return self.kind is ScoreKind.BUST

    @property
    def is_natural(self) -> bool:
        return self.kind is ScoreKind.NATURAL

    def __repr__(self) -> str:
        if self.kind is ScoreKind.BUST:
            return "Bust"
        if self.kind is ScoreKind.NATURAL:
            return "Natural"
        name = "Value" if self.kind is ScoreKind.VALUE else "SixCardCharlie"
        return f"{name}({self.total})"


BUST: Score = Score(ScoreKind.BUST)
NATURAL: Score = Score(ScoreKind.NATURAL)


def score(hand: tuple[int, ...]) -> Score:
    """Classify a hand. Checks run in order: bust, six cards, natural, value.

    Examples:
        >>> score((1, 10))
        Natural
        >>> score((2, 2, 2, 2, 1, 1))
        SixCardCharlie(20)
        >>> score((10, 10, 2))
        Bust
        >>> score((10, 10, 1))
        Value(21)
    """
    total = hand_value(hand)
    if total > 21:
        return BUST
    if len(hand) == MAX_HAND_SIZE:
        return Score.six_card_charlie(total)
    if len(hand) == 2 and total == 21:
        return NATURAL
    return Score.value(total)
