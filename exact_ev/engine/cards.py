"""
Rank constants and compact text encodings for hands and shoes.

Rank encoding (integer 1–10):
    1      = Ace (counted as 1 or 11, see hand.py)
    2..9   = spot cards at face value
    10     = any ten-valued card (10, J, Q, K collapsed into one bucket)

Text encodings (I/O boundaries only):
    hand string  — one digit per card, '0' stands for rank 10: "10" = (1, 10)
    deck string  — ten digits, one count per rank (ace first). Tens counts of
                   10–19 are written as "1" plus the last digit, giving an
                   11-character string: "44444444416" = 16 tens.
"""

from __future__ import annotations

RANK_ACE: int = 1
RANK_TEN: int = 10

RANKS: tuple[int, ...] = tuple(range(1, 11))
"""All ranks in enumeration order (ace first)."""

NON_TEN_RANKS: tuple[int, ...] = tuple(range(1, 10))

NUM_RANKS: int = 10

RANK_NAMES: dict[int, str] = {1: 'A', 2: '2', 3: '3', 4: '4', 5: '5',
                              6: '6', 7: '7', 8: '8', 9: '9', 10: 'T'}


def rank_index(rank: int) -> int:
    """Return the 0-based slot of a rank in a count array.

    Examples:
        >>> rank_index(1)
        0
        >>> rank_index(10)
        9
    """
    return rank - 1


def is_valid_rank(rank: int) -> bool:
    return 1 <= rank <= 10


def parse_hand(hand_str: str) -> tuple[int, ...]:
    """Parse a hand string into a tuple of ranks.

    Every character is a digit; '0' encodes rank 10.

    Raises:
        ValueError: If a character is not a decimal digit.

    Examples:
        >>> parse_hand('10')
        (1, 10)
        >>> parse_hand('055')
        (10, 5, 5)
        >>> parse_hand('')
        ()
    """
    ranks = []
    for char in hand_str:
        if not char.isdigit():
            raise ValueError(f"Invalid card {char!r} in hand {hand_str!r}.")
        digit = int(char)
        ranks.append(RANK_TEN if digit == 0 else digit)
    return tuple(ranks)


def hand_to_str(hand: tuple[int, ...]) -> str:
    """Encode a hand as a digit string (inverse of parse_hand).

    Examples:
        >>> hand_to_str((1, 10))
        '10'
    """
    return ''.join('0' if rank == RANK_TEN else str(rank) for rank in hand)


def hand_to_label(hand: tuple[int, ...]) -> str:
    """Human-readable hand label for reports, e.g. (1, 10) -> 'A,T'."""
    return ','.join(RANK_NAMES[rank] for rank in hand)


def parse_deck(deck_str: str) -> tuple[int, ...]:
    """Parse a deck string into ten per-rank counts.

    A 10-character string holds one digit per rank. In an 11-character
    string the tens count is 10 plus the last digit, so the tenth
    character must be '1'.

    Raises:
        ValueError: If the string has the wrong length or a non-digit, or
            is 11 digits long without '1' as its tenth digit.

    Examples:
        >>> parse_deck('4444444444')
        (4, 4, 4, 4, 4, 4, 4, 4, 4, 4)
        >>> parse_deck('44444444416')
        (4, 4, 4, 4, 4, 4, 4, 4, 4, 16)
    """
    if len(deck_str) not in (NUM_RANKS, NUM_RANKS + 1) or not deck_str.isdigit():
        raise ValueError(
            f"Deck string must be 10 or 11 digits, got {deck_str!r}."
        )
    counts = [int(char) for char in deck_str[:NUM_RANKS]]
    if len(deck_str) == NUM_RANKS + 1:
        if deck_str[NUM_RANKS - 1] != '1':
            raise ValueError(
                f"An 11-digit deck string needs '1' as its tenth digit, got {deck_str!r}."
            )
        counts[-1] = 10 + int(deck_str[NUM_RANKS])
    return tuple(counts)


def deck_to_str(counts: tuple[int, ...]) -> str:
    """Encode ten per-rank counts as a deck string (inverse of parse_deck).

    Raises:
        ValueError: If a non-ten count exceeds 9 or the tens count exceeds 19.

    Examples:
        >>> deck_to_str((4, 4, 4, 4, 4, 4, 4, 4, 4, 16))
        '44444444416'
    """
    *spots, tens = counts
    if any(count > 9 for count in spots) or tens > 19:
        raise ValueError(f"Counts {counts} cannot be written as a deck string.")
    return ''.join(str(count) for count in spots) + str(tens)
