"""
Tabular persistence for shoe samples and computed advantages.

File layout (CSV with a header row):
    samples file    — ten rank-count columns, ace first, tens last
    advantage file  — the same ten columns plus ``advantage``, the shoe's
                      exact expected return per unit bet

Columns are read by position, so files written by other tools with
different header names load the same way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from exact_ev.engine.cards import NUM_RANKS
from exact_ev.engine.deck import Deck

RANK_COLUMNS: list[str] = [
    "aces", "twos", "threes", "fours", "fives",
    "sixes", "sevens", "eights", "nines", "tens",
]
ADVANTAGE_COLUMN: str = "advantage"


def _decks_from_frame(df: pd.DataFrame, path: str | Path) -> list[Deck]:
    if df.shape[1] < NUM_RANKS:
        raise ValueError(
            f"{path}: expected at least {NUM_RANKS} rank columns, got {df.shape[1]}."
        )
    counts = df.iloc[:, :NUM_RANKS].to_numpy(dtype="int64")
    return [Deck.from_array(row) for row in counts]


def read_deck_samples(path: str | Path) -> list[Deck]:
    """Load every shoe composition listed in a samples file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file has fewer than ten columns or bad counts.
    """
    df = pd.read_csv(path)
    return _decks_from_frame(df, path)


def read_computed_decks(path: str | Path) -> set[Deck]:
    """Return the shoes already present in an advantage file.

    A missing or empty file means nothing has been computed yet.
    """
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        return set()
    df = pd.read_csv(path)
    return set(_decks_from_frame(df, path))


def read_advantages(path: str | Path) -> pd.DataFrame:
    """Load an advantage file as a DataFrame with canonical column names."""
    df = pd.read_csv(path)
    if df.shape[1] != NUM_RANKS + 1:
        raise ValueError(
            f"{path}: expected {NUM_RANKS + 1} columns, got {df.shape[1]}."
        )
    df.columns = RANK_COLUMNS + [ADVANTAGE_COLUMN]
    return df


def append_advantage(path: str | Path, deck: Deck, advantage: float) -> None:
    """Append one ``(deck, advantage)`` row, writing a header for a new file."""
    path = Path(path)
    new_file = not path.exists() or path.stat().st_size == 0
    if new_file:
        path.parent.mkdir(parents=True, exist_ok=True)
    row = pd.DataFrame([list(deck.counts) + [advantage]],
                       columns=RANK_COLUMNS + [ADVANTAGE_COLUMN])
    row.to_csv(path, mode="a", header=new_file, index=False)


def write_deck_samples(path: str | Path, decks: Iterable[Deck]) -> int:
    """Write shoe compositions to a samples file (overwrites).

    Returns:
        Number of rows written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame([list(deck.counts) for deck in decks], columns=RANK_COLUMNS)
    df.to_csv(path, index=False)
    return len(df)
