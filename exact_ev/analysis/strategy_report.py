"""Text reports for exact expectation results.

Three public functions format solver output into plain-text tables for the
command line:

    format_strategy_chart(action_grid)      — S/H/D/P chart, pairs vs up-card
    format_action_table(state, evs, best)   — every legal action's expectation
    format_removal_effects(baseline, effects) — effect of removing each rank
"""

from __future__ import annotations

import numpy as np

from exact_ev.engine.cards import RANK_NAMES
from exact_ev.engine.game_state import Action, GameState

from .heat_maps import ACTION_LETTERS, PAIR_LABELS, PAIRS, UPCARD_LABELS, UPCARDS

_RULE_WIDTH: int = 56


def _banner(title: str) -> list[str]:
    return ["=" * _RULE_WIDTH, title, "=" * _RULE_WIDTH]


def format_strategy_chart(action_grid: np.ndarray) -> str:
    """Render a (55, 10) action grid as a fixed-width strategy chart.

    Undealable cells are shown as ``.``.

    Raises:
        ValueError: If the grid does not have one row per pair and one column
            per up-card.
    """
    if action_grid.shape != (len(PAIRS), len(UPCARDS)):
        raise ValueError(
            f"Expected a grid of shape {(len(PAIRS), len(UPCARDS))}, got {action_grid.shape}."
        )

    lines = _banner("Best action  (S=stand H=hit D=double P=split)")
    lines.append(f"  {'Hand':>5}  " + " ".join(f"{label:>1}" for label in UPCARD_LABELS))
    lines.append(f"  {'-----':>5}  " + " ".join("-" for _ in UPCARD_LABELS))
    for label, row in zip(PAIR_LABELS, action_grid):
        cells = ["." if np.isnan(val) else ACTION_LETTERS[int(val)] for val in row]
        lines.append(f"  {label:>5}  " + " ".join(cells))
    return "\n".join(lines)


def format_action_table(
    state: GameState,
    evs: dict[Action, float],
    best: Action,
) -> str:
    """Render the expectation of every legal action in ``state``.

    Args:
        state: Position being analysed.
        evs:   Output of action_expectations(state).
        best:  Output of best_action(state); marked with ``*``.
    """
    lines = _banner(str(state))
    lines.append(f"  {'Action':<10}  {'Expectation':>11}")
    lines.append(f"  {'------':<10}  {'-----------':>11}")
    for action, ev in evs.items():
        marker = " *" if action is best else ""
        lines.append(f"  {action.value:<10}  {ev:>+11.6f}{marker}")
    return "\n".join(lines)


def format_removal_effects(baseline: float, effects: dict[int, float]) -> str:
    """Render a shoe's expectation and the effect of removing each rank.

    Args:
        baseline: deck_expectation of the shoe.
        effects:  Output of removal_effects for the same shoe.
    """
    lines = _banner("Effect of removing one card")
    lines.append(f"  Shoe expectation:  {baseline:+.6f}  ({baseline * 100:+.3f}%)")
    lines.append("")
    lines.append(f"  {'Rank':>4}  {'Delta':>10}")
    lines.append(f"  {'----':>4}  {'-----':>10}")
    for rank, delta in effects.items():
        lines.append(f"  {RANK_NAMES[rank]:>4}  {delta:>+10.6f}")
    return "\n".join(lines)
