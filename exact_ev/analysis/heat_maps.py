"""Strategy heat maps for a shoe composition.

Two public data-builder functions return NumPy matrices that can be used
programmatically or passed to the plot helpers:

    build_expectation_grid(deck)  — optimal expected return per cell
    build_action_grid(deck)       — best_action code per cell

Two public plot functions render matplotlib figures:

    plot_expectation_heatmap(grid, title, ...)  — continuous RdYlGn panel
    plot_action_heatmap(grid, title, ...)       — discrete S/H/D/P panel

Matrix convention (both builders):
    Shape  : (55, 10) — rows = starting pairs (rank1 <= rank2) in the order
                        A,A  A,2 ... A,T  2,2 ... T,T
                        cols = dealer up-card A, 2 ... T
    Values : expected return in bet units, or an ACTION_CODES value
             np.nan = the shoe cannot deal that pair and up-card
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from exact_ev.engine.cards import RANK_NAMES, RANK_TEN, RANKS, hand_to_label
from exact_ev.engine.deck import Deck, InvariantViolation
from exact_ev.engine.game_state import Action, GameState
from exact_ev.solvers.exact_dp import SearchContext, best_action, expectation

# ─── Constants ────────────────────────────────────────────────────────────────

PAIRS: list[tuple[int, int]] = [
    (rank1, rank2) for rank1 in RANKS for rank2 in range(rank1, RANK_TEN + 1)
]
UPCARDS: list[int] = list(RANKS)

ACTION_CODES: dict[Action, int] = {
    Action.STAND: 0,
    Action.HIT: 1,
    Action.DOUBLE: 2,
    Action.SPLIT: 3,
}
ACTION_LETTERS: dict[int, str] = {0: "S", 1: "H", 2: "D", 3: "P"}

PAIR_LABELS: list[str] = [hand_to_label(pair) for pair in PAIRS]
UPCARD_LABELS: list[str] = [RANK_NAMES[rank] for rank in UPCARDS]
_NAN_COLOR: str = "#cccccc"


# ─── Colormaps ────────────────────────────────────────────────────────────────


def _make_action_cmap() -> matplotlib.colors.ListedColormap:
    """Red=STAND, green=HIT, blue=DOUBLE, purple=SPLIT, grey=undealable."""
    cmap = matplotlib.colors.ListedColormap(["#d62728", "#2ca02c", "#1f77b4", "#9467bd"])
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


def _make_continuous_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red=losing, green=winning, grey=undealable."""
    cmap = matplotlib.colormaps["RdYlGn"].copy()
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


_ACTION_CMAP: matplotlib.colors.Colormap = _make_action_cmap()
_CONTINUOUS_CMAP: matplotlib.colors.Colormap = _make_continuous_cmap()


# ─── Data builders ────────────────────────────────────────────────────────────


def _dealt_states(deck: Deck):
    """Yield ``(row, col, state)`` for every dealable cell of the grid."""
    for r, pair in enumerate(PAIRS):
        for c, upcard in enumerate(UPCARDS):
            try:
                state = GameState.deal(pair, (upcard,), deck)
            except InvariantViolation:
                continue
            yield r, c, state


def build_expectation_grid(
    deck: Deck,
    ctx: SearchContext | None = None,
) -> np.ndarray:
    """Return the optimal expected return for every pair and up-card.

    Args:
        deck: Shoe the player's pair and the dealer's up-card are dealt from.
        ctx:  Search context shared by every cell (a fresh one by default).

    Returns:
        float64 array of shape (55, 10), NaN where the cards are unavailable.
    """
    ctx = ctx if ctx is not None else SearchContext()
    grid = np.full((len(PAIRS), len(UPCARDS)), np.nan)
    for r, c, state in _dealt_states(deck):
        grid[r, c] = expectation(state, ctx)
    return grid


def build_action_grid(
    deck: Deck,
    ctx: SearchContext | None = None,
) -> np.ndarray:
    """Return the ``best_action`` code (see ACTION_CODES) for every cell.

    Returns:
        float64 array of shape (55, 10), NaN where the cards are unavailable.
    """
    ctx = ctx if ctx is not None else SearchContext()
    grid = np.full((len(PAIRS), len(UPCARDS)), np.nan)
    for r, c, state in _dealt_states(deck):
        grid[r, c] = ACTION_CODES[best_action(state, ctx)]
    return grid


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
    actions: bool,
) -> matplotlib.image.AxesImage:
    """Render one heat-map panel onto *ax* and return the AxesImage.

    The caller is responsible for setting title, xlabel, and ylabel.
    """
    masked = np.ma.masked_invalid(data)
    if actions:
        im = ax.imshow(masked, cmap=_ACTION_CMAP, vmin=-0.5, vmax=3.5, aspect="auto")
    else:
        norm = matplotlib.colors.TwoSlopeNorm(vmin=-1.0, vcenter=0.0, vmax=1.5)
        im = ax.imshow(masked, cmap=_CONTINUOUS_CMAP, norm=norm, aspect="auto")

    ax.set_xticks(range(len(UPCARDS)))
    ax.set_xticklabels(UPCARD_LABELS, fontsize=8)
    ax.set_yticks(range(len(PAIRS)))
    ax.set_yticklabels(PAIR_LABELS, fontsize=7)

    for r in range(data.shape[0]):
        for c in range(data.shape[1]):
            val = data[r, c]
            if np.isnan(val):
                continue
            if actions:
                text = ACTION_LETTERS[int(val)]
                text_color = "white"
            else:
                text = f"{val:+.2f}"
                text_color = "black" if -0.5 < val < 0.75 else "white"
            ax.text(c, r, text, ha="center", va="center", fontsize=6,
                    color=text_color, fontweight="bold")

    return im


def _finish(
    fig: matplotlib.figure.Figure,
    show: bool,
    save_path: str | None,
) -> matplotlib.figure.Figure:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_expectation_heatmap(
    grid: np.ndarray,
    title: str = "Optimal expectation by starting hand",
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot an expectation grid from build_expectation_grid.

    Args:
        grid:      (55, 10) array of expected returns, NaN = undealable.
        title:     Figure title.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(figsize=(7, 14))
    ax.set_title(title, fontsize=11, fontweight="bold")
    im = _render_panel(ax, grid, actions=False)
    ax.set_xlabel("Dealer up-card", fontsize=9)
    ax.set_ylabel("Player pair", fontsize=9)
    plt.colorbar(im, ax=ax, label="Expected return", fraction=0.046, pad=0.04)
    return _finish(fig, show, save_path)


def plot_action_heatmap(
    grid: np.ndarray,
    title: str = "Best action by starting hand",
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot an action grid from build_action_grid.

    Cells are annotated S (stand), H (hit), D (double) or P (split).

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(figsize=(6, 14))
    ax.set_title(title, fontsize=11, fontweight="bold")
    _render_panel(ax, grid, actions=True)
    ax.set_xlabel("Dealer up-card", fontsize=9)
    ax.set_ylabel("Player pair", fontsize=9)
    return _finish(fig, show, save_path)


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from exact_ev.engine.deck import FULL_SHOE

    deck = Deck.from_str(sys.argv[1]) if len(sys.argv) > 1 else FULL_SHOE
    print(f"Building grids for {deck} …")
    ctx = SearchContext()
    plot_expectation_heatmap(build_expectation_grid(deck, ctx), show=False,
                             save_path="expectation.png")
    plot_action_heatmap(build_action_grid(deck, ctx), show=False, save_path="actions.png")
    print("Saved: expectation.png, actions.png")
