"""Transition-matrix heat maps and occupancy charts.

Two public data builders return NumPy arrays that can be used
programmatically or passed to the plot helpers:

    build_transition_heatmap_data(table, policy, nature)  — (n, n) matrix
    build_occupancy_data(table, initial, discount, ...)   — (n,) vector

Plot functions render matplotlib figures:

    plot_transition_heatmap(data, title, ...)  — one panel, P[s, s']
    plot_policy_transitions(table, policy, nature, ...)  — convenience wrapper
    plot_occupancy(table, initial, discount, policy, nature, ...)  — bar chart

Matrix convention:
    Rows = source state, cols = target state.
    Values: transition probability in [0, 1]; np.nan for every entry of a
    terminal state's row (nothing is resolved there).
"""

from __future__ import annotations

from collections.abc import Sequence

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from rmdp.engine.state_table import StateTable
from rmdp.solvers.occupancy import InitialDistribution, occupancy_frequencies
from rmdp.solvers.transition_matrix import transition_matrix

# ─── Constants ────────────────────────────────────────────────────────────────

_NAN_COLOR: str = "#cccccc"
_ANNOTATE_MAX_STATES: int = 12
"""Cell values are printed only for matrices up to this size."""


def _make_probability_cmap() -> matplotlib.colors.Colormap:
    """Light-to-dark blue for probability 0 → 1, grey for terminal rows (NaN)."""
    cmap = matplotlib.colormaps["Blues"].copy()
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


_PROBABILITY_CMAP: matplotlib.colors.Colormap = _make_probability_cmap()


# ─── Data builders ────────────────────────────────────────────────────────────


def build_transition_heatmap_data(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> np.ndarray:
    """Return the forward transition matrix with terminal rows set to NaN.

    The policy pair is validated first.

    Returns:
        float64 array of shape (n, n).
    """
    data = transition_matrix(table, policy, nature, validate=True)
    for s, state in enumerate(table):
        if state.is_terminal():
            data[s, :] = np.nan
    return data


def build_occupancy_data(
    table: StateTable,
    initial: InitialDistribution,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
) -> np.ndarray:
    return occupancy_frequencies(table, initial, discount, policy, nature, validate=True)


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
) -> matplotlib.image.AxesImage:
    """Render one matrix panel onto *ax* and return the AxesImage.

    Small matrices get per-cell annotations. The caller sets the title.
    """
    n = data.shape[0]
    masked = np.ma.masked_invalid(data)
    im = ax.imshow(masked, cmap=_PROBABILITY_CMAP, vmin=0.0, vmax=1.0, aspect="auto")

    ax.set_xlabel("Target state", fontsize=9)
    ax.set_ylabel("Source state", fontsize=9)
    if n <= _ANNOTATE_MAX_STATES:
        ax.set_xticks(range(n))
        ax.set_yticks(range(n))
        for r in range(n):
            for c in range(n):
                val = data[r, c]
                if np.isnan(val) or val == 0.0:
                    continue
                ax.text(
                    c,
                    r,
                    f"{val:.2f}",
                    ha="center",
                    va="center",
                    fontsize=8,
                    color="white" if val > 0.5 else "black",
                )
    return im


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_transition_heatmap(
    data: np.ndarray,
    title: str,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot an (n, n) transition matrix as a single heat map.

    Args:
        data:      Matrix from build_transition_heatmap_data (NaN = terminal).
        title:     Figure suptitle.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(1, 1, figsize=(6, 5))
    fig.suptitle(title, fontsize=13, fontweight="bold")
    im = _render_panel(ax, data)
    plt.colorbar(im, ax=ax, label="P(s' | s)", fraction=0.046, pad=0.04)
    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig


def plot_policy_transitions(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Convenience: build the policy pair's matrix and render it."""
    data = build_transition_heatmap_data(table, policy, nature)
    return plot_transition_heatmap(
        data,
        f"Transition matrix  ({table.state_count()} states)",
        show=show,
        save_path=save_path,
    )


def plot_occupancy(
    table: StateTable,
    initial: InitialDistribution,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Bar chart of discounted occupancy frequency per state.

    Terminal states are drawn in grey.
    """
    freq = build_occupancy_data(table, initial, discount, policy, nature)
    colors = [_NAN_COLOR if s.is_terminal() else "#1f77b4" for s in table]

    fig, ax = plt.subplots(1, 1, figsize=(max(6, 0.4 * len(freq)), 4))
    fig.suptitle(f"Occupancy frequencies  (γ={discount})", fontsize=13, fontweight="bold")
    ax.bar(range(len(freq)), freq, color=colors)
    ax.set_xlabel("State", fontsize=9)
    ax.set_ylabel("Discounted visits", fontsize=9)
    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig
