"""Interactive Plotly lookup of a policy pair's transitions.

Three public functions:

    build_transition_lookup_figure(table, policy, nature)
        — Heatmap of P[s, s']; hover shows source, target, probability,
          reward and the selected action/outcome.
    build_occupancy_figure(table, initial, discount, policy, nature)
        — Bar chart of occupancy frequencies with per-state hover.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import plotly.graph_objects as go

from rmdp.analysis.heat_maps import build_occupancy_data, build_transition_heatmap_data
from rmdp.engine.state_table import StateTable
from rmdp.solvers.occupancy import InitialDistribution

_COLORSCALE: str = "Blues"


# ─── Hover text builders ──────────────────────────────────────────────────────


def _build_transition_hover(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> list[list[str]]:
    """Return an n×n list of hover strings, empty for zero/terminal cells."""
    n = table.state_count()
    rows: list[list[str]] = [[""] * n for _ in range(n)]
    for s, state in enumerate(table):
        if state.is_terminal():
            continue
        aid, oid = int(policy[s]), int(nature[s])
        for to, probability, reward in state.mean_transition(aid, oid):
            rows[s][to] = "<br>".join(
                [
                    f"From: <b>{s}</b>",
                    f"To: <b>{to}</b>",
                    f"Action / outcome: {aid} / {oid}",
                    f"P: <b>{probability:.4f}</b>",
                    f"Reward: {reward:.4f}",
                ]
            )
    return rows


# ─── Public figure builders ───────────────────────────────────────────────────


def build_transition_lookup_figure(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> go.Figure:
    """Build an interactive heatmap of the policy pair's transition matrix.

    Terminal rows are rendered blank.

    Returns:
        go.Figure with one heatmap trace.
    """
    data = build_transition_heatmap_data(table, policy, nature)
    hover = _build_transition_hover(table, policy, nature)
    labels = [str(s) for s in range(table.state_count())]
    z = [[None if np.isnan(v) else v for v in row] for row in data.tolist()]

    fig = go.Figure(
        go.Heatmap(
            z=z,
            x=labels,
            y=labels,
            colorscale=_COLORSCALE,
            zmin=0.0,
            zmax=1.0,
            text=hover,
            hovertemplate="%{text}<extra></extra>",
            colorbar={"title": "P(s' | s)"},
            name="P",
        )
    )
    fig.update_layout(
        title_text=f"Transition Lookup — {table.state_count()} states",
        title_font_size=15,
        height=520,
        width=600,
    )
    fig.update_xaxes(title_text="Target state")
    fig.update_yaxes(title_text="Source state", autorange="reversed")
    return fig


def build_occupancy_figure(
    table: StateTable,
    initial: InitialDistribution,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
) -> go.Figure:
    """Build a bar chart of discounted occupancy frequencies."""
    freq = build_occupancy_data(table, initial, discount, policy, nature)
    hover = [
        f"State: <b>{s}</b><br>Terminal: {'yes' if state.is_terminal() else 'no'}"
        f"<br>Occupancy: <b>{freq[s]:.4f}</b>"
        for s, state in enumerate(table)
    ]
    fig = go.Figure(
        go.Bar(
            x=[str(s) for s in range(len(freq))],
            y=freq.tolist(),
            text=hover,
            textposition="none",
            hovertemplate="%{text}<extra></extra>",
            name="occupancy",
        )
    )
    fig.update_layout(
        title_text=f"Occupancy Frequencies — γ={discount}",
        title_font_size=15,
        height=420,
        width=780,
    )
    fig.update_xaxes(title_text="State")
    fig.update_yaxes(title_text="Discounted visits")
    return fig


# ─── HTML export ──────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.
    """
    fig.write_html(path, include_plotlyjs="cdn")
