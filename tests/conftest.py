"""
Shared pytest fixtures for the decision-process core tests.

Provides builders for small known models so tests can state their
transitions as plain row tuples.
"""

from __future__ import annotations

import pytest

from rmdp.engine.construction import add_transition
from rmdp.engine.state_table import StateTable, make_mdp, make_rmdp

Row = tuple[int, int, int, int, float, float]

# (from, action, outcome, to, probability, reward)
THREE_STATE_ROWS: list[Row] = [
    # action 0
    (0, 0, 0, 1, 1.0, 0.0),
    (1, 0, 0, 1, 1.0, 1.0),
    (2, 0, 0, 1, 1.0, 1.0),
    # action 1
    (0, 1, 0, 1, 1.0, 0.0),
    (1, 1, 0, 2, 1.0, 0.0),
    (2, 1, 0, 2, 1.0, 1.1),
]


def build_mdp(rows: list[Row]) -> StateTable:
    """Build a plain MDP from (from, action, outcome, to, p, r) rows.

    Examples:
        >>> build_mdp([(0, 0, 0, 1, 1.0, 2.0)]).state_count()
        2
    """
    table = make_mdp()
    for row in rows:
        add_transition(table, *row)
    return table


def build_rmdp(rows: list[Row]) -> StateTable:
    """Build a robust MDP from (from, action, outcome, to, p, r) rows."""
    table = make_rmdp()
    for row in rows:
        add_transition(table, *row)
    return table


@pytest.fixture
def three_state_mdp() -> StateTable:
    """Three states, two actions each, every transition deterministic."""
    return build_mdp(THREE_STATE_ROWS)


@pytest.fixture
def robust_chain() -> StateTable:
    """Robust model: state 0 has one action with two outcomes, state 2 is terminal.

    Outcome 0 stays in 0 w.p. 0.5 and moves to 1 w.p. 0.5 (reward 1 each).
    Outcome 1 moves to 2 with certainty (reward -1).
    State 1 has one action with one outcome looping to itself (reward 2).
    """
    return build_rmdp(
        [
            (0, 0, 0, 0, 0.5, 1.0),
            (0, 0, 0, 1, 0.5, 1.0),
            (0, 0, 1, 2, 1.0, -1.0),
            (1, 0, 0, 1, 1.0, 2.0),
        ]
    )
