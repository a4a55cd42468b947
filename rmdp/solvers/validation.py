"""
Policy validation.

A policy pair (decision maker's actions, nature's outcomes) is correct iff
every non-terminal state selects an existing action and that action an
existing outcome. Terminal states may hold any value.

The matrix, reward and occupancy routines do not bounds-check their inputs;
validate a candidate policy here first, or call them with ``validate=True``.
"""

from __future__ import annotations

from collections.abc import Sequence

from rmdp.engine.errors import InvalidPolicyError
from rmdp.engine.state_table import StateTable

POLICY_CORRECT: int = -1
"""Returned by first_invalid_state when the policy pair is correct."""


def first_invalid_state(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> int:
    """Return the id of the first state with an invalid selection.

    Scans states in id order, skips terminal states and stops at the first
    violation. A policy too short to cover a non-terminal state is a
    violation at that state.

    Returns:
        State id, or POLICY_CORRECT (-1) if the pair is correct.

    Examples:
        >>> from rmdp.engine.construction import add_transition
        >>> from rmdp.engine.state_table import make_mdp
        >>> mdp = make_mdp()
        >>> add_transition(mdp, 0, 0, 0, 1, 1.0, 0.0)
        >>> first_invalid_state(mdp, [0, 0], [0, 0])
        -1
        >>> first_invalid_state(mdp, [3, 0], [0, 0])
        0
    """
    for si, state in enumerate(table):
        if state.is_terminal():
            continue
        if si >= len(policy) or si >= len(nature):
            return si
        if not state.is_action_outcome_correct(int(policy[si]), int(nature[si])):
            return si
    return POLICY_CORRECT


def is_policy_correct(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> bool:
    return first_invalid_state(table, policy, nature) == POLICY_CORRECT


def check_policy(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
) -> None:
    """Raise InvalidPolicyError naming the first invalid state, if any."""
    si = first_invalid_state(table, policy, nature)
    if si != POLICY_CORRECT:
        raise InvalidPolicyError(si)
