"""
Dense transition matrices for a fixed policy pair.

For policy ``policy`` and nature's choice ``nature``:

    P[s, s'] = probability of moving from s to s' under the outcome
               nature[s] of action policy[s]

Terminal states produce an all-zero row and are never resolved. The
transposed builder fills column s instead of row s.

Each state's row depends only on that state, so rows are filled in parallel
by disjoint workers (see ``_parallel.fan_out``). Dense storage costs
O(n²) memory; it is what makes the direct linear solve in ``occupancy``
possible and is meant for moderate state counts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from rmdp.config import EvaluationConfig
from rmdp.engine.errors import ModelError
from rmdp.engine.state_table import StateTable
from rmdp.solvers._parallel import fan_out
from rmdp.solvers.validation import check_policy

logger = logging.getLogger(__name__)


def build_transition_matrix(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    transpose: bool = False,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Build the n×n transition matrix (or its transpose) for a policy pair.

    Args:
        table:     State table; read-only during the call.
        policy:    Action id per state (ignored for terminal states).
        nature:    Outcome id per state (ignored for terminal states).
        transpose: If True, return Pᵀ (entry (s', s) holds P[s, s']).
        validate:  If True, check the policy pair first.
        config:    Parallelism settings.

    Returns:
        float64 array of shape (n, n).

    Raises:
        InvalidPolicyError: With ``validate=True`` and an invalid policy pair.
        ModelError:         If a resolved outcome is empty or targets a
                            state outside the table.
    """
    if validate:
        check_policy(table, policy, nature)

    states = table.states
    n = len(states)
    result = np.zeros((n, n), dtype=np.float64)

    def fill(start: int, stop: int) -> None:
        for s in range(start, stop):
            state = states[s]
            if state.is_terminal():
                continue
            t = state.mean_transition(int(policy[s]), int(nature[s]))
            if t.max_index() >= n:
                raise ModelError(
                    f"State {s} transitions to state {t.max_index()} outside the table of {n}."
                )
            if transpose:
                result[t.indices, s] = t.probabilities
            else:
                result[s, t.indices] = t.probabilities

    logger.debug(
        "Building %s transition matrix for %d states", "transposed" if transpose else "forward", n
    )
    fan_out(n, fill, config)
    return result


def transition_matrix(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Forward matrix: row s is the distribution out of state s."""
    return build_transition_matrix(
        table, policy, nature, transpose=False, validate=validate, config=config
    )


def transition_matrix_t(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Transposed matrix: column s is the distribution out of state s."""
    return build_transition_matrix(
        table, policy, nature, transpose=True, validate=validate, config=config
    )
