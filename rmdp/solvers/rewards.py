"""Per-state expected immediate rewards for a fixed policy pair."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from rmdp.config import EvaluationConfig
from rmdp.engine.state_table import StateTable
from rmdp.solvers._parallel import fan_out
from rmdp.solvers.validation import check_policy

logger = logging.getLogger(__name__)


def state_rewards(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Return reward[s] = mean reward of (policy[s], nature[s]); 0 if terminal.

    Args:
        table:    State table; read-only during the call.
        policy:   Action id per state.
        nature:   Outcome id per state.
        validate: If True, check the policy pair first.
        config:   Parallelism settings.

    Returns:
        float64 array of length n.

    Raises:
        InvalidPolicyError: With ``validate=True`` and an invalid policy pair.
        ModelError:         If a resolved outcome is empty.
    """
    if validate:
        check_policy(table, policy, nature)

    states = table.states
    n = len(states)
    rewards = np.zeros(n, dtype=np.float64)

    def fill(start: int, stop: int) -> None:
        for s in range(start, stop):
            state = states[s]
            if not state.is_terminal():
                rewards[s] = state.mean_reward(int(policy[s]), int(nature[s]))

    logger.debug("Aggregating rewards for %d states", n)
    fan_out(n, fill, config)
    return rewards
