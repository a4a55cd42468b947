"""Printed summaries of a state table and of a fixed policy pair.

Two public functions format results into human-readable tables for
inspection while building or debugging a model:

    print_model_summary(table)            — counts, terminal states, normalization
    print_policy_summary(table, policy, nature, discount, initial)
                                          — per-state selection, reward,
                                            occupancy and value
"""

from __future__ import annotations

from collections.abc import Sequence

from rmdp.engine.state_table import StateTable
from rmdp.solvers.occupancy import (
    InitialDistribution,
    initial_vector,
    occupancy_frequencies,
    policy_values,
)
from rmdp.solvers.rewards import state_rewards
from rmdp.solvers.validation import POLICY_CORRECT, first_invalid_state

_RULE: str = "=" * 56


def print_model_summary(table: StateTable) -> None:
    """Print state/action/outcome counts and the normalization status.

    Args:
        table: Table to summarise.
    """
    n_terminal = sum(1 for s in table if s.is_terminal())
    n_actions = sum(s.action_count() for s in table)
    n_outcomes = sum(len(a.outcomes) for s in table for a in s.actions)
    n_entries = sum(len(o) for s in table for a in s.actions for o in a.outcomes)

    print(_RULE)
    print(f"Model Summary  ({table.state_type.__name__})")
    print(_RULE)
    print(f"  States:          {table.state_count()}")
    print(f"  Terminal:        {n_terminal}")
    print(f"  Actions:         {n_actions}")
    print(f"  Outcomes:        {n_outcomes}")
    print(f"  Target entries:  {n_entries}")
    print(f"  Normalized:      {'yes' if table.is_normalized() else 'no'}")
    print()


def print_policy_summary(
    table: StateTable,
    policy: Sequence[int],
    nature: Sequence[int],
    discount: float,
    initial: InitialDistribution,
) -> None:
    """Print one row per state: selection, reward, occupancy and value.

    The policy pair is validated first; an invalid pair prints the offending
    state and nothing else.

    Args:
        table:    Table to evaluate.
        policy:   Action id per state.
        nature:   Outcome id per state.
        discount: Discount factor for occupancy and values.
        initial:  Initial distribution for occupancy and the expected return.
    """
    print(_RULE)
    print(f"Policy Summary  (γ={discount})")
    print(_RULE)

    bad = first_invalid_state(table, policy, nature)
    if bad != POLICY_CORRECT:
        print(f"  Invalid policy: state {bad} selects a missing action or outcome.")
        print()
        return

    rewards = state_rewards(table, policy, nature)
    occupancy = occupancy_frequencies(table, initial, discount, policy, nature)
    values = policy_values(table, discount, policy, nature)
    alpha = initial_vector(initial, table.state_count())

    print(
        f"  {'State':>5}  {'Action':>6}  {'Outcome':>7}  "
        f"{'Reward':>9}  {'Occupancy':>9}  {'Value':>9}"
    )
    print(
        f"  {'-----':>5}  {'------':>6}  {'-------':>7}  "
        f"{'---------':>9}  {'---------':>9}  {'---------':>9}"
    )
    for s, state in enumerate(table):
        if state.is_terminal():
            action, outcome = "-", "-"
        else:
            action, outcome = str(int(policy[s])), str(int(nature[s]))
        print(
            f"  {s:>5}  {action:>6}  {outcome:>7}  "
            f"{rewards[s]:>9.4f}  {occupancy[s]:>9.4f}  {values[s]:>9.4f}"
        )
    print()
    print(f"  Expected return: {float(alpha @ values):+.4f}")
    print()
