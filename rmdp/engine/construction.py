"""
Model construction helper.

``add_transition`` is the single entry point for building a table one
(state, action, outcome, target) row at a time. States, actions and outcomes
are created on demand, so a model can be filled in any order. The target
state is created too, which keeps every target id inside the table. A row
is checked in full before anything is created, so a rejected row leaves the
table unchanged.
"""

from __future__ import annotations

from .actions import RegularAction
from .errors import InvalidIdError
from .state_table import StateTable
from .transition import check_probability


def add_transition(
    table: StateTable,
    fromid: int,
    actionid: int,
    outcomeid: int,
    toid: int,
    probability: float,
    reward: float,
) -> None:
    """Add one transition row to ``table``.

    Args:
        table:       Table to extend (either variant).
        fromid:      Source state id.
        actionid:    Action id within the source state.
        outcomeid:   Outcome id within the action; must be 0 for plain states.
        toid:        Target state id.
        probability: Non-negative transition weight.
        reward:      Reward for the transition.

    Raises:
        InvalidIdError: On a negative id, or outcomeid != 0 for a plain state.
        ModelError:     On a negative or non-finite probability.

    Examples:
        >>> from rmdp.engine.state_table import make_mdp
        >>> mdp = make_mdp()
        >>> add_transition(mdp, 0, 1, 0, 2, 1.0, 5.0)
        >>> mdp.state_count(), mdp[0].action_count()
        (3, 2)
    """
    for name, value in (
        ("fromid", fromid),
        ("actionid", actionid),
        ("outcomeid", outcomeid),
        ("toid", toid),
    ):
        if value < 0:
            raise InvalidIdError(f"{name} must be non-negative, got {value}.")

    if outcomeid != 0 and table.state_type.action_type is RegularAction:
        raise InvalidIdError(f"A regular action has only outcome 0, got {outcomeid}.")
    check_probability(probability)

    # The row is valid; nothing below can fail part-way.
    table.create_state(toid)
    state = table.create_state(fromid)
    action = state.create_action(actionid)
    outcome = action.create_outcome(outcomeid)
    outcome.add_sample(toid, probability, reward)
