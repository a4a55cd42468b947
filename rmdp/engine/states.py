"""
States of a decision process.

``State`` is the capability contract the container and the evaluation code
are written against. ``SAState`` implements it once for any action type;
the two variants differ only in the action they hold:

    RegularState — actions are RegularAction (one outcome each)
    RobustState  — actions are WeightedOutcomeAction (nature picks an outcome)

A state with no actions is terminal: its value is 0 by convention and it is
never resolved for transitions or rewards.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar, Protocol

from .actions import RegularAction, WeightedOutcomeAction
from .errors import InvalidIdError
from .transition import NORMALIZATION_TOLERANCE, Transition

# ─── Contract ─────────────────────────────────────────────────────────────────


class State(Protocol):
    """Capabilities every state variant provides."""

    @property
    def actions(self) -> Sequence: ...

    def action_count(self) -> int: ...

    def is_terminal(self) -> bool: ...

    def mean_reward(self, actionid: int, outcomeid: int) -> float: ...

    def mean_transition(self, actionid: int, outcomeid: int) -> Transition: ...

    def is_action_outcome_correct(self, actionid: int, outcomeid: int) -> bool: ...

    def is_normalized(self) -> bool: ...

    def normalize(self) -> None: ...

    def to_json(self, stateid: int = -1) -> dict: ...

    def to_string(self) -> str: ...


# ─── Implementation ───────────────────────────────────────────────────────────


class SAState:
    """State holding a list of actions of type ``action_type``.

    Variants set ``action_type``; nothing else is overridden.
    """

    action_type: ClassVar[type] = RegularAction

    __slots__ = ("_actions",)

    def __init__(self, actions: Sequence | None = None) -> None:
        self._actions: list = list(actions) if actions else []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(actions={len(self._actions)})"

    @property
    def actions(self) -> tuple:
        return tuple(self._actions)

    def action_count(self) -> int:
        return len(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def is_terminal(self) -> bool:
        return not self._actions

    def get_action(self, actionid: int):
        if not 0 <= actionid < len(self._actions):
            raise InvalidIdError(
                f"Action {actionid} out of range for state with {len(self._actions)} actions."
            )
        return self._actions[actionid]

    def create_action(self, actionid: int | None = None):
        """Return action ``actionid``, creating it and any gap before it.

        ``None`` appends a new action.

        Raises:
            InvalidIdError: If actionid is negative.
        """
        if actionid is None:
            actionid = len(self._actions)
        if actionid < 0:
            raise InvalidIdError(f"Action id must be non-negative, got {actionid}.")
        while len(self._actions) <= actionid:
            self._actions.append(self.action_type())
        return self._actions[actionid]

    # ── Resolution (hot path: ids assumed valid) ─────────────────────────────

    def mean_transition(self, actionid: int, outcomeid: int) -> Transition:
        return self._actions[actionid].mean_transition(outcomeid)

    def mean_reward(self, actionid: int, outcomeid: int) -> float:
        return self._actions[actionid].mean_reward(outcomeid)

    def is_action_outcome_correct(self, actionid: int, outcomeid: int) -> bool:
        if not 0 <= actionid < len(self._actions):
            return False
        return self._actions[actionid].is_outcome_correct(outcomeid)

    # ── Normalization ────────────────────────────────────────────────────────

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        return all(a.is_normalized(tolerance) for a in self._actions)

    def normalize(self) -> None:
        for action in self._actions:
            action.normalize()

    # ── Serialization ────────────────────────────────────────────────────────

    def to_json(self, stateid: int = -1) -> dict:
        return {
            "stateid": stateid,
            "actions": [a.to_json(ai) for ai, a in enumerate(self._actions)],
        }

    def to_string(self) -> str:
        lines = [str(len(self._actions))]
        for ai, action in enumerate(self._actions):
            lines.append(f"    {ai} : {action.to_string()}")
        return "\n".join(lines)


class RegularState(SAState):
    """State of a plain MDP."""

    action_type = RegularAction
    __slots__ = ()


class RobustState(SAState):
    """State of a robust MDP; nature chooses each action's outcome."""

    action_type = WeightedOutcomeAction
    __slots__ = ()
