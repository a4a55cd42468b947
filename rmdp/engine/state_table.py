"""
StateTable: id-indexed, growing collection owning every state of a process.

The table is written once against the State contract and instantiated per
variant:

    make_mdp(n)   — StateTable[RegularState]
    make_rmdp(n)  — StateTable[RobustState]

Ids are contiguous from 0. Addressing an id beyond the current size when
creating a state grows the table and fills the gap with default (terminal)
states. Lookups never grow the table and fail on out-of-range ids.

The table provides no locking. Evaluation routines treat it as read-only
for the duration of a call; callers must not mutate it concurrently.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from .errors import InvalidIdError, ModelError
from .states import RegularState, RobustState, SAState
from .transition import NORMALIZATION_TOLERANCE

S = TypeVar("S", bound=SAState)


class StateTable(Generic[S]):
    """Growable array of states indexed by state id.

    Args:
        state_type:  State variant to create (RegularState or RobustState).
        state_count: Number of terminal states to pre-allocate.

    Examples:
        >>> table = make_mdp()
        >>> table.create_state(2).is_terminal()
        True
        >>> table.state_count()
        3
    """

    def __init__(self, state_type: type[S], state_count: int = 0) -> None:
        if state_count < 0:
            raise InvalidIdError(f"State count must be non-negative, got {state_count}.")
        self.state_type = state_type
        self._states: list[S] = [state_type() for _ in range(state_count)]

    def __repr__(self) -> str:
        return f"StateTable({self.state_type.__name__}, states={len(self._states)})"

    # ── Growth and access ────────────────────────────────────────────────────

    def create_state(self, stateid: int | None = None) -> S:
        """Return state ``stateid``, growing the table if necessary.

        ``None`` appends a new state at the end.

        Raises:
            InvalidIdError: If stateid is negative.
        """
        if stateid is None:
            stateid = len(self._states)
        if stateid < 0:
            raise InvalidIdError(f"State id must be non-negative, got {stateid}.")
        if stateid >= len(self._states):
            self._states.extend(
                self.state_type() for _ in range(stateid + 1 - len(self._states))
            )
        return self._states[stateid]

    def get_state(self, stateid: int) -> S:
        """Return an existing state.

        Raises:
            InvalidIdError: If stateid is negative or not below state_count().
        """
        if not 0 <= stateid < len(self._states):
            raise InvalidIdError(
                f"State {stateid} out of range for table with {len(self._states)} states."
            )
        return self._states[stateid]

    def __getitem__(self, stateid: int) -> S:
        return self.get_state(stateid)

    def state_count(self) -> int:
        return len(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[S]:
        return iter(self._states)

    @property
    def states(self) -> tuple[S, ...]:
        """Read-only view of all states in id order."""
        return tuple(self._states)

    # ── Normalization ────────────────────────────────────────────────────────

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        """True iff every outcome of every action sums to 1 (empty ones count)."""
        for state in self._states:
            for action in state.actions:
                for outcome in action.outcomes:
                    if not outcome.is_normalized(tolerance):
                        return False
        return True

    def normalize(self) -> None:
        """Rescale every outcome's probabilities to sum to 1.

        All outcomes are checked before any is rescaled, so a failure leaves
        the table unchanged.

        Raises:
            ModelError: If a non-empty outcome has zero total probability.
        """
        for si, state in enumerate(self._states):
            for ai, action in enumerate(state.actions):
                for oi, outcome in enumerate(action.outcomes):
                    if not outcome.is_empty() and outcome.sum_probabilities() == 0.0:
                        raise ModelError(
                            f"Outcome (state {si}, action {ai}, outcome {oi}) has zero "
                            "total probability and cannot be normalized."
                        )
        for state in self._states:
            state.normalize()


# ─── Factories ────────────────────────────────────────────────────────────────


def make_mdp(state_count: int = 0) -> StateTable[RegularState]:
    """Table of plain states (one outcome per action)."""
    return StateTable(RegularState, state_count)


def make_rmdp(state_count: int = 0) -> StateTable[RobustState]:
    """Table of robust states (nature chooses among outcomes)."""
    return StateTable(RobustState, state_count)
