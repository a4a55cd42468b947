"""
Actions: the decision maker's choices at a state.

Two action variants share one capability set:

    RegularAction          — exactly one outcome (plain MDP)
    WeightedOutcomeAction  — a growing list of outcomes from which nature
                             picks, plus a nominal distribution over them

Capability set (used by SAState and the evaluation code):
    outcomes, outcome_count(), get_outcome(oid), create_outcome(oid),
    is_outcome_correct(oid), mean_transition(oid), mean_reward(oid),
    is_normalized(), normalize(), to_json(aid), to_string()
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .errors import InvalidIdError, ModelError
from .transition import NORMALIZATION_TOLERANCE, Transition

# ─── RegularAction ────────────────────────────────────────────────────────────


class RegularAction:
    """Action with a single outcome; the only valid outcome id is 0.

    Examples:
        >>> a = RegularAction()
        >>> a.create_outcome(0).add_sample(1, 1.0, 2.0)
        >>> a.mean_reward(0)
        2.0
        >>> a.is_outcome_correct(1)
        False
    """

    __slots__ = ("_outcome",)

    def __init__(self, outcome: Transition | None = None) -> None:
        self._outcome = outcome if outcome is not None else Transition()

    @property
    def outcome(self) -> Transition:
        return self._outcome

    @property
    def outcomes(self) -> tuple[Transition, ...]:
        return (self._outcome,)

    def outcome_count(self) -> int:
        return 1

    def _check_outcomeid(self, outcomeid: int) -> None:
        if outcomeid != 0:
            raise InvalidIdError(f"A regular action has only outcome 0, got {outcomeid}.")

    def get_outcome(self, outcomeid: int = 0) -> Transition:
        self._check_outcomeid(outcomeid)
        return self._outcome

    def create_outcome(self, outcomeid: int = 0) -> Transition:
        self._check_outcomeid(outcomeid)
        return self._outcome

    def is_outcome_correct(self, outcomeid: int) -> bool:
        return outcomeid == 0

    def mean_transition(self, outcomeid: int = 0) -> Transition:
        """Return the outcome; an empty one is a model error."""
        if self._outcome.is_empty():
            raise ModelError("Action outcome has no target states.")
        return self._outcome

    def mean_reward(self, outcomeid: int = 0) -> float:
        return self._outcome.mean_reward()

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        return self._outcome.is_normalized(tolerance)

    def normalize(self) -> None:
        self._outcome.normalize()

    def to_json(self, actionid: int = -1) -> dict:
        return {"actionid": actionid, "transition": self._outcome.to_json(0)}

    def to_string(self) -> str:
        return self._outcome.to_string()


# ─── WeightedOutcomeAction ────────────────────────────────────────────────────


class WeightedOutcomeAction:
    """Action whose outcome is chosen by nature from a finite set.

    Outcomes are created by id; addressing an id beyond the current count
    fills the gap with empty outcomes. The nominal ``distribution`` stays
    uniform while outcomes are added, until ``set_distribution`` fixes it
    explicitly; from then on new outcomes enter with weight 0.

    Examples:
        >>> a = WeightedOutcomeAction()
        >>> a.create_outcome(1).add_sample(0, 1.0, 4.0)
        >>> a.outcome_count(), a.distribution
        (2, [0.5, 0.5])
        >>> a.is_outcome_correct(1), a.is_outcome_correct(2)
        (True, False)
    """

    __slots__ = ("_outcomes", "_distribution", "_custom_distribution")

    def __init__(self, outcomes: Sequence[Transition] | None = None) -> None:
        self._outcomes: list[Transition] = list(outcomes) if outcomes else []
        self._custom_distribution = False
        self._distribution: list[float] = self._uniform(len(self._outcomes))

    @staticmethod
    def _uniform(count: int) -> list[float]:
        return [1.0 / count] * count if count else []

    @property
    def outcomes(self) -> tuple[Transition, ...]:
        return tuple(self._outcomes)

    @property
    def distribution(self) -> list[float]:
        return list(self._distribution)

    def outcome_count(self) -> int:
        return len(self._outcomes)

    def get_outcome(self, outcomeid: int) -> Transition:
        if not 0 <= outcomeid < len(self._outcomes):
            raise InvalidIdError(
                f"Outcome {outcomeid} out of range for action with {len(self._outcomes)} outcomes."
            )
        return self._outcomes[outcomeid]

    def create_outcome(self, outcomeid: int | None = None) -> Transition:
        """Return outcome ``outcomeid``, creating it (and any gap) if needed.

        ``None`` appends a new outcome at the end.

        Raises:
            InvalidIdError: If outcomeid is negative.
        """
        if outcomeid is None:
            outcomeid = len(self._outcomes)
        if outcomeid < 0:
            raise InvalidIdError(f"Outcome id must be non-negative, got {outcomeid}.")
        if outcomeid >= len(self._outcomes):
            added = outcomeid + 1 - len(self._outcomes)
            self._outcomes.extend(Transition() for _ in range(added))
            if self._custom_distribution:
                self._distribution.extend([0.0] * added)
            else:
                self._distribution = self._uniform(len(self._outcomes))
        return self._outcomes[outcomeid]

    def is_outcome_correct(self, outcomeid: int) -> bool:
        return 0 <= outcomeid < len(self._outcomes)

    # ── Nominal distribution ─────────────────────────────────────────────────

    def set_distribution(self, weights: Sequence[float]) -> None:
        """Fix the nominal distribution over outcomes.

        Raises:
            ValueError: If the length differs from the outcome count or a
                        weight is negative or not finite.
        """
        weights = [float(w) for w in weights]
        if len(weights) != len(self._outcomes):
            raise ValueError(
                f"Expected {len(self._outcomes)} outcome weights, got {len(weights)}."
            )
        if any(not math.isfinite(w) or w < 0.0 for w in weights):
            raise ValueError("Outcome weights must be finite and non-negative.")
        self._distribution = weights
        self._custom_distribution = True

    def is_distribution_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        if not self._distribution:
            return True
        return abs(1.0 - math.fsum(self._distribution)) <= tolerance

    def normalize_distribution(self) -> None:
        if not self._distribution:
            return
        total = math.fsum(self._distribution)
        if total == 0.0:
            raise ModelError("Outcome distribution sums to 0 and cannot be normalized.")
        self._distribution = [w / total for w in self._distribution]

    # ── Resolution ───────────────────────────────────────────────────────────

    def mean_transition(self, outcomeid: int) -> Transition:
        """Return the outcome nature selected.

        Raises:
            ModelError: If the action has no outcomes or the outcome is empty.
        """
        if not self._outcomes:
            raise ModelError("Action has no outcomes.")
        outcome = self._outcomes[outcomeid]
        if outcome.is_empty():
            raise ModelError(f"Outcome {outcomeid} has no target states.")
        return outcome

    def mean_reward(self, outcomeid: int) -> float:
        return self.mean_transition(outcomeid).mean_reward()

    def average_transition(self) -> Transition:
        """Mix all outcomes by the nominal distribution into one transition.

        Rewards of a shared target are probability-weighted, as in
        ``Transition.add_sample``.
        """
        if not self._outcomes:
            raise ModelError("Action has no outcomes.")
        result = Transition()
        for weight, outcome in zip(self._distribution, self._outcomes):
            if outcome.is_empty():
                raise ModelError("Outcome has no target states.")
            if weight == 0.0:
                continue
            for stateid, probability, reward in outcome:
                result.add_sample(stateid, weight * probability, reward)
        if result.is_empty():
            raise ModelError("Outcome distribution puts no weight on any outcome.")
        return result

    def average_reward(self) -> float:
        if not self._outcomes:
            raise ModelError("Action has no outcomes.")
        return math.fsum(
            weight * outcome.mean_reward()
            for weight, outcome in zip(self._distribution, self._outcomes)
        )

    # ── Normalization ────────────────────────────────────────────────────────

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        return all(o.is_normalized(tolerance) for o in self._outcomes)

    def normalize(self) -> None:
        for outcome in self._outcomes:
            outcome.normalize()

    # ── Serialization ────────────────────────────────────────────────────────

    def to_json(self, actionid: int = -1) -> dict:
        return {
            "actionid": actionid,
            "distribution": list(self._distribution),
            "outcomes": [o.to_json(oi) for oi, o in enumerate(self._outcomes)],
        }

    def to_string(self) -> str:
        return " | ".join(f"{oi}: {o.to_string()}" for oi, o in enumerate(self._outcomes))
