"""
Sparse transition: one outcome of an action.

A Transition stores three parallel lists:
    indices        target state ids, strictly increasing
    probabilities  non-negative transition weights (need not sum to 1)
    rewards        reward collected on reaching the matching target

Entries with probability 0 are allowed and preserved so that exported and
re-imported models list the same rows. A transition that is resolved by the
evaluation code must hold at least one entry; an empty one is a model error,
never an implicit terminal.
"""

from __future__ import annotations

import bisect
import math
from collections.abc import Iterator

import numpy as np

from .errors import InvalidIdError, ModelError

# ─── Constants ────────────────────────────────────────────────────────────────

NORMALIZATION_TOLERANCE: float = 1e-5
"""Maximum |1 - sum(p)| for a transition to count as normalized."""


def check_probability(probability: float) -> float:
    """Return probability as a float; ModelError if negative or not finite."""
    probability = float(probability)
    if not math.isfinite(probability) or probability < 0.0:
        raise ModelError(f"Transition probability must be finite and >= 0, got {probability}.")
    return probability


# ─── Transition ───────────────────────────────────────────────────────────────


class Transition:
    """Sparse distribution over target states with per-target rewards.

    Examples:
        >>> t = Transition()
        >>> t.add_sample(2, 0.25, 1.0)
        >>> t.add_sample(0, 0.75, 3.0)
        >>> t.indices, t.probabilities
        ([0, 2], [0.75, 0.25])
        >>> t.mean_reward()
        2.5
    """

    __slots__ = ("_indices", "_probabilities", "_rewards")

    def __init__(
        self,
        indices: list[int] | None = None,
        probabilities: list[float] | None = None,
        rewards: list[float] | None = None,
    ) -> None:
        self._indices: list[int] = []
        self._probabilities: list[float] = []
        self._rewards: list[float] = []

        indices = indices or []
        probabilities = probabilities or []
        if rewards is None:
            rewards = [0.0] * len(indices)
        if not (len(indices) == len(probabilities) == len(rewards)):
            raise ValueError("indices, probabilities and rewards must have equal lengths.")
        for stateid, probability, reward in zip(indices, probabilities, rewards):
            self.add_sample(stateid, probability, reward)

    # ── Accessors ────────────────────────────────────────────────────────────

    @property
    def indices(self) -> list[int]:
        return list(self._indices)

    @property
    def probabilities(self) -> list[float]:
        return list(self._probabilities)

    @property
    def rewards(self) -> list[float]:
        return list(self._rewards)

    def size(self) -> int:
        """Number of target entries."""
        return len(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[tuple[int, float, float]]:
        """Yield (target, probability, reward) in ascending target order."""
        return iter(zip(self._indices, self._probabilities, self._rewards))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transition):
            return NotImplemented
        return (
            self._indices == other._indices
            and self._probabilities == other._probabilities
            and self._rewards == other._rewards
        )

    def __repr__(self) -> str:
        return (
            f"Transition(indices={self._indices}, "
            f"probabilities={self._probabilities}, rewards={self._rewards})"
        )

    def is_empty(self) -> bool:
        return not self._indices

    def max_index(self) -> int:
        """Largest target id, or -1 for an empty transition."""
        return self._indices[-1] if self._indices else -1

    def sum_probabilities(self) -> float:
        return math.fsum(self._probabilities)

    # ── Mutation ─────────────────────────────────────────────────────────────

    def add_sample(self, stateid: int, probability: float, reward: float) -> None:
        """Add probability mass and reward for a target state.

        Adding to a target that is already present merges the two entries:
        probabilities are summed and the reward becomes the
        probability-weighted mean of the old and new rewards. If both
        weights are 0 the newer reward replaces the old one.

        Args:
            stateid:     Target state id (>= 0).
            probability: Non-negative, finite weight.
            reward:      Reward collected on this transition.

        Raises:
            InvalidIdError: If stateid is negative.
            ModelError:     If probability is negative or not finite.
        """
        stateid = int(stateid)
        reward = float(reward)
        if stateid < 0:
            raise InvalidIdError(f"Target state id must be non-negative, got {stateid}.")
        probability = check_probability(probability)

        pos = bisect.bisect_left(self._indices, stateid)
        if pos < len(self._indices) and self._indices[pos] == stateid:
            old_p = self._probabilities[pos]
            old_r = self._rewards[pos]
            total = old_p + probability
            if total > 0.0:
                self._rewards[pos] = (old_p * old_r + probability * reward) / total
            else:
                self._rewards[pos] = reward
            self._probabilities[pos] = total
        else:
            self._indices.insert(pos, stateid)
            self._probabilities.insert(pos, probability)
            self._rewards.insert(pos, reward)

    def set_reward(self, position: int, reward: float) -> None:
        """Overwrite the reward of the entry at ``position`` (not a state id)."""
        if not 0 <= position < len(self._rewards):
            raise InvalidIdError(f"Entry position {position} out of range.")
        self._rewards[position] = float(reward)

    # ── Normalization ────────────────────────────────────────────────────────

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        """True if empty or the probabilities sum to 1 within tolerance."""
        if not self._probabilities:
            return True
        return abs(1.0 - self.sum_probabilities()) <= tolerance

    def normalize(self) -> None:
        """Rescale probabilities to sum to 1. Empty transitions are left alone.

        Raises:
            ModelError: If the entries carry zero total weight.
        """
        if not self._probabilities:
            return
        total = self.sum_probabilities()
        if total == 0.0:
            raise ModelError("Probabilities sum to 0 and cannot be normalized.")
        self._probabilities = [p / total for p in self._probabilities]

    # ── Resolution ───────────────────────────────────────────────────────────

    def mean_reward(self) -> float:
        """Expected immediate reward: sum of probability * reward.

        Raises:
            ModelError: If the transition has no entries.
        """
        if not self._indices:
            raise ModelError("Transition has no target states.")
        return math.fsum(p * r for p, r in zip(self._probabilities, self._rewards))

    def probabilities_vector(self, size: int) -> np.ndarray:
        """Expand to a dense float64 vector of length ``size``.

        Raises:
            InvalidIdError: If a target id does not fit in ``size``.

        Examples:
            >>> Transition([1], [0.5]).probabilities_vector(3)
            array([0. , 0.5, 0. ])
        """
        if self.max_index() >= size:
            raise InvalidIdError(
                f"Target state {self.max_index()} does not fit a vector of size {size}."
            )
        result = np.zeros(size, dtype=np.float64)
        if self._indices:
            result[self._indices] = self._probabilities
        return result

    # ── Serialization ────────────────────────────────────────────────────────

    def to_json(self, outcomeid: int = -1) -> dict:
        return {
            "outcomeid": outcomeid,
            "stateids": list(self._indices),
            "probabilities": list(self._probabilities),
            "rewards": list(self._rewards),
        }

    def to_string(self) -> str:
        """Compact listing, e.g. ``'1 (p=0.5, r=1.0) 2 (p=0.5, r=0.0)'``."""
        return " ".join(
            f"{i} (p={p!r}, r={r!r})" for i, p, r in zip(self._indices, self._probabilities, self._rewards)
        )
