"""
Discounted occupancy frequencies and fixed-policy values by direct solve.

Occupancy
---------
For an initial distribution α, discount γ and the policy pair's transition
matrix P, the discounted occupancy frequency is

    x = Σ_{t≥0} γᵗ (Pᵀ)ᵗ α,   i.e. the solution of  (I − γ Pᵀ) x = α.

Fixed-policy values
~~~~~~~~~~~~~~~~~~~
With r the per-state reward vector, the value of the policy pair is the
solution of (I − γ P) v = r, and the expected return from α is αᵀ v, which
equals xᵀ r.

Both systems are solved with ``scipy.linalg.solve`` (LU with partial
pivoting). Matrix construction runs in parallel; the solve does not.
When γ = 1 and the chain is not absorbing the system is singular; that is
reported as NumericError and the table is left untouched.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Mapping, Sequence

import numpy as np
import scipy.linalg

from rmdp.config import EvaluationConfig
from rmdp.engine.errors import InvalidIdError, NumericError
from rmdp.engine.state_table import StateTable
from rmdp.engine.transition import Transition
from rmdp.solvers.rewards import state_rewards
from rmdp.solvers.transition_matrix import transition_matrix, transition_matrix_t
from rmdp.solvers.validation import check_policy

logger = logging.getLogger(__name__)

InitialDistribution = Transition | Mapping[int, float] | Sequence[float] | np.ndarray


# ─── Helpers ──────────────────────────────────────────────────────────────────


def _check_discount(discount: float) -> float:
    discount = float(discount)
    if not 0.0 <= discount <= 1.0:
        raise ValueError(f"Discount must be in [0, 1], got {discount}.")
    return discount


def initial_vector(initial: InitialDistribution, n: int) -> np.ndarray:
    """Expand an initial distribution into a dense float64 vector of length n.

    Accepts a sparse Transition, a ``{stateid: mass}`` mapping, or a dense
    sequence of length n.

    Raises:
        InvalidIdError: If a sparse entry names a state outside the table.
        ValueError:     If a dense sequence has the wrong length.

    Examples:
        >>> initial_vector({1: 1.0}, 3)
        array([0., 1., 0.])
    """
    if isinstance(initial, Transition):
        return initial.probabilities_vector(n)
    if isinstance(initial, Mapping):
        vec = np.zeros(n, dtype=np.float64)
        for stateid, mass in initial.items():
            if not 0 <= stateid < n:
                raise InvalidIdError(f"Initial state {stateid} outside the table of {n}.")
            vec[stateid] += float(mass)
        return vec
    vec = np.asarray(initial, dtype=np.float64)
    if vec.shape != (n,):
        raise ValueError(f"Initial distribution must have shape ({n},), got {vec.shape}.")
    return vec.copy()


def _solve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve a·x = b, turning singular or ill-conditioned systems into NumericError."""
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", scipy.linalg.LinAlgWarning)
            x = scipy.linalg.solve(a, b, check_finite=True)
    except (np.linalg.LinAlgError, scipy.linalg.LinAlgWarning, ValueError) as exc:
        raise NumericError(f"Linear system could not be solved: {exc}") from exc
    if not np.all(np.isfinite(x)):
        raise NumericError("Linear system produced a non-finite solution.")
    return x


# ─── Public API ───────────────────────────────────────────────────────────────


def occupancy_frequencies(
    table: StateTable,
    initial: InitialDistribution,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Discounted state-occupancy frequencies for a policy pair.

    Args:
        table:    State table; read-only during the call.
        initial:  Initial distribution (Transition, mapping or dense vector).
        discount: γ in [0, 1]; γ = 1 is only solvable for absorbing chains.
        policy:   Action id per state.
        nature:   Outcome id per state.
        validate: If True, check the policy pair first.
        config:   Parallelism settings for matrix construction.

    Returns:
        float64 array x of length n with (I − γ Pᵀ) x = initial.

    Raises:
        ValueError:         If discount is outside [0, 1].
        InvalidPolicyError: With ``validate=True`` and an invalid policy pair.
        NumericError:       If the system is singular or ill-conditioned.

    Examples:
        >>> from rmdp.engine.construction import add_transition
        >>> from rmdp.engine.state_table import make_mdp
        >>> mdp = make_mdp()
        >>> add_transition(mdp, 0, 0, 0, 1, 1.0, 0.0)
        >>> occupancy_frequencies(mdp, {0: 1.0}, 0.5, [0, 0], [0, 0])
        array([1. , 0.5])
    """
    discount = _check_discount(discount)
    if validate:
        check_policy(table, policy, nature)

    n = table.state_count()
    b = initial_vector(initial, n)
    if n == 0:
        return b

    a = transition_matrix_t(table, policy, nature, config=config)
    a *= -discount
    a[np.diag_indices(n)] += 1.0

    logger.debug("Solving occupancy system: n=%d discount=%s", n, discount)
    return _solve(a, b)


def policy_values(
    table: StateTable,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> np.ndarray:
    """Value of every state under a fixed policy pair: (I − γ P) v = r.

    Terminal states have value 0.
    """
    discount = _check_discount(discount)
    if validate:
        check_policy(table, policy, nature)

    n = table.state_count()
    rewards = state_rewards(table, policy, nature, config=config)
    if n == 0:
        return rewards

    a = transition_matrix(table, policy, nature, config=config)
    a *= -discount
    a[np.diag_indices(n)] += 1.0

    logger.debug("Solving policy value system: n=%d discount=%s", n, discount)
    return _solve(a, rewards)


def expected_return(
    table: StateTable,
    initial: InitialDistribution,
    discount: float,
    policy: Sequence[int],
    nature: Sequence[int],
    *,
    validate: bool = False,
    config: EvaluationConfig | None = None,
) -> float:
    """Discounted return of the policy pair from ``initial``: initialᵀ v."""
    values = policy_values(table, discount, policy, nature, validate=validate, config=config)
    alpha = initial_vector(initial, table.state_count())
    return math.fsum(alpha * values)
