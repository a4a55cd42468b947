"""Tests for rmdp/solvers/occupancy.py — occupancy frequencies and policy values."""

from __future__ import annotations

import numpy as np
import pytest

from rmdp.engine.construction import add_transition
from rmdp.engine.errors import InvalidIdError, InvalidPolicyError, NumericError
from rmdp.engine.state_table import make_mdp
from rmdp.engine.transition import Transition
from rmdp.solvers.occupancy import (
    expected_return,
    initial_vector,
    occupancy_frequencies,
    policy_values,
)
from rmdp.solvers.rewards import state_rewards

# ─── initial_vector ───────────────────────────────────────────────────────────


class TestInitialVector:
    def test_from_transition(self):
        vec = initial_vector(Transition([2], [1.0]), 3)
        np.testing.assert_array_equal(vec, [0.0, 0.0, 1.0])

    def test_from_mapping(self):
        vec = initial_vector({0: 0.5, 2: 0.5}, 3)
        np.testing.assert_array_equal(vec, [0.5, 0.0, 0.5])

    def test_from_sequence(self):
        vec = initial_vector([0.2, 0.8], 2)
        np.testing.assert_array_equal(vec, [0.2, 0.8])

    def test_sequence_is_copied(self):
        src = np.array([1.0, 0.0])
        vec = initial_vector(src, 2)
        vec[0] = 5.0
        assert src[0] == 1.0

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            initial_vector([1.0], 3)

    def test_mapping_out_of_range(self):
        with pytest.raises(InvalidIdError):
            initial_vector({3: 1.0}, 3)

    def test_transition_out_of_range(self):
        with pytest.raises(InvalidIdError):
            initial_vector(Transition([3], [1.0]), 3)


# ─── occupancy_frequencies ────────────────────────────────────────────────────


class TestOccupancyFrequencies:
    def test_zero_discount_returns_initial(self, three_state_mdp):
        init = [0.2, 0.3, 0.5]
        x = occupancy_frequencies(three_state_mdp, init, 0.0, [0, 0, 0], [0, 0, 0])
        np.testing.assert_array_equal(x, init)

    def test_self_loop_geometric(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 1.0, 1.0)
        x = occupancy_frequencies(table, {0: 1.0}, 0.9, [0], [0])
        assert x[0] == pytest.approx(10.0)

    def test_three_state(self, three_state_mdp):
        # s0 -> s1 -> s1 -> ...   x0 = 1, x1 = γ/(1-γ), x2 = 0
        x = occupancy_frequencies(three_state_mdp, {0: 1.0}, 0.9, [0, 0, 0], [0, 0, 0])
        np.testing.assert_allclose(x, [1.0, 9.0, 0.0], atol=1e-10)

    def test_matches_power_series(self, three_state_mdp):
        policy, nature = [1, 0, 1], [0, 0, 0]
        gamma = 0.7
        init = np.array([0.5, 0.25, 0.25])
        x = occupancy_frequencies(three_state_mdp, init, gamma, policy, nature)

        from rmdp.solvers.transition_matrix import transition_matrix_t

        pt = transition_matrix_t(three_state_mdp, policy, nature)
        total = np.zeros(3)
        term = init.copy()
        for _ in range(400):
            total += term
            term = gamma * pt @ term
        np.testing.assert_allclose(x, total, atol=1e-8)

    def test_terminal_absorbs_mass(self, robust_chain):
        # Nature sends state 0 to terminal state 2 immediately.
        x = occupancy_frequencies(robust_chain, {0: 1.0}, 0.9, [0, 0, 0], [1, 0, 0])
        np.testing.assert_allclose(x, [1.0, 0.0, 0.9], atol=1e-12)

    def test_empty_table(self):
        x = occupancy_frequencies(make_mdp(), [], 0.5, [], [])
        assert x.shape == (0,)

    def test_discount_out_of_range(self, three_state_mdp):
        with pytest.raises(ValueError):
            occupancy_frequencies(three_state_mdp, {0: 1.0}, 1.5, [0, 0, 0], [0, 0, 0])
        with pytest.raises(ValueError):
            occupancy_frequencies(three_state_mdp, {0: 1.0}, -0.1, [0, 0, 0], [0, 0, 0])

    def test_singular_system(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 1.0, 0.0)
        with pytest.raises(NumericError):
            occupancy_frequencies(table, {0: 1.0}, 1.0, [0], [0])

    def test_singular_does_not_touch_table(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 1.0, 0.0)
        with pytest.raises(NumericError):
            occupancy_frequencies(table, {0: 1.0}, 1.0, [0], [0])
        assert table[0].get_action(0).outcome.probabilities == [1.0]

    def test_discount_one_absorbing_chain(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 1, 1.0, 0.0)
        x = occupancy_frequencies(table, {0: 1.0}, 1.0, [0, 0], [0, 0])
        np.testing.assert_allclose(x, [1.0, 1.0])

    def test_validate(self, three_state_mdp):
        with pytest.raises(InvalidPolicyError):
            occupancy_frequencies(
                three_state_mdp, {0: 1.0}, 0.5, [7, 0, 0], [0, 0, 0], validate=True
            )


# ─── policy_values / expected_return ──────────────────────────────────────────


class TestPolicyValues:
    def test_self_loop(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 1.0, 1.0)
        v = policy_values(table, 0.5, [0], [0])
        assert v[0] == pytest.approx(2.0)

    def test_terminal_value_zero(self, robust_chain):
        v = policy_values(robust_chain, 0.9, [0, 0, 0], [1, 0, 0])
        assert v[2] == 0.0
        assert v[0] == pytest.approx(-1.0)

    def test_three_state(self, three_state_mdp):
        v = policy_values(three_state_mdp, 0.9, [0, 0, 0], [0, 0, 0])
        np.testing.assert_allclose(v, [9.0, 10.0, 10.0], atol=1e-10)

    def test_return_matches_occupancy_dot_rewards(self, three_state_mdp):
        policy, nature = [1, 1, 0], [0, 0, 0]
        init = {0: 0.6, 2: 0.4}
        x = occupancy_frequencies(three_state_mdp, init, 0.8, policy, nature)
        r = state_rewards(three_state_mdp, policy, nature)
        assert expected_return(three_state_mdp, init, 0.8, policy, nature) == pytest.approx(
            float(x @ r)
        )

    def test_empty_table(self):
        assert policy_values(make_mdp(), 0.5, [], []).shape == (0,)
