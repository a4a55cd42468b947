"""Tests for rmdp/solvers/rewards.py — per-state expected rewards."""

from __future__ import annotations

import numpy as np
import pytest

from rmdp.config import EvaluationConfig
from rmdp.engine.construction import add_transition
from rmdp.engine.errors import InvalidPolicyError, ModelError
from rmdp.engine.state_table import make_mdp
from rmdp.solvers.rewards import state_rewards


class TestStateRewards:
    def test_single_terminal_state(self):
        np.testing.assert_array_equal(state_rewards(make_mdp(1), [0], [0]), [0.0])

    def test_self_loop_reward(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 1.0, 3.5)
        np.testing.assert_array_equal(state_rewards(table, [0], [0]), [3.5])

    def test_three_state_action_zero(self, three_state_mdp):
        r = state_rewards(three_state_mdp, [0, 0, 0], [0, 0, 0])
        np.testing.assert_allclose(r, [0.0, 1.0, 1.0])

    def test_three_state_action_one(self, three_state_mdp):
        r = state_rewards(three_state_mdp, [1, 1, 1], [0, 0, 0])
        np.testing.assert_allclose(r, [0.0, 0.0, 1.1])

    def test_robust_outcomes(self, robust_chain):
        r0 = state_rewards(robust_chain, [0, 0, 0], [0, 0, 0])
        r1 = state_rewards(robust_chain, [0, 0, 0], [1, 0, 0])
        np.testing.assert_allclose(r0, [1.0, 2.0, 0.0])
        np.testing.assert_allclose(r1, [-1.0, 2.0, 0.0])

    def test_expected_over_targets(self):
        table = make_mdp()
        add_transition(table, 0, 0, 0, 0, 0.25, 4.0)
        add_transition(table, 0, 0, 0, 1, 0.75, 0.0)
        assert state_rewards(table, [0, 0], [0, 0])[0] == pytest.approx(1.0)

    def test_empty_table(self):
        assert state_rewards(make_mdp(), [], []).shape == (0,)

    def test_parallel_matches_inline(self):
        table = make_mdp()
        for s in range(30):
            add_transition(table, s, 0, 0, (s + 1) % 30, 1.0, float(s))
        policy = [0] * 30
        cfg = EvaluationConfig(max_workers=3, parallel_threshold=0, chunk_size=4)
        np.testing.assert_array_equal(
            state_rewards(table, policy, policy),
            state_rewards(table, policy, policy, config=cfg),
        )

    def test_validate(self, three_state_mdp):
        with pytest.raises(InvalidPolicyError):
            state_rewards(three_state_mdp, [0, 0, 2], [0, 0, 0], validate=True)

    def test_empty_outcome_is_model_error(self):
        table = make_mdp()
        add_transition(table, 0, 1, 0, 0, 1.0, 0.0)
        with pytest.raises(ModelError):
            state_rewards(table, [0], [0])
