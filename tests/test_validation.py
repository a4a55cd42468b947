"""Tests for rmdp/solvers/validation.py — policy pair validation."""

from __future__ import annotations

import numpy as np
import pytest

from rmdp.engine.errors import InvalidPolicyError
from rmdp.engine.state_table import make_mdp
from rmdp.solvers.validation import (
    POLICY_CORRECT,
    check_policy,
    first_invalid_state,
    is_policy_correct,
)


class TestFirstInvalidState:
    def test_valid_policy(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [0, 0, 0], [0, 0, 0]) == POLICY_CORRECT

    def test_missing_action_state_zero(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [5, 0, 0], [0, 0, 0]) == 0

    def test_reports_first_violation_only(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [0, 9, 9], [0, 0, 0]) == 1

    def test_bad_outcome_regular(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [0, 0, 0], [0, 0, 1]) == 2

    def test_negative_action(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [0, -1, 0], [0, 0, 0]) == 1

    def test_terminal_states_ignored(self, robust_chain):
        assert first_invalid_state(robust_chain, [0, 0, 42], [1, 0, -3]) == POLICY_CORRECT

    def test_robust_outcome_out_of_range(self, robust_chain):
        assert first_invalid_state(robust_chain, [0, 0, 0], [2, 0, 0]) == 0

    def test_short_policy(self, three_state_mdp):
        assert first_invalid_state(three_state_mdp, [0, 0], [0, 0, 0]) == 2

    def test_short_policy_covering_terminal_only(self, robust_chain):
        assert first_invalid_state(robust_chain, [0, 0], [0, 0]) == POLICY_CORRECT

    def test_numpy_policies(self, three_state_mdp):
        policy = np.array([1, 1, 1])
        nature = np.zeros(3, dtype=np.int64)
        assert first_invalid_state(three_state_mdp, policy, nature) == POLICY_CORRECT

    def test_all_terminal_table(self):
        assert first_invalid_state(make_mdp(3), [], []) == POLICY_CORRECT


class TestHelpers:
    def test_is_policy_correct(self, three_state_mdp):
        assert is_policy_correct(three_state_mdp, [1, 0, 1], [0, 0, 0])
        assert not is_policy_correct(three_state_mdp, [2, 0, 1], [0, 0, 0])

    def test_check_policy_passes(self, three_state_mdp):
        check_policy(three_state_mdp, [0, 0, 0], [0, 0, 0])

    def test_check_policy_raises_with_state(self, three_state_mdp):
        with pytest.raises(InvalidPolicyError) as excinfo:
            check_policy(three_state_mdp, [0, 0, 3], [0, 0, 0])
        assert excinfo.value.state_id == 2
        assert "state 2" in str(excinfo.value)
