"""
Error taxonomy for the decision-process core.

Three failure classes, each a subclass of a builtin so callers that only
know the standard hierarchy still catch them sensibly:

    InvalidIdError   — bad state/action/outcome id (programming error)
    ModelError       — malformed model found while resolving a transition
    NumericError     — singular or ill-conditioned linear system

InvalidPolicyError is raised by the validator's checking helper and by the
evaluation routines when they are asked to validate their inputs.
"""

from __future__ import annotations


class RmdpError(Exception):
    """Base class for every error raised by this package."""


class InvalidIdError(RmdpError, IndexError):
    """An id is negative or does not address an existing entity."""


class ModelError(RmdpError, ValueError):
    """The model is malformed, e.g. an outcome with no target states."""


class NumericError(RmdpError, ArithmeticError):
    """A linear system could not be solved reliably."""


class InvalidPolicyError(RmdpError, ValueError):
    """A policy pair selects a missing action or outcome.

    Attributes:
        state_id: First state (in id order) whose selection is invalid.
    """

    def __init__(self, state_id: int, message: str | None = None) -> None:
        self.state_id = state_id
        if message is None:
            message = f"Policy selects a missing action or outcome in state {state_id}."
        super().__init__(message)
