"""Error taxonomy for the workflow engine.

Contract violations (`IllegalStateError`, `IllegalArgumentError`) mean the
caller's traversal logic is wrong and are never caught by the engine.
`WorkflowError` is the only expected failure category.
"""

from __future__ import annotations


class WorkflowContractError(Exception):
    """Base class for programming-contract violations."""


class IllegalStateError(WorkflowContractError, RuntimeError):
    """An operation was invoked in a state that forbids it."""


class IllegalArgumentError(WorkflowContractError, ValueError):
    """An argument is not permitted for the target step or workflow."""


class WorkflowError(Exception):
    """Business-logic failure raised while starting or executing a step."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ActorNotPermittedError(WorkflowError):
    def __init__(self, *, actor: object, expected: object) -> None:
        super().__init__(f"Actor {actor} may not decide a step assigned to {expected}")
        self.actor = actor
        self.expected = expected
