"""The Step abstraction: a discrete unit of work in a workflow.

A step moves through an explicit lifecycle (CREATED -> STARTED -> COMPLETED).
Every lifecycle change goes through `Step._transition`, which rejects illegal
moves with `IllegalStateError`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .actor import Actor
from .errors import IllegalArgumentError, IllegalStateError
from .outcome import STEP_ABORT, STEP_CONTINUE, Outcome

logger = logging.getLogger(__name__)

TIME_NOT_SET = datetime.fromtimestamp(0, tz=UTC)


class StepState(str, Enum):
    CREATED = "created"
    STARTED = "started"
    COMPLETED = "completed"


# CREATED -> COMPLETED covers a workflow aborted before its step was started.
ALLOWED_STEP_TRANSITIONS: dict[StepState, set[StepState]] = {
    StepState.CREATED: {StepState.STARTED, StepState.COMPLETED},
    StepState.STARTED: {StepState.COMPLETED},
    StepState.COMPLETED: set(),
}


class Step(ABC):
    """Base class for Tasks and Decisions.

    Successors are kept in an insertion-ordered mapping keyed by outcome, so
    `available_outcomes` lists outcomes in the order they were added. A
    successor of ``None`` makes the outcome available but ends the workflow
    when it is reached.
    """

    def __init__(self, message_key: str, *, actor: Actor | None = None) -> None:
        self.message_key = message_key
        self._actor = actor
        self._state = StepState.CREATED
        self._outcome: Outcome = STEP_CONTINUE
        self._errors: list[str] = []
        self._successors: dict[Outcome, Step | None] = {}
        self._start_time = TIME_NOT_SET
        self._end_time = TIME_NOT_SET
        self._workflow_id: int | None = None
        self._workflow_context: dict[str, Any] | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message_key!r}, state={self._state.value})"

    # Lifecycle

    @property
    def state(self) -> StepState:
        return self._state

    @property
    def is_started(self) -> bool:
        return self._start_time != TIME_NOT_SET

    @property
    def is_completed(self) -> bool:
        return self._state is StepState.COMPLETED

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def end_time(self) -> datetime:
        return self._end_time

    def _transition(self, to: StepState) -> None:
        allowed = ALLOWED_STEP_TRANSITIONS[self._state]
        if to not in allowed:
            raise IllegalStateError(
                f"Illegal step transition: {self._state.value} -> {to.value} ({self.message_key})"
            )
        self._state = to

    def start(self) -> None:
        """Start the step and record the start time.

        Raises:
            IllegalStateError: If the step was already started.
            WorkflowError: If the step cannot be set up (raised by subclasses
                before calling this implementation).
        """

        if self.is_started:
            raise IllegalStateError(f"Step already started: {self.message_key}")
        self._transition(StepState.STARTED)
        self._start_time = datetime.now(UTC)
        logger.debug(
            "Step started",
            extra={"step": self.message_key, "workflow_id": self._workflow_id},
        )

    @abstractmethod
    def execute(self, context: Any) -> Outcome:
        """Run this step's processing once and return the resulting outcome.

        May be invoked more than once while the step is not completed.

        Args:
            context: Opaque handle to host services, passed through unchanged.

        Raises:
            WorkflowError: On business-logic failures.
        """

    # Outcomes and successors

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    def add_successor(self, outcome: Outcome, step: Step | None) -> None:
        """Register the step reached via `outcome`; a repeat registration replaces the earlier one."""

        self._successors[outcome] = step

    def get_successor(self, outcome: Outcome) -> Step | None:
        return self._successors.get(outcome)

    @property
    def available_outcomes(self) -> list[Outcome]:
        """Outcomes registered for this step, in registration order (a fresh copy)."""

        return list(self._successors)

    def permits(self, outcome: Outcome) -> bool:
        return outcome in self._successors or outcome in (STEP_CONTINUE, STEP_ABORT)

    def set_outcome(self, outcome: Outcome) -> None:
        """Record the step's outcome; a completion outcome completes the step.

        Raises:
            IllegalStateError: If the step is already completed.
            IllegalArgumentError: If the outcome is not available for this step.
        """

        if self.is_completed:
            raise IllegalStateError(
                f"Step {self.message_key} already completed with {self._outcome.key}"
            )
        if not self.permits(outcome):
            raise IllegalArgumentError(
                f"Outcome {outcome.key} is not available for step {self.message_key}"
            )
        if outcome.is_completion:
            self._transition(StepState.COMPLETED)
            self._end_time = datetime.now(UTC)
        self._outcome = outcome
        logger.debug(
            "Step outcome set",
            extra={
                "step": self.message_key,
                "workflow_id": self._workflow_id,
                "outcome": outcome.key,
                "completed": self.is_completed,
            },
        )

    # Actor, errors and workflow binding

    @property
    def actor(self) -> Actor | None:
        return self._actor

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    @property
    def workflow_id(self) -> int | None:
        return self._workflow_id

    @property
    def workflow_context(self) -> dict[str, Any]:
        if self._workflow_context is None:
            raise IllegalStateError(f"Step {self.message_key} is not attached to a workflow")
        return self._workflow_context

    def set_workflow(self, workflow_id: int, workflow_context: dict[str, Any]) -> None:
        """Bind this step to its owning workflow's id and shared context.

        The context is held by reference so every step of one workflow sees the
        same map. Once started, a step may still receive its first binding or a
        new id from the same workflow, but never another workflow's context.
        """

        if (
            self.is_started
            and self._workflow_context is not None
            and self._workflow_context is not workflow_context
        ):
            raise IllegalStateError(f"Cannot rebind started step {self.message_key}")
        self._workflow_id = workflow_id
        self._workflow_context = workflow_context
