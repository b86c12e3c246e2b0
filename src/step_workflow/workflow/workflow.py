"""The workflow aggregate and its traversal loop.

A workflow owns the graph of steps reachable from its first step. Steps only
hold the workflow id and a reference to the shared context map.

Callers drive progress with `advance`; the engine never blocks or schedules
anything itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .actor import Actor
from .decision import Decision
from .errors import IllegalArgumentError, IllegalStateError, WorkflowError
from .events import WorkflowEvent, WorkflowEventType, WorkflowListener
from .outcome import STEP_ABORT, STEP_CONTINUE, Outcome
from .records import WorkflowRecord, record_workflow
from .step import TIME_NOT_SET, Step

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    # Returned by `advance` while a decision awaits its actor.
    WAITING = "waiting"
    COMPLETED = "completed"
    ABORTED = "aborted"


ALLOWED_TRANSITIONS: dict[WorkflowState, set[WorkflowState]] = {
    WorkflowState.CREATED: {WorkflowState.RUNNING, WorkflowState.ABORTED},
    WorkflowState.RUNNING: {
        WorkflowState.WAITING,
        WorkflowState.COMPLETED,
        WorkflowState.ABORTED,
    },
    WorkflowState.WAITING: {WorkflowState.RUNNING, WorkflowState.ABORTED},
    WorkflowState.COMPLETED: set(),
    WorkflowState.ABORTED: set(),
}

TERMINAL_STATES = frozenset({WorkflowState.COMPLETED, WorkflowState.ABORTED})

_MESSAGE_ARGUMENT_TYPES = (str, int, float, datetime)


def transition(*, current: WorkflowState, to: WorkflowState) -> WorkflowState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalStateError(f"Illegal transition: {current.value} -> {to.value}")
    return to


class Workflow:
    """A graph of steps joined by outcome-labelled edges, plus a shared context.

    Args:
        message_key: i18n key naming this workflow.
        first_step: The step the workflow starts with.
        owner: The actor who started the workflow.
        workflow_id: Identifier; the manager assigns one when it is 0.
        context: Seed values for the shared context map.
    """

    def __init__(
        self,
        message_key: str,
        first_step: Step,
        *,
        owner: Actor | None = None,
        workflow_id: int = 0,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message_key = message_key
        self.owner = owner
        self._id = workflow_id
        self._state = WorkflowState.CREATED
        self._first_step = first_step
        self._current_step: Step = first_step
        self._previous_step: Step | None = None
        self._history: list[Step] = []
        self._context: dict[str, Any] = dict(context or {})
        self._message_arguments: list[Any] = []
        self._start_time = TIME_NOT_SET
        self._end_time = TIME_NOT_SET
        self._listeners: list[WorkflowListener] = []
        first_step.set_workflow(self._id, self._context)

    def __repr__(self) -> str:
        return f"Workflow(id={self._id}, {self.message_key!r}, state={self._state.value})"

    @property
    def id(self) -> int:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        if self._state is not WorkflowState.CREATED:
            raise IllegalStateError(f"Cannot change the id of {self._state.value} workflow")
        self._id = value
        self._first_step.set_workflow(value, self._context)

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def is_completed(self) -> bool:
        return self._state is WorkflowState.COMPLETED

    @property
    def is_aborted(self) -> bool:
        return self._state is WorkflowState.ABORTED

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def first_step(self) -> Step:
        return self._first_step

    @property
    def current_step(self) -> Step | None:
        """The step being worked on; None once the workflow is terminal."""

        if self.is_terminal:
            return None
        return self._current_step

    @property
    def previous_step(self) -> Step | None:
        return self._previous_step

    @property
    def history(self) -> list[Step]:
        return list(self._history)

    @property
    def current_actor(self) -> Actor | None:
        step = self.current_step
        return None if step is None else step.actor

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def end_time(self) -> datetime:
        return self._end_time

    # Shared context

    @property
    def context(self) -> dict[str, Any]:
        """The live context map shared by every step of this workflow."""

        return self._context

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._context.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self._context[name] = value

    # Message arguments

    @property
    def message_arguments(self) -> list[Any]:
        """Owner name, current actor name, then any added arguments."""

        owner = "-" if self.owner is None else str(self.owner)
        actor = self.current_actor
        return [owner, "-" if actor is None else str(actor), *self._message_arguments]

    def add_message_argument(self, value: Any) -> None:
        if not isinstance(value, _MESSAGE_ARGUMENT_TYPES) or isinstance(value, bool):
            raise IllegalArgumentError(
                f"Message arguments must be str, int, float or datetime, got {type(value).__name__}"
            )
        self._message_arguments.append(value)

    # Listeners

    def add_listener(self, listener: WorkflowListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: WorkflowListener) -> None:
        self._listeners.remove(listener)

    def _emit(self, event_type: WorkflowEventType, **payload: object) -> None:
        event = WorkflowEvent(type=event_type, workflow_id=self._id, payload=payload)
        for listener in list(self._listeners):
            listener(event)

    def _transition(self, to: WorkflowState) -> None:
        self._state = transition(current=self._state, to=to)
        logger.info(
            "Workflow state changed",
            extra={"workflow_id": self._id, "workflow": self.message_key, "state": to.value},
        )

    # Traversal

    def advance(self, context: Any) -> WorkflowState:
        """Drive the workflow as far as it can go without outside input.

        Starts the first step on the first call, then executes the current
        step, follows its successor for the outcome it produced, and repeats.
        Stops when the workflow completes or aborts, when a decision awaits its
        actor (WAITING), or when a task asks to be run again (RUNNING).

        A decision that is still pending makes this a no-op returning WAITING.

        Args:
            context: Opaque execution context handed to each step's `execute`.

        Returns:
            The workflow state after advancing.

        Raises:
            IllegalStateError: If the workflow already completed or aborted.
            WorkflowError: If a step fails; the message is also recorded on the
                step and the workflow stays RUNNING so the step can be retried.
        """

        if self.is_terminal:
            raise IllegalStateError(f"Workflow {self._id} is already {self._state.value}")

        if self._state is WorkflowState.WAITING:
            if not self._current_step.is_completed:
                return WorkflowState.WAITING
            self._transition(WorkflowState.RUNNING)
            self._emit(WorkflowEventType.RUNNING)
        elif self._state is WorkflowState.CREATED:
            self._transition(WorkflowState.RUNNING)
            self._start_time = datetime.now(UTC)
            self._emit(WorkflowEventType.STARTED)

        return self._process(context)

    def _process(self, context: Any) -> WorkflowState:
        while True:
            step = self._current_step
            if not step.is_completed:
                self._run_step(step, context)

            if not step.is_completed:
                if isinstance(step, Decision):
                    self._transition(WorkflowState.WAITING)
                    self._emit(WorkflowEventType.WAITING, decision_id=step.decision_id)
                    return WorkflowState.WAITING
                return WorkflowState.RUNNING

            self._history.append(step)
            outcome = step.outcome
            if outcome == STEP_ABORT:
                self._finish(WorkflowState.ABORTED, outcome)
                return WorkflowState.ABORTED

            successor = step.get_successor(outcome)
            if successor is None:
                self._finish(WorkflowState.COMPLETED, outcome)
                return WorkflowState.COMPLETED
            if successor.is_completed:
                raise IllegalStateError(
                    f"Successor {successor.message_key} of {step.message_key} already completed"
                )

            successor.set_workflow(self._id, self._context)
            self._previous_step = step
            self._current_step = successor
            logger.debug(
                "Workflow moved to next step",
                extra={
                    "workflow_id": self._id,
                    "from_step": step.message_key,
                    "to_step": successor.message_key,
                    "outcome": outcome.key,
                },
            )

    def _run_step(self, step: Step, context: Any) -> None:
        if not step.is_started:
            self._guard(step, step.start)
        elif isinstance(step, Decision) and step.is_pending:
            return
        outcome = self._guard(step, lambda: step.execute(context))
        if not step.is_completed and outcome != STEP_CONTINUE:
            step.set_outcome(outcome)

    def _guard(self, step: Step, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except WorkflowError as e:
            step.add_error(e.message)
            logger.warning(
                "Step failed",
                extra={
                    "workflow_id": self._id,
                    "step": step.message_key,
                    "error": e.message,
                },
            )
            raise

    def _finish(self, to: WorkflowState, outcome: Outcome) -> None:
        self._transition(to)
        self._end_time = datetime.now(UTC)
        event_type = (
            WorkflowEventType.ABORTED if to is WorkflowState.ABORTED else WorkflowEventType.COMPLETED
        )
        self._emit(event_type, outcome=outcome.key)

    def abort(self) -> None:
        """Abort the workflow, marking an incomplete current step as aborted.

        Raises:
            IllegalStateError: If the workflow already completed or aborted.
        """

        if self.is_terminal:
            raise IllegalStateError(f"Workflow {self._id} is already {self._state.value}")
        step = self._current_step
        if not step.is_completed:
            step.set_outcome(STEP_ABORT)
        if not self._history or self._history[-1] is not step:
            self._history.append(step)
        self._finish(WorkflowState.ABORTED, STEP_ABORT)

    def to_record(self) -> WorkflowRecord:
        return record_workflow(self)
