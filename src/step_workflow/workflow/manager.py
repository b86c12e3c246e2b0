"""Bookkeeping for the workflows of one process.

The manager hands out workflow ids, tracks running and finished workflows and
keeps the decision queue in step with them by listening to workflow events.
It never advances a workflow on its own; callers do, through `start` and
`decide`.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

from step_workflow.config import EngineSettings

from .actor import Actor
from .decision import Decision
from .decision_queue import DecisionQueue
from .errors import IllegalArgumentError, IllegalStateError
from .events import WorkflowEvent, WorkflowEventType
from .outcome import Outcome
from .workflow import Workflow, WorkflowState

logger = logging.getLogger(__name__)


class WorkflowManager:
    def __init__(self, settings: EngineSettings | None = None) -> None:
        """Initialize the workflow manager.

        Args:
            settings: Engine settings. If None, loads from environment.
        """
        self.settings = settings or EngineSettings()
        self.decision_queue = DecisionQueue()
        self._ids = itertools.count(1)
        self._workflows: dict[int, Workflow] = {}
        self._completed: list[Workflow] = []

    def get_approver(self, workflow_key: str) -> Actor | None:
        """The actor configured to approve `workflow_key`, if any."""

        name = self.settings.approvers.get(workflow_key)
        return None if name is None else Actor(name)

    @property
    def workflows(self) -> list[Workflow]:
        return list(self._workflows.values())

    @property
    def completed_workflows(self) -> list[Workflow]:
        return list(self._completed)

    def get_workflow(self, workflow_id: int) -> Workflow | None:
        return self._workflows.get(workflow_id)

    def owner_workflows(self, actor: Actor) -> list[Workflow]:
        return [wf for wf in self._workflows.values() if wf.owner == actor]

    def start(self, workflow: Workflow, context: Any) -> WorkflowState:
        """Register a new workflow and advance it for the first time.

        Raises:
            IllegalStateError: If the workflow was already started.
            WorkflowError: If its first steps fail.
        """

        if workflow.state is not WorkflowState.CREATED:
            raise IllegalStateError(f"Workflow {workflow.id} was already started")
        if workflow.id == 0:
            workflow.id = next(self._ids)
        elif workflow.id in self._workflows:
            raise IllegalArgumentError(f"Workflow id {workflow.id} is already in use")

        self._workflows[workflow.id] = workflow
        workflow.add_listener(self._on_event)
        logger.info(
            "Workflow registered",
            extra={
                "workflow_id": workflow.id,
                "workflow": workflow.message_key,
                "owner": str(workflow.owner),
            },
        )
        return workflow.advance(context)

    def decide(
        self, decision: Decision, outcome: Outcome, actor: Actor, context: Any
    ) -> WorkflowState:
        """Resolve a queued decision as `actor` and advance its workflow."""

        workflow = self._workflows.get(decision.workflow_id or 0)
        if workflow is None:
            raise IllegalStateError(f"Decision {decision.decision_id} has no running workflow")
        self.decision_queue.decide(decision, outcome, actor)
        return workflow.advance(context)

    def _on_event(self, event: WorkflowEvent) -> None:
        workflow = self._workflows.get(event.workflow_id)
        if workflow is None:
            return
        if event.type is WorkflowEventType.WAITING:
            step = workflow.current_step
            if isinstance(step, Decision):
                self.decision_queue.add(step)
        elif event.type in (WorkflowEventType.COMPLETED, WorkflowEventType.ABORTED):
            for decision in self.decision_queue.decisions():
                if decision.workflow_id == workflow.id:
                    self.decision_queue.remove(decision)
            del self._workflows[workflow.id]
            self._completed.append(workflow)
            logger.info(
                "Workflow finished",
                extra={"workflow_id": workflow.id, "state": workflow.state.value},
            )
