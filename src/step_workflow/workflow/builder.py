from __future__ import annotations

import logging
from collections.abc import Iterable

from .actor import Actor
from .decision import Fact, SimpleDecision, SimpleNotification
from .manager import WorkflowManager
from .outcome import DECISION_APPROVE, DECISION_DENY
from .step import Step
from .task import Task
from .workflow import Workflow

logger = logging.getLogger(__name__)


class WorkflowBuilder:
    """Assembles common workflow shapes for a manager."""

    def __init__(self, manager: WorkflowManager) -> None:
        self.manager = manager

    def build_approval_workflow(
        self,
        submitter: Actor,
        workflow_key: str,
        *,
        prep_task: Task | None,
        decision_key: str,
        facts: Iterable[Fact] = (),
        completion_task: Task | None,
        rejected_message_key: str | None = None,
    ) -> Workflow:
        """Build prep -> approval decision -> completion.

        The decision goes to the approver configured for `workflow_key`. On
        denial the submitter receives a `rejected_message_key` notification, if
        one is given. Without a configured approver the decision is left out and
        the prep task flows straight into the completion task.

        Raises:
            ValueError: If neither a prep nor a completion task is supplied.
        """

        approver = self.manager.get_approver(workflow_key)
        decision: SimpleDecision | None = None
        if approver is not None:
            decision = SimpleDecision(decision_key, actor=approver)
            for fact in facts:
                decision.add_fact(fact)
            decision.add_successor(DECISION_APPROVE, completion_task)
            if rejected_message_key is not None:
                decision.add_successor(
                    DECISION_DENY, SimpleNotification(rejected_message_key, actor=submitter)
                )

        if prep_task is not None:
            prep_task.set_successor(decision or completion_task)
            first: Step = prep_task
        elif completion_task is not None:
            first = decision or completion_task
        else:
            raise ValueError("An approval workflow needs a prep task or a completion task")

        logger.debug(
            "Built approval workflow",
            extra={
                "workflow": workflow_key,
                "approver": None if approver is None else str(approver),
            },
        )
        return Workflow(workflow_key, first, owner=submitter)
