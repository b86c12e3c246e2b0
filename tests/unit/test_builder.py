"""Unit tests for the approval workflow builder."""

from __future__ import annotations

from typing import Any

import pytest

from step_workflow.workflow import (
    DECISION_ACKNOWLEDGE,
    DECISION_APPROVE,
    DECISION_DENY,
    STEP_COMPLETE,
    Actor,
    Fact,
    Outcome,
    SimpleDecision,
    SimpleNotification,
    Task,
    WorkflowBuilder,
    WorkflowManager,
    WorkflowState,
)


class RecordingTask(Task):
    def __init__(self, message_key: str) -> None:
        super().__init__(message_key)
        self.calls = 0

    def execute(self, context: Any) -> Outcome:
        self.calls += 1
        return STEP_COMPLETE


def _build(
    manager: WorkflowManager, submitter: Actor, workflow_key: str = "workflow.saveWikiPage"
) -> tuple[Any, RecordingTask, RecordingTask]:
    prep = RecordingTask("task.preSaveWikiPage")
    save = RecordingTask("task.saveWikiPage")
    wf = WorkflowBuilder(manager).build_approval_workflow(
        submitter,
        workflow_key,
        prep_task=prep,
        decision_key="decision.saveWikiPage",
        facts=[Fact("fact.page.change", "Main")],
        completion_task=save,
        rejected_message_key="notification.saveWikiPage.reject",
    )
    return wf, prep, save


def test_graph_with_approver(manager: WorkflowManager, submitter: Actor) -> None:
    wf, prep, save = _build(manager, submitter)

    assert wf.first_step is prep
    assert wf.owner == submitter
    decision = prep.get_successor(STEP_COMPLETE)
    assert isinstance(decision, SimpleDecision)
    assert decision.actor == Actor("Admin")
    assert decision.facts == [Fact("fact.page.change", "Main")]
    assert decision.get_successor(DECISION_APPROVE) is save
    rejection = decision.get_successor(DECISION_DENY)
    assert isinstance(rejection, SimpleNotification)
    assert rejection.actor == submitter


def test_approval_runs_completion_task(manager: WorkflowManager, submitter: Actor) -> None:
    wf, prep, save = _build(manager, submitter)

    assert manager.start(wf, None) is WorkflowState.WAITING
    assert prep.calls == 1 and save.calls == 0

    (decision,) = manager.decision_queue.actor_decisions(Actor("Admin"))
    assert manager.decide(decision, DECISION_APPROVE, Actor("Admin"), None) is (
        WorkflowState.COMPLETED
    )
    assert save.calls == 1


def test_denial_notifies_submitter(manager: WorkflowManager, submitter: Actor) -> None:
    wf, _, save = _build(manager, submitter)
    manager.start(wf, None)
    (decision,) = manager.decision_queue.decisions()

    assert manager.decide(decision, DECISION_DENY, Actor("Admin"), None) is WorkflowState.WAITING

    (note,) = manager.decision_queue.actor_decisions(submitter)
    assert isinstance(note, SimpleNotification)
    assert manager.decide(note, DECISION_ACKNOWLEDGE, submitter, None) is WorkflowState.COMPLETED
    assert save.calls == 0


def test_no_approver_skips_decision(manager: WorkflowManager, submitter: Actor) -> None:
    wf, prep, save = _build(manager, submitter, workflow_key="workflow.createGroup")

    assert prep.get_successor(STEP_COMPLETE) is save
    assert manager.start(wf, None) is WorkflowState.COMPLETED
    assert (prep.calls, save.calls) == (1, 1)
    assert len(manager.decision_queue) == 0


def test_decision_first_without_prep(manager: WorkflowManager, submitter: Actor) -> None:
    save = RecordingTask("task.saveWikiPage")
    wf = WorkflowBuilder(manager).build_approval_workflow(
        submitter,
        "workflow.saveWikiPage",
        prep_task=None,
        decision_key="decision.saveWikiPage",
        completion_task=save,
    )

    assert isinstance(wf.first_step, SimpleDecision)
    assert wf.first_step.get_successor(DECISION_DENY) is None


def test_requires_a_task(manager: WorkflowManager, submitter: Actor) -> None:
    with pytest.raises(ValueError):
        WorkflowBuilder(manager).build_approval_workflow(
            submitter,
            "workflow.saveWikiPage",
            prep_task=None,
            decision_key="decision.saveWikiPage",
            completion_task=None,
        )
