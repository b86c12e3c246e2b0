"""Unit tests for decisions and notifications."""

from __future__ import annotations

from typing import Any

import pytest

from step_workflow.workflow import (
    DECISION_ACKNOWLEDGE,
    DECISION_APPROVE,
    DECISION_DENY,
    DECISION_REASSIGN,
    STEP_ABORT,
    STEP_COMPLETE,
    STEP_CONTINUE,
    Actor,
    Fact,
    IllegalArgumentError,
    IllegalStateError,
    SimpleDecision,
    SimpleNotification,
    WorkflowError,
)


class NotifyingDecision(SimpleDecision):
    def __init__(self, message_key: str, *, actor: Actor | None = None) -> None:
        super().__init__(message_key, actor=actor)
        self.notified: list[Any] = []

    def begin(self, context: Any) -> None:
        self.notified.append(context)


def test_simple_decision_outcomes(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    fixed = SimpleDecision("decision.review", actor=admin, reassignable=False)

    assert decision.available_outcomes == [DECISION_APPROVE, DECISION_DENY, DECISION_REASSIGN]
    assert fixed.available_outcomes == [DECISION_APPROVE, DECISION_DENY]


def test_start_without_actor_fails() -> None:
    decision = SimpleDecision("decision.review")

    with pytest.raises(WorkflowError):
        decision.start()
    assert not decision.is_started


def test_execute_suspends_without_completing(admin: Actor) -> None:
    decision = NotifyingDecision("decision.review", actor=admin)
    decision.start()

    assert decision.execute("ctx") == STEP_CONTINUE
    assert decision.notified == ["ctx"]
    assert not decision.is_completed
    assert decision.outcome == STEP_CONTINUE


def test_resolve_completes_with_permitted_outcome(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.start()
    decision.execute(None)

    decision.resolve(DECISION_APPROVE)

    assert decision.is_completed
    assert decision.outcome == DECISION_APPROVE
    with pytest.raises(IllegalStateError):
        decision.resolve(DECISION_DENY)


def test_resolve_rejects_outcomes_outside_the_decision(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.start()

    with pytest.raises(IllegalArgumentError):
        decision.resolve(STEP_COMPLETE)
    with pytest.raises(IllegalArgumentError):
        decision.resolve(STEP_CONTINUE)
    assert not decision.is_completed


def test_resolve_accepts_abort(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.start()
    decision.resolve(STEP_ABORT)

    assert decision.is_completed
    assert decision.outcome == STEP_ABORT


def test_reassign(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.reassign(Actor("Editors"))
    assert decision.actor == Actor("Editors")

    fixed = SimpleDecision("decision.review", actor=admin, reassignable=False)
    with pytest.raises(IllegalStateError):
        fixed.reassign(Actor("Editors"))


def test_reassign_after_completion_is_illegal(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.start()
    decision.resolve(DECISION_DENY)

    with pytest.raises(IllegalStateError):
        decision.reassign(Actor("Editors"))


def test_facts_are_ordered_snapshots(admin: Actor) -> None:
    decision = SimpleDecision("decision.review", actor=admin)
    decision.add_fact(Fact("fact.page", "Main"))
    decision.add_fact(Fact("fact.author", "janne"))

    facts = decision.facts
    facts.pop()
    assert decision.facts == [Fact("fact.page", "Main"), Fact("fact.author", "janne")]


def test_decision_ids_are_unique(admin: Actor) -> None:
    first = SimpleDecision("decision.a", actor=admin)
    second = SimpleDecision("decision.b", actor=admin)

    assert second.decision_id > first.decision_id


def test_notification_is_acknowledged(submitter: Actor) -> None:
    note = SimpleNotification("notification.rejected", actor=submitter)

    assert note.available_outcomes == [DECISION_ACKNOWLEDGE]
    note.start()
    assert note.execute(None) == STEP_CONTINUE
    note.acknowledge()
    assert note.is_completed
    assert note.outcome == DECISION_ACKNOWLEDGE
