"""Plain-data snapshots of a workflow graph.

Steps reference each other by their index in `WorkflowRecord.steps`, so a
record is a tree of JSON-friendly values with no object cycles.
"""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from .decision import Decision
from .step import Step

if TYPE_CHECKING:
    from .workflow import Workflow


class FactRecord(BaseModel):
    message_key: str
    value: Any


class StepRecord(BaseModel):
    kind: str
    message_key: str
    actor: str | None = None
    state: str
    outcome: str
    start_time: datetime
    end_time: datetime
    errors: list[str] = Field(default_factory=list)
    available_outcomes: list[str] = Field(default_factory=list)
    successors: dict[str, int | None] = Field(default_factory=dict)

    decision_id: int | None = None
    facts: list[FactRecord] = Field(default_factory=list)


class WorkflowRecord(BaseModel):
    id: int
    message_key: str
    owner: str | None = None
    state: str
    start_time: datetime
    end_time: datetime
    first_step: int | None = None
    current_step: int | None = None
    previous_step: int | None = None
    history: list[int] = Field(default_factory=list)
    steps: list[StepRecord] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)
    message_arguments: list[Any] = Field(default_factory=list)


def reachable_steps(first: Step | None) -> list[Step]:
    """Steps reachable from `first`, breadth-first in successor order."""

    if first is None:
        return []
    seen: dict[int, Step] = {id(first): first}
    queue: deque[Step] = deque([first])
    while queue:
        step = queue.popleft()
        for outcome in step.available_outcomes:
            successor = step.get_successor(outcome)
            if successor is not None and id(successor) not in seen:
                seen[id(successor)] = successor
                queue.append(successor)
    return list(seen.values())


def _step_record(step: Step, index: dict[int, int]) -> StepRecord:
    successors: dict[str, int | None] = {}
    for outcome in step.available_outcomes:
        successor = step.get_successor(outcome)
        successors[outcome.key] = None if successor is None else index[id(successor)]

    record = StepRecord(
        kind=type(step).__name__,
        message_key=step.message_key,
        actor=None if step.actor is None else str(step.actor),
        state=step.state.value,
        outcome=step.outcome.key,
        start_time=step.start_time,
        end_time=step.end_time,
        errors=step.errors,
        available_outcomes=[o.key for o in step.available_outcomes],
        successors=successors,
    )
    if isinstance(step, Decision):
        record.decision_id = step.decision_id
        record.facts = [FactRecord(message_key=f.message_key, value=f.value) for f in step.facts]
    return record


def record_workflow(workflow: Workflow) -> WorkflowRecord:
    steps = reachable_steps(workflow.first_step)
    index = {id(step): i for i, step in enumerate(steps)}

    def _idx(step: Step | None) -> int | None:
        return None if step is None else index[id(step)]

    return WorkflowRecord(
        id=workflow.id,
        message_key=workflow.message_key,
        owner=None if workflow.owner is None else str(workflow.owner),
        state=workflow.state.value,
        start_time=workflow.start_time,
        end_time=workflow.end_time,
        first_step=_idx(workflow.first_step),
        current_step=_idx(workflow.current_step),
        previous_step=_idx(workflow.previous_step),
        history=[index[id(step)] for step in workflow.history],
        steps=[_step_record(step, index) for step in steps],
        context=dict(workflow.context),
        message_arguments=workflow.message_arguments,
    )
