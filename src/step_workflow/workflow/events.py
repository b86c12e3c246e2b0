from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class WorkflowEventType(str, Enum):
    STARTED = "started"
    RUNNING = "running"
    WAITING = "waiting"
    COMPLETED = "completed"
    ABORTED = "aborted"
    DQ_ADDITION = "dq_addition"
    DQ_REMOVAL = "dq_removal"
    DQ_REASSIGN = "dq_reassign"


@dataclass(frozen=True, slots=True)
class WorkflowEvent:
    """A signal emitted when a workflow or the decision queue changes.

    Listeners observe events; they never drive the workflow themselves.
    """

    type: WorkflowEventType
    workflow_id: int
    payload: dict[str, object] = field(default_factory=dict)


WorkflowListener = Callable[[WorkflowEvent], None]
