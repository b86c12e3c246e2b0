"""Step/outcome workflow engine.

A workflow is a graph of steps joined by outcome-labelled edges:
- Tasks complete within their own execution
- Decisions wait for an actor to choose an outcome
- The workflow follows the successor registered for each outcome

Progress is driven by the caller; nothing here runs in the background.
"""

from .actor import Actor
from .builder import WorkflowBuilder
from .decision import Decision, Fact, SimpleDecision, SimpleNotification
from .decision_queue import DecisionQueue
from .errors import (
    ActorNotPermittedError,
    IllegalArgumentError,
    IllegalStateError,
    WorkflowContractError,
    WorkflowError,
)
from .events import WorkflowEvent, WorkflowEventType
from .manager import WorkflowManager
from .outcome import (
    DECISION_ACKNOWLEDGE,
    DECISION_APPROVE,
    DECISION_DENY,
    DECISION_HOLD,
    DECISION_REASSIGN,
    STEP_ABORT,
    STEP_COMPLETE,
    STEP_CONTINUE,
    Outcome,
    define_outcome,
    outcome_for_key,
)
from .records import StepRecord, WorkflowRecord
from .step import TIME_NOT_SET, Step, StepState
from .task import SYSTEM_ACTOR, Task
from .workflow import Workflow, WorkflowState

__all__ = [
    "Actor",
    "ActorNotPermittedError",
    "DECISION_ACKNOWLEDGE",
    "DECISION_APPROVE",
    "DECISION_DENY",
    "DECISION_HOLD",
    "DECISION_REASSIGN",
    "Decision",
    "DecisionQueue",
    "Fact",
    "IllegalArgumentError",
    "IllegalStateError",
    "Outcome",
    "STEP_ABORT",
    "STEP_COMPLETE",
    "STEP_CONTINUE",
    "SYSTEM_ACTOR",
    "SimpleDecision",
    "SimpleNotification",
    "Step",
    "StepRecord",
    "StepState",
    "TIME_NOT_SET",
    "Task",
    "Workflow",
    "WorkflowBuilder",
    "WorkflowContractError",
    "WorkflowError",
    "WorkflowEvent",
    "WorkflowEventType",
    "WorkflowManager",
    "WorkflowRecord",
    "WorkflowState",
    "define_outcome",
    "outcome_for_key",
]
