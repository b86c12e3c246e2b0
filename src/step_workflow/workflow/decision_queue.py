"""Pending decisions, in the order they started waiting.

Deciding through the queue enforces actor gating: only the actor a decision
is assigned to may resolve it.
"""

from __future__ import annotations

import logging

from .actor import Actor
from .decision import Decision
from .errors import ActorNotPermittedError, IllegalStateError
from .events import WorkflowEvent, WorkflowEventType, WorkflowListener
from .outcome import Outcome

logger = logging.getLogger(__name__)


class DecisionQueue:
    def __init__(self) -> None:
        self._queue: list[Decision] = []
        self._listeners: list[WorkflowListener] = []

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, decision: object) -> bool:
        return any(decision is d for d in self._queue)

    def add_listener(self, listener: WorkflowListener) -> None:
        self._listeners.append(listener)

    def _emit(self, event_type: WorkflowEventType, decision: Decision, **payload: object) -> None:
        event = WorkflowEvent(
            type=event_type,
            workflow_id=decision.workflow_id or 0,
            payload={"decision_id": decision.decision_id, **payload},
        )
        for listener in list(self._listeners):
            listener(event)

    def decisions(self) -> list[Decision]:
        return list(self._queue)

    def actor_decisions(self, actor: Actor) -> list[Decision]:
        return [d for d in self._queue if d.actor == actor]

    def get(self, decision_id: int) -> Decision | None:
        for decision in self._queue:
            if decision.decision_id == decision_id:
                return decision
        return None

    def add(self, decision: Decision) -> None:
        if decision in self:
            return
        self._queue.append(decision)
        logger.info(
            "Decision queued",
            extra={
                "decision_id": decision.decision_id,
                "workflow_id": decision.workflow_id,
                "actor": str(decision.actor),
            },
        )
        self._emit(WorkflowEventType.DQ_ADDITION, decision)

    def remove(self, decision: Decision) -> None:
        if decision not in self:
            return
        self._queue = [d for d in self._queue if d is not decision]
        self._emit(WorkflowEventType.DQ_REMOVAL, decision)

    def decide(self, decision: Decision, outcome: Outcome, actor: Actor) -> None:
        """Resolve a queued decision on behalf of `actor`.

        Raises:
            IllegalStateError: If the decision is not queued.
            ActorNotPermittedError: If `actor` is not the decision's actor.
            IllegalArgumentError: If `outcome` is not one of its choices.
        """

        if decision not in self:
            raise IllegalStateError(f"Decision {decision.decision_id} is not queued")
        if actor != decision.actor:
            raise ActorNotPermittedError(actor=actor, expected=decision.actor)
        decision.resolve(outcome)
        if decision.is_completed:
            self.remove(decision)

    def reassign(self, decision: Decision, actor: Actor) -> None:
        if decision not in self:
            raise IllegalStateError(f"Decision {decision.decision_id} is not queued")
        previous = decision.actor
        decision.reassign(actor)
        self._emit(
            WorkflowEventType.DQ_REASSIGN,
            decision,
            from_actor=str(previous),
            to_actor=str(actor),
        )
