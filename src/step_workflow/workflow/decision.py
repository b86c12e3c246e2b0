"""Decisions: steps that wait for an actor to choose an outcome.

A decision runs in two phases. `execute` calls `begin` (notify the actor,
publish facts) and always returns `STEP_CONTINUE`; the step then stays
incomplete until `resolve` records the actor's choice.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any

from .actor import Actor
from .errors import IllegalArgumentError, IllegalStateError, WorkflowError
from .outcome import (
    DECISION_ACKNOWLEDGE,
    DECISION_APPROVE,
    DECISION_DENY,
    DECISION_REASSIGN,
    STEP_ABORT,
    STEP_CONTINUE,
    Outcome,
)
from .step import Step

logger = logging.getLogger(__name__)

_decision_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Fact:
    """A labelled value shown to the actor who makes a decision."""

    message_key: str
    value: object


class Decision(Step):
    def __init__(
        self,
        message_key: str,
        *,
        actor: Actor | None = None,
        outcomes: tuple[Outcome, ...] = (),
        reassignable: bool = True,
    ) -> None:
        super().__init__(message_key, actor=actor)
        self.decision_id = next(_decision_ids)
        self.reassignable = reassignable
        self._facts: list[Fact] = []
        self._begun = False
        for outcome in outcomes:
            self.add_successor(outcome, None)
        if reassignable:
            self.add_successor(DECISION_REASSIGN, None)

    @property
    def facts(self) -> list[Fact]:
        return list(self._facts)

    def add_fact(self, fact: Fact) -> None:
        self._facts.append(fact)

    def start(self) -> None:
        if self.actor is None:
            raise WorkflowError(f"No actor assigned to decision {self.message_key}")
        super().start()

    def begin(self, context: Any) -> None:
        """Present the decision to its actor. The default does nothing."""

    @property
    def is_pending(self) -> bool:
        """Whether the actor has been asked and has not answered yet."""

        return self._begun and not self.is_completed

    def execute(self, context: Any) -> Outcome:
        self.begin(context)
        self._begun = True
        logger.info(
            "Decision awaiting actor",
            extra={
                "decision_id": self.decision_id,
                "workflow_id": self.workflow_id,
                "actor": str(self.actor),
            },
        )
        return STEP_CONTINUE

    def resolve(self, outcome: Outcome) -> None:
        """Record the actor's choice.

        Only the decision's own outcomes (or an abort) are accepted here.
        """

        if outcome not in self._successors and outcome != STEP_ABORT:
            raise IllegalArgumentError(
                f"Outcome {outcome.key} is not a choice for decision {self.message_key}"
            )
        self.set_outcome(outcome)
        logger.info(
            "Decision resolved",
            extra={
                "decision_id": self.decision_id,
                "workflow_id": self.workflow_id,
                "outcome": outcome.key,
            },
        )

    def reassign(self, actor: Actor) -> None:
        if not self.reassignable:
            raise IllegalStateError(f"Decision {self.message_key} cannot be reassigned")
        if self.is_completed:
            raise IllegalStateError(f"Decision {self.message_key} is already completed")
        logger.info(
            "Decision reassigned",
            extra={
                "decision_id": self.decision_id,
                "from_actor": str(self.actor),
                "to_actor": str(actor),
            },
        )
        self._actor = actor


class SimpleDecision(Decision):
    """An approve/deny decision."""

    def __init__(
        self, message_key: str, *, actor: Actor | None = None, reassignable: bool = True
    ) -> None:
        super().__init__(
            message_key,
            actor=actor,
            outcomes=(DECISION_APPROVE, DECISION_DENY),
            reassignable=reassignable,
        )


class SimpleNotification(Decision):
    """A decision whose only choice is to acknowledge it."""

    def __init__(self, message_key: str, *, actor: Actor | None = None) -> None:
        super().__init__(
            message_key,
            actor=actor,
            outcomes=(DECISION_ACKNOWLEDGE,),
            reassignable=False,
        )

    def acknowledge(self) -> None:
        self.resolve(DECISION_ACKNOWLEDGE)
