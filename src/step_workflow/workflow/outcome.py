"""Outcomes: the edge labels of a workflow graph.

Outcomes are shared value objects. Two outcomes are equal when their keys
match, so an outcome rebuilt from serialized data is interchangeable with the
catalog instance.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .errors import IllegalArgumentError


@dataclass(frozen=True, slots=True, eq=False)
class Outcome:
    key: str
    message_key: str = field(default="")
    completion: bool = False
    ok: bool = False

    def __post_init__(self) -> None:
        if not self.key:
            raise IllegalArgumentError("Outcome key must not be empty")
        if not self.message_key:
            object.__setattr__(self, "message_key", self.key)
        if self.ok and not self.completion:
            raise IllegalArgumentError(f"Outcome {self.key} cannot be ok without completing")

    @property
    def is_completion(self) -> bool:
        """Whether reaching this outcome completes the step."""

        return self.completion

    @property
    def is_ok(self) -> bool:
        """Whether this outcome is a successful terminal state."""

        return self.ok

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key


_registry: dict[str, Outcome] = {}
_registry_lock = threading.Lock()


def define_outcome(
    key: str,
    *,
    completion: bool,
    ok: bool | None = None,
    message_key: str | None = None,
) -> Outcome:
    """Register an outcome in the shared catalog.

    Re-registering a key with identical attributes returns the existing
    instance; any other redefinition is rejected.
    """

    outcome = Outcome(
        key=key,
        message_key=message_key or key,
        completion=completion,
        ok=completion if ok is None else ok,
    )
    with _registry_lock:
        existing = _registry.get(key)
        if existing is None:
            _registry[key] = outcome
            return outcome
    if (existing.message_key, existing.completion, existing.ok) != (
        outcome.message_key,
        outcome.completion,
        outcome.ok,
    ):
        raise IllegalArgumentError(f"Outcome {key} is already defined differently")
    return existing


def outcome_for_key(key: str) -> Outcome:
    try:
        return _registry[key]
    except KeyError:
        raise IllegalArgumentError(f"Unknown outcome: {key}") from None


def known_outcomes() -> list[Outcome]:
    with _registry_lock:
        return list(_registry.values())


STEP_COMPLETE = define_outcome("outcome.step.complete", completion=True)
STEP_ABORT = define_outcome("outcome.step.abort", completion=True, ok=False)
STEP_CONTINUE = define_outcome("outcome.step.continue", completion=False)

DECISION_APPROVE = define_outcome("outcome.decision.approve", completion=True)
DECISION_DENY = define_outcome("outcome.decision.deny", completion=True)
DECISION_HOLD = define_outcome("outcome.decision.hold", completion=False)
DECISION_REASSIGN = define_outcome("outcome.decision.reassign", completion=False)
DECISION_ACKNOWLEDGE = define_outcome("outcome.decision.acknowledge", completion=True)
