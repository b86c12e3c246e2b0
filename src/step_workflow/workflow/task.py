from __future__ import annotations

from .actor import Actor
from .outcome import STEP_COMPLETE
from .step import Step

SYSTEM_ACTOR = Actor("system")


class Task(Step):
    """A step that completes within its own `execute` call.

    Subclasses implement `execute` and return `STEP_COMPLETE` or `STEP_ABORT`
    (or `STEP_CONTINUE` to be run again on the next advance), raising
    `WorkflowError` on failure. Tasks are performed by the system actor unless
    one is supplied.
    """

    def __init__(self, message_key: str, *, actor: Actor | None = None) -> None:
        super().__init__(message_key, actor=actor or SYSTEM_ACTOR)
        self.add_successor(STEP_COMPLETE, None)

    def set_successor(self, step: Step | None) -> None:
        self.add_successor(STEP_COMPLETE, step)
