from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Actor:
    """The identity responsible for a step (a user, a group or the system).

    The engine only compares actors and displays their names.
    """

    name: str

    def __str__(self) -> str:
        return self.name
