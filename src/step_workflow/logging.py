"""Structured logging for the workflow engine.

Engine modules log through `logging.getLogger(__name__)` and pass workflow ids,
step keys and outcomes via `extra=`. The JSON formatter puts `workflow_id` at
the top level of each line, so one workflow's trail can be filtered from a
shared log. Every other `extra=` value lands under `fields`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

ENGINE_LOGGER = "step_workflow"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, keyed by workflow where the record names one."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if "workflow_id" in fields:
            payload["workflow_id"] = fields.pop("workflow_id")
        payload["message"] = record.getMessage()
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Actors, outcomes and datetimes are rendered through str().
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    level: str, *, engine_level: str | None = None, stream: TextIO | None = None
) -> None:
    """Send all logging to `stream` as JSON lines.

    Args:
        level: Root logging level, usually `EngineSettings.log_level`.
        engine_level: Separate level for the engine's own loggers, e.g.
            "DEBUG" to trace step transitions without debug output elsewhere.
        stream: Destination; stdout by default.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    engine = logging.getLogger(ENGINE_LOGGER)
    engine.setLevel(engine_level.upper() if engine_level else logging.NOTSET)
