"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from step_workflow.config import EngineSettings
from step_workflow.logging import JsonFormatter
from step_workflow.workflow import Actor, WorkflowManager


@pytest.fixture
def admin() -> Actor:
    """The approver used throughout the tests."""
    return Actor("Admin")


@pytest.fixture
def submitter() -> Actor:
    return Actor("janne")


@pytest.fixture
def settings() -> EngineSettings:
    """Provide engine settings with one approval workflow configured."""
    return EngineSettings(
        log_level="DEBUG",
        approvers={"workflow.saveWikiPage": "Admin"},
    )


@pytest.fixture
def manager(settings: EngineSettings) -> WorkflowManager:
    return WorkflowManager(settings)


@pytest.fixture
def restore_root_logging() -> Iterator[logging.Logger]:
    """Undo changes tests make to the root logger."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
