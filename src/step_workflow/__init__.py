"""Step Workflow.

A single-process workflow engine for approval flows and automated steps:
- configuration loaded from `.env`
- structured logging
- steps, outcomes and workflows driven by the caller
"""

__version__ = "0.1.0"

from step_workflow.config import EngineSettings

__all__ = ["__version__", "EngineSettings"]
