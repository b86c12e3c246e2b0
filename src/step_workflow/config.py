"""Settings for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Approvers are configured per workflow key, e.g.
`WORKFLOW_APPROVERS='{"workflow.saveWikiPage": "Admin"}'`. A workflow key with
no approver runs without its approval decision.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for the workflow engine.

    Environment variables:
    - LOG_LEVEL           (optional)
    - WORKFLOW_APPROVERS  (optional, JSON object)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    approvers: dict[str, str] = Field(
        default_factory=dict,
        validation_alias="WORKFLOW_APPROVERS",
        description="Approver name for each workflow key",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("approvers")
    @classmethod
    def _strip_blank_approvers(cls, value: dict[str, str]) -> dict[str, str]:
        return {key: name.strip() for key, name in value.items() if name.strip()}
