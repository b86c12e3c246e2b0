"""Unit tests for engine settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from step_workflow.config import EngineSettings


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("WORKFLOW_APPROVERS", raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_defaults() -> None:
    settings = EngineSettings()

    assert settings.log_level == "INFO"
    assert settings.approvers == {}


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=debug",
                "WORKFLOW_APPROVERS='{\"workflow.saveWikiPage\": \"Admin\"}'",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = EngineSettings()

    assert settings.log_level == "DEBUG"
    assert settings.approvers == {"workflow.saveWikiPage": "Admin"}


def test_settings_loads_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_APPROVERS", '{"workflow.createGroup": "Admin"}')

    assert EngineSettings().approvers == {"workflow.createGroup": "Admin"}


def test_blank_approvers_are_dropped() -> None:
    settings = EngineSettings(approvers={"workflow.a": "  Admin ", "workflow.b": "  "})

    assert settings.approvers == {"workflow.a": "Admin"}


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        EngineSettings(log_level="chatty")
