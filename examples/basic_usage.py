#!/usr/bin/env python3
"""Page-change approval example.

This demonstrates driving the engine directly:

* load settings from `.env` (approvers via `WORKFLOW_APPROVERS`)
* build a prep -> approval -> save workflow
* decide as the approver and inspect the final workflow record

The page text and the decision are passed as arguments.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Sequence

from step_workflow.config import EngineSettings
from step_workflow.logging import configure_logging
from step_workflow.workflow import (
    DECISION_APPROVE,
    DECISION_DENY,
    STEP_ABORT,
    STEP_COMPLETE,
    Actor,
    Fact,
    Outcome,
    Task,
    WorkflowBuilder,
    WorkflowManager,
    WorkflowState,
)

WORKFLOW_KEY = "workflow.saveWikiPage"


class PrepareChange(Task):
    def execute(self, context: Any) -> Outcome:
        if not self.workflow_context.get("text", "").strip():
            return STEP_ABORT
        self.workflow_context["prepared"] = True
        return STEP_COMPLETE


class SaveChange(Task):
    def execute(self, context: Any) -> Outcome:
        context["pages"][self.workflow_context["page"]] = self.workflow_context["text"]
        return STEP_COMPLETE


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a page-change approval workflow.")
    parser.add_argument("--page", default="Main", help="Page name")
    parser.add_argument("--text", required=True, help="New page text")
    parser.add_argument("--deny", action="store_true", help="Deny instead of approving")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    if WORKFLOW_KEY not in settings.approvers:
        settings = settings.model_copy(
            update={"approvers": {**settings.approvers, WORKFLOW_KEY: "Admin"}}
        )
    configure_logging(settings.log_level)

    manager = WorkflowManager(settings)
    host: dict[str, Any] = {"pages": {}}
    submitter = Actor("janne")

    workflow = WorkflowBuilder(manager).build_approval_workflow(
        submitter,
        WORKFLOW_KEY,
        prep_task=PrepareChange("task.preSaveWikiPage"),
        decision_key="decision.saveWikiPage",
        facts=[Fact("fact.page", args.page)],
        completion_task=SaveChange("task.saveWikiPage"),
    )
    workflow.context.update({"page": args.page, "text": args.text})

    state = manager.start(workflow, host)
    if state is WorkflowState.WAITING:
        approver = manager.get_approver(WORKFLOW_KEY)
        assert approver is not None
        (decision,) = manager.decision_queue.actor_decisions(approver)
        outcome = DECISION_DENY if args.deny else DECISION_APPROVE
        state = manager.decide(decision, outcome, approver, host)

    print(f"Workflow {workflow.id} finished: {state.value}")
    print(f"Pages: {host['pages']}")
    print(json.dumps(workflow.to_record().model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
