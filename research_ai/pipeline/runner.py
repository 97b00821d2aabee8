"""Budgeted run entrypoint.

Creates a run, scopes its memory thread to the run id, enforces the
wall-clock budget, and turns the outcome into a RunReport with a fixed,
user-facing message.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from loguru import logger

from research_ai.config import TIMEOUTS
from research_ai.pipeline.context import RunContext

if TYPE_CHECKING:
    from research_ai.pipeline.workflow import ResearchExecutionWorkflow

SUCCESS_MESSAGE = (
    "Pipeline completed successfully (Phases A→F). Final result is below; tell the user in this chat."
)
TIMEOUT_MESSAGE = (
    "Pipeline timed out after 10 minutes. Phases A–F may still be running or stuck. "
    "Tell the user in this chat and suggest trying again with a shorter or more focused prompt."
)
UNAVAILABLE_MESSAGE = (
    "The pipeline could not be started (workflow not available). Please try again or use Research AI."
)


def failed_message(error: str) -> str:
    return f"Pipeline failed: {error}. Tell the user in this chat."


def other_status_message(status: str) -> str:
    return f"Pipeline finished with status: {status}. Tell the user in this chat."


@dataclass
class RunReport:
    """What the caller (CLI or the Intake chat tool) gets back from a run."""
    run: bool
    message: str
    status: Optional[str] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    run_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"run": self.run, "message": self.message}
        if self.status is not None:
            payload["status"] = self.status
        if self.result is not None:
            payload["result"] = self.result
        if self.error is not None:
            payload["error"] = self.error
        if self.run_id is not None:
            payload["runId"] = self.run_id
        return payload


def workflow_unavailable_report() -> RunReport:
    return RunReport(run=False, message=UNAVAILABLE_MESSAGE)


async def run_research_execution(
    workflow: Optional["ResearchExecutionWorkflow"],
    prompt: str,
    timeout_seconds: Optional[float] = None,
) -> RunReport:
    """
    Run the workflow once under a wall-clock budget.

    Args:
        workflow: The workflow, or None when it is not available
        prompt: User prompt or enriched prompt
        timeout_seconds: Budget (defaults to RESEARCH_AI_RUN_TIMEOUT, 600 s)

    Returns:
        RunReport; never raises for run failures
    """
    if workflow is None:
        logger.warning("run-research-execution requested but no workflow is available")
        return workflow_unavailable_report()

    budget = float(timeout_seconds if timeout_seconds is not None else TIMEOUTS.RUN_BUDGET)
    run = workflow.create_run()
    run_context = RunContext(run_id=run.run_id)
    logger.info(f"Starting run {run.run_id} (budget {budget:.0f}s)")

    try:
        outcome = await asyncio.wait_for(run.start({"prompt": prompt}, run_context), timeout=budget)
    except asyncio.TimeoutError:
        logger.error(f"Run {run.run_id} exceeded its {budget:.0f}s budget")
        return RunReport(run=True, status="timeout", message=TIMEOUT_MESSAGE, run_id=run.run_id)
    except Exception as e:
        error = str(e) or type(e).__name__
        logger.error(f"Run {run.run_id} raised: {error}")
        return RunReport(run=True, status="failed", error=error, message=failed_message(error), run_id=run.run_id)

    if outcome.status == "success":
        return RunReport(
            run=True,
            status=outcome.status,
            result=outcome.result,
            message=SUCCESS_MESSAGE,
            run_id=run.run_id,
        )
    if outcome.status == "failed":
        error = outcome.error or "Unknown error"
        return RunReport(
            run=True,
            status=outcome.status,
            error=error,
            message=failed_message(error),
            run_id=run.run_id,
        )
    return RunReport(
        run=True,
        status=outcome.status,
        result=outcome.result,
        error=outcome.error,
        message=other_status_message(outcome.status),
        run_id=run.run_id,
    )
