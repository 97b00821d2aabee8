"""
Workflow Tools
==============
Tools that let the Intake chat start the full pipeline:

- run-research-execution-workflow: run Intake + Phases A-F on a prompt and
  return the RunReport (status, message, result or error)
- format-research-query: combine a question and optional context into one
  search-ready query string

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from loguru import logger

from research_ai.pipeline.runner import run_research_execution, workflow_unavailable_report
from research_ai.tools.base import Tool

WorkflowSource = Union[Any, Callable[[], Any], None]


def resolve_workflow(source: WorkflowSource) -> Optional[Any]:
    """Resolve a workflow instance, a zero-argument getter, or None."""
    if source is None:
        return None
    if hasattr(source, "create_run"):
        return source
    if callable(source):
        return source()
    return None


def create_run_workflow_tool(
    source: WorkflowSource,
    timeout_seconds: Optional[float] = None,
) -> Tool:
    """Build the run-research-execution-workflow tool.

    The workflow is resolved at call time, so the tool can be created before
    the workflow exists.
    """

    async def _execute(prompt: str, **_: Any) -> Dict[str, Any]:
        workflow = resolve_workflow(source)
        if workflow is None:
            return workflow_unavailable_report().to_dict()
        logger.info(f"Intake chat started the pipeline ({len(prompt)} chars)")
        report = await run_research_execution(workflow, prompt, timeout_seconds=timeout_seconds)
        return report.to_dict()

    return Tool(
        id="run-research-execution-workflow",
        description=(
            "Run the full R&D Execution pipeline (Intake then Phases A–F) on an enriched prompt. "
            "Use when the user says proceed, run it, go, yes, or asks to execute the pipeline. "
            "Returns status, a message to relay, and the final Phase F result or an error."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The enriched prompt: request, mode, time horizon, research type, search summary",
                },
            },
            "required": ["prompt"],
        },
        output_schema={
            "type": "object",
            "properties": {
                "run": {"type": "boolean"},
                "status": {"type": "string"},
                "message": {"type": "string"},
                "result": {"type": "object"},
                "error": {"type": "string"},
                "runId": {"type": "string"},
            },
            "required": ["run", "message"],
        },
        execute=_execute,
    )


def format_research_query(question: str, context: Optional[str] = None) -> Dict[str, str]:
    """Combine a question with optional context into one query."""
    query = f"{question} (context: {context})" if context else question
    return {
        "query": query,
        "formattedAt": datetime.now(timezone.utc).isoformat(),
    }


def create_format_query_tool() -> Tool:
    """Build the format-research-query tool."""

    async def _execute(question: str, context: Optional[str] = None, **_: Any) -> Dict[str, str]:
        return format_research_query(question, context)

    return Tool(
        id="format-research-query",
        description="Format a research question into a clear, searchable query. Use when the user asks a research question.",
        input_schema={
            "type": "object",
            "properties": {
                "question": {"type": "string", "minLength": 1, "description": "The research question to format"},
                "context": {"type": "string", "description": "Optional context for the research"},
            },
            "required": ["question"],
        },
        output_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string"},
                "formattedAt": {"type": "string"},
            },
            "required": ["query", "formattedAt"],
        },
        execute=_execute,
    )
