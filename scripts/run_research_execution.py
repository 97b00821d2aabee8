#!/usr/bin/env python3
"""Run the R&D Execution pipeline or chat with the Intake agent.

Usage:
    python scripts/run_research_execution.py run "<prompt>" [--timeout S] [--output PATH]
    python scripts/run_research_execution.py chat "<message>" [--thread ID]

`run` executes Intake + Phases A-F once and prints a summary of the final
record. `chat` sends one message to the Intake agent on a memory thread; the
agent may start the pipeline itself.

Exit code behavior:
- Exits 1 only for CLI usage errors.
- Exits 2 when the app cannot be built (e.g. ANTHROPIC_API_KEY missing).
- Otherwise exits 0; run failures and timeouts are reported in the summary
  and in the report file.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table


ROOT_DIR = Path(__file__).resolve().parents[1]
root_str = str(ROOT_DIR)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from research_ai.app import ResearchApp, create_app  # noqa: E402
from research_ai.pipeline.runner import RunReport  # noqa: E402

console = Console()

STATUS_STYLES = {"success": "green", "failed": "red", "timeout": "yellow"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="R&D Execution pipeline (Intake + Phases A–F)")
    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Run the full pipeline on a prompt")
    run_parser.add_argument("prompt", help="R&D request, e.g. 'Validate demand for a $25k/month B2B tool in 60 days'")
    run_parser.add_argument("--timeout", type=float, default=None, help="Run budget in seconds (default: 600)")
    run_parser.add_argument("--output", default=None, help="Write the run report JSON to this path")

    chat_parser = sub.add_parser("chat", help="Send one message to the Intake agent")
    chat_parser.add_argument("message", help="Message for the Intake agent")
    chat_parser.add_argument("--thread", default="cli", help="Memory thread id (default: cli)")

    return parser


def render_report(report: RunReport) -> Table:
    result = report.result or {}
    feedback = result.get("executorFeedback") or {}

    table = Table(title="R&D Execution Run")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    style = STATUS_STYLES.get(report.status or "", "white")
    table.add_row("Run status", f"[{style}]{report.status or 'not started'}[/{style}]")
    table.add_row("Run ID", report.run_id or "-")
    table.add_row("Phase", str(result.get("phase", "-")))
    table.add_row("Accepted", str(result.get("accepted", "-")))
    table.add_row("Business goal", str(result.get("businessGoal", "-")))
    table.add_row("Time horizon (days)", str(result.get("timeHorizonDays", "-")))
    table.add_row("Research type", str(result.get("researchType", "-")))
    table.add_row("Mode", str(result.get("mode", "-")))
    table.add_row("Final status", str(result.get("status", "-")))
    if feedback.get("primaryReason"):
        table.add_row("Primary reason", str(feedback["primaryReason"]))
    if report.error:
        table.add_row("Error", f"[red]{report.error}[/red]")
    return table


async def _run(app: ResearchApp, prompt: str, timeout: Optional[float], output: Optional[str]) -> None:
    console.print(f"Starting pipeline ({len(prompt)} chars)...")
    report = await app.run(prompt, timeout=timeout)

    console.print(render_report(report))
    console.print(report.message)

    if output:
        out_path = Path(output).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        console.print(f"Report: {out_path}")


async def _chat(app: ResearchApp, message: str, thread_id: str) -> None:
    reply = await app.chat(message, thread_id)
    console.print(reply)


def _build_app() -> Optional[ResearchApp]:
    try:
        return create_app()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        if not args.prompt.strip():
            console.print("[red]prompt must not be empty[/red]")
            return 1
        if args.timeout is not None and args.timeout <= 0:
            console.print("[red]--timeout must be positive[/red]")
            return 1
        app = _build_app()
        if app is None:
            return 2
        asyncio.run(_run(app, args.prompt, args.timeout, args.output))
        return 0

    if args.command == "chat":
        if not args.message.strip():
            console.print("[red]message must not be empty[/red]")
            return 1
        app = _build_app()
        if app is None:
            return 2
        asyncio.run(_chat(app, args.message, args.thread))
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
