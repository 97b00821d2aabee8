"""Pipeline run context.

This module defines the small, serializable state objects a run carries:
the RunContext passed to every step (it scopes the memory thread), and the
StepRecord entries of a run's step log.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_run_id() -> str:
    return uuid4().hex


@dataclass
class RunContext:
    """Per-run scope passed to every step.

    Thread and resource ids default to the run id, so every agent in a run
    reads and writes the same memory thread.
    """

    run_id: str = field(default_factory=new_run_id)
    thread_id: str = ""
    resource_id: str = ""
    created_at: str = field(default_factory=_utc_now_iso)

    def __post_init__(self) -> None:
        if not self.thread_id:
            self.thread_id = self.run_id
        if not self.resource_id:
            self.resource_id = self.run_id


@dataclass
class StepRecord:
    """One executed step in a run's step log."""

    step_id: str
    kind: str
    started_at: str = field(default_factory=_utc_now_iso)
    finished_at: Optional[str] = None
    success: bool = False
    error: Optional[str] = None

    def finish(self, success: bool, error: Optional[str] = None) -> None:
        self.finished_at = _utc_now_iso()
        self.success = success
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "kind": self.kind,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "success": self.success,
            "error": self.error,
        }
