"""Late-bound workflow reference.

The Intake agent's run-workflow tool needs the workflow, and the workflow
needs the agents. The app builds the agents with a WorkflowHandle, then
builds the workflow and fills the handle.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

from typing import Any, Optional


class WorkflowNotAvailableError(RuntimeError):
    """Raised when a workflow handle is resolved before it was set."""


class WorkflowHandle:
    """Reference cell holding the workflow once it exists."""

    def __init__(self, workflow: Optional[Any] = None):
        self._workflow = workflow

    def set(self, workflow: Any) -> None:
        self._workflow = workflow

    def get(self) -> Optional[Any]:
        return self._workflow

    def resolve(self) -> Any:
        if self._workflow is None:
            raise WorkflowNotAvailableError("Workflow handle resolved before the workflow was constructed")
        return self._workflow

    @property
    def is_set(self) -> bool:
        return self._workflow is not None

    def __call__(self) -> Optional[Any]:
        return self.get()
