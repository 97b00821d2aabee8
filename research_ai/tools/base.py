"""
Agent Tools
===========
A minimal tool abstraction shared by every agent: an id, a description, a
JSON Schema for the arguments, and an async execute function.

Tools never raise into the model loop. Arguments that fail the input schema
come back to the model as an unsuccessful result it can read and correct.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from jsonschema import Draft202012Validator
from loguru import logger

ToolExecutor = Callable[..., Awaitable[Dict[str, Any]]]


def clean_schema_for_tool(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Strip keys the Anthropic tool input_schema does not need ($schema, title)."""
    cleaned = copy.deepcopy(schema)
    cleaned.pop("$schema", None)
    cleaned.pop("title", None)
    return cleaned


@dataclass
class Tool:
    """A callable capability exposed to the model."""

    id: str
    description: str
    input_schema: Dict[str, Any]
    execute: ToolExecutor
    output_schema: Optional[Dict[str, Any]] = None

    def to_anthropic(self) -> Dict[str, Any]:
        """Tool definition in the shape the Messages API expects."""
        return {
            "name": self.id,
            "description": self.description,
            "input_schema": clean_schema_for_tool(self.input_schema),
        }

    def _apply_defaults(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(arguments)
        for name, prop in (self.input_schema.get("properties") or {}).items():
            if name not in out and isinstance(prop, dict) and "default" in prop:
                out[name] = prop["default"]
        return out

    async def invoke(self, arguments: Any, **context: Any) -> Dict[str, Any]:
        """Validate arguments, fill defaults, and run the tool."""
        if not isinstance(arguments, dict):
            return {"success": False, "error": f"{self.id}: arguments must be an object"}

        arguments = self._apply_defaults(arguments)
        validator = Draft202012Validator(self.input_schema)
        errors = sorted(validator.iter_errors(arguments), key=lambda e: list(e.path))
        if errors:
            error = errors[0]
            path = "/".join(str(p) for p in error.path)
            message = f"{self.id}: invalid input at '{path}': {error.message}" if path else f"{self.id}: {error.message}"
            logger.warning(message)
            return {"success": False, "error": message}

        logger.debug(f"Tool {self.id} called with {sorted(arguments)}")
        # Caller context wins over model arguments of the same name
        try:
            return await self.execute(**{**arguments, **context})
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(f"Tool {self.id} failed: {error}")
            return {"success": False, "error": f"{self.id}: {error}"}
