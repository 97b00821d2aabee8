"""
Schema Validation Utilities
===========================
JSON Schema validation helpers for phase records and step payloads.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError

from research_ai.schemas.phase_records import get_phase_schema


class PhaseSchemaError(ValueError):
    """Raised when a step's structured output does not match its declared schema."""

    def __init__(self, message: str, step_id: Optional[str] = None):
        super().__init__(message)
        self.step_id = step_id


def validate_against_schema(payload: Any, schema: Dict[str, Any], label: str = "payload") -> None:
    """Validate payload against a JSON Schema dict.

    Args:
        payload: Any JSON-serializable object.
        schema: JSON Schema (draft 2020-12).
        label: Name used in the error message.

    Raises:
        PhaseSchemaError: When payload fails validation.
    """
    validator = Draft202012Validator(schema, format_checker=FormatChecker())

    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if not errors:
        return

    error: ValidationError = errors[0]
    path = "/".join(str(p) for p in error.path)
    prefix = f"{label} failed validation at '{path}': " if path else f"{label} failed validation: "
    raise PhaseSchemaError(prefix + error.message, step_id=label)


def validate_phase_record(record: Dict[str, Any], phase_id: str) -> None:
    """Validate a Phase A-F record against its cumulative schema."""
    validate_against_schema(record, get_phase_schema(phase_id), label=f"Phase {phase_id.upper()} output")


def is_valid_phase_record(record: Any, phase_id: str) -> bool:
    """Return True when record validates as the given phase's output."""
    if not isinstance(record, dict):
        return False
    try:
        validate_phase_record(record, phase_id)
        return True
    except PhaseSchemaError:
        return False


def strip_unknown_fields(payload: Any, schema: Dict[str, Any]) -> Any:
    """Return a copy of payload without keys the schema does not declare.

    Recurses into declared object properties and array items. Values that are
    not objects or arrays, and objects whose schema lists no properties, are
    returned as they are.
    """
    if isinstance(payload, dict) and isinstance(schema.get("properties"), dict):
        properties = schema["properties"]
        return {
            key: strip_unknown_fields(value, properties[key])
            for key, value in payload.items()
            if key in properties
        }
    if isinstance(payload, list) and isinstance(schema.get("items"), dict):
        return [strip_unknown_fields(item, schema["items"]) for item in payload]
    return payload
