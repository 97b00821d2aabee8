"""
Utility Functions
=================
Schema validation and JSON helpers shared by agents and the pipeline.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from .schema_validation import (
    PhaseSchemaError,
    validate_against_schema,
    validate_phase_record,
    is_valid_phase_record,
    strip_unknown_fields,
)
from .validation import (
    safe_json_loads,
    extract_json_object,
    sanitize_filename,
)

__all__ = [
    "PhaseSchemaError",
    "validate_against_schema",
    "validate_phase_record",
    "is_valid_phase_record",
    "strip_unknown_fields",
    "safe_json_loads",
    "extract_json_object",
    "sanitize_filename",
]
