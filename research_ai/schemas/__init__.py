"""Schemas for the Intake output and the cumulative Phase A-F records."""

from .phase_records import (
    AGENT_INPUT_SCHEMA,
    FINAL_STATUSES,
    INTAKE_OUTPUT_SCHEMA,
    MODES,
    PHASE_IDS,
    PHASE_SCHEMAS,
    RESEARCH_TYPES,
    TIME_HORIZONS,
    WORKFLOW_INPUT_SCHEMA,
    extend_schema,
    get_phase_schema,
    phase_added_fields,
)

__all__ = [
    "AGENT_INPUT_SCHEMA",
    "FINAL_STATUSES",
    "INTAKE_OUTPUT_SCHEMA",
    "MODES",
    "PHASE_IDS",
    "PHASE_SCHEMAS",
    "RESEARCH_TYPES",
    "TIME_HORIZONS",
    "WORKFLOW_INPUT_SCHEMA",
    "extend_schema",
    "get_phase_schema",
    "phase_added_fields",
]
