"""
Phase Registry
==============
Static table of the R&D Execution steps: for the Intake step and each of
Phases A-F it records the agent id and display name, the rulebook, the
output schema, and the label used when handing off into the phase.

This enables:
- Agent construction from one table (see phase_agents.create_phase_agents)
- Bridge prompts that name the phase being entered
- Phase lookup by letter for validation and reporting

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from research_ai.agents.prompts import (
    INTAKE_SYSTEM_PROMPT,
    PHASE_A_SYSTEM_PROMPT,
    PHASE_B_SYSTEM_PROMPT,
    PHASE_C_SYSTEM_PROMPT,
    PHASE_D_SYSTEM_PROMPT,
    PHASE_E_SYSTEM_PROMPT,
    PHASE_F_SYSTEM_PROMPT,
)
from research_ai.schemas.phase_records import (
    INTAKE_OUTPUT_SCHEMA,
    PHASE_IDS,
    PHASE_SCHEMAS,
)

INTAKE_ID = "intake"


@dataclass(frozen=True)
class PhaseSpec:
    """Complete definition of one agent step."""
    id: str                        # "intake" or phase letter
    name: str                      # Agent display name
    agent_id: str                  # Unique agent ID
    step_id: str                   # Workflow step ID
    label: str                     # Used in "Proceed to <label>" handoffs
    instructions: str              # System prompt (rulebook)
    output_schema: Dict[str, Any]  # Structured output the step must produce
    schema_name: str               # Name of the structured-output tool


PHASE_REGISTRY: Dict[str, PhaseSpec] = {
    INTAKE_ID: PhaseSpec(
        id=INTAKE_ID,
        name="Intake — Research & Enrichment",
        agent_id="intake-agent",
        step_id="intake",
        label="Intake",
        instructions=INTAKE_SYSTEM_PROMPT,
        output_schema=INTAKE_OUTPUT_SCHEMA,
        schema_name="submit_enriched_prompt",
    ),
    "A": PhaseSpec(
        id="A",
        name="Phase A — Task Intake",
        agent_id="phase-a-agent",
        step_id="phase-a",
        label="Phase A — Task Intake",
        instructions=PHASE_A_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["A"],
        schema_name="submit_phase_a",
    ),
    "B": PhaseSpec(
        id="B",
        name="Phase B — Research Type",
        agent_id="phase-b-agent",
        step_id="phase-b",
        label="Phase B — Research Type Validation",
        instructions=PHASE_B_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["B"],
        schema_name="submit_phase_b",
    ),
    "C": PhaseSpec(
        id="C",
        name="Phase C — Metrics Lock",
        agent_id="phase-c-agent",
        step_id="phase-c",
        label="Phase C — Metrics & Constraints Lock",
        instructions=PHASE_C_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["C"],
        schema_name="submit_phase_c",
    ),
    "D": PhaseSpec(
        id="D",
        name="Phase D — Method Selection",
        agent_id="phase-d-agent",
        step_id="phase-d",
        label="Phase D — Solution & Method Selection",
        instructions=PHASE_D_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["D"],
        schema_name="submit_phase_d",
    ),
    "E": PhaseSpec(
        id="E",
        name="Phase E — Handoff Package",
        agent_id="phase-e-agent",
        step_id="phase-e",
        label="Phase E — Handoff Package Formation",
        instructions=PHASE_E_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["E"],
        schema_name="submit_phase_e",
    ),
    "F": PhaseSpec(
        id="F",
        name="Phase F — Validation & Status",
        agent_id="phase-f-agent",
        step_id="phase-f",
        label="Phase F — Validation & Status",
        instructions=PHASE_F_SYSTEM_PROMPT,
        output_schema=PHASE_SCHEMAS["F"],
        schema_name="submit_phase_f",
    ),
}


def get_phase_spec(phase_id: str) -> PhaseSpec:
    """Get the spec for "intake" or a phase letter (case-insensitive)."""
    key = phase_id if phase_id == INTAKE_ID else phase_id.upper()
    try:
        return PHASE_REGISTRY[key]
    except KeyError:
        raise KeyError(f"Unknown phase: {phase_id!r}") from None


def list_phases(include_intake: bool = False) -> List[PhaseSpec]:
    """Phase specs in pipeline order."""
    ids: List[str] = ([INTAKE_ID] if include_intake else []) + list(PHASE_IDS)
    return [PHASE_REGISTRY[i] for i in ids]


def previous_phase_id(phase_id: str) -> Optional[str]:
    """The phase before `phase_id`, or None for Phase A."""
    index = PHASE_IDS.index(phase_id.upper())
    return PHASE_IDS[index - 1] if index > 0 else None
