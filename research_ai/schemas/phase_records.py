"""
Phase Record Schemas
====================
JSON Schemas (draft 2020-12) for the Intake output and the cumulative
Phase A-F records.

Every phase schema is built from the previous one with extend_schema():
properties and required fields are only ever added, and `phase` is
re-pinned to the new phase letter. The Phase F schema is therefore the full
union of every phase's fields.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

PHASE_IDS = ("A", "B", "C", "D", "E", "F")

RESEARCH_TYPES = (
    "Commercial Opportunity Research",
    "Product Market Fit Validation",
    "Technology-to-Business Research",
    "Investment Opportunity Research",
    "Internal Problem-Solving Research",
)

TIME_HORIZONS = (30, 60, 90)
MODES = ("commercial", "product")
FINAL_STATUSES = ("SUCCESS", "PARTIAL_SUCCESS", "FAIL")

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def _string(description: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "string"}
    if description:
        schema["description"] = description
    return schema


def _boolean(description: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "boolean"}
    if description:
        schema["description"] = description
    return schema


def _phase_literal(phase_id: str) -> Dict[str, Any]:
    return {
        "type": "string",
        "const": phase_id,
        "description": f'Always "{phase_id}" for Phase {phase_id}',
    }


def extend_schema(
    base: Dict[str, Any],
    phase_id: str,
    properties: Dict[str, Any],
    required: Optional[List[str]] = None,
    title: Optional[str] = None,
) -> Dict[str, Any]:
    """Return a new object schema that is `base` plus `properties`.

    The base schema is deep-copied and never modified. `phase` is re-pinned
    to `phase_id`; every other base property and required name is kept.

    Raises:
        ValueError: When an added property would redefine a base property.
    """
    clashes = sorted(k for k in properties if k in base.get("properties", {}) and k != "phase")
    if clashes:
        raise ValueError(f"Phase {phase_id} schema redefines inherited fields: {clashes}")

    schema = copy.deepcopy(base)
    schema["properties"]["phase"] = _phase_literal(phase_id)
    schema["properties"].update(copy.deepcopy(properties))

    merged_required = list(schema.get("required", []))
    for name in required or []:
        if name not in merged_required:
            merged_required.append(name)
    schema["required"] = merged_required

    if title:
        schema["title"] = title
    return schema


INTAKE_OUTPUT_SCHEMA: Dict[str, Any] = {
    "$schema": JSON_SCHEMA_DIALECT,
    "title": "IntakeOutput",
    "type": "object",
    "properties": {
        "enrichedPrompt": _string(
            "Single prompt combining original request, mode, time horizon, "
            "and concise search/reasoning summary for Phase A"
        ),
    },
    "required": ["enrichedPrompt"],
}

AGENT_INPUT_SCHEMA: Dict[str, Any] = {
    "$schema": JSON_SCHEMA_DIALECT,
    "title": "AgentInput",
    "type": "object",
    "properties": {"prompt": _string("Directive for the next agent step")},
    "required": ["prompt"],
}

WORKFLOW_INPUT_SCHEMA: Dict[str, Any] = {
    "$schema": JSON_SCHEMA_DIALECT,
    "title": "WorkflowInput",
    "type": "object",
    "properties": {"prompt": _string("Initial R&D task or request")},
    "required": ["prompt"],
}

PHASE_A_SCHEMA: Dict[str, Any] = {
    "$schema": JSON_SCHEMA_DIALECT,
    "title": "PhaseAOutput",
    "type": "object",
    "properties": {
        "phase": _phase_literal("A"),
        "accepted": _boolean(
            "True only if business goal, time horizon (30/60/90), research type, "
            "and mode are clear and measurable"
        ),
        "businessGoal": _string("One clear sentence with $ or product metric"),
        "timeHorizonDays": {
            "type": "integer",
            "enum": list(TIME_HORIZONS),
            "description": "Exactly one of: 30, 60, or 90 (number)",
        },
        "researchType": {
            "type": "string",
            "enum": list(RESEARCH_TYPES),
            "description": "Exactly one of the five research types; no other values",
        },
        "rejectedReason": _string("If accepted is false, short list of what is missing or vague"),
        "mode": {
            "type": "string",
            "enum": list(MODES),
            "description": 'Exactly "commercial" or "product"',
        },
    },
    "required": ["phase", "accepted", "businessGoal", "timeHorizonDays", "researchType", "mode"],
}

PHASE_B_SCHEMA = extend_schema(
    PHASE_A_SCHEMA,
    "B",
    {
        "researchTypeValidated": _boolean(),
        "validationNotes": _string(),
    },
    required=["researchTypeValidated"],
    title="PhaseBOutput",
)

PHASE_C_SCHEMA = extend_schema(
    PHASE_B_SCHEMA,
    "C",
    {
        "successCriteria": _string(),
        "failureCriteria": _string(),
        "timeLimitDays": {"type": "number", "minimum": 1, "maximum": 2},
        "costLimitUsd": {"type": "number", "maximum": 500},
        "cycleRiskOrNoGo": _boolean(),
    },
    required=["successCriteria", "failureCriteria", "timeLimitDays", "costLimitUsd"],
    title="PhaseCOutput",
)

METHOD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "hypothesis": _string(),
        "expectedBusinessEffect": _string(),
        "failureCondition": _string(),
        "proofThreshold": _string(),
    },
    "required": ["hypothesis", "expectedBusinessEffect", "failureCondition", "proofThreshold"],
}

PHASE_D_SCHEMA = extend_schema(
    PHASE_C_SCHEMA,
    "D",
    {
        "methods": {"type": "array", "items": METHOD_SCHEMA, "minItems": 1, "maxItems": 3},
        "methodsJustification": _string(),
    },
    required=["methods", "methodsJustification"],
    title="PhaseDOutput",
)

HANDOFF_PACKAGE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "researchGoal": _string(),
        "researchType": _string(),
        "icpAndBuyerRole": _string(),
        "initialPaidEngagement": _string(),
        "methodsWithHypothesesAndProof": _string(),
        "validationAlgorithm": _string(),
        "businessAndMoneyLogic": _string(),
        "cycleRiskFlag": _boolean(),
        "risksAndLimitations": _string(),
        "sourcesOrLinks": _string(),
    },
    "required": [
        "researchGoal",
        "researchType",
        "icpAndBuyerRole",
        "initialPaidEngagement",
        "methodsWithHypothesesAndProof",
        "validationAlgorithm",
        "businessAndMoneyLogic",
        "risksAndLimitations",
        "sourcesOrLinks",
    ],
}

PHASE_E_SCHEMA = extend_schema(
    PHASE_D_SCHEMA,
    "E",
    {
        "handoffPackage": HANDOFF_PACKAGE_SCHEMA,
        "handoffWithinPageLimit": _boolean(),
    },
    required=["handoffPackage", "handoffWithinPageLimit"],
    title="PhaseEOutput",
)

PHASE_F_SCHEMA = extend_schema(
    PHASE_E_SCHEMA,
    "F",
    {
        "status": {"type": "string", "enum": list(FINAL_STATUSES)},
        "executorFeedback": {
            "type": "object",
            "properties": {
                "primaryReason": _string(),
                "whatWouldHaveChangedResult": _string(),
            },
            "required": ["primaryReason"],
        },
    },
    required=["status", "executorFeedback"],
    title="PhaseFOutput",
)

PHASE_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "A": PHASE_A_SCHEMA,
    "B": PHASE_B_SCHEMA,
    "C": PHASE_C_SCHEMA,
    "D": PHASE_D_SCHEMA,
    "E": PHASE_E_SCHEMA,
    "F": PHASE_F_SCHEMA,
}


def get_phase_schema(phase_id: str) -> Dict[str, Any]:
    """Return the output schema for a phase letter (A-F)."""
    try:
        return PHASE_SCHEMAS[phase_id.upper()]
    except KeyError:
        raise KeyError(f"Unknown phase: {phase_id!r}") from None


def phase_added_fields(phase_id: str) -> List[str]:
    """Names of the properties a phase adds on top of its predecessor."""
    phase_id = phase_id.upper()
    index = PHASE_IDS.index(phase_id)
    own = set(PHASE_SCHEMAS[phase_id]["properties"])
    if index == 0:
        return sorted(own)
    inherited = set(PHASE_SCHEMAS[PHASE_IDS[index - 1]]["properties"])
    return sorted(own - inherited)
