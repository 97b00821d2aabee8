"""Bridge steps between agent steps.

Bridges are pure functions: they turn one step's structured output into the
next agent's prompt. They never call a model, never fail on a valid input,
and never modify the record they receive.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict

from research_ai.agents.registry import get_phase_spec

Bridge = Callable[[Dict[str, Any]], Dict[str, str]]


def bridge_intake_to_a(intake_output: Dict[str, Any]) -> Dict[str, str]:
    """Forward the Intake step's enriched prompt verbatim as Phase A's prompt."""
    return {"prompt": intake_output["enrichedPrompt"]}


def build_prompt_for_next_phase(label: str, previous_record: Dict[str, Any]) -> str:
    """Embed the previous record and ask for the next phase's cumulative record."""
    return (
        f"[Previous phase output]\n{json.dumps(previous_record, indent=2, ensure_ascii=False)}\n\n"
        f"Proceed to {label}. Output the complete structured result for this phase only "
        "(include all prior phase fields plus this phase's new fields)."
    )


def make_phase_bridge(next_phase_id: str) -> Bridge:
    """Create the bridge that hands a record into `next_phase_id`."""
    label = get_phase_spec(next_phase_id).label

    def _bridge(previous_record: Dict[str, Any]) -> Dict[str, str]:
        return {"prompt": build_prompt_for_next_phase(label, previous_record)}

    _bridge.__name__ = f"bridge_to_{next_phase_id.lower()}"
    return _bridge


bridge_a_to_b = make_phase_bridge("B")
bridge_b_to_c = make_phase_bridge("C")
bridge_c_to_d = make_phase_bridge("D")
bridge_d_to_e = make_phase_bridge("E")
bridge_e_to_f = make_phase_bridge("F")

PHASE_BRIDGES: Dict[str, Bridge] = {
    "B": bridge_a_to_b,
    "C": bridge_b_to_c,
    "D": bridge_c_to_d,
    "E": bridge_d_to_e,
    "F": bridge_e_to_f,
}
