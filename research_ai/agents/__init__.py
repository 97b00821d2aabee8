"""
R&D Execution Agents
====================
Structured-output agents for the R&D Execution pipeline.

- IntakeAgent: researches and enriches the user's request; can chat and
  start the pipeline
- Phase A-F agents: Task Intake, Research Type Validation, Metrics &
  Constraints Lock, Solution & Method Selection, Handoff Package Formation,
  Validation & Status

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from .base import AgentResult, StructuredAgent
from .phase_agents import IntakeAgent, create_phase_agents
from .registry import PHASE_REGISTRY, PhaseSpec, get_phase_spec, list_phases

__all__ = [
    "AgentResult",
    "StructuredAgent",
    "IntakeAgent",
    "create_phase_agents",
    "PHASE_REGISTRY",
    "PhaseSpec",
    "get_phase_spec",
    "list_phases",
]
