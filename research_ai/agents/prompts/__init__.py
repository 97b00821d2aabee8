"""research_ai.agents.prompts

Centralized prompts for the R&D Execution agents.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from .phases import (
    CORE_RULES,
    INTAKE_SYSTEM_PROMPT,
    INTAKE_CHAT_ADDENDUM,
    PHASE_A_SYSTEM_PROMPT,
    PHASE_B_SYSTEM_PROMPT,
    PHASE_C_SYSTEM_PROMPT,
    PHASE_D_SYSTEM_PROMPT,
    PHASE_E_SYSTEM_PROMPT,
    PHASE_F_SYSTEM_PROMPT,
)

__all__ = [
    "CORE_RULES",
    "INTAKE_SYSTEM_PROMPT",
    "INTAKE_CHAT_ADDENDUM",
    "PHASE_A_SYSTEM_PROMPT",
    "PHASE_B_SYSTEM_PROMPT",
    "PHASE_C_SYSTEM_PROMPT",
    "PHASE_D_SYSTEM_PROMPT",
    "PHASE_E_SYSTEM_PROMPT",
    "PHASE_F_SYSTEM_PROMPT",
]
