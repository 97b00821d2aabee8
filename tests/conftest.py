"""
Shared test fixtures
====================
Phase records and a fake Claude client that answers each structured-output
call from canned records, so the pipeline runs without network or API keys.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import asyncio
import copy
import re
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from research_ai.llm.claude_client import ModelResponse
from research_ai.memory.store import ThreadMemory

PHASE_ADDITIONS: Dict[str, Dict[str, Any]] = {
    "A": {
        "accepted": True,
        "businessGoal": "Validate willingness to pay ≥$25k/month for a B2B onboarding tool",
        "researchType": "Product Market Fit Validation",
        "mode": "product",
    },
    "B": {
        "researchTypeValidated": True,
        "validationNotes": "Goal is a PMF question, not a market sizing one.",
    },
    "C": {
        "successCriteria": "2 LOIs at ≥$20k/month within the horizon",
        "failureCriteria": "No buyer willing to sign an LOI after 10 qualified calls",
        "timeLimitDays": 2,
        "costLimitUsd": 400,
        "cycleRiskOrNoGo": False,
    },
    "D": {
        "methods": [
            {
                "hypothesis": "Mid-market HR leads will pre-pay a pilot",
                "expectedBusinessEffect": "First $25k/month contract",
                "failureCondition": "Zero paid pilots after outreach",
                "proofThreshold": "1 paid signal",
            }
        ],
        "methodsJustification": "Paid pilots are stronger evidence than surveys.",
    },
    "E": {
        "handoffPackage": {
            "researchGoal": "Validate willingness to pay ≥$25k/month",
            "researchType": "Product Market Fit Validation",
            "icpAndBuyerRole": "VP People at 200-1000 employee SaaS companies",
            "initialPaidEngagement": "$25k/month pilot",
            "methodsWithHypothesesAndProof": "Paid pilot outreach; proof is 1 paid signal",
            "validationAlgorithm": "1. Build list 2. Outreach 3. Pilot offer 4. Count signed",
            "businessAndMoneyLogic": "Pilot converts to annual $300k contract",
            "risksAndLimitations": "Small sample",
            "sourcesOrLinks": "https://example.com/benchmarks",
        },
        "handoffWithinPageLimit": True,
    },
    "F": {
        "status": "PARTIAL_SUCCESS",
        "executorFeedback": {
            "primaryReason": "Demand confirmed, price point needs adjustment",
            "whatWouldHaveChangedResult": "A second ICP segment",
        },
    },
}

SCHEMA_TO_PHASE = {f"submit_phase_{p.lower()}": p for p in PHASE_ADDITIONS}

_HORIZON = re.compile(r"\b(30|60|90)\s*days?\b", re.IGNORECASE)


def build_phase_record(phase_id: str, horizon: int = 60) -> Dict[str, Any]:
    """Cumulative record for a phase: every earlier phase's fields plus its own."""
    record: Dict[str, Any] = {"timeHorizonDays": horizon}
    for letter, additions in PHASE_ADDITIONS.items():
        record.update(copy.deepcopy(additions))
        if letter == phase_id:
            break
    record["phase"] = phase_id
    return record


Override = Union[Dict[str, Any], Callable[[str], Dict[str, Any]]]


class FakeClaudeClient:
    """Stands in for ClaudeClient in agent and workflow tests."""

    def __init__(
        self,
        overrides: Optional[Dict[str, Override]] = None,
        delay: float = 0.0,
        chat_reply: str = "Say **proceed** or **run it** to start the full pipeline (Phases A–F).",
    ):
        self.overrides = overrides or {}
        self.delay = delay
        self.chat_reply = chat_reply
        self.horizon = 30
        self.calls: List[Dict[str, Any]] = []

    async def run_structured_async(
        self,
        messages: List[dict],
        system: Optional[str],
        output_schema: dict,
        schema_name: str = "submit_result",
        tools: Optional[dict] = None,
        tool_context: Optional[dict] = None,
        **kwargs: Any,
    ) -> ModelResponse:
        prompt = messages[-1]["content"]
        self.calls.append({
            "schema_name": schema_name,
            "messages": list(messages),
            "system": system,
            "tools": sorted(tools or {}),
        })
        if self.delay:
            await asyncio.sleep(self.delay)

        if schema_name in self.overrides:
            override = self.overrides[schema_name]
            data = override(prompt) if callable(override) else copy.deepcopy(override)
            return ModelResponse(data=data, output_tokens=10)

        if schema_name == "submit_enriched_prompt":
            match = _HORIZON.search(prompt)
            self.horizon = int(match.group(1)) if match else 30
            data = {
                "enrichedPrompt": (
                    f"Original request: {prompt}\nMode: product\n"
                    f"Time horizon: {self.horizon} days\nResearch type: Product Market Fit Validation"
                )
            }
        else:
            data = build_phase_record(SCHEMA_TO_PHASE[schema_name], horizon=self.horizon)
        return ModelResponse(data=data, output_tokens=10)

    async def chat_with_tools_async(
        self,
        messages: List[dict],
        system: Optional[str] = None,
        tools: Optional[dict] = None,
        **kwargs: Any,
    ) -> ModelResponse:
        self.calls.append({
            "schema_name": None,
            "messages": list(messages),
            "system": system,
            "tools": sorted(tools or {}),
        })
        return ModelResponse(text=self.chat_reply)


@pytest.fixture
def fake_client() -> FakeClaudeClient:
    return FakeClaudeClient()


@pytest.fixture
def memory(tmp_path) -> ThreadMemory:
    return ThreadMemory(tmp_path / "memory")
