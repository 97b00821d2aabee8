"""
Base Agent Classes
==================
Foundation for the R&D Execution agents using the Claude API.

A StructuredAgent is one rulebook plus one output schema:
- Current date awareness (models know today's date)
- Shared search tools the model may call before answering
- Structured output validated by the caller, never free text
- Thread memory: recent messages of the run's thread are replayed into
  each call, and each call's prompt and answer are appended to it

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from loguru import logger

from research_ai.config import MEMORY
from research_ai.llm.claude_client import ClaudeClient
from research_ai.memory.store import ThreadMemory
from research_ai.tools.base import Tool
from research_ai.tracing import safe_set_current_span_attributes

if TYPE_CHECKING:
    from research_ai.pipeline.context import RunContext


def get_current_date_context() -> str:
    """Date line appended to every system prompt for temporal reasoning."""
    now = datetime.now(timezone.utc)
    return f"\n\nCURRENT DATE: {now.strftime('%Y-%m-%d')} (use it to judge how recent sources are)"


@dataclass
class AgentResult:
    """Result from an agent execution."""
    agent_id: str
    agent_name: str
    success: bool
    content: str
    structured_data: dict = field(default_factory=dict)
    error: Optional[str] = None
    tokens_used: int = 0
    execution_time: float = 0.0
    tool_calls: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert result to dictionary for JSON serialization."""
        return {
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "success": self.success,
            "content": self.content,
            "structured_data": self.structured_data,
            "error": self.error,
            "tokens_used": self.tokens_used,
            "execution_time": self.execution_time,
            "tool_calls": list(self.tool_calls),
            "timestamp": self.timestamp,
        }


class StructuredAgent:
    """
    Agent that answers every prompt with a schema-shaped JSON object.

    Usage:
        agent = StructuredAgent(
            id="phase-b-agent",
            name="Phase B — Research Type",
            instructions=PHASE_B_SYSTEM_PROMPT,
            output_schema=PHASE_B_SCHEMA,
            client=ClaudeClient(),
            tools=create_search_tools(),
            memory=ThreadMemory(),
        )
        result = await agent.generate(prompt, run_context)
    """

    def __init__(
        self,
        id: str,
        name: str,
        instructions: str,
        output_schema: Dict[str, Any],
        client: ClaudeClient,
        tools: Optional[Dict[str, Tool]] = None,
        memory: Optional[ThreadMemory] = None,
        schema_name: str = "submit_result",
        include_date: bool = True,
        memory_window: int = MEMORY.LAST_MESSAGES,
    ):
        """
        Initialize agent with Claude client and configuration.

        Args:
            id: Unique agent id
            name: Human-readable name
            instructions: System prompt (rulebook)
            output_schema: JSON Schema of the structured answer
            client: Shared ClaudeClient
            tools: Tools the model may call, keyed by tool id
            memory: Thread memory store (None disables history)
            schema_name: Name of the structured-output tool
            include_date: Whether to add current date context to the system prompt
            memory_window: Number of recent thread messages replayed per call
        """
        self.id = id
        self.name = name
        self.instructions = instructions
        self.output_schema = output_schema
        self.client = client
        self.tools: Dict[str, Tool] = dict(tools or {})
        self.memory = memory
        self.schema_name = schema_name
        self.memory_window = memory_window
        self.system_prompt = instructions + (get_current_date_context() if include_date else "")

        logger.debug(f"Initialized {self.id} with tools: {sorted(self.tools)}")

    def _history(self, thread_id: Optional[str]) -> List[dict]:
        """Recent thread messages as Messages API turns, ending on an assistant turn."""
        if self.memory is None or not thread_id:
            return []
        turns = [{"role": m.role, "content": m.content} for m in self.memory.recent(thread_id, self.memory_window)]
        while turns and turns[-1]["role"] != "assistant":
            turns.pop()
        return turns

    def _remember(self, thread_id: Optional[str], resource_id: Optional[str], prompt: str, answer: str) -> None:
        if self.memory is None or not thread_id:
            return
        self.memory.append(thread_id, "user", prompt, resource_id=resource_id, agent_id=self.id)
        self.memory.append(thread_id, "assistant", answer, resource_id=resource_id, agent_id=self.id)

    async def generate(self, prompt: str, run_context: Optional["RunContext"] = None) -> AgentResult:
        """
        Run one structured-output call.

        Args:
            prompt: User message for this step
            run_context: Scopes the memory thread (thread and resource ids)

        Returns:
            AgentResult whose structured_data is the model's answer (not yet validated)

        Raises:
            PhaseSchemaError: When the model produces no structured output
        """
        start_time = time.time()
        thread_id = run_context.thread_id if run_context else None
        resource_id = run_context.resource_id if run_context else None
        messages = self._history(thread_id) + [{"role": "user", "content": prompt}]

        try:
            response = await self.client.run_structured_async(
                messages=messages,
                system=self.system_prompt,
                output_schema=self.output_schema,
                schema_name=self.schema_name,
                tools=self.tools,
                tool_context={"run_context": run_context},
            )
        except Exception as e:
            logger.error(f"{self.id} error: {e}")
            raise

        data = response.data or {}
        content = json.dumps(data, indent=2, ensure_ascii=False)
        self._remember(thread_id, resource_id, prompt, content)

        elapsed = time.time() - start_time
        safe_set_current_span_attributes({
            "agent_id": self.id,
            "tokens_used": response.output_tokens,
            "tool_calls": [call.tool for call in response.tool_calls],
        })
        logger.debug(
            f"{self.id} completed in {elapsed:.2f}s, {response.output_tokens} tokens, "
            f"{len(response.tool_calls)} tool calls"
        )

        return AgentResult(
            agent_id=self.id,
            agent_name=self.name,
            success=True,
            content=content,
            structured_data=data,
            tokens_used=response.output_tokens,
            execution_time=elapsed,
            tool_calls=[call.tool for call in response.tool_calls],
        )
