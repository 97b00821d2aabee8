"""
Claude API Client with Tool Use and Structured Output
=====================================================
Provides Claude API access for the phase agents:
- Model registry and tier selection (Opus, Sonnet, Haiku)
- Prompt caching for the stable system prompts
- Tool-use loop: the model may call search tools before answering
- Structured output: the final answer is a call to a tool whose input_schema
  is the phase schema, so the result arrives as JSON, not prose
- Token usage tracking and cost estimation

Retries cover transient transport errors only (rate limit, connection,
server errors). A model that never produces structured output is not
retried; the caller sees a PhaseSchemaError.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import anthropic
import httpx
from loguru import logger
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from research_ai.config import MODELS as MODEL_CONFIG, TIMEOUTS
from research_ai.tools.base import Tool, clean_schema_for_tool
from research_ai.utils.schema_validation import PhaseSchemaError
from research_ai.utils.validation import extract_json_object


class ModelTier(Enum):
    """Model tiers for agent configuration."""
    OPUS = "opus"       # Premium: Maximum intelligence, complex reasoning
    SONNET = "sonnet"   # Balanced: Agents, tool use, structured output
    HAIKU = "haiku"     # Fast: High-volume, low-latency tasks


@dataclass
class ModelInfo:
    """Information about a Claude model."""
    id: str
    tier: ModelTier
    description: str
    input_price_per_mtok: float
    output_price_per_mtok: float


MODELS = {
    ModelTier.OPUS: ModelInfo(
        id="claude-opus-4-5-20251101",
        tier=ModelTier.OPUS,
        description="Premium model with maximum intelligence for complex reasoning",
        input_price_per_mtok=5.0,
        output_price_per_mtok=25.0,
    ),
    ModelTier.SONNET: ModelInfo(
        id=MODEL_CONFIG.DEFAULT_MODEL,
        tier=ModelTier.SONNET,
        description="Smart model for agents with tools and structured output",
        input_price_per_mtok=3.0,
        output_price_per_mtok=15.0,
    ),
    ModelTier.HAIKU: ModelInfo(
        id="claude-haiku-4-5-20251001",
        tier=ModelTier.HAIKU,
        description="Fastest model with near-frontier intelligence",
        input_price_per_mtok=1.0,
        output_price_per_mtok=5.0,
    ),
}

_TIER_BY_NAME = {"opus": ModelTier.OPUS, "sonnet": ModelTier.SONNET, "haiku": ModelTier.HAIKU}

_TRANSIENT_ERRORS = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)


@dataclass
class TokenUsage:
    """Track token usage across requests."""
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def add_response(self, response: Any) -> int:
        """Add usage from an API response. Returns output tokens of this response."""
        usage = getattr(response, "usage", None)
        if usage is None:
            return 0

        def _count(name: str) -> int:
            value = getattr(usage, name, 0)
            return value if isinstance(value, int) else 0

        output = _count("output_tokens")
        self.input_tokens += _count("input_tokens")
        self.output_tokens += output
        self.cache_creation_tokens += _count("cache_creation_input_tokens")
        self.cache_read_tokens += _count("cache_read_input_tokens")
        return output

    def estimate_cost(self, model: ModelTier) -> float:
        """Estimate cost in USD based on model pricing."""
        info = MODELS[model]
        input_cost = (self.input_tokens / 1_000_000) * info.input_price_per_mtok
        output_cost = (self.output_tokens / 1_000_000) * info.output_price_per_mtok
        return input_cost + output_cost


@dataclass
class ToolCallRecord:
    """One tool invocation made during an agent call."""
    tool: str
    arguments: dict
    success: bool


@dataclass
class ModelResponse:
    """Result of a tool-use loop."""
    text: str = ""
    data: Optional[dict] = None
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    rounds: int = 0
    output_tokens: int = 0


def make_structured_tool(schema_name: str, output_schema: dict) -> dict:
    """Create a tool definition that carries the structured answer."""
    return {
        "name": schema_name,
        "description": (
            "Return your final answer as structured data. "
            "You MUST call this tool exactly once with your complete result."
        ),
        "input_schema": clean_schema_for_tool(output_schema),
    }


def _block_to_param(block: Any) -> Optional[dict]:
    """Convert a response content block into a request content param."""
    block_type = getattr(block, "type", None)
    if block_type == "text":
        return {"type": "text", "text": block.text}
    if block_type == "tool_use":
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    return None


def _response_text(response: Any) -> str:
    return "".join(
        getattr(block, "text", "") for block in response.content
        if getattr(block, "type", None) == "text"
    )


class ClaudeClient:
    """
    Claude API client for tool-using, schema-constrained agents.

    Features:
    - Multi-model: Opus, Sonnet, Haiku with a configurable default
    - Prompt caching: Reuse stable system prompts (cache control)
    - Tool use: agents can call search tools before answering
    - Structured output via a dedicated output tool
    - Token tracking: Monitor usage and cost estimation
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: Union[ModelTier, str] = ModelTier.SONNET,
        enable_caching: bool = True,
    ):
        """
        Initialize Claude client.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            default_model: Default model tier (OPUS, SONNET, HAIKU) or string
            enable_caching: Whether to enable prompt caching
        """
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY not found in environment")

        timeout_config = httpx.Timeout(float(TIMEOUTS.LLM_API), connect=float(TIMEOUTS.LLM_CONNECT))

        self.async_client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            timeout=timeout_config,
        )

        if isinstance(default_model, str):
            self.default_model = _TIER_BY_NAME.get(default_model.lower(), ModelTier.SONNET)
        else:
            self.default_model = default_model

        self.enable_caching = enable_caching
        self.usage = TokenUsage()

        logger.info(f"Claude client initialized with model: {MODELS[self.default_model].id}")

    def get_model_id(self, model: Optional[Union[ModelTier, str]] = None) -> str:
        """
        Get model ID string from tier or string.

        Args:
            model: Model tier enum or string name

        Returns:
            Model ID string for the API
        """
        if model is None:
            return MODELS[self.default_model].id

        if isinstance(model, str):
            tier = _TIER_BY_NAME.get(model.lower(), self.default_model)
        else:
            tier = model

        return MODELS[tier].id

    def _system_param(self, system: Optional[str]) -> Any:
        if not system:
            return None
        if self.enable_caching:
            return [{"type": "text", "text": system, "cache_control": {"type": "ephemeral"}}]
        return system

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _create_message(self, **kwargs: Any) -> Any:
        """Messages API call with retry on transient errors (1s, 2s, 4s backoff)."""
        return await self.async_client.messages.create(**kwargs)

    async def _run_tool_calls(
        self,
        tool_uses: List[Any],
        tools: Dict[str, Tool],
        record: ModelResponse,
        tool_context: Dict[str, Any],
    ) -> List[dict]:
        """Execute requested tools in order and build tool_result blocks."""
        results = []
        for block in tool_uses:
            tool = tools.get(block.name)
            if tool is None:
                output = {"success": False, "error": f"Unknown tool: {block.name}"}
            else:
                output = await tool.invoke(block.input, **tool_context)
            record.tool_calls.append(ToolCallRecord(
                tool=block.name,
                arguments=dict(block.input) if isinstance(block.input, dict) else {},
                success=bool(output.get("success", True)),
            ))
            results.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": json.dumps(output, default=str),
            })
        return results

    async def run_structured_async(
        self,
        messages: List[dict],
        system: Optional[str],
        output_schema: dict,
        schema_name: str = "submit_result",
        tools: Optional[Dict[str, Tool]] = None,
        model: Optional[Union[ModelTier, str]] = None,
        max_tokens: int = MODEL_CONFIG.MAX_TOKENS,
        max_tool_rounds: int = MODEL_CONFIG.MAX_TOOL_ROUNDS,
        tool_context: Optional[Dict[str, Any]] = None,
    ) -> ModelResponse:
        """
        Run a tool-use loop that must end in a structured answer.

        Every turn the model has to call a tool: a search tool, or the output
        tool named `schema_name`. After `max_tool_rounds` tool rounds only the
        output tool is offered.

        Args:
            messages: Conversation so far (history plus the current prompt)
            system: System prompt (cached when caching is enabled)
            output_schema: JSON Schema of the structured answer
            schema_name: Name of the output tool
            tools: Tools the model may call before answering
            model: Model tier override
            max_tokens: Maximum output tokens per turn
            max_tool_rounds: Tool round trips before the answer is forced
            tool_context: Extra keyword arguments passed to every tool

        Returns:
            ModelResponse with `data` set to the structured answer

        Raises:
            PhaseSchemaError: When the model produces no structured answer
        """
        tools = tools or {}
        tool_context = tool_context or {}
        output_tool = make_structured_tool(schema_name, output_schema)
        tool_defs = [t.to_anthropic() for t in tools.values()] + [output_tool]

        conversation = list(messages)
        record = ModelResponse()
        model_id = self.get_model_id(model)

        while True:
            force_answer = record.rounds >= max_tool_rounds
            kwargs: Dict[str, Any] = {
                "model": model_id,
                "max_tokens": max_tokens,
                "messages": conversation,
                "tools": [output_tool] if force_answer else tool_defs,
                "tool_choice": {"type": "tool", "name": schema_name} if force_answer else {"type": "any"},
            }
            system_param = self._system_param(system)
            if system_param:
                kwargs["system"] = system_param

            response = await self._create_message(**kwargs)
            record.output_tokens += self.usage.add_response(response)

            tool_uses = [b for b in response.content if getattr(b, "type", None) == "tool_use"]
            answer = next((b for b in tool_uses if b.name == schema_name), None)
            if answer is not None:
                record.data = dict(answer.input) if isinstance(answer.input, dict) else None
                record.text = _response_text(response)
                if record.data is None:
                    raise PhaseSchemaError(f"{schema_name} was called with a non-object payload", step_id=schema_name)
                return record

            if not tool_uses:
                # Model answered in prose; accept a JSON object embedded in it.
                record.text = _response_text(response)
                record.data = extract_json_object(record.text)
                if record.data is None:
                    raise PhaseSchemaError(
                        f"Model returned no structured output for {schema_name}",
                        step_id=schema_name,
                    )
                logger.debug(f"{schema_name}: structured output parsed from text reply")
                return record

            conversation.append({
                "role": "assistant",
                "content": [p for p in (_block_to_param(b) for b in response.content) if p],
            })
            conversation.append({
                "role": "user",
                "content": await self._run_tool_calls(tool_uses, tools, record, tool_context),
            })
            record.rounds += 1
            logger.debug(f"{schema_name}: tool round {record.rounds} ({', '.join(b.name for b in tool_uses)})")

    async def chat_with_tools_async(
        self,
        messages: List[dict],
        system: Optional[str] = None,
        tools: Optional[Dict[str, Tool]] = None,
        model: Optional[Union[ModelTier, str]] = None,
        max_tokens: int = MODEL_CONFIG.MAX_TOKENS,
        max_tool_rounds: int = MODEL_CONFIG.MAX_TOOL_ROUNDS,
        tool_context: Optional[Dict[str, Any]] = None,
    ) -> ModelResponse:
        """
        Free-text chat turn where the model may call tools before replying.

        Returns:
            ModelResponse with `text` set to the final reply
        """
        tools = tools or {}
        tool_context = tool_context or {}
        tool_defs = [t.to_anthropic() for t in tools.values()]

        conversation = list(messages)
        record = ModelResponse()
        model_id = self.get_model_id(model)

        while True:
            kwargs: Dict[str, Any] = {
                "model": model_id,
                "max_tokens": max_tokens,
                "messages": conversation,
            }
            if tool_defs:
                kwargs["tools"] = tool_defs
                # Past the round limit the model must answer in text
                if record.rounds >= max_tool_rounds:
                    kwargs["tool_choice"] = {"type": "none"}
            system_param = self._system_param(system)
            if system_param:
                kwargs["system"] = system_param

            response = await self._create_message(**kwargs)
            record.output_tokens += self.usage.add_response(response)

            tool_uses = [b for b in response.content if getattr(b, "type", None) == "tool_use"]
            if not tool_uses or record.rounds >= max_tool_rounds:
                record.text = _response_text(response)
                return record

            conversation.append({
                "role": "assistant",
                "content": [p for p in (_block_to_param(b) for b in response.content) if p],
            })
            conversation.append({
                "role": "user",
                "content": await self._run_tool_calls(tool_uses, tools, record, tool_context),
            })
            record.rounds += 1

    def get_usage_summary(self) -> dict:
        """Get token usage summary with cost estimates."""
        return {
            "input_tokens": self.usage.input_tokens,
            "output_tokens": self.usage.output_tokens,
            "total_tokens": self.usage.total_tokens,
            "cache_creation_tokens": self.usage.cache_creation_tokens,
            "cache_read_tokens": self.usage.cache_read_tokens,
            "estimated_cost_usd": f"${self.usage.estimate_cost(self.default_model):.4f}",
        }
