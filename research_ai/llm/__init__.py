"""
LLM Client Module
=================
Provides Claude access with tool use and structured output.
"""

from .claude_client import ClaudeClient, ModelResponse, ModelTier, TokenUsage

__all__ = [
    "ClaudeClient",
    "ModelResponse",
    "ModelTier",
    "TokenUsage",
]
