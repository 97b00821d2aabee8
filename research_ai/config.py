"""
Centralized Configuration
=========================
Centralized configuration values and constants for the R&D Execution pipeline.

This module provides:
- Timeout configuration (model calls, search calls, run budget)
- Model and search defaults
- Memory and tracing settings
- Lenient .env loading

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path


def load_env_file_lenient(env_path: Path = None) -> None:
    """Load .env from the working directory without raising or printing parse warnings.

    Existing environment variables always win.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return

    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return

    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if not key:
            continue
        if not re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", key):
            continue
        os.environ.setdefault(key, value)


load_env_file_lenient()


@dataclass(frozen=True)
class TimeoutConfig:
    """Centralized timeout configuration in seconds."""

    # LLM API timeouts (Claude)
    LLM_API: int = 600
    LLM_CONNECT: int = 30

    # Search API (Serper)
    SEARCH_API: int = int(os.getenv("RESEARCH_AI_SEARCH_TIMEOUT", "30"))

    # Wall-clock budget for one full pipeline run, enforced by the caller
    RUN_BUDGET: int = int(os.getenv("RESEARCH_AI_RUN_TIMEOUT", "600"))


@dataclass(frozen=True)
class ModelConfig:
    """Model selection and per-call limits."""

    DEFAULT_MODEL: str = os.getenv("RESEARCH_AI_MODEL", "claude-sonnet-4-6")
    MAX_TOKENS: int = int(os.getenv("RESEARCH_AI_MAX_TOKENS", "8192"))

    # Tool-use round trips allowed before the model must submit its structured output
    MAX_TOOL_ROUNDS: int = int(os.getenv("RESEARCH_AI_MAX_TOOL_ROUNDS", "8"))


@dataclass(frozen=True)
class SearchConfig:
    """Web search (Serper) configuration."""

    API_URL: str = "https://google.serper.dev/search"
    API_KEY_ENV: str = "SERPER_API_KEY"
    DEFAULT_NUM_RESULTS: int = 5
    MAX_NUM_RESULTS: int = 10
    DEEP_RESULTS_PER_QUERY: int = 3
    MAX_DEEP_QUERIES: int = 5


@dataclass(frozen=True)
class MemoryConfig:
    """Conversation memory configuration."""

    HOME: str = os.getenv("RESEARCH_AI_HOME", ".research_ai")
    ENABLED: bool = os.getenv("RESEARCH_AI_MEMORY", "true").lower() == "true"

    # Recent thread messages replayed into each agent call
    LAST_MESSAGES: int = int(os.getenv("RESEARCH_AI_LAST_MESSAGES", "10"))


@dataclass(frozen=True)
class TracingConfig:
    """Tracing configuration."""

    SERVICE_NAME: str = "research-ai"
    OTLP_ENDPOINT: str = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    ENABLED: bool = os.getenv("ENABLE_TRACING", "false").lower() == "true"


# Global singleton instances
TIMEOUTS = TimeoutConfig()
MODELS = ModelConfig()
SEARCH = SearchConfig()
MEMORY = MemoryConfig()
TRACING = TracingConfig()


def get_timeout(operation: str) -> int:
    """Get timeout for a specific operation type.

    Args:
        operation: One of 'llm', 'llm_connect', 'search', 'run'

    Returns:
        Timeout in seconds
    """
    mapping = {
        "llm": TIMEOUTS.LLM_API,
        "llm_connect": TIMEOUTS.LLM_CONNECT,
        "search": TIMEOUTS.SEARCH_API,
        "run": TIMEOUTS.RUN_BUDGET,
    }
    return mapping.get(operation, TIMEOUTS.LLM_API)


def get_serper_api_key() -> str:
    """Return the trimmed Serper key, or an empty string when unset."""
    return (os.getenv(SEARCH.API_KEY_ENV) or "").strip()
