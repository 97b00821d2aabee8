"""
Agent Tools Module
==================
Search tools shared by every phase agent, and the workflow tools the Intake
chat uses.
"""

from .base import Tool, clean_schema_for_tool
from .search import (
    SerperSearchClient,
    create_deep_research_tool,
    create_internet_search_tool,
    create_search_tools,
    deep_research,
    internet_search,
)
from .workflow_tools import (
    create_format_query_tool,
    create_run_workflow_tool,
    format_research_query,
)

__all__ = [
    "Tool",
    "clean_schema_for_tool",
    "SerperSearchClient",
    "create_deep_research_tool",
    "create_internet_search_tool",
    "create_search_tools",
    "deep_research",
    "internet_search",
    "create_format_query_tool",
    "create_run_workflow_tool",
    "format_research_query",
]
