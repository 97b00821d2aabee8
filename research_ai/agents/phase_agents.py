"""
Phase Agents
============
Builds the Intake agent and the six phase agents from the phase registry.
All of them share one ClaudeClient, one memory store, and the two search
tools.

When a workflow getter is supplied, the Intake agent also gets the
run-research-execution-workflow tool, but only for chat turns
(IntakeAgent.chat). The pipeline's own Intake step never sees it.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from typing import Any, Callable, Dict, Optional

from loguru import logger

from research_ai.agents.base import StructuredAgent
from research_ai.agents.prompts import INTAKE_CHAT_ADDENDUM
from research_ai.agents.registry import INTAKE_ID, PhaseSpec, get_phase_spec, list_phases
from research_ai.llm.claude_client import ClaudeClient
from research_ai.memory.store import ThreadMemory
from research_ai.tools.base import Tool
from research_ai.tools.search import SerperSearchClient, create_search_tools
from research_ai.tools.workflow_tools import create_format_query_tool, create_run_workflow_tool


class IntakeAgent(StructuredAgent):
    """
    Intake step agent that can also hold a conversation.

    As a pipeline step it behaves like every StructuredAgent and returns
    {"enrichedPrompt": ...}. In chat it replies with text and may start the
    pipeline through the run-workflow tool.
    """

    def __init__(self, *args: Any, chat_tools: Optional[Dict[str, Tool]] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.chat_tools: Dict[str, Tool] = dict(chat_tools or {})

    @property
    def chat_system_prompt(self) -> str:
        if "run-research-execution-workflow" in self.chat_tools:
            return self.system_prompt + "\n" + INTAKE_CHAT_ADDENDUM
        return self.system_prompt

    async def chat(self, message: str, thread_id: str, resource_id: Optional[str] = None) -> str:
        """
        One conversational turn on a memory thread.

        Args:
            message: User message
            thread_id: Conversation thread (history is replayed from memory)
            resource_id: Owning resource (defaults to the thread id)

        Returns:
            The agent's text reply
        """
        messages = self._history(thread_id) + [{"role": "user", "content": message}]
        response = await self.client.chat_with_tools_async(
            messages=messages,
            system=self.chat_system_prompt,
            tools={**self.tools, **self.chat_tools},
        )

        reply = response.text.strip()
        self._remember(thread_id, resource_id or thread_id, message, reply)
        logger.info(f"{self.id} chat on {thread_id}: {len(response.tool_calls)} tool calls")
        return reply


def _build_agent(
    spec: PhaseSpec,
    client: ClaudeClient,
    memory: Optional[ThreadMemory],
    tools: Dict[str, Tool],
) -> StructuredAgent:
    return StructuredAgent(
        id=spec.agent_id,
        name=spec.name,
        instructions=spec.instructions,
        output_schema=spec.output_schema,
        client=client,
        tools=tools,
        memory=memory,
        schema_name=spec.schema_name,
    )


def create_phase_agents(
    client: ClaudeClient,
    memory: Optional[ThreadMemory] = None,
    get_workflow: Optional[Callable[[], Any]] = None,
    search_client: Optional[SerperSearchClient] = None,
) -> Dict[str, StructuredAgent]:
    """
    Create the Intake agent and the Phase A-F agents.

    Args:
        client: Shared ClaudeClient
        memory: Shared thread memory (None disables history)
        get_workflow: Late-bound workflow getter for the Intake chat tool
        search_client: Optional shared Serper client for the search tools

    Returns:
        Agents keyed by "intake" and phase letters A-F
    """
    tools = create_search_tools(search_client)

    chat_tools: Dict[str, Tool] = {}
    if get_workflow is not None:
        for tool in (create_run_workflow_tool(get_workflow), create_format_query_tool()):
            chat_tools[tool.id] = tool

    intake = get_phase_spec(INTAKE_ID)
    agents: Dict[str, StructuredAgent] = {
        INTAKE_ID: IntakeAgent(
            id=intake.agent_id,
            name=intake.name,
            instructions=intake.instructions,
            output_schema=intake.output_schema,
            client=client,
            tools=tools,
            memory=memory,
            schema_name=intake.schema_name,
            chat_tools=chat_tools,
        ),
    }
    for spec in list_phases():
        agents[spec.id] = _build_agent(spec, client, memory, tools)

    logger.info(f"Created {len(agents)} agents: {', '.join(a.id for a in agents.values())}")
    return agents
