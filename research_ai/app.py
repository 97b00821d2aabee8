"""
Application Assembly
====================
Wires the shared pieces together in the order the late-bound workflow tool
requires:

1. Memory store and tracing
2. A WorkflowHandle (empty)
3. Agents, with the handle as the Intake chat's workflow getter
4. The workflow, which then fills the handle

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger

from research_ai.agents.base import StructuredAgent
from research_ai.agents.phase_agents import IntakeAgent, create_phase_agents
from research_ai.agents.registry import INTAKE_ID
from research_ai.config import MEMORY
from research_ai.llm.claude_client import ClaudeClient
from research_ai.memory.store import ThreadMemory
from research_ai.pipeline.handle import WorkflowHandle
from research_ai.pipeline.runner import RunReport, run_research_execution
from research_ai.pipeline.workflow import ResearchExecutionWorkflow
from research_ai.tools.search import SerperSearchClient
from research_ai.tracing import init_tracing


@dataclass
class ResearchApp:
    """The assembled agents, workflow and memory."""
    agents: Dict[str, StructuredAgent]
    workflow: ResearchExecutionWorkflow
    memory: Optional[ThreadMemory]
    handle: WorkflowHandle

    @property
    def intake(self) -> IntakeAgent:
        return self.agents[INTAKE_ID]

    async def run(self, prompt: str, timeout: Optional[float] = None) -> RunReport:
        """Run the full pipeline once under the run budget."""
        return await run_research_execution(self.workflow, prompt, timeout_seconds=timeout)

    async def chat(self, message: str, thread_id: str) -> str:
        """One Intake chat turn; the agent may start the pipeline."""
        return await self.intake.chat(message, thread_id)


def create_app(
    client: Optional[ClaudeClient] = None,
    memory: Optional[ThreadMemory] = None,
    search_client: Optional[SerperSearchClient] = None,
) -> ResearchApp:
    """
    Build the application.

    Args:
        client: ClaudeClient (created from ANTHROPIC_API_KEY if omitted)
        memory: Thread memory (created under RESEARCH_AI_HOME if omitted and enabled)
        search_client: Optional shared Serper client

    Returns:
        ResearchApp with a workflow handle that is already filled
    """
    init_tracing()

    client = client or ClaudeClient()
    if memory is None and MEMORY.ENABLED:
        memory = ThreadMemory()

    handle = WorkflowHandle()
    agents = create_phase_agents(client, memory=memory, get_workflow=handle, search_client=search_client)
    workflow = ResearchExecutionWorkflow(agents)
    handle.set(workflow)

    logger.info(f"Research app ready: workflow {workflow.id} with {len(workflow.steps)} steps")
    return ResearchApp(agents=agents, workflow=workflow, memory=memory, handle=handle)
