"""
R&D Execution Workflow
======================
Chains the Intake agent and the six phase agents into one linear run:

    intake -> bridge-intake-to-a -> phase-a -> bridge-a-to-b -> phase-b
           -> ... -> bridge-e-to-f -> phase-f

Every agent step produces structured output that is validated against its
schema before the next step starts. For Phases B-F the previous record's
fields (all but `phase`) are laid over the model's output first, so fields
decided in an earlier phase reach the Phase F record unchanged.

Any exception or schema violation stops the run with status `failed`.
There are no retries and no partial results.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from research_ai.agents.base import StructuredAgent
from research_ai.agents.registry import (
    INTAKE_ID,
    PhaseSpec,
    get_phase_spec,
    list_phases,
    previous_phase_id,
)
from research_ai.pipeline.bridges import PHASE_BRIDGES, Bridge, bridge_intake_to_a
from research_ai.pipeline.context import RunContext, StepRecord, new_run_id
from research_ai.schemas.phase_records import (
    AGENT_INPUT_SCHEMA,
    INTAKE_OUTPUT_SCHEMA,
    PHASE_IDS,
    PHASE_SCHEMAS,
    WORKFLOW_INPUT_SCHEMA,
)
from research_ai.tracing import get_tracer, safe_set_span_attributes
from research_ai.utils.schema_validation import (
    strip_unknown_fields,
    validate_against_schema,
    validate_phase_record,
)

WORKFLOW_ID = "research-execution"
WORKFLOW_NAME = "R&D Execution (Unified: Intake + Phases A–F)"
WORKFLOW_DESCRIPTION = (
    "Single workflow: Intake (research and enrichment) then Phases A–F. "
    "Input: user prompt. Output: final Phase F result."
)


class StepKind(Enum):
    AGENT = "agent"
    BRIDGE = "bridge"


class RunStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


StepExecutor = Callable[[Dict[str, Any], RunContext], Awaitable[Dict[str, Any]]]


@dataclass
class Step:
    """One node in the chain."""
    id: str
    description: str
    kind: StepKind
    input_schema: Dict[str, Any]
    output_schema: Dict[str, Any]
    execute: StepExecutor
    phase_id: Optional[str] = None  # "intake" or phase letter for agent steps


@dataclass
class WorkflowOutcome:
    """Result of one workflow run."""
    status: str
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    steps: List[StepRecord] = field(default_factory=list)
    run_id: str = ""
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "status": self.status,
            "result": self.result,
            "error": self.error,
            "steps": [s.to_dict() for s in self.steps],
            "elapsed_seconds": self.elapsed_seconds,
        }


def carry_forward(previous_record: Dict[str, Any], output: Dict[str, Any]) -> Dict[str, Any]:
    """
    Lay the previous record's fields over a phase output.

    Returns a new dict; neither argument is modified. `phase` is always taken
    from `output`. A warning names carried fields the model changed.
    """
    merged = copy.deepcopy(output)
    drifted = []
    for key, value in previous_record.items():
        if key == "phase":
            continue
        if key in output and output[key] != value:
            drifted.append(key)
        merged[key] = copy.deepcopy(value)

    if drifted:
        logger.warning(
            f"Phase {output.get('phase', '?')} output changed carried fields {sorted(drifted)}; "
            "restored earlier values"
        )
    return merged


def _agent_step(spec: PhaseSpec, agent: StructuredAgent) -> Step:
    async def _execute(input_data: Dict[str, Any], run_context: RunContext) -> Dict[str, Any]:
        result = await agent.generate(input_data["prompt"], run_context)
        return result.structured_data

    return Step(
        id=spec.step_id,
        description=spec.name,
        kind=StepKind.AGENT,
        input_schema=AGENT_INPUT_SCHEMA,
        output_schema=spec.output_schema,
        execute=_execute,
        phase_id=spec.id,
    )


def _bridge_step(step_id: str, description: str, bridge: Bridge, input_schema: Dict[str, Any]) -> Step:
    async def _execute(input_data: Dict[str, Any], run_context: RunContext) -> Dict[str, Any]:
        return bridge(input_data)

    return Step(
        id=step_id,
        description=description,
        kind=StepKind.BRIDGE,
        input_schema=input_schema,
        output_schema=AGENT_INPUT_SCHEMA,
        execute=_execute,
    )


class ResearchExecutionWorkflow:
    """
    The fixed Intake + Phases A-F chain.

    Usage:
        workflow = ResearchExecutionWorkflow(agents)
        run = workflow.create_run()
        outcome = await run.start({"prompt": "Validate demand for ..."})
    """

    id = WORKFLOW_ID
    name = WORKFLOW_NAME
    description = WORKFLOW_DESCRIPTION
    input_schema = WORKFLOW_INPUT_SCHEMA
    output_schema = PHASE_SCHEMAS["F"]

    def __init__(self, agents: Dict[str, StructuredAgent]):
        """
        Build the step chain.

        Args:
            agents: Agents keyed by "intake" and phase letters A-F
        """
        missing = [s.id for s in list_phases(include_intake=True) if s.id not in agents]
        if missing:
            raise ValueError(f"Missing agents for steps: {missing}")

        self.agents = agents
        self.steps: List[Step] = self._build_steps()
        self.tracer = get_tracer(WORKFLOW_ID)

        logger.debug(f"{WORKFLOW_ID}: {len(self.steps)} steps ({', '.join(s.id for s in self.steps)})")

    def _build_steps(self) -> List[Step]:
        intake = get_phase_spec(INTAKE_ID)
        steps = [
            _agent_step(intake, self.agents[INTAKE_ID]),
            _bridge_step(
                "bridge-intake-to-a",
                "Pass enriched prompt to Phase A",
                bridge_intake_to_a,
                INTAKE_OUTPUT_SCHEMA,
            ),
        ]

        previous: Optional[PhaseSpec] = None
        for spec in list_phases():
            if previous is not None:
                steps.append(_bridge_step(
                    f"bridge-{previous.id.lower()}-to-{spec.id.lower()}",
                    f"Format Phase {previous.id} output as prompt for Phase {spec.id}",
                    PHASE_BRIDGES[spec.id],
                    previous.output_schema,
                ))
            steps.append(_agent_step(spec, self.agents[spec.id]))
            previous = spec
        return steps

    @property
    def step_ids(self) -> List[str]:
        return [s.id for s in self.steps]

    def create_run(self, run_id: Optional[str] = None) -> "WorkflowRun":
        return WorkflowRun(self, run_id=run_id or new_run_id())


class WorkflowRun:
    """One execution of the workflow. Not reusable."""

    def __init__(self, workflow: ResearchExecutionWorkflow, run_id: str):
        self.workflow = workflow
        self.run_id = run_id
        self.status = RunStatus.PENDING
        self.step_log: List[StepRecord] = []
        self.records: Dict[str, Dict[str, Any]] = {}

    def _validate_output(self, step: Step, output: Any) -> None:
        if step.phase_id == INTAKE_ID:
            validate_against_schema(output, step.output_schema, label="Intake output")
        elif step.phase_id is not None:
            validate_phase_record(output, step.phase_id)

    async def _run_step(self, step: Step, data: Dict[str, Any], run_context: RunContext) -> Dict[str, Any]:
        record = StepRecord(step_id=step.id, kind=step.kind.value)
        self.step_log.append(record)

        with self.workflow.tracer.start_as_current_span(step.id) as span:
            safe_set_span_attributes(span, {
                "run_id": self.run_id,
                "step_kind": step.kind.value,
                "phase": step.phase_id,
            })
            try:
                if step.kind is StepKind.AGENT:
                    validate_against_schema(data, step.input_schema, label=f"{step.id} input")
                output = await step.execute(data, run_context)
                if step.kind is StepKind.AGENT:
                    stripped = strip_unknown_fields(output, step.output_schema)
                    if stripped != output:
                        logger.debug(f"{step.id}: dropped fields outside the output schema")
                    output = stripped
                previous = self.records.get(previous_phase_id(step.phase_id)) if step.phase_id in PHASE_IDS else None
                if previous is not None:
                    output = carry_forward(previous, output)
                self._validate_output(step, output)
            except Exception as e:
                record.finish(success=False, error=str(e))
                safe_set_span_attributes(span, {"success": False, "error": str(e)})
                raise

            record.finish(success=True)
            safe_set_span_attributes(span, {"success": True})

        if step.kind is StepKind.AGENT and step.phase_id != INTAKE_ID:
            self.records[step.phase_id] = output
        return output

    async def start(
        self,
        input_data: Dict[str, Any],
        run_context: Optional[RunContext] = None,
    ) -> WorkflowOutcome:
        """
        Execute every step in order.

        Args:
            input_data: {"prompt": str}
            run_context: Scope for memory; defaults to thread = resource = run id

        Returns:
            WorkflowOutcome with the Phase F record on success
        """
        if self.status is not RunStatus.PENDING:
            raise RuntimeError(f"Run {self.run_id} was already started")

        run_context = run_context or RunContext(run_id=self.run_id)
        self.status = RunStatus.RUNNING
        start_time = time.time()
        logger.info(f"{WORKFLOW_ID} run {self.run_id} started")

        with self.workflow.tracer.start_as_current_span(WORKFLOW_ID) as span:
            safe_set_span_attributes(span, {"run_id": self.run_id, "thread_id": run_context.thread_id})

            data: Dict[str, Any] = input_data
            try:
                validate_against_schema(input_data, WORKFLOW_INPUT_SCHEMA, label="Workflow input")
                for step in self.workflow.steps:
                    logger.info(f"{WORKFLOW_ID} run {self.run_id}: {step.id}")
                    data = await self._run_step(step, data, run_context)
            except Exception as e:
                error = str(e) or type(e).__name__
                self.status = RunStatus.FAILED
                safe_set_span_attributes(span, {"status": self.status.value, "error": error})
                logger.error(f"{WORKFLOW_ID} run {self.run_id} failed: {error}")
                return self._outcome(error=error, started=start_time)

            self.status = RunStatus.SUCCESS
            safe_set_span_attributes(span, {
                "status": self.status.value,
                "final_status": data.get("status"),
            })

        logger.info(f"{WORKFLOW_ID} run {self.run_id} finished in {time.time() - start_time:.1f}s")
        return self._outcome(result=data, started=start_time)

    def _outcome(
        self,
        started: float,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> WorkflowOutcome:
        return WorkflowOutcome(
            status=self.status.value,
            result=result,
            error=error,
            steps=list(self.step_log),
            run_id=self.run_id,
            elapsed_seconds=round(time.time() - started, 3),
        )
