"""
Workflow Tracing
================
OpenTelemetry spans for research-execution runs: one span per run, one child
span per step, and agent attributes (id, tokens, tools) on the step span.

Whether spans leave the process is decided once, by init_tracing(). With
ENABLE_TRACING=true a TracerProvider exports to the OTLP endpoint and the
httpx clients (Anthropic, Serper) are instrumented. Otherwise the global
provider stays the OpenTelemetry default and every span is a no-op. Attribute
helpers never raise, so a broken collector cannot fail a run.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import atexit
from typing import Any, Mapping, Optional

from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from research_ai.config import TRACING

MAX_ATTRIBUTE_LENGTH = 2048
MAX_LIST_ITEM_LENGTH = 256

_tracer: Optional[trace.Tracer] = None
_provider: Optional[TracerProvider] = None


def init_tracing(enabled: Optional[bool] = None) -> trace.Tracer:
    """
    Decide once whether spans are exported and return the service tracer.

    Later calls return the first tracer unchanged, whatever `enabled` says.

    Args:
        enabled: Override for ENABLE_TRACING (used by tests)

    Returns:
        The research-ai tracer (a no-op tracer when export is disabled)
    """
    global _tracer, _provider
    if _tracer is not None:
        return _tracer

    if TRACING.ENABLED if enabled is None else enabled:
        _provider = TracerProvider(resource=Resource.create({SERVICE_NAME: TRACING.SERVICE_NAME}))
        _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=TRACING.OTLP_ENDPOINT)))
        trace.set_tracer_provider(_provider)
        HTTPXClientInstrumentor().instrument()
        atexit.register(shutdown_tracing)
        logger.info(f"Tracing enabled: run and step spans export to {TRACING.OTLP_ENDPOINT}")
    else:
        logger.debug("Tracing disabled; run and step spans are no-ops")

    _tracer = trace.get_tracer(TRACING.SERVICE_NAME)
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans. Registered at exit when export is enabled."""
    global _provider
    if _provider is None:
        return
    try:
        _provider.shutdown()
    except Exception as e:
        logger.debug(f"Tracer shutdown failed: {e}")
    _provider = None


def get_tracer(name: str = TRACING.SERVICE_NAME) -> trace.Tracer:
    """Tracer for a component, e.g. get_tracer("research-execution")."""
    return trace.get_tracer(name)


def _attribute_value(value: Any) -> Any:
    """Coerce a value to an OpenTelemetry attribute type, or None to skip it.

    Runs and steps set ids, statuses and phase letters (str), token counts
    (int), success flags (bool) and tool names (list of str).
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(item)[:MAX_LIST_ITEM_LENGTH] for item in value]
    return str(value)[:MAX_ATTRIBUTE_LENGTH]


def safe_set_span_attributes(span: Any, attributes: Mapping[str, Any]) -> None:
    """Set run or step attributes on a span; never raises."""
    setter = getattr(span, "set_attribute", None)
    if not callable(setter):
        return

    for key, value in attributes.items():
        value = _attribute_value(value)
        if value is None:
            continue
        try:
            setter(key, value)
        except Exception as e:
            logger.debug(f"Dropped span attribute {key}: {e}")


def safe_set_current_span_attributes(attributes: Mapping[str, Any]) -> None:
    """Set attributes on the active step span (agents call this mid-step)."""
    safe_set_span_attributes(trace.get_current_span(), attributes)
