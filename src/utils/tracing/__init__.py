"""
Tracing for sync runs using OpenTelemetry.

Spans cover reading the source, orphan detection and the bulk write. Until
``initialize_tracing`` is called every span is a no-op.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_attributes",
    "add_span_event",
]
