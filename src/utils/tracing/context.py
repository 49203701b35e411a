"""
Span helpers that work on the current span.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace

from .tracer import get_tracer

_ATTRIBUTE_TYPES = (str, bool, int, float)


def _attribute_value(value: Any) -> str | bool | int | float:
    return value if isinstance(value, _ATTRIBUTE_TYPES) else str(value)


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes: Any,
) -> Iterator[trace.Span]:
    """
    Run a block inside a new span.

    Exceptions are recorded on the span and re-raised.

    Example:
        >>> with trace_operation("execute_batch", collection="locations") as span:
        ...     result = collection.bulk_write(ops, ordered=False)
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(
        operation_name,
        kind=kind,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        for key, value in attributes.items():
            span.set_attribute(key, _attribute_value(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attributes(**attributes: Any) -> None:
    """Add attributes to the current span, if it is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        for key, value in attributes.items():
            current_span.set_attribute(key, _attribute_value(value))


def add_span_event(name: str, **attributes: Any) -> None:
    """Add an event to the current span, if it is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        current_span.add_event(
            name,
            attributes={key: _attribute_value(value) for key, value in attributes.items()},
        )
