"""
OpenTelemetry Distributed Tracing

Configures an OpenTelemetry tracer provider for the marketplace services.
Spans wrap the multi-step write paths (reservation, sale finalization, seller
removal) so a slow or failing step can be located.
"""

import logging
from typing import Dict

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

_tracers: Dict[str, trace.Tracer] = {}
_initialized = False


def setup_tracing(
    service_name: str = "secondhand-backend",
    enable: bool = True,
    export_to_console: bool = False,
) -> None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        enable: Enable/disable tracing
        export_to_console: Print finished spans to stdout (local debugging)
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    resource = Resource(attributes={SERVICE_NAME: service_name})
    tracer_provider = TracerProvider(resource=resource)

    if export_to_console:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")


def get_tracer(name: str = __name__) -> trace.Tracer:
    """
    Get tracer instance for creating custom spans.

    Without ``setup_tracing`` the global no-op provider is used, so spans cost
    nothing in tests.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("reserve"):
            ...
    """
    if name not in _tracers:
        _tracers[name] = trace.get_tracer(name)

    return _tracers[name]


def add_span_attributes(span: trace.Span, **attributes) -> None:
    """Add custom attributes to a span, stringifying values."""
    for key, value in attributes.items():
        span.set_attribute(key, str(value))
