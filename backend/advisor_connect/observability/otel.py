from __future__ import annotations

import os

from fastapi import FastAPI

from ..settings import Settings
from .logging import get_logger


def _truthy(v: str | None) -> bool:
    return str(v or "").strip().lower() in ("1", "true", "yes", "y", "on")


def otel_enabled(settings: Settings) -> bool:
    return bool(getattr(settings, "otel_enabled", False)) or _truthy(
        os.environ.get("OTEL_ENABLED")
    )


def configure_otel(settings: Settings) -> None:
    """
    Optional OpenTelemetry setup.

    - If OTEL is disabled, do nothing.
    - If the `otel` extra is not installed, log once and do nothing.
    - Without an exporter endpoint, spans go to the console exporter.
    """
    if not otel_enabled(settings):
        return

    log = get_logger("otel")

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )
    except ImportError:
        log.warning("otel_disabled_missing_deps")
        return

    service_name = str(
        getattr(settings, "otel_service_name", None)
        or os.environ.get("OTEL_SERVICE_NAME")
        or "advisor-connect-backend"
    ).strip()

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    endpoint = str(
        getattr(settings, "otel_exporter_otlp_endpoint", None)
        or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
        or ""
    ).strip()

    if endpoint:
        exporter = OTLPSpanExporter(endpoint=endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        log.info("otel_configured", exporter="otlp_http", endpoint=endpoint)
    else:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        log.info("otel_configured", exporter="console")

    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI, settings: Settings) -> None:
    """
    Wire instrumentation for inbound HTTP and the DynamoDB client.
    """
    if not otel_enabled(settings):
        return

    log = get_logger("otel")

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        log.info("otel_instrumented", target="fastapi")
    except ImportError:
        log.warning("otel_instrument_failed", target="fastapi")

    if settings.normalized_storage_backend != "dynamodb":
        return

    try:
        from opentelemetry.instrumentation.botocore import BotocoreInstrumentor

        BotocoreInstrumentor().instrument()
        log.info("otel_instrumented", target="botocore")
    except ImportError:
        log.warning("otel_instrument_failed", target="botocore")
