"""Telemetry helpers and metrics."""

from .metrics import (
    CONVERSION_COUNT,
    CONVERSION_LATENCY,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_conversion,
    observe_request,
)

__all__ = [
    "CONVERSION_COUNT",
    "CONVERSION_LATENCY",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_conversion",
    "observe_request",
]
