"""
Observability - structured logging with correlation IDs.
"""

from .logging import (
    LogLevel, CorrelationFilter, JSONLogFormatter, HumanReadableFormatter,
    configure_logging, correlation_context, call_context,
    get_correlation_id, get_call_id
)

__all__ = [
    "LogLevel",
    "CorrelationFilter",
    "JSONLogFormatter",
    "HumanReadableFormatter",
    "configure_logging",
    "correlation_context",
    "call_context",
    "get_correlation_id",
    "get_call_id",
]
