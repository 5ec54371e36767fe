"""
Structured Logging for incall_plugins

Provides structured JSON logging with correlation IDs on top of the standard
``logging`` module. Modules keep using ``logging.getLogger(__name__)``; this
module supplies the context variables, formatters and handler setup.
"""

import json
import logging
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Union
from contextvars import ContextVar

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
call_id_var: ContextVar[Optional[str]] = ContextVar('call_id', default=None)

ROOT_LOGGER_NAME = "incall_plugins"

# Attributes present on every LogRecord; anything else came in through ``extra``.
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "correlation_id", "call_id",
}


class LogLevel(Enum):
    """Log levels for the incall_plugins logging setup"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_logging_level(self) -> int:
        return getattr(logging, self.value)


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith('_')
    }


class CorrelationFilter(logging.Filter):
    """Stamps every record with the current correlation and call IDs."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        record.call_id = call_id_var.get()
        return True


class JSONLogFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', None),
            'call_id': getattr(record, 'call_id', None),
        }

        extra = _extra_fields(record)
        if extra:
            payload['extra'] = extra

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload['exception'] = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value),
            }

        # Remove None values to keep logs clean
        payload = {k: v for k, v in payload.items() if v is not None}
        return json.dumps(payload, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development/debugging"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        base_msg = f"[{timestamp}] {record.levelname} {record.name}: {record.getMessage()}"

        correlation_id = getattr(record, 'correlation_id', None)
        if correlation_id:
            base_msg += f" [correlation_id={correlation_id}]"

        extra = _extra_fields(record)
        if extra:
            extra_str = ', '.join(f"{k}={v}" for k, v in extra.items())
            base_msg += f" [{extra_str}]"

        if record.exc_info:
            base_msg += "\n" + self.formatException(record.exc_info)

        return base_msg


def configure_logging(
    logging_config: Optional[Any] = None,
    stream: TextIO = sys.stdout
) -> List[logging.Handler]:
    """
    Configure handlers on the ``incall_plugins`` logger from a LoggingConfiguration.

    Previously installed handlers from an earlier call are replaced. Returns the
    handlers that were installed.
    """
    level = LogLevel(getattr(logging_config, 'level', 'INFO'))
    use_json = getattr(logging_config, 'format', 'json') == 'json'
    output = getattr(logging_config, 'output', 'console')
    file_path = getattr(logging_config, 'file_path', None)

    formatter = JSONLogFormatter() if use_json else HumanReadableFormatter()
    correlation_filter = CorrelationFilter()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.to_logging_level())
    for handler in list(root_logger.handlers):
        if getattr(handler, '_incall_plugins_handler', False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: List[logging.Handler] = []
    if output in ('console', 'both'):
        handlers.append(logging.StreamHandler(stream))
    if output in ('file', 'both') and file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding='utf-8'))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(correlation_filter)
        handler._incall_plugins_handler = True
        root_logger.addHandler(handler)

    return handlers


@contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Context manager for correlation ID tracking"""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


@contextmanager
def call_context(call_id: str) -> Iterator[str]:
    """Context manager binding log records to a call ID"""
    token = call_id_var.set(call_id)
    try:
        yield call_id
    finally:
        call_id_var.reset(token)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context"""
    return correlation_id_var.get()


def get_call_id() -> Optional[str]:
    """Get the current call ID from context"""
    return call_id_var.get()
