"""
Structured Exception Hierarchy

Provides the exception hierarchy used across incall_plugins. Every exception
carries an error code, context data and a correlation ID so failures can be
traced through the structured logs.
"""

from typing import Dict, List, Any, Optional
import uuid
from datetime import datetime, timezone


class InCallPluginsException(Exception):
    """
    Base exception class for all incall_plugins exceptions.

    Provides structured error information including error codes,
    context data, and correlation IDs for tracing.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(InCallPluginsException):
    """Raised when configuration-related errors occur."""

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        validation_errors: Optional[List[Any]] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if config_path:
            context['config_path'] = config_path
        if validation_errors:
            context['validation_errors'] = validation_errors

        super().__init__(
            message=message,
            error_code=kwargs.pop('error_code', "CONFIG_ERROR"),
            context=context,
            **kwargs
        )


class PluginError(InCallPluginsException):
    """Raised when plugin catalog operations fail."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        mime_type: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if component:
            context['component'] = component
        if mime_type:
            context['mime_type'] = mime_type

        super().__init__(
            message=message,
            error_code="PLUGIN_ERROR",
            context=context,
            **kwargs
        )


class PluginInfoValidationError(InCallPluginsException):
    """Raised by PluginInfo.Builder.build() when required fields are unset."""

    def __init__(self, missing_fields: List[str], **kwargs):
        self.missing_fields = list(missing_fields)
        context = kwargs.pop('context', {})
        context['missing_fields'] = self.missing_fields

        super().__init__(
            message=f"Missing required PluginInfo fields: {', '.join(self.missing_fields)}",
            error_code="PLUGIN_INFO_VALIDATION_ERROR",
            context=context,
            **kwargs
        )


class UnsupportedLookupTargetError(InCallPluginsException):
    """Raised when a contact lookup URI is neither a contact URI nor a data URI."""

    def __init__(self, lookup_uri: str, **kwargs):
        self.lookup_uri = lookup_uri
        context = kwargs.pop('context', {})
        context['lookup_uri'] = lookup_uri

        super().__init__(
            message=f'Input Uri must be contact Uri or data Uri (input: "{lookup_uri}")',
            error_code="UNSUPPORTED_LOOKUP_TARGET",
            context=context,
            **kwargs
        )


class AggregationError(InCallPluginsException):
    """Raised when a plugin info aggregation cannot be scheduled."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if operation:
            context['operation'] = operation

        super().__init__(
            message=message,
            error_code="AGGREGATION_ERROR",
            context=context,
            **kwargs
        )
