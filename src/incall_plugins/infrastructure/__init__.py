"""
Infrastructure layer: exceptions and observability.
"""

from .exceptions import (
    InCallPluginsException,
    ConfigurationError,
    PluginError,
    PluginInfoValidationError,
    UnsupportedLookupTargetError,
    AggregationError,
)

__all__ = [
    "InCallPluginsException",
    "ConfigurationError",
    "PluginError",
    "PluginInfoValidationError",
    "UnsupportedLookupTargetError",
    "AggregationError",
]
