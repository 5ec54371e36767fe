"""
Configuration Management System

Type-safe configuration management with YAML and environment variable
sources and validation.
"""

from .models import (
    AggregationConfiguration,
    LoggingConfiguration,
    FrameworkConfiguration
)

from .sources import (
    ConfigurationSource,
    YAMLConfigurationSource,
    EnvironmentConfigurationSource
)

from .validation import (
    ConfigurationValidator,
    ConfigurationValidationError
)

from .core import InCallPluginsConfiguration

from .builder import ConfigurationBuilder

from .utils import (
    load_configuration_from_file,
    load_default_configuration
)

__all__ = [
    # Models
    'AggregationConfiguration',
    'LoggingConfiguration',
    'FrameworkConfiguration',

    # Sources
    'ConfigurationSource',
    'YAMLConfigurationSource',
    'EnvironmentConfigurationSource',

    # Validation
    'ConfigurationValidator',
    'ConfigurationValidationError',

    # Core
    'InCallPluginsConfiguration',

    # Builder
    'ConfigurationBuilder',

    # Utilities
    'load_configuration_from_file',
    'load_default_configuration'
]
