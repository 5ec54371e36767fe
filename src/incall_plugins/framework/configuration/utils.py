"""
Utility functions for common configuration patterns.
"""

from typing import Union
from pathlib import Path

from .builder import ConfigurationBuilder
from .core import InCallPluginsConfiguration
from .sources import ENVIRONMENT_PREFIX


def load_configuration_from_file(file_path: Union[str, Path]) -> InCallPluginsConfiguration:
    """
    Load configuration from a single YAML file with environment variable overrides.

    Args:
        file_path: Path to the YAML configuration file

    Returns:
        InCallPluginsConfiguration instance
    """
    return (ConfigurationBuilder()
            .add_yaml_source(file_path, 100)
            .add_environment_source(ENVIRONMENT_PREFIX, 200)
            .build())


def load_default_configuration() -> InCallPluginsConfiguration:
    """Load default configuration with environment variable support."""
    return (ConfigurationBuilder()
            .add_environment_source(ENVIRONMENT_PREFIX, 200)
            .build())
