"""
Core configuration management class.
"""

import threading
import logging
from typing import Dict, Any, Optional, List, Callable

from .models import AggregationConfiguration, FrameworkConfiguration, LoggingConfiguration
from .sources import ConfigurationSource
from .validation import ConfigurationValidator

logger = logging.getLogger(__name__)


class InCallPluginsConfiguration:
    """
    Layered configuration for incall_plugins.

    Sources are merged in priority order (lowest first, highest wins) and the
    merged result is validated before it replaces the current configuration.
    """

    def __init__(self, sources: Optional[List[ConfigurationSource]] = None):
        self._sources = sources or []
        self._config_data: Dict[str, Any] = {}
        self._framework_config: Optional[FrameworkConfiguration] = None
        self._reload_callbacks: List[Callable[[], None]] = []
        self._config_lock = threading.RLock()

        if self._sources:
            self._load_configuration()

    def add_source(self, source: ConfigurationSource) -> None:
        """Add a configuration source."""
        with self._config_lock:
            self._sources.append(source)
            self._sources.sort(key=lambda s: s.get_priority())

    def _load_configuration(self) -> None:
        """Load and merge configuration from all sources."""
        merged_config: Dict[str, Any] = {}

        for source in sorted(self._sources, key=lambda s: s.get_priority()):
            try:
                source_config = source.load()
            except Exception as e:
                logger.error(f"Failed to load configuration from source: {type(source).__name__}: {e}")
                raise
            merged_config = self._deep_merge(merged_config, source_config)

        warnings = ConfigurationValidator.validate_configuration(merged_config)
        for warning in warnings:
            logger.warning(warning)

        framework_config = FrameworkConfiguration(**merged_config.get('framework', {}))

        with self._config_lock:
            self._config_data = merged_config
            self._framework_config = framework_config

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get_framework_config(self) -> FrameworkConfiguration:
        """Get framework configuration."""
        with self._config_lock:
            if self._framework_config is None:
                return FrameworkConfiguration()
            return self._framework_config

    def get_aggregation_config(self) -> AggregationConfiguration:
        return self.get_framework_config().aggregation_config

    def get_logging_config(self) -> LoggingConfiguration:
        return self.get_framework_config().logging_config

    def reload_configuration(self) -> None:
        """Reload configuration from all sources."""
        self._load_configuration()

        for callback in list(self._reload_callbacks):
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in reload callback: {e}")

    def get_raw_config(self) -> Dict[str, Any]:
        """Get the raw configuration data."""
        with self._config_lock:
            return self._config_data.copy()

    def add_reload_callback(self, callback: Callable[[], None]) -> None:
        """Add a callback to be called when configuration is reloaded."""
        self._reload_callbacks.append(callback)

    def remove_reload_callback(self, callback: Callable[[], None]) -> None:
        """Remove a reload callback."""
        if callback in self._reload_callbacks:
            self._reload_callbacks.remove(callback)
