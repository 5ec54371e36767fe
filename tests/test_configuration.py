"""
Tests for the configuration management system.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from incall_plugins.framework.configuration import (
    AggregationConfiguration,
    ConfigurationBuilder,
    ConfigurationValidationError,
    ConfigurationValidator,
    EnvironmentConfigurationSource,
    FrameworkConfiguration,
    InCallPluginsConfiguration,
    LoggingConfiguration,
    YAMLConfigurationSource,
    load_configuration_from_file,
    load_default_configuration,
)
from incall_plugins.infrastructure.exceptions import ConfigurationError


def write_yaml(path: Path, data) -> Path:
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f)
    return path


class TestConfigurationModels:
    """Test configuration data models."""

    def test_aggregation_defaults(self):
        """Test default aggregation settings."""
        config = AggregationConfiguration()
        assert config.invite_timeout_seconds == 10.0
        assert config.max_workers == 1
        assert config.contacts_content_uri == "content://com.android.contacts/contacts"
        assert config.data_content_uri == "content://com.android.contacts/data"

    def test_aggregation_invalid_timeout(self):
        """Test non-positive invite timeouts are rejected."""
        with pytest.raises(ValueError):
            AggregationConfiguration(invite_timeout_seconds=0)

    def test_aggregation_invalid_workers(self):
        """Test worker count bounds."""
        with pytest.raises(ValueError):
            AggregationConfiguration(max_workers=0)

    def test_aggregation_invalid_content_uri(self):
        """Test content URIs must use the content scheme."""
        with pytest.raises(ValueError, match="Invalid content URI"):
            AggregationConfiguration(data_content_uri="https://example.com/data")

    def test_content_uri_trailing_slash_is_stripped(self):
        """Test trailing slashes are normalized away."""
        config = AggregationConfiguration(contacts_content_uri="content://custom/contacts/")
        assert config.contacts_content_uri == "content://custom/contacts"

    def test_logging_configuration_valid(self):
        """Test valid logging configuration."""
        config = LoggingConfiguration(level="DEBUG", format="text", output="console")
        assert config.level == "DEBUG"
        assert config.format == "text"

    def test_logging_configuration_invalid_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValueError):
            LoggingConfiguration(level="VERBOSE")

    def test_logging_file_output_requires_path(self):
        """Test file output without file_path is rejected."""
        with pytest.raises(ValueError, match="file_path is required"):
            LoggingConfiguration(output="file")


class TestConfigurationSources:
    """Test YAML and environment sources."""

    def test_yaml_source_loads_mapping(self, tmp_path):
        """Test loading a YAML file."""
        path = write_yaml(tmp_path / "config.yaml", {"framework": {"aggregation_config": {"max_workers": 3}}})

        data = YAMLConfigurationSource(path).load()

        assert data == {"framework": {"aggregation_config": {"max_workers": 3}}}

    def test_yaml_source_missing_file(self, tmp_path):
        """Test a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            YAMLConfigurationSource(tmp_path / "missing.yaml").load()

        assert exc_info.value.error_code == "CONFIG_FILE_NOT_FOUND"
        assert exc_info.value.context["config_path"].endswith("missing.yaml")

    def test_yaml_source_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigurationError."""
        path = tmp_path / "broken.yaml"
        path.write_text("framework: [unclosed", encoding='utf-8')

        with pytest.raises(ConfigurationError) as exc_info:
            YAMLConfigurationSource(path).load()

        assert exc_info.value.error_code == "INVALID_YAML"

    def test_yaml_source_empty_file(self, tmp_path):
        """Test an empty file loads as an empty mapping."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding='utf-8')

        assert YAMLConfigurationSource(path).load() == {}

    def test_environment_source(self):
        """Test environment variables map onto nested sections."""
        env = {
            "INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_MAX_WORKERS": "4",
            "INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_INVITE_TIMEOUT_SECONDS": "2.5",
            "INCALL_PLUGINS_FRAMEWORK_LOGGING_CONFIG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=True):
            data = EnvironmentConfigurationSource().load()

        assert data == {
            "framework": {
                "aggregation_config": {"max_workers": 4, "invite_timeout_seconds": 2.5},
                "logging_config": {"level": "DEBUG"},
            }
        }

    def test_environment_source_parses_booleans(self):
        """Test boolean parsing of environment values."""
        source = EnvironmentConfigurationSource()
        assert source._parse_value("true") is True
        assert source._parse_value("False") is False
        assert source._parse_value("text") == "text"


class TestInCallPluginsConfiguration:
    """Test layered configuration loading."""

    def test_defaults_without_sources(self):
        """Test an empty configuration falls back to defaults."""
        config = InCallPluginsConfiguration()

        assert config.get_framework_config() == FrameworkConfiguration()
        assert config.get_raw_config() == {}

    def test_environment_overrides_yaml(self, tmp_path):
        """Test higher priority sources win."""
        path = write_yaml(tmp_path / "config.yaml", {
            "framework": {
                "aggregation_config": {"max_workers": 2, "invite_timeout_seconds": 5},
                "logging_config": {"format": "text"},
            }
        })
        env = {"INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_MAX_WORKERS": "8"}
        with patch.dict(os.environ, env, clear=True):
            config = load_configuration_from_file(path)

        aggregation = config.get_aggregation_config()
        assert aggregation.max_workers == 8
        assert aggregation.invite_timeout_seconds == 5
        assert config.get_logging_config().format == "text"

    def test_invalid_configuration_raises(self, tmp_path):
        """Test validation errors are reported with their location."""
        path = write_yaml(tmp_path / "config.yaml", {"framework": {"aggregation_config": {"max_workers": 0}}})

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationValidationError) as exc_info:
                load_configuration_from_file(path)

        detailed = exc_info.value.get_detailed_message()
        assert "framework -> aggregation_config -> max_workers" in detailed

    def test_reload_notifies_callbacks(self, tmp_path):
        """Test reloading picks up file changes and runs callbacks."""
        path = write_yaml(tmp_path / "config.yaml", {"framework": {"aggregation_config": {"max_workers": 2}}})
        config = ConfigurationBuilder().add_yaml_source(path).build()
        reloads = []
        config.add_reload_callback(lambda: reloads.append(True))

        write_yaml(path, {"framework": {"aggregation_config": {"max_workers": 6}}})
        config.reload_configuration()

        assert config.get_aggregation_config().max_workers == 6
        assert reloads == [True]

    def test_removed_callback_is_not_called(self, tmp_path):
        """Test reload callbacks can be removed."""
        path = write_yaml(tmp_path / "config.yaml", {})
        config = ConfigurationBuilder().add_yaml_source(path).build()
        reloads = []
        callback = lambda: reloads.append(True)
        config.add_reload_callback(callback)
        config.remove_reload_callback(callback)

        config.reload_configuration()

        assert reloads == []

    def test_load_default_configuration(self):
        """Test default loading uses only the environment."""
        with patch.dict(os.environ, {"INCALL_PLUGINS_FRAMEWORK_LOGGING_CONFIG_LEVEL": "ERROR"}, clear=True):
            config = load_default_configuration()

        assert config.get_logging_config().level == "ERROR"


class TestConfigurationValidator:
    """Test ConfigurationValidator."""

    def test_unknown_top_level_key_warns(self):
        """Test unknown keys produce warnings, not errors."""
        warnings = ConfigurationValidator.validate_configuration({"framework": {}, "plugins": []})
        assert warnings == ["Unknown configuration key: plugins"]

    def test_non_mapping_framework_section(self):
        """Test a framework section that is not a mapping is an error."""
        with pytest.raises(ConfigurationValidationError):
            ConfigurationValidator.validate_configuration({"framework": ["bad"]})

    def test_unknown_environment_variable_warns(self):
        """Test unknown prefixed environment variables are reported."""
        env = {
            "INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_MAX_WORKERS": "2",
            "INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_RETRIES": "3",
        }
        with patch.dict(os.environ, env, clear=True):
            warnings = ConfigurationValidator.validate_environment_variables()

        assert warnings == ["Unknown environment variable: INCALL_PLUGINS_FRAMEWORK_AGGREGATION_CONFIG_RETRIES"]
