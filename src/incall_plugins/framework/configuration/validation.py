"""
Configuration validation utilities.
"""

import os
from typing import Dict, Any, List
from pydantic import ValidationError

from ...infrastructure.exceptions import ConfigurationError
from .models import FrameworkConfiguration
from .sources import ENVIRONMENT_PREFIX


class ConfigurationValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, validation_errors: List[Dict[str, Any]]):
        super().__init__(
            message,
            validation_errors=validation_errors,
            error_code="CONFIGURATION_VALIDATION_ERROR"
        )
        self.validation_errors = validation_errors

    def get_detailed_message(self) -> str:
        """Get a detailed error message with all validation errors."""
        lines = [self.message]
        lines.append("Validation errors:")

        for error in self.validation_errors:
            location = " -> ".join(str(loc) for loc in error.get('loc', []))
            msg = error.get('msg', 'Unknown error')
            lines.append(f"- {location}: {msg}")

        return "\n".join(lines)


class ConfigurationValidator:
    """Validates configuration data and provides detailed error messages."""

    KNOWN_KEYS = frozenset({'framework'})

    @staticmethod
    def validate_configuration(config_data: Dict[str, Any]) -> List[str]:
        """
        Validate configuration data and return list of warnings.

        Args:
            config_data: Raw configuration data to validate

        Returns:
            List of warning messages for unknown configuration keys

        Raises:
            ConfigurationValidationError: If validation fails with errors
        """
        errors = []
        warnings = []

        if 'framework' in config_data:
            framework_data = config_data['framework']
            if not isinstance(framework_data, dict):
                errors.append({
                    'loc': ['framework'],
                    'msg': "framework section must be a mapping",
                    'type': 'type_error'
                })
            else:
                try:
                    FrameworkConfiguration(**framework_data)
                except ValidationError as e:
                    for error in e.errors():
                        errors.append({
                            'loc': ['framework'] + list(error['loc']),
                            'msg': error['msg'],
                            'type': error['type']
                        })

        for key in config_data.keys():
            if key not in ConfigurationValidator.KNOWN_KEYS:
                warnings.append(f"Unknown configuration key: {key}")

        if errors:
            raise ConfigurationValidationError(
                "Configuration validation failed",
                errors
            )

        return warnings

    @staticmethod
    def validate_environment_variables(prefix: str = ENVIRONMENT_PREFIX) -> List[str]:
        """
        Validate environment variables and return warnings for unknown variables.

        Args:
            prefix: Environment variable prefix to check

        Returns:
            List of warning messages for unknown environment variables
        """
        warnings = []
        valid_paths = {
            f"framework_{section}_{field_name}"
            for section, model in FrameworkConfiguration.model_fields.items()
            for field_name in model.annotation.model_fields
        }

        prefix_upper = prefix.upper()
        for key in os.environ:
            if key.startswith(prefix_upper):
                config_key = key[len(prefix_upper):].lower()
                if config_key not in valid_paths:
                    warnings.append(f"Unknown environment variable: {key}")

        return warnings
