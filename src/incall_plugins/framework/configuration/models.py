"""
Configuration data models with validation.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..lookup import CONTACTS_CONTENT_URI, DATA_CONTENT_URI


class AggregationConfiguration(BaseModel):
    """Plugin info aggregation settings with validation."""
    invite_timeout_seconds: float = Field(default=10.0, gt=0, le=300)
    max_workers: int = Field(default=1, ge=1, le=32)
    contacts_content_uri: str = CONTACTS_CONTENT_URI
    data_content_uri: str = DATA_CONTENT_URI

    @field_validator('contacts_content_uri', 'data_content_uri')
    @classmethod
    def validate_content_uri(cls, v):
        """Validate content URI scheme."""
        if not v.startswith('content://'):
            raise ValueError(f"Invalid content URI: {v}")
        return v.rstrip('/')


class LoggingConfiguration(BaseModel):
    """Logging system configuration with validation."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="json", pattern="^(json|text)$")
    output: str = Field(default="console", pattern="^(console|file|both)$")
    file_path: Optional[str] = None

    @model_validator(mode='after')
    def validate_file_path(self):
        """Validate file path when file output is used."""
        if self.output in ['file', 'both'] and not self.file_path:
            raise ValueError("file_path is required when output is 'file' or 'both'")
        return self


class FrameworkConfiguration(BaseModel):
    """Core framework configuration with nested validation."""
    aggregation_config: AggregationConfiguration = Field(default_factory=AggregationConfiguration)
    logging_config: LoggingConfiguration = Field(default_factory=LoggingConfiguration)
