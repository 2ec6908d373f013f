"""Pydantic configuration schema for edgebridge."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PrerenderedConfig(BaseModel):
    """Where prerendered pages live and how to enumerate them."""

    model_config = ConfigDict(extra="forbid")

    directory: str = Field(default="prerendered", description="Directory holding prerendered pages")
    manifest: Optional[str] = Field(
        None, description="Optional JSON list of relative paths; the directory is walked otherwise"
    )


class LoggingConfig(BaseModel):
    """Log output settings."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Root log level")
    pretty: bool = Field(default=False, description="Indented JSON for local development")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return level


class BridgeConfig(BaseModel):
    """Top-level configuration schema.

    This schema validates config.yaml or the EDGEBRIDGE_CONFIG document.
    """

    model_config = ConfigDict(extra="forbid")

    app: str = Field(..., description="Application reference in 'module:attribute' form")
    prerendered: PrerenderedConfig = Field(default_factory=PrerenderedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("app")
    @classmethod
    def validate_app(cls, v: str) -> str:
        """Validate that the application reference names a module and an attribute."""
        module_name, sep, attribute = v.partition(":")
        if not sep or not module_name.strip() or not attribute.strip():
            raise ValueError("Application reference must look like 'package.module:attribute'")
        return v.strip()
