"""Configuration management for schemeless.

Settings are resolved from environment variables (prefix ``SCHEMELESS_``)
using Pydantic Settings; CLI options override them per invocation.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidatorSettings(BaseSettings):
    """Validator and logging configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEMELESS_", case_sensitive=False)

    # Environment
    environment: Literal["development", "testing", "production"] = Field(
        default="development", description="Application environment"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Rule tables
    rules_file: str | None = Field(
        default=None,
        description="Optional YAML file extending the built-in rule tables",
    )

    # Engine behaviour
    strict_attributes: bool = Field(
        default=False,
        description="Reject elements that repeat an attribute key",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"
