"""CLI logging settings loaded from the environment using Pydantic Settings.

Only the command-line runner reads these. They control diagnostic logging and
never change validation results.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ALLOWED_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


class CliSettings(BaseSettings):
    """Logging options for ``mcp-config-validator``."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_CONFIG_VALIDATOR_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    log_level: str = Field(
        default="warning",
        pattern=r"^(?i:debug|info|warning|error|critical)$",
        description="Root log level for diagnostic output on stderr",
    )
    log_json: bool = Field(default=False, description="Emit diagnostic logs as JSON lines")
    logger_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Per-logger level overrides as a JSON object (logger name -> level)",
        examples=[{"mcp_config_validator.validator": "debug"}],
    )

    @field_validator("logger_levels")
    @classmethod
    def validate_logger_levels(cls, value: dict[str, str]) -> dict[str, str]:
        """Validate that all logger_levels values use supported log levels."""
        invalid = {name: level for name, level in value.items() if level.lower() not in ALLOWED_LOG_LEVELS}
        if invalid:
            details = ", ".join(f"{name}={level}" for name, level in invalid.items())
            raise ValueError(
                f"Invalid log level(s) in logger_levels; allowed levels are {sorted(ALLOWED_LOG_LEVELS)}; got: {details}"
            )
        return value
