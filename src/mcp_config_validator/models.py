"""Data model for MCP server configuration validation.

The configuration document is a Claude Desktop style ``mcpServers`` map:

    {
        "mcpServers": {
            "sonarqube-prod": {
                "command": "npx",
                "args": ["-y", "sonarqube-mcp-server@latest"],
                "env": {
                    "SONARQUBE_URL": "https://sonar.example.com",
                    "SONARQUBE_TOKEN": "squ_...",
                    "LOG_FILE": "/tmp/sonarqube-prod.log",
                    "LOG_LEVEL": "INFO"
                }
            }
        }
    }

``ValidationRules`` names the env fields and enumerations the checks use;
``DEFAULT_RULES`` reproduces the stock behavior.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator


class ValidationRules(BaseModel):
    """Field names and enumerations applied to every instance."""

    model_config = {"extra": "forbid", "frozen": True}

    recommended_commands: Annotated[
        tuple[str, ...],
        Field(description="Commands accepted without an 'unusual command' warning"),
    ] = ("npx", "node", "docker")

    log_levels: Annotated[
        tuple[str, ...],
        Field(description="Accepted LOG_LEVEL values (case-sensitive), most verbose first"),
    ] = ("DEBUG", "INFO", "WARN", "ERROR")

    placeholder_markers: Annotated[
        tuple[str, ...],
        Field(
            description="Substrings that mark a token as an unfilled placeholder",
            examples=[("YOUR_", "_HERE")],
        ),
    ] = ("YOUR_", "_HERE")

    token_field: str = "SONARQUBE_TOKEN"
    username_field: str = "SONARQUBE_USERNAME"
    password_field: str = "SONARQUBE_PASSWORD"
    passcode_field: str = "SONARQUBE_PASSCODE"
    url_field: str = "SONARQUBE_URL"
    log_file_field: str = "LOG_FILE"
    log_level_field: str = "LOG_LEVEL"
    elicitation_field: str = "SONARQUBE_MCP_ELICITATION"
    bulk_threshold_field: str = "SONARQUBE_MCP_BULK_THRESHOLD"

    elicitation_enabled_value: Annotated[
        str,
        Field(description="Exact string that enables elicitation; anything else means disabled"),
    ] = "true"

    min_bulk_threshold: Annotated[
        int,
        Field(ge=0, description="Smallest accepted bulk threshold"),
    ] = 1

    @field_validator("recommended_commands", "log_levels", "placeholder_markers")
    @classmethod
    def validate_non_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Reject empty enumerations and blank entries."""
        if not value:
            raise ValueError("must contain at least one entry")
        blank = [entry for entry in value if not entry]
        if blank:
            raise ValueError("entries must be non-empty strings")
        return value


DEFAULT_RULES = ValidationRules()


class InstanceConfig(BaseModel):
    """One named server instance under ``mcpServers``.

    Values are kept as parsed so the validator can report on them; nothing is
    coerced except ``env``, which falls back to an empty map when it is missing
    or not an object.
    """

    model_config = {"extra": "allow"}

    command: Any = None
    args: Any = None
    env: dict[str, Any] = Field(default_factory=dict)

    @field_validator("env", mode="before")
    @classmethod
    def normalize_env(cls, value: object) -> dict[str, Any]:
        if isinstance(value, dict):
            return value
        return {}

    @property
    def has_args_array(self) -> bool:
        return isinstance(self.args, list)

    def env_value(self, key: str) -> Any:
        return self.env.get(key)


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Errors and warnings collected for one configuration file."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True when no errors were found (warnings allowed)."""
        return not self.errors

    @property
    def clean(self) -> bool:
        return not self.errors and not self.warnings

    @classmethod
    def failure(cls, message: str) -> ValidationResult:
        return cls(errors=(message,))
