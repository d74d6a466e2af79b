"""Pre-flight validator for multi-instance MCP server configuration files."""

from mcp_config_validator.models import DEFAULT_RULES, InstanceConfig, ValidationResult, ValidationRules
from mcp_config_validator.validator import ConfigValidator, validate_config_file


__all__ = [
    "DEFAULT_RULES",
    "ConfigValidator",
    "InstanceConfig",
    "ValidationResult",
    "ValidationRules",
    "validate_config_file",
]
