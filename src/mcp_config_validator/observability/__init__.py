"""Logging setup for the validator."""

from mcp_config_validator.observability.logging import JsonFormatter, configure_logging


__all__ = [
    "JsonFormatter",
    "configure_logging",
]
