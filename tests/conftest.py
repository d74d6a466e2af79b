"""Shared test fixtures and configuration."""

import json
import logging
from pathlib import Path
from typing import Any

import pytest


# Environment the CLI reads for its own logging setup
CLI_ENV_KEYS = (
    "MCP_CONFIG_VALIDATOR_LOG_LEVEL",
    "MCP_CONFIG_VALIDATOR_LOG_JSON",
    "MCP_CONFIG_VALIDATOR_LOGGER_LEVELS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Clear CLI logging settings so each test starts from the defaults."""
    for key in CLI_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by configure_logging() so none outlive a captured stream."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
    for name, candidate in logging.root.manager.loggerDict.items():
        if name.startswith("mcp_config_validator") and isinstance(candidate, logging.Logger):
            candidate.setLevel(logging.NOTSET)


@pytest.fixture
def make_instance():
    """Build a fully valid instance config; keyword args override env entries."""

    def _make(name: str = "sonarqube", *, command: Any = "npx", **env: Any) -> dict[str, Any]:
        base_env = {
            "SONARQUBE_URL": "https://sonarcloud.io",
            "SONARQUBE_TOKEN": f"squ_{name}_0123456789",
            "LOG_FILE": f"/tmp/{name}.log",
            "LOG_LEVEL": "INFO",
        }
        base_env.update(env)
        merged = {key: value for key, value in base_env.items() if value is not None}
        return {
            "command": command,
            "args": ["-y", "sonarqube-mcp-server@latest"],
            "env": merged,
        }

    return _make


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a document (dict or raw text) to a file under tmp_path."""

    def _write(document: Any, name: str = "claude-config.json") -> Path:
        path = tmp_path / name
        text = document if isinstance(document, str) else json.dumps(document, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
