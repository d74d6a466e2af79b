"""Pre-flight validation of multi-instance MCP server configuration files.

``ConfigValidator.validate`` runs a fixed battery of checks over one JSON file
and returns a ``ValidationResult``. It never raises for a bad input file: a
missing file, malformed JSON or a missing ``mcpServers`` section each end the
run early with a single error, and every other problem becomes one error or
warning message while the remaining checks continue.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import json
import logging
import math
from pathlib import Path
import re
from typing import Any

from pydantic import AnyUrl, TypeAdapter, ValidationError

from mcp_config_validator.models import DEFAULT_RULES, InstanceConfig, ValidationResult, ValidationRules


logger = logging.getLogger(__name__)

ProgressSink = Callable[[str], None]

_URL_ADAPTER = TypeAdapter(AnyUrl)
_LEADING_INT = re.compile(r"\s*([+-]?)(\d+)", re.ASCII)
# Longer digit runs are clamped; the value is only compared against small floors
_MAX_THRESHOLD_DIGITS = 18


class _ObjectPairs(dict):
    """JSON object that also keeps every (key, value) pair, duplicates included."""

    __slots__ = ("pairs",)

    def __init__(self, pairs: list[tuple[str, Any]]) -> None:
        super().__init__(pairs)
        self.pairs = pairs


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def _parse_number(literal: str) -> int | float:
    """Integers beyond int()'s digit limit become floats, as JSON numbers do in JS."""
    try:
        return int(literal)
    except ValueError:
        return float(literal)


def _parse_json(text: str) -> Any:
    return json.loads(
        text,
        object_pairs_hook=_ObjectPairs,
        parse_constant=_reject_constant,
        parse_int=_parse_number,
    )


def _tracker_key(value: Any) -> tuple[str, Any] | None:
    """Identity for log-file uniqueness; None for arrays and objects, which never collide."""
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    return None


def _iter_pairs(mapping: dict[str, Any]) -> list[tuple[str, Any]]:
    if isinstance(mapping, _ObjectPairs):
        return list(mapping.pairs)
    return list(mapping.items())


def _is_set(value: Any) -> bool:
    """JSON truthiness: null, false, 0 and "" count as unset."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def _parse_leading_int(value: Any) -> int | None:
    """Parse an integer prefix ("12", " 7", "3 items"); None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if len(digits) > _MAX_THRESHOLD_DIGITS:
        digits = "9" * _MAX_THRESHOLD_DIGITS
    number = int(digits)
    return -number if sign == "-" else number


def is_valid_url(value: Any) -> bool:
    """Return True when ``value`` parses as an absolute URL."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


@dataclass(slots=True)
class _ValidationPass:
    """Accumulators and uniqueness trackers for a single validate() call."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    seen_names: set[str] = field(default_factory=set)
    seen_log_files: set[tuple[str, Any]] = field(default_factory=set)

    def result(self) -> ValidationResult:
        return ValidationResult(errors=tuple(self.errors), warnings=tuple(self.warnings))


class ConfigValidator:
    """Validate ``mcpServers`` configuration files.

    Args:
        rules: Field names and enumerations applied to each instance.
        progress: Receives one human-readable line per passed check. When
            omitted, progress goes to this module's logger at DEBUG.
    """

    def __init__(self, rules: ValidationRules = DEFAULT_RULES, progress: ProgressSink | None = None) -> None:
        self.rules = rules
        self._progress = progress

    def validate(self, path: str | Path) -> ValidationResult:
        config_path = Path(path)
        result = self._validate(config_path)
        logger.info(
            "Validated %s: %d error(s), %d warning(s)",
            config_path,
            len(result.errors),
            len(result.warnings),
            extra={"config_path": str(config_path)},
        )
        return result

    def _validate(self, config_path: Path) -> ValidationResult:
        if not config_path.exists():
            return ValidationResult.failure(f"File does not exist: {config_path}")

        try:
            content = config_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            return ValidationResult.failure(f"Invalid JSON syntax: {exc}")
        except OSError as exc:
            return ValidationResult.failure(
                f"File does not exist or is unreadable: {config_path} ({exc.strerror or exc})"
            )

        try:
            document = _parse_json(content)
        except (ValueError, RecursionError) as exc:
            return ValidationResult.failure(f"Invalid JSON syntax: {exc}")
        self._emit("✓ Valid JSON syntax")

        servers = document.get("mcpServers") if isinstance(document, dict) else None
        if not _is_set(servers):
            return ValidationResult.failure('Missing "mcpServers" section')
        if not isinstance(servers, dict):
            return ValidationResult.failure('"mcpServers" section must be an object')

        instances = _iter_pairs(servers)
        self._emit(f"✓ Found {len(instances)} MCP server instance(s)")

        state = _ValidationPass()
        for name, raw_instance in instances:
            self._check_instance(state, name, raw_instance)
        return state.result()

    def _emit(self, line: str, instance: str | None = None) -> None:
        if self._progress is not None:
            self._progress(line)
            return
        extra = {"instance": instance} if instance is not None else {}
        logger.debug(line.strip(), extra=extra)

    def _check_instance(self, state: _ValidationPass, name: str, raw_instance: Any) -> None:
        self._emit(f"\n  Validating instance: {name}", name)
        label = f'Instance "{name}"'

        if name in state.seen_names:
            state.errors.append(f"Duplicate instance name: {name}")
        else:
            state.seen_names.add(name)
            self._emit("    ✓ Unique instance name", name)

        if not isinstance(raw_instance, dict):
            state.errors.append(f"{label}: configuration must be an object")
            return

        instance = InstanceConfig.model_validate(raw_instance)
        self._check_command(state, name, label, instance)
        self._check_args(state, name, label, instance)
        self._check_authentication(state, name, label, instance)
        self._check_url(state, name, label, instance)
        self._check_log_file(state, name, label, instance)
        self._check_log_level(state, name, label, instance)
        self._check_elicitation(state, name, label, instance)

    def _check_command(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        command = instance.command
        if not _is_set(command):
            state.errors.append(f'{label}: Missing "command"')
        elif command not in self.rules.recommended_commands:
            state.warnings.append(f'{label}: Unusual command "{_display(command)}"')
        else:
            self._emit(f"    ✓ Valid command: {command}", name)

    def _check_args(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        if not instance.has_args_array:
            state.errors.append(f'{label}: Missing or invalid "args" array')
        else:
            self._emit("    ✓ Valid args array", name)

    def _check_authentication(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        rules = self.rules
        token = instance.env_value(rules.token_field)
        has_token = _is_set(token)
        has_basic_auth = _is_set(instance.env_value(rules.username_field)) and _is_set(
            instance.env_value(rules.password_field)
        )
        has_passcode = _is_set(instance.env_value(rules.passcode_field))

        if not (has_token or has_basic_auth or has_passcode):
            state.errors.append(f"{label}: Missing authentication (token, basic auth, or passcode)")
            return
        self._emit("    ✓ Authentication configured", name)

        if isinstance(token, str) and any(marker in token for marker in rules.placeholder_markers):
            state.warnings.append(f"{label}: Token appears to be a placeholder")

    def _check_url(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        url = instance.env_value(self.rules.url_field)
        if not _is_set(url):
            return
        if is_valid_url(url):
            self._emit("    ✓ Valid SonarQube URL", name)
        else:
            state.errors.append(f"{label}: Invalid {self.rules.url_field} format")

    def _check_log_file(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        log_file = instance.env_value(self.rules.log_file_field)
        if not _is_set(log_file):
            state.warnings.append(f"{label}: No {self.rules.log_file_field} specified (will use default stderr)")
            return

        key = _tracker_key(log_file)
        if key is not None and key in state.seen_log_files:
            state.errors.append(f"{label}: Duplicate log file path: {_display(log_file)}")
        else:
            if key is not None:
                state.seen_log_files.add(key)
            self._emit("    ✓ Unique log file path", name)

    def _check_log_level(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        levels = self.rules.log_levels
        log_level = instance.env_value(self.rules.log_level_field)
        if not _is_set(log_level):
            state.warnings.append(f"{label}: No {self.rules.log_level_field} specified (will use {levels[0]})")
        elif log_level not in levels:
            state.warnings.append(
                f'{label}: Invalid {self.rules.log_level_field} "{_display(log_level)}" '
                f"(should be: {', '.join(levels)})"
            )
        else:
            self._emit(f"    ✓ Valid log level: {log_level}", name)

    def _check_elicitation(self, state: _ValidationPass, name: str, label: str, instance: InstanceConfig) -> None:
        rules = self.rules
        if instance.env_value(rules.elicitation_field) != rules.elicitation_enabled_value:
            return
        self._emit("    ✓ Elicitation enabled", name)

        raw_threshold = instance.env_value(rules.bulk_threshold_field)
        if not _is_set(raw_threshold):
            return
        threshold = _parse_leading_int(raw_threshold)
        if threshold is None or threshold < rules.min_bulk_threshold:
            state.warnings.append(f"{label}: Invalid {rules.bulk_threshold_field}")
        else:
            self._emit(f"    ✓ Bulk threshold: {threshold}", name)


def validate_config_file(path: str | Path, progress: ProgressSink | None = None) -> ValidationResult:
    """Validate one file with the default rules."""
    return ConfigValidator(progress=progress).validate(path)
