"""Validate MCP server configuration files for parallel multi-instance setups.

Checks JSON syntax, required environment variables, unique instance names,
unique log file paths and security best practices.
"""

# ruff: noqa: T201  # CLI intentionally prints the validation report

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
import logging
from pathlib import Path

from pydantic import ValidationError

from mcp_config_validator.models import ValidationResult
from mcp_config_validator.observability import configure_logging
from mcp_config_validator.settings import CliSettings
from mcp_config_validator.validator import ConfigValidator


logger = logging.getLogger(__name__)

PROG = "mcp-config-validator"
RULE = "=" * 50

USAGE = f"""Usage: {PROG} <config-file> [config-file2] ...

This command validates MCP client configuration files for parallel SonarQube MCP Server instances.

Examples:
  {PROG} claude-config.json
  {PROG} config/*.json"""


@dataclass(slots=True)
class RunSummary:
    files: int = 0
    errors: int = 0
    warnings: int = 0

    def add(self, result: ValidationResult) -> None:
        self.files += 1
        self.errors += len(result.errors)
        self.warnings += len(result.warnings)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "config_files",
        nargs="*",
        type=Path,
        metavar="config-file",
        help="Configuration file(s) to validate",
    )
    return parser


def print_result(result: ValidationResult) -> None:
    if result.errors:
        print("\n❌ ERRORS:")
        for error in result.errors:
            print(f"  - {error}")

    if result.warnings:
        print("\n⚠️  WARNINGS:")
        for warning in result.warnings:
            print(f"  - {warning}")

    if result.clean:
        print("\n✅ Configuration is valid!")


def print_summary(summary: RunSummary) -> None:
    print("\n" + RULE)
    print(f"Summary: {summary.errors} error(s), {summary.warnings} warning(s)")

    if summary.errors > 0:
        print("\n❌ Some configurations have errors that must be fixed.")
    elif summary.warnings > 0:
        print("\n⚠️  Some configurations have warnings. Review for best practices.")
    else:
        print("\n✅ All configurations are valid!")


def validate_files(paths: Sequence[Path], validator: ConfigValidator) -> RunSummary:
    """Validate each path in order, printing a report section per file."""
    summary = RunSummary()
    for path in paths:
        print(f"\nValidating: {path}")
        print(RULE)
        result = validator.validate(path)
        print_result(result)
        summary.add(result)
    return summary


def main(argv: Sequence[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)

    try:
        settings = CliSettings()
    except ValidationError as exc:
        settings = CliSettings.model_construct()
        configure_logging(settings.log_level, json_output=settings.log_json, logger_levels=settings.logger_levels)
        logger.warning("Ignoring invalid logging settings: %s", exc)
    else:
        configure_logging(settings.log_level, json_output=settings.log_json, logger_levels=settings.logger_levels)

    if not args.config_files:
        print(USAGE)
        return 1

    summary = validate_files(args.config_files, ConfigValidator(progress=print))
    print_summary(summary)
    logger.info(
        "Validated %d file(s): %d error(s), %d warning(s)",
        summary.files,
        summary.errors,
        summary.warnings,
    )
    return 1 if summary.errors > 0 else 0


if __name__ == "__main__":
    raise SystemExit(main())
