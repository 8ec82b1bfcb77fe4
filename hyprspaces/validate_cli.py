"""The `hyprspaces validate` command: checks the configuration without starting the daemon."""

import logging
import sys

from .ansi import ReportStyles, colorize
from .config_loader import ConfigLoader
from .constants import CONFIG_SECTION
from .logging_setup import get_logger
from .models import ConfigError, ExitCode
from .schema import WORKSPACES_CONFIG_SCHEMA
from .validation import validate_section

__all__ = ["run_validate"]


def _quiet_logger() -> logging.Logger:
    """A logger for the validator, the report is printed instead."""
    logger = logging.getLogger("hyprspaces.validate.quiet")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


async def run_validate(config_filename: str = "") -> None:
    """Print the errors and warnings of the `[workspaces]` section, then exit.

    Exits with USAGE_ERROR when an option is invalid, ENV_ERROR when the file
    can't be read, SUCCESS otherwise (unknown options are only warnings).
    """
    try:
        config = await ConfigLoader(get_logger("validate")).load(config_filename)
    except ConfigError:
        sys.exit(ExitCode.ENV_ERROR)

    if CONFIG_SECTION not in config:
        print(f"No [{CONFIG_SECTION}] section, default settings are used.")
        sys.exit(ExitCode.SUCCESS)

    report = validate_section(config[CONFIG_SECTION], CONFIG_SECTION, WORKSPACES_CONFIG_SCHEMA, _quiet_logger())

    for error in report.errors:
        print(f"  {colorize('ERROR', *ReportStyles.ERROR, stream=sys.stdout)}: {error}")
    for warning in report.warnings:
        print(f"  {colorize('WARNING', *ReportStyles.WARNING, stream=sys.stdout)}: {warning}")

    if report.errors:
        print(f"Found {len(report.errors)} error(s) and {len(report.warnings)} warning(s)")
        sys.exit(ExitCode.USAGE_ERROR)
    if report.warnings:
        print(f"Found {len(report.warnings)} warning(s)")
    else:
        print(colorize("Configuration is valid!", *ReportStyles.VALID, stream=sys.stdout))
    sys.exit(ExitCode.SUCCESS)
