"""Client-side functions for the hyprspaces CLI."""

import asyncio
import sys

from . import constants as hyprspaces_constants
from .logging_setup import get_logger
from .models import ExitCode, ResponsePrefix
from .validate_cli import run_validate

__all__ = ["run_client"]


async def run_client(args: list[str], config_filename: str = "") -> None:
    """Run the client (CLI).

    Args:
        args: The command and its arguments (eg: ["click", "3"])
        config_filename: Configuration file used by `validate`
    """
    if args[0] == "validate":
        # no daemon needed
        await run_validate(config_filename)
        return

    try:
        reader, writer = await asyncio.open_unix_connection(hyprspaces_constants.CONTROL)
    except (ConnectionRefusedError, FileNotFoundError):
        get_logger().critical(
            "Cannot connect to the hyprspaces daemon at %s.\nIs the daemon running? Start it with: hyprspaces (no arguments)",
            hyprspaces_constants.CONTROL,
        )
        sys.exit(ExitCode.CONNECTION_ERROR)

    args = list(args)
    args[0] = args[0].replace("-", "_")
    writer.write((" ".join(args) + "\n").encode())
    writer.write_eof()
    await writer.drain()
    return_value = (await reader.read()).decode("utf-8")
    writer.close()
    await writer.wait_closed()

    if return_value.startswith(f"{ResponsePrefix.ERROR}:"):
        error_msg = return_value[len(ResponsePrefix.ERROR) + 2 :].strip()
        print(f"Error: {error_msg}", file=sys.stderr)
        sys.exit(ExitCode.COMMAND_ERROR)

    remaining = return_value.removeprefix(ResponsePrefix.OK).strip()
    if remaining:
        print(remaining)
    sys.exit(ExitCode.SUCCESS)
