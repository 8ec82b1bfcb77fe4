"""Interact with Hyprland using sockets."""

__all__ = [
    "Dispatcher",
    "get_event_stream",
    "get_response",
    "hyprctl_connection",
    "hyprctl_json",
    "parse_event",
]

import asyncio
import contextlib
import json
from collections.abc import AsyncIterator, Callable
from logging import Logger
from typing import Any

from .constants import EVENTS, HYPRCTL, IPC_MAX_RETRIES, IPC_RETRY_DELAY_MULTIPLIER
from .models import DispatchError, HyprspacesError, JSONResponse


async def get_event_stream() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Return a new event socket connection."""
    return await asyncio.open_unix_connection(EVENTS)


def parse_event(raw_data: str) -> tuple[str, str] | None:
    """Parse a raw event line into (handler name, parameters).

    Eg: "openwindow>>55d1,1,kitty,~" → ("event_openwindow", "55d1,1,kitty,~")
    """
    if ">>" not in raw_data:
        return None
    cmd, params = raw_data.split(">>", 1)
    return f"event_{cmd}", params.rstrip("\n")


@contextlib.asynccontextmanager
async def hyprctl_connection(logger: Logger) -> AsyncIterator[tuple[asyncio.StreamReader, asyncio.StreamWriter]]:
    """Open a connection to the Hyprland control socket, closing it on exit."""
    try:
        reader, writer = await asyncio.open_unix_connection(HYPRCTL)
    except FileNotFoundError as e:
        logger.critical("hyprctl socket not found! is it running ?")
        raise HyprspacesError from e
    try:
        yield reader, writer
    finally:
        writer.close()
        await writer.wait_closed()


def retry_on_reset(func: Callable) -> Callable:
    """Retry on connection reset (JSON queries only)."""

    async def wrapper(*args, logger: Logger, **kwargs) -> Any:  # noqa: ANN401
        exc = None
        for count in range(IPC_MAX_RETRIES):
            try:
                return await func(*args, **kwargs, logger=logger)
            except ConnectionResetError as e:  # noqa: PERF203
                exc = e
                logger.warning("ipc connection problem, retrying...")
                await asyncio.sleep(IPC_RETRY_DELAY_MULTIPLIER * count)
        logger.error("ipc connection failed.")
        raise ConnectionResetError from exc

    return wrapper


async def get_response(command: bytes, logger: Logger) -> JSONResponse:
    """Get the JSON response of `command` from the control socket."""
    async with hyprctl_connection(logger) as (reader, writer):
        writer.write(command)
        await writer.drain()
        reader_data = await reader.read()
    decoded_data = reader_data.decode("utf-8", errors="replace")
    return json.loads(decoded_data)  # type: ignore[no-any-return]


@retry_on_reset
async def hyprctl_json(command: str, logger: Logger) -> JSONResponse:
    """Run an IPC query (eg: "workspaces", "clients") and return the JSON output."""
    logger.debug(command)
    ret = await get_response(f"-j/{command}".encode(), logger)
    assert isinstance(ret, list | dict)
    return ret


class Dispatcher:
    """Sends dispatch commands to Hyprland.

    A command either succeeds or raises `DispatchError`; nothing is retried.
    """

    def __init__(self, logger: Logger) -> None:
        self.log = logger

    async def execute(self, command: str) -> None:
        """Send one command (eg: "dispatch workspace 3").

        Raises:
            DispatchError: the socket is unavailable or Hyprland did not reply "ok"
        """
        self.log.debug(command)
        try:
            async with hyprctl_connection(self.log) as (ctl_reader, ctl_writer):
                ctl_writer.write(f"/{command}".encode())
                await ctl_writer.drain()
                resp = await ctl_reader.read(100)
        except (OSError, HyprspacesError) as e:
            msg = f"{command}: {str(e) or type(e).__name__}"
            raise DispatchError(msg) from e

        resp = b"".join(resp.split(b"\n"))
        if resp != b"ok":
            msg = f"{command}: {resp.decode('utf-8', errors='replace')}"
            raise DispatchError(msg)

    async def execute_all(self, commands: list[str]) -> None:
        """Send the commands one after the other, stopping at the first failure."""
        for command in commands:
            await self.execute(command)

    async def run_shell(self, command: str) -> int:
        """Run a shell command, returning its exit code."""
        self.log.debug("running %s", command)
        proc = await asyncio.create_subprocess_shell(command, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.STDOUT)
        out, _ = await proc.communicate()
        if proc.returncode:
            self.log.error("Failed to execute %s: %s", command, out.decode("utf-8", errors="replace").strip())
        return proc.returncode or 0
