"""The hyprspaces daemon: follows Hyprland events and prints the workspaces state as JSON lines."""

import asyncio
import contextlib
import itertools
import json
import signal
import sys
from pathlib import Path
from typing import TextIO

from .config_loader import ConfigLoader
from .constants import CONTROL
from .dispatch import ClickEvent
from .display import render_markup
from .ipc import get_event_stream, parse_event
from .logging_setup import get_logger
from .manager import WorkspacesManager
from .models import ClickKind, HyprspacesError, ResponsePrefix

__all__ = ["Hyprspaces", "get_event_stream_with_retry", "run_daemon"]


def _click_event(button: str, kind: str) -> ClickEvent:
    return ClickEvent(kind=ClickKind(kind), button=int(button))


class Hyprspaces:
    """Main app object."""

    server: asyncio.Server
    event_reader: asyncio.StreamReader | None = None
    stopped = False

    def __init__(self, config_filename: str = "", output: TextIO | None = None) -> None:
        self.log = get_logger()
        self.manager = WorkspacesManager(logger=get_logger("workspaces"))
        self.config_loader = ConfigLoader(self.log)
        self.config_filename = config_filename
        self.output = output or sys.stdout
        self.last_line = ""
        self.tasks: list[asyncio.Task] = []

    async def load_config(self) -> None:
        """Load the configuration file and apply the `[workspaces]` section."""
        config = await self.config_loader.load(self.config_filename)
        self.manager.apply_config(config)

    async def initialize(self) -> None:
        """Load the configuration, then the state of Hyprland."""
        await self.load_config()
        await self.manager.refresh()
        self.publish()

    def publish(self) -> None:
        """Render the workspaces and print the JSON line, unless it didn't change."""
        models = self.manager.render()
        payload = {
            "text": " ".join(markup for markup in (render_markup(model) for model in models) if markup),
            "workspaces": [model.as_dict() for model in models],
        }
        line = json.dumps(payload, ensure_ascii=False)
        if line == self.last_line:
            return
        self.last_line = line
        print(line, file=self.output, flush=True)

    # Events {{{

    async def _handle_event(self, name: str, params: str) -> None:
        try:
            handled = await self.manager.handle_event(name, params)
        except Exception:  # pylint: disable=broad-exception-caught
            self.log.exception("%s(%s) failed:", name, params)
            handled = True
        if handled:
            self.publish()

    async def read_events_loop(self) -> None:
        """Consume the event stream and call the corresponding handlers."""
        if self.event_reader is None:
            return
        while not self.stopped:
            try:
                data = (await self.event_reader.readline()).decode(errors="replace")
            except RuntimeError:
                self.log.exception("Aborting event loop")
                return
            if not data:
                self.log.critical("Reader starved")
                await self.stop()
                return

            parsed_event = parse_event(data)
            if parsed_event:
                await self._handle_event(*parsed_event)

    # }}}

    # Commands {{{

    async def run_click(self, workspace_id: str, button: str = "1", kind: str = ClickKind.PRESS.value) -> str:
        """Click a workspace."""
        if not await self.manager.handle_click(int(workspace_id), _click_event(button, kind)):
            msg = f"click on workspace {workspace_id} not handled"
            raise HyprspacesError(msg)
        return ""

    async def run_click_special(self, workspace_id: str, button: str = "1", kind: str = ClickKind.PRESS.value) -> str:
        """Click the special workspace section of a combined workspace."""
        if not await self.manager.handle_special_click(int(workspace_id), _click_event(button, kind)):
            msg = f"click on the special section of workspace {workspace_id} not handled"
            raise HyprspacesError(msg)
        return ""

    async def run_click_window(self, address: str, button: str = "1", kind: str = ClickKind.PRESS.value) -> str:
        """Click a taskbar window."""
        await self.manager.handle_window_click(address, _click_event(button, kind))
        return ""

    async def run_dump(self) -> str:
        """Return the last rendered models as JSON."""
        return json.dumps(self.manager.dump(), ensure_ascii=False, indent=2)

    async def run_reload(self) -> str:
        """Reload the configuration and the state of Hyprland."""
        await self.load_config()
        await self.manager.refresh()
        self.publish()
        return ""

    async def run_exit(self) -> str:
        """Stop the daemon."""
        self.stopped = True
        return ""

    async def _process_command(self, data: str) -> str:
        """Run a command and return the response."""
        args = data.split()
        cmd = args[0]
        handler = getattr(self, f"run_{cmd}", None)
        if handler is None:
            self.log.warning("No such command: %s", cmd)
            return f'{ResponsePrefix.ERROR}: Unknown command "{cmd}"\n'
        try:
            async with self.manager.lock:
                result = await handler(*args[1:])
        except (TypeError, ValueError) as e:
            self.log.warning("Invalid arguments for %s: %s", cmd, e)
            return f"{ResponsePrefix.ERROR}: invalid arguments for {cmd}: {e}\n"
        except HyprspacesError as e:
            return f"{ResponsePrefix.ERROR}: {e}\n"
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.log.exception("%s failed:", data)
            return f"{ResponsePrefix.ERROR}: {cmd}: {e}\n"
        if result:
            return f"{ResponsePrefix.OK}\n{result}\n"
        return f"{ResponsePrefix.OK}\n"

    async def read_command(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Receive a socket command.

        Args:
            reader: The stream reader
            writer: The stream writer
        """
        data = (await reader.readline()).decode().strip()

        if not data:
            self.log.warning("Empty command received")
            writer.write(f"{ResponsePrefix.ERROR}: No command provided\n".encode())
        else:
            writer.write((await self._process_command(data)).encode())

        with contextlib.suppress(BrokenPipeError, ConnectionResetError):
            await writer.drain()
        writer.close()
        if self.stopped:
            await self.stop()

    # }}}

    async def stop(self) -> None:
        """Stop serving and reading events."""
        self.stopped = True
        for task in self.tasks:
            if task is not asyncio.current_task():
                task.cancel()
        self.server.close()

    async def serve(self) -> None:
        """Run the server."""
        async with self.server:
            await self.server.wait_closed()

    async def run(self) -> None:
        """Run the server and the event listener."""
        self.tasks = [asyncio.create_task(self.serve())]
        if self.event_reader:
            self.tasks.append(asyncio.create_task(self.read_events_loop()))
        await asyncio.gather(*self.tasks, return_exceptions=True)


async def get_event_stream_with_retry(
    max_retry: int = 10,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter] | tuple[None, BaseException]:
    """Obtain the event stream, retrying if it fails.

    If retry count is exhausted, returns (None, exception).

    Args:
        max_retry: Maximum number of retries
    """
    err_count = itertools.count()
    while True:
        attempt = next(err_count)
        try:
            return await get_event_stream()
        except (OSError, HyprspacesError) as e:
            if attempt > max_retry:
                return None, e
            await asyncio.sleep(1)


async def run_daemon(config_filename: str = "") -> None:
    """Run the server / daemon."""
    app = Hyprspaces(config_filename)
    signal.signal(signal.SIGTERM, lambda *_: sys.exit(0))

    ipc_folder = Path(CONTROL).parent
    try:
        ipc_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        app.log.critical("Cannot create IPC folder %s: %s", ipc_folder, e)
        return

    result = await get_event_stream_with_retry()
    if result[0] is None:
        events_writer = None
        app.log.warning("Failed to open hyprland event stream: %s.", result[1])
    else:
        app.event_reader, events_writer = result

    await app.initialize()

    app.server = await asyncio.start_unix_server(app.read_command, CONTROL)

    app.log.debug("[ initialized ]".center(80, "="))

    try:
        await app.run()
    except asyncio.CancelledError:
        app.log.critical("cancelled")
    finally:
        if events_writer:
            events_writer.close()
            await events_writer.wait_closed()
        app.server.close()
