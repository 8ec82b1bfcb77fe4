import asyncio
from unittest.mock import AsyncMock, Mock

from hyprspaces.workspace import Workspace


async def wait_called(fn, timeout=1.0, count=1):
    delay = 0.0
    ival = 0.05
    while True:
        if fn.call_count >= count:
            break
        await asyncio.sleep(ival)
        delay += ival

        if delay > timeout:
            raise TimeoutError()


class MockReader:
    "A StreamReader mock"

    def __init__(self):
        self.q = asyncio.Queue()

    async def readline(self, *a):
        return await self.q.get()

    read = readline


class MockWriter:
    "A StreamWriter mock"

    def __init__(self):
        self.write = Mock()
        self.drain = AsyncMock()
        self.close = Mock()
        self.wait_closed = AsyncMock()

    @property
    def written(self):
        return b"".join(call.args[0] for call in self.write.call_args_list).decode()


def make_workspace(workspace_id=1, name=None, windows=0, monitor="DP-1", **extra):
    "Build a Workspace from a j/workspaces-like record"
    record = {"id": workspace_id, "name": str(workspace_id) if name is None else name, "monitor": monitor, "windows": windows}
    record.update(extra)
    return Workspace(record)


def make_client(address, workspace_id, workspace_name=None, window_class="kitty", title="~"):
    "Build a j/clients-like record"
    return {
        "address": f"0x{address}",
        "mapped": True,
        "hidden": False,
        "workspace": {"id": workspace_id, "name": str(workspace_id) if workspace_name is None else workspace_name},
        "class": window_class,
        "title": title,
    }
