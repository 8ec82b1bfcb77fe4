" generic fixtures "
import logging
from copy import deepcopy
from unittest.mock import AsyncMock, MagicMock

import pytest

from hyprspaces.manager import WorkspacesManager
from hyprspaces.settings import WorkspacesSettings

from .testtools import make_client


def pytest_configure():
    "Runs once before all"
    from hyprspaces.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


WORKSPACES = [
    {"id": 1, "name": "1", "monitor": "DP-1", "windows": 2},
    {"id": 3, "name": "3", "monitor": "DP-1", "windows": 1},
    {"id": 4, "name": "4", "monitor": "HDMI-A-1", "windows": 0},
    {"id": -1337, "name": "web", "monitor": "HDMI-A-1", "windows": 1},
    {"id": -97, "name": "special:sp3", "monitor": "DP-1", "windows": 1},
    {"id": -98, "name": "special:scratch", "monitor": "DP-1", "windows": 1},
]

CLIENTS = [
    make_client("a1", 1, window_class="kitty", title="Terminal"),
    make_client("a2", 1, window_class="firefox", title="Mozilla Firefox"),
    make_client("a3", 3, window_class="code", title="main.py - Code"),
    make_client("a4", -97, "special:sp3", window_class="spotify", title="Spotify"),
    make_client("a5", -98, "special:scratch", window_class="kitty", title="scratch"),
    make_client("a6", -1337, "web", window_class="chromium", title="Docs"),
]

MONITORS = [
    {
        "id": 1,
        "name": "DP-1",
        "focused": True,
        "activeWorkspace": {"id": 1, "name": "1"},
        "specialWorkspace": {"id": 0, "name": ""},
    },
    {
        "id": 0,
        "name": "HDMI-A-1",
        "focused": False,
        "activeWorkspace": {"id": 4, "name": "4"},
        "specialWorkspace": {"id": 0, "name": ""},
    },
]


async def mocked_query(command, logger=None):
    "Simulates hyprctl_json"
    if command == "workspaces":
        return deepcopy(WORKSPACES)
    if command == "clients":
        return deepcopy(CLIENTS)
    if command == "monitors":
        return deepcopy(MONITORS)
    if command == "activewindow":
        return {"address": "0xa1"}
    raise NotImplementedError()


@pytest.fixture
def test_logger():
    "A logger which doesn't print anything"
    logger = logging.getLogger("hyprspaces.tests")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture
def settings():
    "Default settings"
    return WorkspacesSettings()


@pytest.fixture
def dispatcher():
    "A Dispatcher mock"
    mock = MagicMock(name="dispatcher")
    mock.execute = AsyncMock()
    mock.execute_all = AsyncMock()
    mock.run_shell = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def manager(dispatcher, test_logger):
    "A manager loaded with the sample snapshot"
    mgr = WorkspacesManager(dispatcher=dispatcher, logger=test_logger)
    mgr.query = AsyncMock(side_effect=mocked_query)
    mgr.load_snapshot(deepcopy(WORKSPACES), deepcopy(CLIENTS), deepcopy(MONITORS), active_window="0xa1")
    return mgr
