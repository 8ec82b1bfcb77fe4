"""Common types from the Hyprland API and hyprspaces errors."""

from enum import IntEnum, StrEnum
from typing import TypedDict

PlainTypes = float | str | dict[str, "PlainTypes"] | list["PlainTypes"]
JSONResponse = dict[str, PlainTypes] | list[dict[str, PlainTypes]] | PlainTypes


class WorkspaceDf(TypedDict):
    """Workspace reference."""

    id: int
    name: str


WorkspaceInfo = TypedDict(
    "WorkspaceInfo",
    {
        "id": int,
        "name": str,
        "monitor": str,
        "windows": int,
        "persistent-rule": bool,
        "persistent-config": bool,
    },
    total=False,
)
"""Workspace record as returned by `j/workspaces` (persistent flags are optional)."""

ClientInfo = TypedDict(
    "ClientInfo",
    {
        "address": str,
        "mapped": bool,
        "hidden": bool,
        "workspace": WorkspaceDf,
        "class": str,
        "title": str,
        "initialClass": str,
        "initialTitle": str,
        "focusHistoryID": int,
    },
    total=False,
)
"""Client information as returned by `j/clients`."""


class MonitorInfo(TypedDict):
    """Monitor information (subset used by hyprspaces)."""

    id: int
    name: str
    focused: bool
    activeWorkspace: WorkspaceDf
    specialWorkspace: WorkspaceDf


class ActiveWindowPosition(StrEnum):
    """Where the active window is moved in its workspace's window list."""

    NONE = "none"
    FIRST = "first"
    LAST = "last"


class ClickKind(StrEnum):
    """Kind of pointer event delivered by the renderer."""

    PRESS = "press"
    DOUBLE_PRESS = "double-press"
    RELEASE = "release"


class DisplayKind(StrEnum):
    """Tag of a display variant."""

    HIDDEN = "hidden"
    TASKBAR = "taskbar"
    COMBINED = "combined"
    REGULAR = "regular"
    SPECIAL = "special"


class HyprspacesError(Exception):
    """Base class for hyprspaces errors."""


class DispatchError(HyprspacesError):
    """A command round-trip with the compositor failed."""


class ConfigError(HyprspacesError):
    """The configuration file can not be used (already logged)."""


class ExitCode(IntEnum):
    """Standard exit codes for the hyprspaces client."""

    SUCCESS = 0
    USAGE_ERROR = 1
    ENV_ERROR = 2
    CONNECTION_ERROR = 3
    COMMAND_ERROR = 4


class ResponsePrefix(StrEnum):
    """Response prefixes for daemon-client communication."""

    OK = "OK"
    ERROR = "ERROR"

