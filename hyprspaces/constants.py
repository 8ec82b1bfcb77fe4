"""Shared constants for hyprspaces."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "CONTROL",
    "EVENTS",
    "HYPRCTL",
    "IPC_FOLDER",
    "IPC_MAX_RETRIES",
    "IPC_RETRY_DELAY_MULTIPLIER",
    "PRIMARY_BUTTON",
    "SPECIAL_SENTINEL_ID",
    "TASK_TIMEOUT",
]

HYPRLAND_INSTANCE_SIGNATURE = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE", "NO_INSTANCE")

MAX_SOCKET_FILE_LEN = 15
MAX_SOCKET_PATH_LEN = 108


def _get_ipc_folder() -> str:
    """Return the Hyprland runtime folder, shortened through a symlink when the AF_UNIX path would be too long."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if runtime_dir is None:
        return "/"
    original = f"{runtime_dir}/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"
    if not os.path.exists(original):
        original = f"/tmp/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108

    if len(original) >= MAX_SOCKET_PATH_LEN - MAX_SOCKET_FILE_LEN:
        short = f"/tmp/.hyprspaces-{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108
        if not os.path.exists(short):
            os.symlink(original, short)
        return short
    return original


IPC_FOLDER = _get_ipc_folder()

HYPRCTL = f"{IPC_FOLDER}/.socket.sock"
EVENTS = f"{IPC_FOLDER}/.socket2.sock"
CONTROL = f"{IPC_FOLDER}/.hyprspaces.sock"

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "hyprspaces" / "config.toml"
CONFIG_SECTION = "workspaces"

TASK_TIMEOUT = 35.0

# IPC retry settings (JSON queries only, dispatch is never retried)
IPC_MAX_RETRIES = 3
IPC_RETRY_DELAY_MULTIPLIER = 0.5

# Hyprland's id for the unnamed special workspace
SPECIAL_SENTINEL_ID = -99

PRIMARY_BUTTON = 1
