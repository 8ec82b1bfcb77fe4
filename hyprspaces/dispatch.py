"""Translate clicks into Hyprland commands.

These functions only build command strings; `ipc.Dispatcher` sends them.
"""

from dataclasses import dataclass

from .constants import PRIMARY_BUTTON, SPECIAL_SENTINEL_ID
from .models import ClickKind
from .pairing import extract_special_number
from .settings import WorkspacesSettings
from .utils import apply_variables
from .workspace import Workspace

__all__ = ["ClickEvent", "focus_command", "special_section_commands", "window_command", "workspace_command"]


@dataclass(frozen=True)
class ClickEvent:
    """A pointer event received by the renderer."""

    kind: ClickKind = ClickKind.PRESS
    button: int = PRIMARY_BUTTON

    @property
    def is_press(self) -> bool:
        """Single press (double presses and releases are not clicks)."""
        return self.kind == ClickKind.PRESS

    @property
    def is_primary_press(self) -> bool:
        """Single press of the primary button."""
        return self.is_press and self.button == PRIMARY_BUTTON


def focus_command(target: int | str, move_to_monitor: bool) -> str:
    """Return the command focusing workspace `target` (an id or "name:<name>")."""
    if move_to_monitor:
        return f"dispatch focusworkspaceoncurrentmonitor {target}"
    return f"dispatch workspace {target}"


def workspace_command(workspace: Workspace, settings: WorkspacesSettings) -> str:
    """Return the command to run when `workspace` is clicked."""
    if workspace.id > 0:
        return focus_command(workspace.id, settings.move_to_monitor)
    if not workspace.is_special:
        return focus_command(f"name:{workspace.name}", settings.move_to_monitor)
    if workspace.id != SPECIAL_SENTINEL_ID:
        return f"dispatch togglespecialworkspace {workspace.name}"
    return "dispatch togglespecialworkspace"


def special_section_commands(workspace: Workspace, special_name: str, settings: WorkspacesSettings) -> list[str]:
    """Return the commands to run when the special part of a combined display is clicked.

    Focuses the workspace the special workspace is named after (`sp3` → 3),
    then toggles it. When the name carries no number, the clicked (regular)
    workspace is focused and the special workspace is toggled by name.
    """
    special_number = extract_special_number(special_name)
    if special_number > 0:
        return [
            focus_command(special_number, settings.move_to_monitor),
            f"dispatch togglespecialworkspace sp{special_number}",
        ]
    commands = []
    if workspace.id > 0:
        commands.append(focus_command(workspace.id, settings.move_to_monitor))
    commands.append(f"dispatch togglespecialworkspace {special_name}")
    return commands


def window_command(template: str, address: str, button: int) -> str:
    """Return the shell command to run when a taskbar window is clicked.

    Replaces `{address}` (with the 0x prefix) and `{button}` in `template`.
    """
    return apply_variables(template, {"address": f"0x{address.removeprefix('0x')}", "button": button})
