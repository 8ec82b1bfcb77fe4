"""Configuration schema for the `[workspaces]` section."""

import re

from .models import ActiveWindowPosition
from .validation import ConfigField, ConfigItems


def _check_patterns(value: list | dict) -> list[str]:
    """Report the regular expressions which fail to compile."""
    errors = []
    for pattern in value:
        # window_rewrite keys may carry a class<...> / title<...> selector
        match = re.fullmatch(r"(?:class|title)<(.*)>", pattern)
        try:
            re.compile(match.group(1) if match else pattern)
        except re.error as e:
            errors.append(f"Invalid regular expression {pattern!r}: {e}")
    return errors


WORKSPACES_CONFIG_SCHEMA = ConfigItems(
    ConfigField("enable_taskbar", bool, default=False, description="List every window as text instead of icons only"),
    ConfigField(
        "active_window_position",
        str,
        default=ActiveWindowPosition.NONE.value,
        description="Move the active window to the front or back of its workspace",
        choices=[p.value for p in ActiveWindowPosition],
    ),
    ConfigField("persistent_only", bool, default=False, description="Only show persistent workspaces"),
    ConfigField("active_only", bool, default=False, description="Only show active, persistent, visible or special workspaces"),
    ConfigField("special_visible_only", bool, default=False, description="Hide special workspaces which are not visible"),
    ConfigField("deduplicate_windows", bool, default=False, description="Show one icon per window class in each workspace"),
    ConfigField("ignore_windows", list, default=[], description="Regular expressions of window classes or titles to ignore", validator=_check_patterns),
    ConfigField("move_to_monitor", bool, default=False, description="Focus clicked workspaces on the current monitor"),
    ConfigField("show_workspace_number", bool, default=False, description="Add the workspace number as a superscript"),
    ConfigField("show_special_workspace_number", bool, default=False, description="Add the special workspace number as a superscript"),
    ConfigField("special_workspace_icon_scale", float, default=0.75, description="Icon scale of special workspace windows"),
    ConfigField("special_workspace_indicator", str, default="◆", description="Markup shown before special workspace icons"),
    ConfigField("icon_size", int, default=16, description="Window icon size in pixels"),
    ConfigField("on_click_window", str, default="", description="Shell command run when a taskbar window is clicked ({address}, {button})"),
    ConfigField("window_separator", str, default=" ", description="Separator between taskbar windows"),
    ConfigField("format_before", str, default="{icon}", description="Workspace label template ({id}, {name}, {icon}, {windows})"),
    ConfigField("format_after", str, default="", description="Taskbar trailing label template ({id}, {name}, {icon})"),
    ConfigField("format_icons", dict, default={}, description="Workspace icons by state or name"),
    ConfigField("taskbar_format_before", str, default="{title}", description="Text before a taskbar window icon ({title})"),
    ConfigField("taskbar_format_after", str, default="", description="Text after a taskbar window icon ({title})"),
    ConfigField("taskbar_with_icon", bool, default=True, description="Show window icons in taskbar mode"),
    ConfigField("taskbar_icon_size", int, default=16, description="Taskbar icon size in pixels"),
    ConfigField("taskbar_reverse_direction", bool, default=False, description="List taskbar windows in reverse order"),
    ConfigField("window_rewrite", dict, default={}, description="Window representation by class<regex> or title<regex>", validator=_check_patterns),
    ConfigField("window_rewrite_default", str, default="{class}", description="Window representation when no rewrite rule matches"),
    ConfigField("persistent_workspaces", list, default=[], description="Workspace names which are always shown"),
    ConfigField("bar_output", str, default="", description="Monitor hosting the bar (adds the hosting-monitor tag)"),
)
