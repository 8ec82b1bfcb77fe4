"""Display model of a workspace.

`compose_display` is the only place deciding how a workspace is rendered. It
returns exactly one of the display variants:

- `HiddenDisplay`: filtered out, or a special workspace already shown by its pair
- `TaskbarDisplay`: taskbar mode, one text entry per window
- `CombinedDisplay`: regular workspace followed by its paired special workspace
- `RegularDisplay`: regular (or named) workspace on its own
- `SpecialDisplay`: special workspace on its own
"""

from __future__ import annotations

import html
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from .constants import SPECIAL_SENTINEL_ID
from .models import DisplayKind
from .pairing import to_superscript
from .utils import apply_variables

if TYPE_CHECKING:
    from .settings import WorkspacesSettings
    from .workspace import Workspace

__all__ = [
    "CombinedDisplay",
    "DisplayVariant",
    "HiddenDisplay",
    "RegularDisplay",
    "SpecialDisplay",
    "SpecialSection",
    "TaskbarDisplay",
    "TaskbarWindow",
    "WindowIcon",
    "WorkspaceModel",
    "compose_display",
    "render_markup",
]

SUPERSCRIPT_MARKUP = "<span size='small' rise='5000'>{}</span>"


@dataclass(frozen=True)
class WindowIcon:
    """A window shown as an icon."""

    address: str
    window_class: str
    title: str
    representation: str
    size: int
    is_active: bool = False


@dataclass(frozen=True)
class TaskbarWindow:
    """A window shown as a taskbar entry."""

    address: str
    text_before: str
    text_after: str
    icon: str
    icon_size: int
    tooltip: str
    is_active: bool = False


@dataclass(frozen=True)
class SpecialSection:
    """The special workspace part of a combined display."""

    name: str
    indicator: str
    icons: tuple[WindowIcon, ...]
    number: str = ""


@dataclass(frozen=True)
class HiddenDisplay:
    """The workspace is not shown."""

    kind: ClassVar[DisplayKind] = DisplayKind.HIDDEN
    reason: str = ""


@dataclass(frozen=True)
class TaskbarDisplay:
    """Label, one entry per window, number and trailing label."""

    kind: ClassVar[DisplayKind] = DisplayKind.TASKBAR
    label: str
    windows: tuple[TaskbarWindow, ...]
    separator: str = ""
    number: str = ""
    label_after: str = ""


@dataclass(frozen=True)
class RegularDisplay:
    """Label, window icons and number."""

    kind: ClassVar[DisplayKind] = DisplayKind.REGULAR
    label: str
    icons: tuple[WindowIcon, ...]
    number: str = ""


@dataclass(frozen=True)
class SpecialDisplay:
    """Indicator, (smaller) window icons and special number."""

    kind: ClassVar[DisplayKind] = DisplayKind.SPECIAL
    indicator: str
    icons: tuple[WindowIcon, ...]
    number: str = ""


@dataclass(frozen=True)
class CombinedDisplay:
    """Regular workspace label and icons followed by the paired special workspace.

    The regular number follows the regular icons, or ends the display when the
    regular workspace has no icon.
    """

    kind: ClassVar[DisplayKind] = DisplayKind.COMBINED
    label: str
    icons: tuple[WindowIcon, ...]
    special: SpecialSection
    number: str = ""

    @property
    def number_at_end(self) -> bool:
        """Tell if the regular number is placed after the special section."""
        return not self.icons


DisplayVariant = HiddenDisplay | TaskbarDisplay | CombinedDisplay | RegularDisplay | SpecialDisplay


@dataclass(frozen=True)
class WorkspaceModel:
    """Everything an external renderer needs to draw a workspace."""

    id: int
    name: str
    output: str
    icon: str
    tags: frozenset[str]
    display: DisplayVariant

    @property
    def visible(self) -> bool:
        """Tell if the workspace should be drawn."""
        return not isinstance(self.display, HiddenDisplay)

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation."""
        return {
            "id": self.id,
            "name": self.name,
            "output": self.output,
            "icon": self.icon,
            "visible": self.visible,
            "tags": sorted(self.tags),
            "kind": self.display.kind.value,
            "display": asdict(self.display),
        }


def _window_icons(workspace: Workspace, settings: WorkspacesSettings, smaller: bool = False) -> tuple[WindowIcon, ...]:
    size = settings.special_icon_size if smaller or workspace.is_special else settings.icon_size
    return tuple(
        WindowIcon(
            address=window.address,
            window_class=window.window_class,
            title=window.title,
            representation=window.representation,
            size=size,
            is_active=window.is_active,
        )
        for window in workspace.iter_display_windows(settings)
    )


def _label(template: str, workspace: Workspace, icon: str) -> str:
    return apply_variables(template, {"id": workspace.id, "name": workspace.name, "icon": icon, "windows": ""})


def _workspace_number(workspace: Workspace, settings: WorkspacesSettings) -> str:
    if settings.show_workspace_number and workspace.id > 0:
        return to_superscript(workspace.id)
    return ""


def _special_number(workspace: Workspace, settings: WorkspacesSettings) -> str:
    if settings.show_special_workspace_number and workspace.id != SPECIAL_SENTINEL_ID:
        number = workspace.special_number
        if number > 0:
            return to_superscript(number)
    return ""


def _hidden_reason(workspace: Workspace, settings: WorkspacesSettings, consumed: bool) -> str:
    if not workspace.is_shown(settings):
        return "filtered"
    if consumed and workspace.is_special and not settings.enable_taskbar:
        return "combined"
    return ""


def _taskbar_display(workspace: Workspace, settings: WorkspacesSettings, icon: str) -> TaskbarDisplay:
    windows = tuple(
        TaskbarWindow(
            address=window.address,
            text_before=apply_variables(settings.taskbar_format_before, {"title": window.title}),
            text_after=apply_variables(settings.taskbar_format_after, {"title": window.title}),
            icon=window.window_class if settings.taskbar_with_icon else "",
            icon_size=settings.taskbar_icon_size,
            tooltip=window.title,
            is_active=window.is_active,
        )
        for window in workspace.iter_display_windows(settings, reverse=settings.taskbar_reverse_direction)
    )
    number = _special_number(workspace, settings) if workspace.is_special else _workspace_number(workspace, settings)
    return TaskbarDisplay(
        label=_label(settings.format_before, workspace, icon),
        windows=windows,
        separator=settings.window_separator,
        number=number,
        label_after=_label(settings.format_after, workspace, icon) if settings.format_after else "",
    )


def compose_display(
    workspace: Workspace,
    settings: WorkspacesSettings,
    *,
    paired: Workspace | None = None,
    consumed: bool = False,
    icon: str | None = None,
) -> DisplayVariant:
    """Decide how a workspace is displayed.

    Args:
        workspace: The workspace to display
        settings: Shared settings
        paired: The special workspace paired with this (regular) workspace
        consumed: True if this special workspace is displayed by its paired regular workspace
        icon: The workspace icon (computed when not provided)
    """
    reason = _hidden_reason(workspace, settings, consumed)
    if reason:
        return HiddenDisplay(reason)

    if icon is None:
        icon = workspace.select_icon(settings)

    if settings.enable_taskbar:
        return _taskbar_display(workspace, settings, icon)

    label = _label(settings.format_before, workspace, icon)

    if not workspace.is_special:
        if paired is not None and paired.has_windows():
            return CombinedDisplay(
                label=label,
                icons=_window_icons(workspace, settings),
                special=SpecialSection(
                    name=paired.name,
                    indicator=settings.special_workspace_indicator,
                    icons=_window_icons(paired, settings, smaller=True),
                    number=_special_number(paired, settings),
                ),
                number=_workspace_number(workspace, settings),
            )
        return RegularDisplay(
            label=label,
            icons=_window_icons(workspace, settings),
            number=_workspace_number(workspace, settings),
        )

    return SpecialDisplay(
        indicator=settings.special_workspace_indicator,
        icons=_window_icons(workspace, settings, smaller=True),
        number=_special_number(workspace, settings),
    )


# Text rendering {{{


def _sup(number: str) -> list[str]:
    return [SUPERSCRIPT_MARKUP.format(number)] if number else []


def _icons_markup(icons: tuple[WindowIcon, ...]) -> list[str]:
    return [html.escape(icon.representation, quote=False) for icon in icons if icon.representation]


def _taskbar_markup(display: TaskbarDisplay) -> str:
    entries = []
    for window in display.windows:
        text = "".join(html.escape(part, quote=False) for part in (window.text_before, window.text_after) if part)
        entries.append(f"<b>{text}</b>" if window.is_active else text)
    parts = [display.label] if display.label else []
    parts.append(display.separator.join(entries))
    parts.extend(_sup(display.number))
    if display.label_after:
        parts.append(display.label_after)
    return " ".join(part for part in parts if part)


def render_markup(model: WorkspaceModel) -> str:
    """Render a model as Pango markup, for bars which only display text."""
    display = model.display
    if isinstance(display, HiddenDisplay):
        return ""
    if isinstance(display, TaskbarDisplay):
        return _taskbar_markup(display)
    if isinstance(display, RegularDisplay):
        parts = [display.label, *_icons_markup(display.icons), *_sup(display.number)]
    elif isinstance(display, SpecialDisplay):
        parts = [display.indicator, *_icons_markup(display.icons), *_sup(display.number)]
    else:
        parts = [display.label, *_icons_markup(display.icons)]
        if not display.number_at_end:
            parts.extend(_sup(display.number))
        parts.extend([display.special.indicator, *_icons_markup(display.special.icons), *_sup(display.special.number)])
        if display.number_at_end:
            parts.extend(_sup(display.number))
    return " ".join(part for part in parts if part)


# }}}
