"""Per-workspace state: window list, flags and the decisions derived from them."""

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import cast

from .constants import SPECIAL_SENTINEL_ID
from .models import ActiveWindowPosition, ClientInfo, WorkspaceInfo
from .pairing import extract_special_number
from .settings import WorkspacesSettings
from .window import WindowCandidate, WindowEntry, normalize_address, normalize_workspace_name

__all__ = ["Workspace", "WorkspaceFlags", "select_icon", "should_skip_window"]


@dataclass(frozen=True)
class WorkspaceFlags:
    """Snapshot of the flags used to pick a workspace icon."""

    is_urgent: bool = False
    is_active: bool = False
    is_special: bool = False
    is_visible: bool = False
    is_empty: bool = False
    is_persistent: bool = False


def select_icon(flags: WorkspaceFlags, icons_map: Mapping[str, str], name: str) -> str:
    """Return the icon of a workspace.

    The first state which is set *and* has an entry in `icons_map` wins, in
    this order: urgent, active, special, the workspace name, visible, empty,
    persistent, default. Falls back to the workspace name.
    """
    candidates = (
        ("urgent", flags.is_urgent),
        ("active", flags.is_active),
        ("special", flags.is_special),
        (name, True),
        ("visible", flags.is_visible),
        ("empty", flags.is_empty),
        ("persistent", flags.is_persistent),
        ("default", True),
    )
    for key, applies in candidates:
        if applies and key in icons_map:
            return icons_map[key]
    return name


def should_skip_window(entry: WindowEntry, ignore_patterns: Iterable[re.Pattern[str]]) -> bool:
    """Tell if any pattern fully matches the window's class or title."""
    return any(pattern.fullmatch(entry.window_class) or pattern.fullmatch(entry.title) for pattern in ignore_patterns)


class Workspace:  # pylint: disable=too-many-instance-attributes,too-many-public-methods
    """A Hyprland workspace and the windows it holds.

    `window_list` order is the display order. Window addresses are unique in
    the list.
    """

    def __init__(self, workspace_data: WorkspaceInfo) -> None:
        """Create the workspace from a `j/workspaces` record or a synthesized one."""
        self.id: int = workspace_data["id"]
        self.output: str = workspace_data.get("monitor", "")
        self.windows: int = workspace_data.get("windows", 0)
        self.is_active = False
        self.is_urgent = False
        self.is_visible = False
        self.is_persistent_rule: bool = workspace_data.get("persistent-rule", False)
        self.is_persistent_config: bool = workspace_data.get("persistent-config", False)
        self.name, self.is_special = normalize_workspace_name(workspace_data["name"], self.id)
        self.window_list: list[WindowEntry] = []
        # counted in `windows` but not listed: no representation outside taskbar mode
        self.unlisted_windows: dict[str, WindowCandidate] = {}

    def __repr__(self) -> str:
        return f"<Workspace {self.id} {self.name!r} ({len(self.window_list)} windows)>"

    @property
    def is_persistent(self) -> bool:
        """Persistent through a workspace rule or the configuration."""
        return self.is_persistent_rule or self.is_persistent_config

    @property
    def is_regular(self) -> bool:
        """Numbered, non special workspace."""
        return self.id > 0 and not self.is_special

    @property
    def special_number(self) -> int:
        """Number this special workspace refers to (`sp3` → 3), 0 if none."""
        if not self.is_special or self.id == SPECIAL_SENTINEL_ID:
            return 0
        return extract_special_number(self.name)

    def has_windows(self) -> bool:
        """Tell if the workspace holds windows, according to the tracked list or Hyprland's count."""
        return self.windows > 0 or bool(self.window_list)

    # Window map {{{

    def find_window(self, address: str) -> WindowEntry | None:
        """Return the entry for `address`, if tracked."""
        address = normalize_address(address)
        for window in self.window_list:
            if window.address == address:
                return window
        return None

    def initialize_window_map(self, clients: Iterable[ClientInfo], settings: WorkspacesSettings, active_address: str = "") -> None:
        """Seed the window list with the clients located on this workspace."""
        self.window_list.clear()
        self.unlisted_windows.clear()
        for client in clients:
            if cast("dict", client.get("workspace", {})).get("id") == self.id:
                self.add_window(WindowCandidate.from_client(client, active_address), settings)

    def insert_window(self, candidate: WindowCandidate, settings: WorkspacesSettings) -> bool:
        """Insert a window or update the entry with the same address.

        Windows without a representation are only kept in taskbar mode.

        Returns:
            True if the window is tracked
        """
        if candidate.is_empty():
            return False
        representation = settings.window_repr(candidate.window_class, candidate.title)
        if not representation and not settings.enable_taskbar:
            return False
        entry = candidate.to_entry(representation)
        for idx, window in enumerate(self.window_list):
            if window.address == entry.address:
                entry.is_active = entry.is_active or window.is_active
                self.window_list[idx] = entry
                break
        else:
            self.window_list.append(entry)
        self.unlisted_windows.pop(entry.address, None)
        return True

    def close_window(self, address: str) -> WindowEntry | None:
        """Remove a window, returning its last known state (None if not tracked)."""
        window = self.find_window(address)
        if window is not None:
            self.window_list.remove(window)
        return window

    def add_window(self, candidate: WindowCandidate, settings: WorkspacesSettings) -> None:
        """Insert the window, or keep it unlisted when it has no representation."""
        if not self.insert_window(candidate, settings) and not candidate.is_empty():
            self.unlisted_windows[candidate.address] = candidate

    def pop_window(self, address: str) -> WindowCandidate | None:
        """Remove a window, listed or not, and decrement the window count.

        Returns:
            The last known state of the window, None if it isn't on this workspace
        """
        address = normalize_address(address)
        candidate = self.unlisted_windows.pop(address, None)
        entry = self.close_window(address)
        if entry is not None:
            candidate = WindowCandidate(
                address=entry.address,
                workspace_name=self.name,
                window_class=entry.window_class,
                title=entry.title,
                workspace_id=self.id,
                is_active=entry.is_active,
            )
        if candidate is not None:
            self.windows = max(0, self.windows - 1)
        return candidate

    def on_window_opened(self, candidate: WindowCandidate, settings: WorkspacesSettings) -> bool:
        """Insert the window if it was opened on this workspace.

        Returns:
            True if the window belongs to this workspace
        """
        if candidate.workspace_name == self.name:
            self.add_window(candidate, settings)
            return True
        return False

    def update_window_title(self, address: str, title: str, settings: WorkspacesSettings) -> bool:
        """Refresh the title (and representation) of a tracked window."""
        window = self.find_window(address)
        if window is None:
            return False
        window.title = title
        window.representation = settings.window_repr(window.window_class, title)
        return True

    def set_active_window(self, address: str, position: ActiveWindowPosition = ActiveWindowPosition.NONE) -> None:
        """Mark `address` as the only active window, optionally moving it to the front or the back."""
        address = normalize_address(address)
        active: WindowEntry | None = None
        for window in self.window_list:
            window.is_active = window.address == address
            if window.is_active:
                active = window

        if active is None or position == ActiveWindowPosition.NONE:
            return
        self.window_list.remove(active)
        if position == ActiveWindowPosition.FIRST:
            self.window_list.insert(0, active)
        else:
            self.window_list.append(active)

    # }}}

    # Decisions {{{

    def should_skip_window(self, entry: WindowEntry, settings: WorkspacesSettings) -> bool:
        """Tell if the window is ignored by the configuration."""
        return should_skip_window(entry, settings.ignore_windows)

    def is_empty(self, settings: WorkspacesSettings) -> bool:
        """Tell if the workspace has nothing to show.

        Without ignore patterns, relies on Hyprland's window count. Otherwise a
        workspace whose tracked windows are all ignored is empty, whatever the
        count says.
        """
        if not settings.ignore_windows:
            return self.windows == 0
        return all(self.should_skip_window(window, settings) for window in self.window_list)

    def flags(self, settings: WorkspacesSettings) -> WorkspaceFlags:
        """Return the current flags."""
        return WorkspaceFlags(
            is_urgent=self.is_urgent,
            is_active=self.is_active,
            is_special=self.is_special,
            is_visible=self.is_visible,
            is_empty=self.is_empty(settings),
            is_persistent=self.is_persistent,
        )

    def select_icon(self, settings: WorkspacesSettings) -> str:
        """Return the workspace icon according to `format_icons`."""
        return select_icon(self.flags(settings), settings.format_icons, self.name)

    def iter_display_windows(self, settings: WorkspacesSettings, reverse: bool = False) -> Iterator[WindowEntry]:
        """Yield the windows to display, in order.

        Ignored windows are skipped. With `deduplicate_windows`, only the first
        window of each class is yielded; the seen classes are local to one
        iteration.
        """
        seen_classes: set[str] = set()
        for window in reversed(self.window_list) if reverse else self.window_list:
            if self.should_skip_window(window, settings):
                continue
            if settings.deduplicate_windows:
                if window.window_class in seen_classes:
                    continue
                seen_classes.add(window.window_class)
            yield window

    def is_shown(self, settings: WorkspacesSettings) -> bool:
        """Apply the `persistent_only`, `active_only` and `special_visible_only` filters."""
        if settings.persistent_only and not self.is_persistent:
            return False
        if settings.active_only and not (self.is_active or self.is_persistent or self.is_visible or self.is_special):
            return False
        return not (settings.special_visible_only and self.is_special and not self.is_visible)

    def state_tags(self, settings: WorkspacesSettings, bar_output: str = "") -> frozenset[str]:
        """Return the style classes of the workspace."""
        tags = {
            "active": self.is_active,
            "special": self.is_special,
            "empty": self.is_empty(settings),
            "persistent": self.is_persistent,
            "urgent": self.is_urgent,
            "visible": self.is_visible,
            "hosting-monitor": bool(bar_output) and bar_output == self.output,
        }
        return frozenset(tag for tag, enabled in tags.items() if enabled)

    # }}}
