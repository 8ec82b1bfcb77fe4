"""Registry of the live workspaces and the handlers keeping it in sync with Hyprland."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from functools import partial
from typing import Any, cast

from .config import Configuration
from .constants import CONFIG_SECTION
from .display import CombinedDisplay, WorkspaceModel, compose_display
from .dispatch import ClickEvent, special_section_commands, window_command, workspace_command
from .ipc import Dispatcher, hyprctl_json
from .logging_setup import get_logger
from .models import ClientInfo, DispatchError, HyprspacesError, MonitorInfo, WorkspaceInfo
from .pairing import PairingResolver
from .schema import WORKSPACES_CONFIG_SCHEMA
from .settings import WorkspacesSettings
from .validation import validate_section
from .window import WindowCandidate, normalize_address, normalize_workspace_name
from .workspace import Workspace

__all__ = ["WorkspacesManager"]


def _split(params: str, count: int) -> list[str]:
    """Split an event payload in `count` fields, the last one keeping its commas."""
    return (params.split(",", count - 1) + [""] * count)[:count]


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


class WorkspacesManager:  # pylint: disable=too-many-instance-attributes,too-many-public-methods
    """Owns every `Workspace` and the pairing table.

    Event handlers are named after the Hyprland events (`event_<name>`) and
    receive the raw payload. All the mutations happen in this class, one
    handler at a time (see `lock`).
    """

    def __init__(
        self,
        settings: WorkspacesSettings | None = None,
        dispatcher: Dispatcher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.log = logger or get_logger("workspaces")
        self.settings = settings or WorkspacesSettings()
        self.dispatcher = dispatcher or Dispatcher(self.log)
        self.query: Callable = partial(hyprctl_json, logger=self.log)
        self.lock = asyncio.Lock()
        # insertion order is creation order
        self.workspaces: dict[int, Workspace] = {}
        self.pairing = PairingResolver()
        self.models: dict[int, WorkspaceModel] = {}
        # windows opened on a workspace which doesn't exist yet
        self.orphan_windows: dict[str, WindowCandidate] = {}
        self.active_monitor = ""
        self.active_window = ""
        self.monitor_workspaces: dict[str, str] = {}
        self.monitor_specials: dict[str, str] = {}

    # Configuration {{{

    def apply_config(self, config: dict[str, Any]) -> list[str]:
        """Validate and use the `[workspaces]` section of `config`.

        Invalid options are logged and replaced by their default value.

        Returns:
            The validation errors
        """
        section = cast("dict[str, Any]", config.get(CONFIG_SECTION, {}))
        report = validate_section(section, CONFIG_SECTION, WORKSPACES_CONFIG_SCHEMA, self.log)
        for error in report.errors:
            self.log.error(error)

        options = Configuration(report.valid_options(section), logger=self.log, schema=WORKSPACES_CONFIG_SCHEMA)
        self.settings = WorkspacesSettings.from_config(options)
        return report.errors

    # }}}

    # State loading {{{

    async def refresh(self) -> None:
        """Reload the whole state from Hyprland."""
        workspaces = await self.query("workspaces")
        clients = await self.query("clients")
        monitors = await self.query("monitors")
        active_window = cast("dict[str, Any]", await self.query("activewindow"))
        self.load_snapshot(
            cast("list[WorkspaceInfo]", workspaces),
            cast("list[ClientInfo]", clients),
            cast("list[MonitorInfo]", monitors),
            active_window=str(active_window.get("address", "")),
        )

    def load_snapshot(
        self,
        workspaces: Iterable[WorkspaceInfo],
        clients: Iterable[ClientInfo],
        monitors: Iterable[MonitorInfo],
        active_window: str = "",
    ) -> None:
        """Replace the state with a full snapshot (`j/workspaces`, `j/clients`, `j/monitors`).

        Args:
            workspaces: Workspace records
            clients: Client records, dispatched to their workspace
            monitors: Monitor records, giving the active and visible workspaces
            active_window: Address of the focused window
        """
        clients = list(clients)
        self.active_window = normalize_address(active_window)
        self._load_monitors(monitors)
        self.workspaces = {}
        self.models = {}
        self.orphan_windows = {}
        for record in workspaces:
            self._add_workspace(record, clients)
        self._add_persistent_workspaces()
        self._workspaces_changed()

    def _load_monitors(self, monitors: Iterable[MonitorInfo]) -> None:
        self.monitor_workspaces = {}
        self.monitor_specials = {}
        for monitor in monitors:
            active = monitor["activeWorkspace"]
            self.monitor_workspaces[monitor["name"]] = normalize_workspace_name(active["name"], active["id"])[0]
            special = monitor.get("specialWorkspace", {"id": 0, "name": ""})
            self.monitor_specials[monitor["name"]] = normalize_workspace_name(special["name"], special["id"])[0] if special["name"] else ""
            if monitor.get("focused"):
                self.active_monitor = monitor["name"]

    def _add_workspace(self, record: WorkspaceInfo, clients: Iterable[ClientInfo] = ()) -> Workspace:
        workspace = Workspace(record)
        if not workspace.is_special and workspace.name in self.settings.persistent_workspaces:
            workspace.is_persistent_config = True
        workspace.initialize_window_map(clients, self.settings, self.active_window)
        for address, candidate in list(self.orphan_windows.items()):
            if workspace.on_window_opened(candidate, self.settings):
                del self.orphan_windows[address]
        self.workspaces[workspace.id] = workspace
        return workspace

    def _add_persistent_workspaces(self) -> None:
        """Create the configured persistent workspaces Hyprland doesn't report."""
        existing = {ws.name for ws in self.workspaces.values() if not ws.is_special}
        for name in self.settings.persistent_workspaces:
            if name in existing:
                continue
            if not name.isdigit():
                self.log.warning("Persistent workspace %r ignored: only numbered workspaces are created in advance", name)
                continue
            record: WorkspaceInfo = {
                "id": int(name),
                "name": name,
                "monitor": self.settings.bar_output or self.active_monitor,
                "windows": 0,
                "persistent-config": True,
            }
            self._add_workspace(record)

    async def _fetch_workspace(self, workspace_id: int) -> WorkspaceInfo | None:
        try:
            records = cast("list[WorkspaceInfo]", await self.query("workspaces"))
        except (OSError, HyprspacesError) as e:
            self.log.warning("Can't fetch workspace %s: %s", workspace_id, e)
            return None
        for record in records:
            if record["id"] == workspace_id:
                return record
        return None

    def _workspaces_changed(self) -> None:
        for workspace_id in list(self.models):
            if workspace_id not in self.workspaces:
                del self.models[workspace_id]
        self.pairing.recompute(self.workspaces.values())
        self._update_states()

    def _update_states(self) -> None:
        """Recompute the active, visible and urgent flags from the monitors state."""
        visible = {(name, False) for name in self.monitor_workspaces.values()}
        visible.update((name, True) for name in self.monitor_specials.values() if name)
        focused = {(self.monitor_workspaces.get(self.active_monitor, ""), False)}
        if self.monitor_specials.get(self.active_monitor):
            focused.add((self.monitor_specials[self.active_monitor], True))
        for workspace in self.workspaces.values():
            key = (workspace.name, workspace.is_special)
            workspace.is_visible = key in visible
            workspace.is_active = key in focused
            if workspace.is_active:
                workspace.is_urgent = False

    # }}}

    # Lookups {{{

    def find_workspace(self, name: str, special: bool = False) -> Workspace | None:
        """Return the workspace called `name` (normalized)."""
        for workspace in self.workspaces.values():
            if workspace.name == name and workspace.is_special == special:
                return workspace
        return None

    def find_window_workspace(self, address: str) -> Workspace | None:
        """Return the workspace tracking the window `address`."""
        for workspace in self.workspaces.values():
            if workspace.find_window(address) is not None:
                return workspace
        return None

    def ordered_workspaces(self) -> list[Workspace]:
        """Return the workspaces in display order: numbered, named, then special ones."""
        return sorted(
            self.workspaces.values(),
            key=lambda ws: (ws.is_special, ws.id <= 0, max(ws.id, 0), ws.name),
        )

    def paired_workspace(self, workspace: Workspace) -> Workspace | None:
        """Return the live special workspace paired with a regular workspace."""
        if not workspace.is_regular:
            return None
        special_name = self.pairing.paired_special(workspace.id)
        if special_name is None:
            return None
        return self.find_workspace(special_name, special=True)

    # }}}

    # Hyprland events {{{

    async def handle_event(self, name: str, params: str) -> bool:
        """Run the `name` handler, if any.

        Returns:
            True if the event is handled
        """
        handler = getattr(self, name, None)
        if handler is None:
            return False
        self.log.debug("%s(%s)", name, params)
        async with self.lock:
            await handler(params)
        return True

    async def event_workspacev2(self, params: str) -> None:
        """Active workspace changed on the focused monitor: ID,NAME."""
        workspace_id, name = _split(params, 2)
        self.monitor_workspaces[self.active_monitor] = normalize_workspace_name(name, _to_int(workspace_id))[0]
        self._update_states()

    async def event_focusedmon(self, params: str) -> None:
        """Focused monitor changed: MONNAME,WORKSPACENAME."""
        monitor, name = _split(params, 2)
        self.active_monitor = monitor
        name, is_special = normalize_workspace_name(name)
        if not is_special:
            self.monitor_workspaces[monitor] = name
        self._update_states()

    async def event_activespecial(self, params: str) -> None:
        """Special workspace shown or hidden: WORKSPACENAME,MONNAME (empty name when hidden)."""
        name, monitor = (params.rsplit(",", 1) + [""])[:2]
        self.monitor_specials[monitor] = normalize_workspace_name(name)[0] if name else ""
        self._update_states()

    async def event_createworkspacev2(self, params: str) -> None:
        """Workspace created: ID,NAME."""
        workspace_id, name = _split(params, 2)
        record = await self._fetch_workspace(_to_int(workspace_id))
        if record is None:
            record = {"id": _to_int(workspace_id), "name": name, "monitor": self.active_monitor, "windows": 0}
        previous = self.workspaces.get(record["id"])
        workspace = self._add_workspace(record)
        if previous is not None:
            workspace.is_persistent_config = workspace.is_persistent_config or previous.is_persistent_config
            for window in previous.window_list:
                if workspace.find_window(window.address) is None:
                    workspace.window_list.append(window)
            for address, candidate in previous.unlisted_windows.items():
                workspace.unlisted_windows.setdefault(address, candidate)
        self._workspaces_changed()

    async def event_destroyworkspacev2(self, params: str) -> None:
        """Workspace destroyed: ID,NAME. Configured persistent workspaces are emptied instead."""
        workspace = self.workspaces.get(_to_int(_split(params, 2)[0]))
        if workspace is None:
            return
        if workspace.is_persistent_config:
            workspace.window_list.clear()
            workspace.unlisted_windows.clear()
            workspace.windows = 0
            workspace.is_urgent = False
        else:
            del self.workspaces[workspace.id]
        self._workspaces_changed()

    async def event_moveworkspacev2(self, params: str) -> None:
        """Workspace moved to another monitor: ID,NAME,MONNAME."""
        workspace_id = _split(params, 2)[0]
        monitor = params.rsplit(",", 1)[-1]
        workspace = self.workspaces.get(_to_int(workspace_id))
        if workspace is not None:
            workspace.output = monitor

    async def event_renameworkspace(self, params: str) -> None:
        """Workspace renamed: ID,NEWNAME."""
        workspace_id, name = _split(params, 2)
        workspace = self.workspaces.get(_to_int(workspace_id))
        if workspace is None:
            return
        workspace.name = normalize_workspace_name(name, workspace.id)[0]
        self._workspaces_changed()

    async def event_openwindow(self, params: str) -> None:
        """Window opened: ADDRESS,WORKSPACENAME,CLASS,TITLE."""
        candidate = WindowCandidate.from_event(params)
        if candidate.is_empty():
            return
        for workspace in self.workspaces.values():
            if workspace.on_window_opened(candidate, self.settings):
                workspace.windows += 1
                return
        self.log.debug("Window %s opened on unknown workspace %s", candidate.address, candidate.workspace_name)
        self.orphan_windows[candidate.address] = candidate

    async def event_closewindow(self, params: str) -> None:
        """Window closed: ADDRESS."""
        address = normalize_address(params.strip())
        self.orphan_windows.pop(address, None)
        for workspace in self.workspaces.values():
            if workspace.pop_window(address) is not None:
                return

    async def event_movewindowv2(self, params: str) -> None:
        """Window moved to another workspace: ADDRESS,WORKSPACEID,WORKSPACENAME."""
        address, workspace_id, name = _split(params, 3)
        address = normalize_address(address)
        target_id = _to_int(workspace_id)
        moved = self.orphan_windows.pop(address, None)
        for workspace in self.workspaces.values():
            popped = workspace.pop_window(address)
            if popped is not None:
                moved = popped
                break
        if moved is None:
            self.log.debug("Untracked window %s moved", address)
            return

        moved = replace(moved, workspace_name=normalize_workspace_name(name, target_id)[0], workspace_id=target_id)
        target = self.workspaces.get(target_id)
        if target is None:
            self.orphan_windows[address] = moved
            return
        target.add_window(moved, self.settings)
        target.windows += 1

    async def event_windowtitlev2(self, params: str) -> None:
        """Window title changed: ADDRESS,TITLE."""
        address, title = _split(params, 2)
        for workspace in self.workspaces.values():
            if workspace.update_window_title(address, title, self.settings):
                return

    async def event_activewindowv2(self, params: str) -> None:
        """Focused window changed: ADDRESS (empty when nothing is focused)."""
        self.active_window = normalize_address(params.strip())
        for workspace in self.workspaces.values():
            workspace.set_active_window(self.active_window, self.settings.active_window_position)

    async def event_urgent(self, params: str) -> None:
        """Window requested attention: ADDRESS."""
        workspace = self.find_window_workspace(params.strip())
        if workspace is not None and not workspace.is_active:
            workspace.is_urgent = True

    async def event_configreloaded(self, _params: str = "") -> None:
        """Hyprland configuration reloaded (persistent rules may have changed)."""
        await self.refresh()

    # }}}

    # Rendering {{{

    def build_model(self, workspace: Workspace, consumed: Iterable[str] = ()) -> WorkspaceModel:
        """Compute the model of one workspace.

        Args:
            workspace: The workspace to render
            consumed: Names of the special workspaces displayed by their paired workspace
        """
        icon = workspace.select_icon(self.settings)
        display = compose_display(
            workspace,
            self.settings,
            paired=self.paired_workspace(workspace),
            consumed=workspace.is_special and workspace.name in consumed,
            icon=icon,
        )
        return WorkspaceModel(
            id=workspace.id,
            name=workspace.name,
            output=workspace.output,
            icon=icon,
            tags=workspace.state_tags(self.settings, self.settings.bar_output),
            display=display,
        )

    def render(self) -> list[WorkspaceModel]:
        """Update the model of every workspace and return them in display order.

        A workspace failing to render keeps its previous model.
        """
        consumed: set[str] = set()
        # specials last: they are hidden only when a Combined display shows them
        for workspace in sorted(self.workspaces.values(), key=lambda ws: ws.is_special):
            try:
                model = self.build_model(workspace, consumed)
            except Exception:  # pylint: disable=broad-exception-caught
                self.log.exception("Failed to render workspace %s", workspace.name)
                continue
            self.models[workspace.id] = model
            if isinstance(model.display, CombinedDisplay):
                consumed.add(model.display.special.name)
        return [self.models[ws.id] for ws in self.ordered_workspaces() if ws.id in self.models]

    def dump(self) -> dict[str, Any]:
        """Return the last rendered models."""
        return {"workspaces": [self.models[ws.id].as_dict() for ws in self.ordered_workspaces() if ws.id in self.models]}

    # }}}

    # Interactions {{{

    async def handle_click(self, workspace_id: int, event: ClickEvent) -> bool:
        """Focus (or toggle) the clicked workspace.

        Returns:
            False if the event is not a press, True otherwise
        """
        workspace = self.workspaces.get(workspace_id)
        if workspace is None or not event.is_press:
            return False
        try:
            await self.dispatcher.execute(workspace_command(workspace, self.settings))
        except DispatchError as e:
            self.log.error("Failed to dispatch workspace: %s", e)
        return True

    async def handle_special_click(self, workspace_id: int, event: ClickEvent) -> bool:
        """Toggle the special workspace paired with `workspace_id`.

        Only primary button presses are handled.

        Returns:
            True if the click is handled (stops propagation to the workspace)
        """
        if not event.is_primary_press:
            return False
        workspace = self.workspaces.get(workspace_id)
        special_name = self.pairing.paired_special(workspace_id) if workspace is not None else None
        if workspace is None or special_name is None:
            return False
        try:
            await self.dispatcher.execute_all(special_section_commands(workspace, special_name, self.settings))
        except DispatchError as e:
            self.log.error("Failed to handle special workspace click: %s", e)
        return True

    async def handle_window_click(self, address: str, event: ClickEvent) -> bool:
        """Run `on_click_window` for a taskbar window.

        Returns:
            True (the click never reaches the workspace)
        """
        if event.is_press and self.settings.on_click_window:
            await self.dispatcher.run_shell(window_command(self.settings.on_click_window, normalize_address(address), event.button))
        return True

    # }}}
