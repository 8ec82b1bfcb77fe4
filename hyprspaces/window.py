"""Window records tracked by the workspaces."""

from dataclasses import dataclass

from .constants import SPECIAL_SENTINEL_ID
from .models import ClientInfo

__all__ = ["WindowCandidate", "WindowEntry", "normalize_address", "normalize_workspace_name"]

SENTINEL_SPECIAL_NAME = "special:special"


def normalize_address(address: str) -> str:
    """Return the address without its "0x" prefix, as Hyprland events carry it."""
    return address.removeprefix("0x")


def normalize_workspace_name(name: str, workspace_id: int | None = None) -> tuple[str, bool]:
    """Strip the "name:" / "special:" prefixes of a workspace name.

    The unnamed special workspace (id -99) keeps its full name.

    Args:
        name: Workspace name as reported by Hyprland
        workspace_id: Workspace id, guessed from the name when unknown

    Returns:
        The normalized name and whether the workspace is special
    """
    if name.startswith("name:"):
        return name[5:], False
    if name.startswith("special"):
        if workspace_id is None and name == SENTINEL_SPECIAL_NAME:
            workspace_id = SPECIAL_SENTINEL_ID
        return (name if workspace_id == SPECIAL_SENTINEL_ID else name[8:]), True
    return name, False


@dataclass
class WindowEntry:
    """A window of a workspace.

    Only `is_active` and `title` change after creation.
    """

    address: str
    window_class: str
    title: str
    representation: str = ""
    is_active: bool = False


@dataclass(frozen=True)
class WindowCandidate:
    """Creation payload of a window, from a client snapshot or an `openwindow` event."""

    address: str
    workspace_name: str
    window_class: str = ""
    title: str = ""
    workspace_id: int | None = None
    is_active: bool = False

    @classmethod
    def from_client(cls, client: ClientInfo, active_address: str = "") -> "WindowCandidate":
        """Build a candidate from a `j/clients` record."""
        address = normalize_address(client.get("address", ""))
        workspace = client.get("workspace", {"id": 0, "name": ""})
        return cls(
            address=address,
            workspace_name=normalize_workspace_name(workspace["name"], workspace["id"])[0],
            window_class=client.get("class", ""),
            title=client.get("title", ""),
            workspace_id=workspace["id"],
            is_active=bool(active_address) and address == normalize_address(active_address),
        )

    @classmethod
    def from_event(cls, params: str) -> "WindowCandidate":
        """Build a candidate from the `openwindow` event payload.

        Payload: ADDRESS,WORKSPACENAME,WINDOWCLASS,WINDOWTITLE (the title may contain commas)
        """
        address, workspace_name, window_class, title = (params.split(",", 3) + ["", "", ""])[:4]
        return cls(
            address=normalize_address(address),
            workspace_name=normalize_workspace_name(workspace_name)[0],
            window_class=window_class,
            title=title,
        )

    def is_empty(self) -> bool:
        """Tell if the payload does not describe a window."""
        return not self.address

    def to_entry(self, representation: str) -> WindowEntry:
        """Return the entry stored in the workspace's window list."""
        return WindowEntry(
            address=self.address,
            window_class=self.window_class,
            title=self.title,
            representation=representation,
            is_active=self.is_active,
        )
