"""Association between special workspaces and the regular workspace they are named after.

A special workspace named `sp3` (or simply `3`) is paired with workspace 3.
The association is derived from the live workspace set and recomputed each
time it changes; workspaces never keep a reference to their pair.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .constants import SPECIAL_SENTINEL_ID

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .workspace import Workspace

__all__ = ["PairingResolver", "extract_special_number", "to_superscript"]

_SP_NUMBER_RE = re.compile(r"sp([0-9]+)")
# the whole name, as a plain decimal number: "3a", "1_000" or non-ASCII digits don't match
_NUMBER_RE = re.compile(r"[+-]?[0-9]+")

_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def extract_special_number(name: str) -> int:
    """Return the number a special workspace name refers to.

    Handles "sp1", "special:sp2" or plain numbers; returns 0 when no number
    can be found.
    """
    clean_name = name.removeprefix("special:")
    match = _SP_NUMBER_RE.search(clean_name)
    if match:
        return int(match.group(1))
    if _NUMBER_RE.fullmatch(clean_name):
        return int(clean_name)
    return 0


def to_superscript(num: int) -> str:
    """Return `num` written with unicode superscript digits."""
    return str(num).translate(_SUPERSCRIPTS)


class PairingResolver:
    """Lookup table of the special workspace paired with each regular workspace.

    Keys are regular workspace ids, values the (normalized) names of the
    paired special workspaces. Only `recompute` writes to the table.
    """

    def __init__(self) -> None:
        self._pairs: dict[int, str] = {}

    def __contains__(self, regular_id: int) -> bool:
        return regular_id in self._pairs

    def recompute(self, workspaces: Iterable[Workspace]) -> None:
        """Rebuild the table from the live workspace set.

        When several special workspaces refer to the same number, the first
        one (in iteration order) wins.
        """
        workspaces = list(workspaces)
        regular_ids = {ws.id for ws in workspaces if ws.is_regular}
        pairs: dict[int, str] = {}
        for ws in workspaces:
            if not ws.is_special or ws.id == SPECIAL_SENTINEL_ID:
                continue
            number = extract_special_number(ws.name)
            if number in regular_ids and number not in pairs:
                pairs[number] = ws.name
        self._pairs = pairs

    def paired_special(self, regular_id: int) -> str | None:
        """Return the name of the special workspace paired with `regular_id`."""
        return self._pairs.get(regular_id)

