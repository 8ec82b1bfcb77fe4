"""Read-only settings shared by every workspace."""

import re
from dataclasses import dataclass, field
from logging import Logger
from types import MappingProxyType

from .config import Configuration
from .models import ActiveWindowPosition
from .utils import apply_variables

__all__ = ["WindowRewriteRule", "WorkspacesSettings"]

_SELECTOR_RE = re.compile(r"(class|title)<(.*)>")


@dataclass(frozen=True)
class WindowRewriteRule:
    """Maps windows whose class (or title) matches `pattern` to a representation."""

    selector: str
    pattern: re.Pattern[str]
    template: str

    def matches(self, window_class: str, title: str) -> bool:
        """Tell if the rule applies to the window."""
        return self.pattern.search(title if self.selector == "title" else window_class) is not None


def _compile_patterns(patterns: list[str], log: Logger) -> tuple[re.Pattern[str], ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error:
            log.exception("Ignoring invalid pattern %r", pattern)
    return tuple(compiled)


def _compile_rewrite_rules(rules: dict[str, str], log: Logger) -> tuple[WindowRewriteRule, ...]:
    compiled = []
    for selector, template in rules.items():
        match = _SELECTOR_RE.fullmatch(selector)
        selector_name, pattern = match.groups() if match else ("class", selector)
        try:
            compiled.append(WindowRewriteRule(selector_name, re.compile(pattern), str(template)))
        except re.error:
            log.exception("Ignoring invalid window_rewrite rule %r", selector)
    return tuple(compiled)


@dataclass(frozen=True)
class WorkspacesSettings:  # pylint: disable=too-many-instance-attributes
    """Typed, immutable view of the `[workspaces]` section.

    Built once per configuration load and passed explicitly to the decision
    functions, never mutated by a workspace.
    """

    enable_taskbar: bool = False
    active_window_position: ActiveWindowPosition = ActiveWindowPosition.NONE
    persistent_only: bool = False
    active_only: bool = False
    special_visible_only: bool = False
    deduplicate_windows: bool = False
    ignore_windows: tuple[re.Pattern[str], ...] = ()
    move_to_monitor: bool = False
    show_workspace_number: bool = False
    show_special_workspace_number: bool = False
    special_workspace_icon_scale: float = 0.75
    special_workspace_indicator: str = "◆"
    icon_size: int = 16
    on_click_window: str = ""
    window_separator: str = " "
    format_before: str = "{icon}"
    format_after: str = ""
    format_icons: MappingProxyType[str, str] = field(default_factory=lambda: MappingProxyType({}))
    taskbar_format_before: str = "{title}"
    taskbar_format_after: str = ""
    taskbar_with_icon: bool = True
    taskbar_icon_size: int = 16
    taskbar_reverse_direction: bool = False
    window_rewrite: tuple[WindowRewriteRule, ...] = ()
    window_rewrite_default: str = "{class}"
    persistent_workspaces: tuple[str, ...] = ()
    bar_output: str = ""

    @classmethod
    def from_config(cls, config: Configuration) -> "WorkspacesSettings":
        """Build the settings from a schema-aware configuration section."""
        position = config.get_str("active_window_position", ActiveWindowPosition.NONE.value).lower()
        try:
            active_position = ActiveWindowPosition(position)
        except ValueError:
            config.log.warning("Invalid active_window_position %r, using 'none'", position)
            active_position = ActiveWindowPosition.NONE

        return cls(
            enable_taskbar=config.get_bool("enable_taskbar"),
            active_window_position=active_position,
            persistent_only=config.get_bool("persistent_only"),
            active_only=config.get_bool("active_only"),
            special_visible_only=config.get_bool("special_visible_only"),
            deduplicate_windows=config.get_bool("deduplicate_windows"),
            ignore_windows=_compile_patterns([str(p) for p in config.get_list("ignore_windows")], config.log),
            move_to_monitor=config.get_bool("move_to_monitor"),
            show_workspace_number=config.get_bool("show_workspace_number"),
            show_special_workspace_number=config.get_bool("show_special_workspace_number"),
            special_workspace_icon_scale=config.get_float("special_workspace_icon_scale", 0.75),
            special_workspace_indicator=config.get_str("special_workspace_indicator"),
            icon_size=config.get_int("icon_size", 16),
            on_click_window=config.get_str("on_click_window"),
            window_separator=config.get_str("window_separator"),
            format_before=config.get_str("format_before"),
            format_after=config.get_str("format_after"),
            format_icons=MappingProxyType(config.get_mapping("format_icons")),
            taskbar_format_before=config.get_str("taskbar_format_before"),
            taskbar_format_after=config.get_str("taskbar_format_after"),
            taskbar_with_icon=config.get_bool("taskbar_with_icon", True),
            taskbar_icon_size=config.get_int("taskbar_icon_size", 16),
            taskbar_reverse_direction=config.get_bool("taskbar_reverse_direction"),
            window_rewrite=_compile_rewrite_rules(config.get_mapping("window_rewrite"), config.log),
            window_rewrite_default=config.get_str("window_rewrite_default"),
            persistent_workspaces=tuple(str(name) for name in config.get_list("persistent_workspaces")),
            bar_output=config.get_str("bar_output"),
        )

    @property
    def special_icon_size(self) -> int:
        """Icon size used for special workspace windows."""
        return int(self.icon_size * self.special_workspace_icon_scale)

    def window_repr(self, window_class: str, title: str) -> str:
        """Return the representation of a window, empty when it has none."""
        variables = {"class": window_class, "title": title}
        for rule in self.window_rewrite:
            if rule.matches(window_class, title):
                return apply_variables(rule.template, variables)
        return apply_variables(self.window_rewrite_default, variables)
