"""Typed access to a configuration section, with the schema defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    import logging

    from .validation import ConfigItems

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_STRINGS", "BOOL_TRUE_STRINGS", "Configuration", "coerce_to_bool"]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Read a loosely typed boolean.

    None gives `default`, blank strings and the strings of BOOL_FALSE_STRINGS
    are false, any other string is true.
    """
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        return bool(text) and text not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """One section of the configuration file.

    Missing keys fall back to the schema defaults, then to the default given
    to the getter. Values which can't be converted are logged and replaced by
    the default.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        super().__init__(*args, **kwargs)
        self.log = logger
        self._defaults: dict[str, ConfigValueType] = {}
        if schema:
            self._defaults = {field.name: field.default for field in schema if field.default is not None}

    @overload
    def get(self, name: str) -> ConfigValueType | None: ...

    @overload
    def get(self, name: str, default: ConfigValueType) -> ConfigValueType: ...

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:
        """Return the value of `name`, the schema default or `default`, in this order."""
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        return self._defaults.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean ("yes", "off"... are accepted)."""
        return coerce_to_bool(self.get(name), default)

    def _get_number(self, name: str, convert: type[int] | type[float], default: float) -> Any:  # noqa: ANN401
        value = self.get(name)
        if value is None:
            return default
        try:
            return convert(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid %s value for %s: %r", convert.__name__, name, value)
            return default

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer, numeric strings are accepted."""
        return int(self._get_number(name, int, default))

    def get_float(self, name: str, default: float = 0.0) -> float:
        """Get a float, numeric strings are accepted."""
        return float(self._get_number(name, float, default))

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string, other scalars are converted."""
        value = self.get(name)
        return default if value is None else str(value)

    def get_list(self, name: str) -> list[Any]:
        """Get a list, a single value is wrapped in a list."""
        value = self.get(name)
        if value is None:
            return []
        return list(value) if isinstance(value, list) else [value]

    def get_mapping(self, name: str) -> dict[str, str]:
        """Get a table whose keys and values are read as strings."""
        value = self.get(name)
        if not isinstance(value, dict):
            if value is not None:
                self.log.warning("Invalid table for %s: %r", name, value)
            return {}
        return {str(k): str(v) for k, v in value.items()}
