"""Schema of a configuration section and its validation.

`ConfigField` declares one option (type, default, allowed values, extra
checks). `validate_section` checks a whole section and tells which options
must fall back to their default; it is shared by
`WorkspacesManager.apply_config()` and the `hyprspaces validate` command.
"""

import difflib
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "ValidationReport",
    "format_config_error",
    "validate_section",
]


@dataclass
class ConfigField:
    """An expected option.

    Attributes:
        name: The option name
        field_type: Expected type, or a tuple of accepted types
        required: Whether the option must be set
        default: Value used when the option is missing or invalid
        description: Human-readable description
        choices: Valid values, for enum-like options
        validator: Extra check, returning error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    required: bool = False
    default: Any = None
    description: str = ""
    choices: list | None = None
    validator: Callable[[Any], list[str]] | None = None

    @property
    def type_name(self) -> str:
        """Eg: "int", "int or str"."""
        types = self.field_type if isinstance(self.field_type, tuple) else (self.field_type,)
        return " or ".join(typ.__name__ for typ in types)


class ConfigItems(list):
    """The fields of a section, in declaration order."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)
        self._by_name = {item.name: item for item in args}

    def get(self, name: str) -> ConfigField | None:
        """Return the field called `name`, None if unknown."""
        return self._by_name.get(name)

    @property
    def names(self) -> list[str]:
        """The field names."""
        return list(self._by_name)


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    return matches[0] if matches else None


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Return "[section] Config error for 'field': message -> suggestion"."""
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


def _is_bool(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, bool) or (isinstance(value, str) and value.lower() in BOOL_STRINGS)


def _is_number(kind: type) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:  # noqa: ANN401
        if isinstance(value, bool):
            return False
        if isinstance(value, int | float):
            return True
        try:
            kind(value)
        except (ValueError, TypeError):
            return False
        return True

    return check


_TYPE_CHECKS: dict[type, Callable[[Any], bool]] = {
    bool: _is_bool,
    int: _is_number(int),
    float: _is_number(float),
    str: lambda value: isinstance(value, str),
    list: lambda value: isinstance(value, list),
    dict: lambda value: isinstance(value, dict),
}

_TYPE_HINTS: dict[type, str] = {
    bool: "Use true/false (without quotes)",
    int: "Use {name} = 42 (without quotes)",
    float: "Use {name} = 0.5 (without quotes)",
    str: 'Use {name} = "value"',
    list: 'Use {name} = ["item1", "item2"]',
}


class ConfigValidator:
    """Checks a configuration section against a schema."""

    def __init__(self, config: Mapping[str, Any], section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            config: The section content
            section: Section name, used in the messages
            logger: Receives the unknown keys warnings
        """
        self.config = config
        self.section = section
        self.log = logger

    def check_field(self, field_def: ConfigField) -> list[str]:
        """Return the errors of one option (none when it is not set and not required)."""
        value = self.config.get(field_def.name)
        if value is None:
            if field_def.required:
                return [format_config_error(self.section, field_def.name, "Missing required field")]
            return []

        type_error = self._check_type(field_def, value)
        if type_error:
            return [type_error]

        errors = []
        if field_def.choices is not None and field_def.validator is None and value not in field_def.choices:
            choices_str = ", ".join(repr(c) for c in field_def.choices)
            errors.append(format_config_error(self.section, field_def.name, f"Invalid value {value!r}", f"Valid options: {choices_str}"))
        if field_def.validator:
            errors.extend(format_config_error(self.section, field_def.name, message) for message in field_def.validator(value))
        return errors

    def validate(self, schema: ConfigItems) -> list[str]:
        """Return the error messages of every option."""
        return [error for field_def in schema for error in self.check_field(field_def)]

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        types = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if any(_TYPE_CHECKS.get(kind, lambda _: True)(value) for kind in types):
            return None
        hint = _TYPE_HINTS.get(types[0], "") if len(types) == 1 else ""
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
            hint.format(name=field_def.name),
        )

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log and return a warning for each key the schema doesn't know."""
        warnings = []
        for key in self.config:
            if schema.get(key) is not None:
                continue
            similar = _find_similar_key(key, schema.names)
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"
            self.log.warning(msg)
            warnings.append(msg)
        return warnings


@dataclass
class ValidationReport:
    """Outcome of `validate_section`."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    invalid_fields: set[str] = field(default_factory=set)

    def valid_options(self, config: Mapping[str, Any]) -> dict[str, Any]:
        """Return `config` without the invalid options, so they use their default."""
        return {key: value for key, value in config.items() if key not in self.invalid_fields}


def validate_section(config: Mapping[str, Any], section: str, schema: ConfigItems, logger: logging.Logger) -> ValidationReport:
    """Check every option of a section and look for unknown keys."""
    validator = ConfigValidator(config, section, logger)
    report = ValidationReport()
    for field_def in schema:
        field_errors = validator.check_field(field_def)
        if field_errors:
            report.invalid_fields.add(field_def.name)
            report.errors.extend(field_errors)
    report.warnings = validator.warn_unknown_keys(schema)
    return report
