from hyprspaces.config import Configuration
from hyprspaces.models import ActiveWindowPosition
from hyprspaces.schema import WORKSPACES_CONFIG_SCHEMA, _check_patterns
from hyprspaces.settings import WorkspacesSettings
from hyprspaces.validation import ConfigField, ConfigItems, ConfigValidator, _find_similar_key, format_config_error, validate_section


def test_config_access(test_logger):
    conf = Configuration({"a": 1, "b": "test"}, logger=test_logger)
    assert conf["a"] == 1
    assert conf.get("b") == "test"
    assert conf.get("c", 3) == 3


def test_get_bool(test_logger):
    conf = Configuration(
        {
            "t1": True,
            "t2": "true",
            "t3": "yes",
            "t4": "on",
            "t5": "1",
            "f1": False,
            "f2": "false",
            "f3": "no",
            "f4": "off",
            "f5": "0",
            "invalid": "foo",
            "empty": "",
        },
        logger=test_logger,
    )

    for key in ("t1", "t2", "t3", "t4", "t5"):
        assert conf.get_bool(key) is True
    for key in ("f1", "f2", "f3", "f4", "f5"):
        assert conf.get_bool(key) is False

    # Non-empty unrecognized strings are truthy
    assert conf.get_bool("invalid") is True
    assert conf.get_bool("empty") is False

    assert conf.get_bool("missing", default=True) is True
    assert conf.get_bool("missing", default=False) is False


def test_get_int(test_logger):
    conf = Configuration({"a": 1, "b": "2", "c": "invalid"}, logger=test_logger)
    assert conf.get_int("a") == 1
    assert conf.get_int("b") == 2
    assert conf.get_int("c", default=10) == 10
    assert conf.get_int("missing", default=5) == 5


def test_get_float(test_logger):
    conf = Configuration({"a": 1.5, "b": "2.5", "c": "invalid"}, logger=test_logger)
    assert conf.get_float("a") == 1.5
    assert conf.get_float("b") == 2.5
    assert conf.get_float("c", default=10.0) == 10.0
    assert conf.get_float("missing", default=5.5) == 5.5


def test_get_str(test_logger):
    conf = Configuration({"a": "text", "b": 123}, logger=test_logger)
    assert conf.get_str("a") == "text"
    assert conf.get_str("b") == "123"
    assert conf.get_str("missing", "default") == "default"


def test_get_list_and_mapping(test_logger):
    conf = Configuration({"one": "a", "many": ["a", "b"], "table": {"1": 1}, "bad": "x"}, logger=test_logger)
    assert conf.get_list("one") == ["a"]
    assert conf.get_list("many") == ["a", "b"]
    assert conf.get_list("missing") == []
    assert conf.get_mapping("table") == {"1": "1"}
    assert conf.get_mapping("bad") == {}


def test_schema_defaults(test_logger):
    conf = Configuration({"icon_size": 24}, logger=test_logger, schema=WORKSPACES_CONFIG_SCHEMA)
    assert conf.get_int("icon_size") == 24
    assert conf.get_str("format_before") == "{icon}"
    assert conf.get_str("special_workspace_indicator") == "◆"
    assert conf.get_list("persistent_workspaces") == []
    assert conf.get_mapping("format_icons") == {}


# Validation


def test_config_field_defaults():
    field = ConfigField("test")
    assert field.name == "test"
    assert field.field_type is str
    assert field.required is False
    assert field.default is None
    assert field.description == ""
    assert field.choices is None


def test_find_similar_key():
    known_keys = ["icon_size", "format_icons", "enable_taskbar", "bar_output"]

    assert _find_similar_key("icn_size", known_keys) == "icon_size"
    assert _find_similar_key("format_icon", known_keys) == "format_icons"
    assert _find_similar_key("enable_tasbar", known_keys) == "enable_taskbar"

    assert _find_similar_key("xyz", known_keys) is None


def test_format_config_error():
    msg = format_config_error("workspaces", "icon_size", "Expected int, got str")
    assert "[workspaces]" in msg
    assert "icon_size" in msg
    assert "Expected int, got str" in msg

    msg_with_suggestion = format_config_error("workspaces", "icon_size", "Expected int, got str", "Use icon_size = 42")
    assert "Use icon_size = 42" in msg_with_suggestion


def test_config_validator_required_fields(test_logger):
    schema = ConfigItems(
        ConfigField("command", str, required=True),
        ConfigField("class", str, required=False),
    )

    errors = ConfigValidator({}, "test", test_logger).validate(schema)
    assert len(errors) == 1
    assert "Missing required field" in errors[0]

    assert ConfigValidator({"command": "kitty"}, "test", test_logger).validate(schema) == []


def test_config_validator_type_checking(test_logger):
    schema = ConfigItems(
        ConfigField("count", int),
        ConfigField("factor", float),
        ConfigField("enabled", bool),
        ConfigField("name", str),
        ConfigField("items", list),
        ConfigField("options", dict),
    )

    config = {
        "count": 10,
        "factor": 2.5,
        "enabled": True,
        "name": "test",
        "items": [1, 2, 3],
        "options": {"a": 1},
    }
    assert ConfigValidator(config, "test", test_logger).validate(schema) == []

    config_bad = {
        "count": "not a number",
        "factor": "not a float",
        "enabled": "maybe",
        "name": 123,
        "items": "not a list",
        "options": "not a dict",
    }
    assert len(ConfigValidator(config_bad, "test", test_logger).validate(schema)) == 6


def test_config_validator_numeric_strings(test_logger):
    schema = ConfigItems(ConfigField("count", int), ConfigField("factor", float))
    assert ConfigValidator({"count": "42", "factor": "2.5"}, "test", test_logger).validate(schema) == []


def test_config_validator_union_types(test_logger):
    schema = ConfigItems(ConfigField("setting", (int, str)))
    assert ConfigValidator({"setting": 42}, "test", test_logger).validate(schema) == []
    assert ConfigValidator({"setting": "auto"}, "test", test_logger).validate(schema) == []

    errors = ConfigValidator({"setting": [1, 2]}, "test", test_logger).validate(schema)
    assert len(errors) == 1
    assert "int or str" in errors[0]


def test_workspaces_schema_choices(test_logger):
    validator = ConfigValidator({"active_window_position": "middle"}, "workspaces", test_logger)
    errors = validator.validate(WORKSPACES_CONFIG_SCHEMA)
    assert len(errors) == 1
    assert "middle" in errors[0]
    assert "Valid options" in errors[0]


def test_workspaces_schema_unknown_keys(test_logger):
    config = {"icon_size": 12, "icn_size": 3, "foobar": 1}
    warnings = ConfigValidator(config, "workspaces", test_logger).warn_unknown_keys(WORKSPACES_CONFIG_SCHEMA)

    assert len(warnings) == 2
    assert any("icn_size" in w and "icon_size" in w for w in warnings)
    assert any("foobar" in w for w in warnings)


def test_check_patterns():
    assert _check_patterns(["kitty", "class<firefox.*>", "title<.*YouTube.*>"]) == []

    errors = _check_patterns(["(", "title<[>"])
    assert len(errors) == 2
    assert "'('" in errors[0]
    assert "title<[>" in errors[1]

    # dict keys are checked too
    assert len(_check_patterns({"class<(>": "x", "ok": "y"})) == 1


# Settings


def test_settings_defaults(test_logger):
    settings = WorkspacesSettings.from_config(Configuration({}, logger=test_logger, schema=WORKSPACES_CONFIG_SCHEMA))
    assert settings == WorkspacesSettings()
    assert settings.special_icon_size == 12


def test_settings_from_config(test_logger):
    conf = Configuration(
        {
            "enable_taskbar": "yes",
            "active_window_position": "LAST",
            "ignore_windows": ["Picture-in-Picture", "("],
            "icon_size": "20",
            "special_workspace_icon_scale": 0.5,
            "format_icons": {"active": "", "1": "one"},
            "persistent_workspaces": [1, 2, "mail"],
        },
        logger=test_logger,
        schema=WORKSPACES_CONFIG_SCHEMA,
    )
    settings = WorkspacesSettings.from_config(conf)

    assert settings.enable_taskbar
    assert settings.active_window_position == ActiveWindowPosition.LAST
    assert [p.pattern for p in settings.ignore_windows] == ["Picture-in-Picture"]
    assert settings.icon_size == 20
    assert settings.special_icon_size == 10
    assert dict(settings.format_icons) == {"active": "", "1": "one"}
    assert settings.persistent_workspaces == ("1", "2", "mail")


def test_settings_invalid_position(test_logger):
    conf = Configuration({"active_window_position": "middle"}, logger=test_logger, schema=WORKSPACES_CONFIG_SCHEMA)
    assert WorkspacesSettings.from_config(conf).active_window_position == ActiveWindowPosition.NONE


def test_window_rewrite(test_logger):
    conf = Configuration(
        {
            "window_rewrite": {
                "title<.*YouTube.*>": "yt",
                "class<firefox>": "web {title}",
                "kitty": "term",
                "class<(>": "broken",
            },
            "window_rewrite_default": "?{class}",
        },
        logger=test_logger,
        schema=WORKSPACES_CONFIG_SCHEMA,
    )
    settings = WorkspacesSettings.from_config(conf)

    assert len(settings.window_rewrite) == 3
    assert settings.window_rewrite[0].selector == "title"
    assert settings.window_rewrite[2].selector == "class"
    # first matching rule wins
    assert settings.window_repr("firefox", "Funny cats - YouTube") == "yt"
    assert settings.window_repr("firefox", "News") == "web News"
    assert settings.window_repr("kitty", "~") == "term"
    assert settings.window_repr("code", "main.py") == "?code"




def test_validate_section(test_logger):
    section = {"icon_size": "big", "enable_taskbar": True, "icn_size": 3}
    report = validate_section(section, "workspaces", WORKSPACES_CONFIG_SCHEMA, test_logger)

    assert len(report.errors) == 1
    assert len(report.warnings) == 1
    assert report.invalid_fields == {"icon_size"}
    assert report.valid_options(section) == {"enable_taskbar": True, "icn_size": 3}
