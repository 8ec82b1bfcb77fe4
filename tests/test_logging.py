import logging

from hyprspaces.logging_setup import LogObjects, ScreenLogFormatter, get_logger, is_debug


def make_record(level, msg="hello"):
    return logging.LogRecord("hyprspaces", level, __file__, 1, msg, None, None)


def test_get_logger_shares_handlers():
    log = get_logger("hyprspaces.test_shared")
    assert not log.propagate
    for handler in LogObjects.handlers:
        assert handler in log.handlers

    # asking again doesn't duplicate the handlers
    assert len(get_logger("hyprspaces.test_shared").handlers) == len(log.handlers)


def test_get_logger_level():
    # the test suite runs in debug mode
    assert is_debug()
    assert get_logger("hyprspaces.test_level").level == logging.DEBUG
    assert get_logger("hyprspaces.test_level", logging.ERROR).level == logging.ERROR


def test_screen_formatter(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert ScreenLogFormatter().format(make_record(logging.WARNING)) == "hello"
    assert ScreenLogFormatter(debug=True).format(make_record(logging.INFO)).endswith("hello // test_logging.py:1")


def test_screen_formatter_colors(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("FORCE_COLOR", "1")
    formatter = ScreenLogFormatter()
    assert formatter.format(make_record(logging.ERROR)) == "\x1b[31;2mhello\x1b[0m"
    assert formatter.format(make_record(logging.INFO)) == "hello"
