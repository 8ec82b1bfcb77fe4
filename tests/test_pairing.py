import pytest

from hyprspaces.pairing import PairingResolver, extract_special_number, to_superscript

from .testtools import make_workspace


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("special:sp12", 12),
        ("sp7", 7),
        ("42", 42),
        ("special:3", 3),
        ("abc", 0),
        ("special:", 0),
        ("", 0),
        ("3a", 0),
        ("1_000", 0),
        ("٣", 0),
        ("sp٣", 0),
    ],
)
def test_extract_special_number(name, expected):
    assert extract_special_number(name) == expected


def test_to_superscript():
    assert to_superscript(12) == "¹²"
    assert to_superscript(0) == "⁰"


@pytest.fixture
def workspaces():
    return [
        make_workspace(1),
        make_workspace(3),
        make_workspace(-97, "special:sp3", windows=1),
        make_workspace(-98, "special:scratch", windows=1),
        make_workspace(-99, "special:special", windows=1),
    ]


def test_recompute(workspaces):
    resolver = PairingResolver()
    resolver.recompute(workspaces)

    assert 3 in resolver
    assert 1 not in resolver
    assert resolver.paired_special(3) == "sp3"
    assert resolver.paired_special(1) is None


def test_first_special_wins():
    regular = make_workspace(3)
    first = make_workspace(-97, "special:sp3")
    second = make_workspace(-96, "special:3")

    resolver = PairingResolver()
    resolver.recompute([regular, first, second])
    assert resolver.paired_special(3) == "sp3"

    resolver.recompute([regular, second, first])
    assert resolver.paired_special(3) == "3"


def test_no_regular_workspace():
    resolver = PairingResolver()
    resolver.recompute([make_workspace(-95, "special:sp5", windows=1)])
    assert 5 not in resolver


def test_destroyed_special_drops_pairing(workspaces):
    resolver = PairingResolver()
    resolver.recompute(workspaces)
    assert 3 in resolver

    resolver.recompute([ws for ws in workspaces if ws.name != "sp3"])
    assert 3 not in resolver
    assert resolver.paired_special(3) is None
