import pytest

from ponghub.port_type import PortType, parse_port_type


@pytest.mark.parametrize(
    ("text", "expected"),
    [("health", PortType.HEALTH), ("api", PortType.API), ("web", PortType.UNKNOWN), ("", PortType.UNKNOWN)],
)
def test_parse_port_type(text, expected):
    assert parse_port_type(text) is expected


def test_is_valid():
    assert PortType.HEALTH.is_valid()
    assert PortType.API.is_valid()
    assert not PortType.UNKNOWN.is_valid()


@pytest.mark.parametrize("kind", list(PortType))
def test_str_round_trip(kind):
    assert parse_port_type(str(kind)) is kind


@pytest.mark.parametrize(("text", "expected"), [("health", "health"), ("api", "api"), ("other", "unknown")])
def test_str_value(text, expected):
    assert str(parse_port_type(text)) == expected