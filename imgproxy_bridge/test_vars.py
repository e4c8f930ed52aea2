import pytest

from imgproxy_bridge.errors import ConfigurationError
from imgproxy_bridge.vars import _parse_header_map, _parse_list, _parse_port


def test_port_defaults_when_unset():
    assert _parse_port("") == 8000


def test_port_is_parsed():
    assert _parse_port("9090") == 9090


@pytest.mark.parametrize("raw", ["abc", "80a", "8000.5", "0", "-1", "70000"])
def test_malformed_port_is_a_configuration_error(raw):
    with pytest.raises(ConfigurationError) as exc_info:
        _parse_port(raw)
    assert "PORT" in str(exc_info.value)


def test_parse_list_skips_blanks():
    assert _parse_list(" a, ,b ,") == ["a", "b"]


def test_parse_header_map():
    assert _parse_header_map("X-Tenant=acme, bad, X-Empty=, Authorization=Basic a=b") == {
        "X-Tenant": "acme",
        "Authorization": "Basic a=b",
    }
