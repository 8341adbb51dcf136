import pytest

from portfolio_proxy.exceptions import InputValidationError
from portfolio_proxy.services import is_public_host, validate_public_host


@pytest.mark.parametrize(
    "host",
    [
        "localhost",
        "LOCALHOST.",
        "api.localhost",
        "127.0.0.1",
        "127.10.0.3",
        "10.0.0.1",
        "192.168.1.5",
        "172.16.0.1",
        "172.31.255.255",
        "169.254.169.254",
        "0.0.0.0",
        "::1",
        "[::1]",
        "fd00::1",
    ],
)
def test_private_hosts(host):
    assert is_public_host(host) is False


@pytest.mark.parametrize(
    "host",
    ["example.com", "www.example.com", "8.8.8.8", "172.15.0.1", "172.32.0.1", "2606:4700::1111"],
)
def test_public_hosts(host):
    assert is_public_host(host) is True


def test_validate_normalizes_host():
    assert validate_public_host("  Example.COM. ") == "example.com"


@pytest.mark.parametrize("host", [None, "", "   "])
def test_validate_missing_host(host):
    with pytest.raises(InputValidationError, match="Missing host parameter"):
        validate_public_host(host)


def test_validate_private_host():
    with pytest.raises(InputValidationError, match="only supports public domains"):
        validate_public_host("192.168.0.10")
