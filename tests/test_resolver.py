import asyncio
import ipaddress
import socket

import pytest

from echoping import ResolutionError, resolve


class RecordingLookup:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = []

    async def __call__(self, host):
        self.calls.append(host)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.mark.parametrize("literal", ["192.0.2.7", "2001:db8::7", "::1"])
def test_literal_skips_lookup(literal):
    lookup = RecordingLookup(["203.0.113.1"])
    address = asyncio.run(resolve(literal, lookup=lookup))
    assert address == ipaddress.ip_address(literal)
    assert lookup.calls == []


def test_first_dns_result_wins():
    lookup = RecordingLookup(["2001:db8::1", "198.51.100.2"])
    address = asyncio.run(resolve("example.test", lookup=lookup))
    assert address == ipaddress.IPv6Address("2001:db8::1")
    assert lookup.calls == ["example.test"]


def test_no_addresses_is_resolution_error():
    lookup = RecordingLookup([])
    with pytest.raises(ResolutionError) as excinfo:
        asyncio.run(resolve("nowhere.invalid", lookup=lookup))
    assert excinfo.value.host == "nowhere.invalid"
    assert "Could not resolve host" in str(excinfo.value)


def test_lookup_failure_is_chained():
    cause = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    lookup = RecordingLookup(error=cause)
    with pytest.raises(ResolutionError) as excinfo:
        asyncio.run(resolve("nowhere.invalid", lookup=lookup))
    assert excinfo.value.__cause__ is cause
    assert "DNS resolution failed for nowhere.invalid" in str(excinfo.value)


def canned_getaddrinfo(result=None, error=None):
    calls = []

    def getaddrinfo(host, port, family=0, type=0, proto=0, flags=0):
        calls.append((host, type))
        if error is not None:
            raise error
        return result

    return getaddrinfo, calls


def test_default_lookup_picks_first_getaddrinfo_result(monkeypatch):
    getaddrinfo, calls = canned_getaddrinfo(
        [
            (socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("198.51.100.4", 0)),
            (socket.AF_INET6, socket.SOCK_DGRAM, 17, "", ("2001:db8::4", 0, 0, 0)),
        ]
    )
    monkeypatch.setattr(socket, "getaddrinfo", getaddrinfo)

    address = asyncio.run(resolve("example.test"))

    assert address == ipaddress.IPv4Address("198.51.100.4")
    assert calls == [("example.test", socket.SOCK_DGRAM)]


@pytest.mark.parametrize(
    "error",
    [
        socket.gaierror(socket.EAI_NONAME, "Name or service not known"),
        UnicodeError("encoding with 'idna' codec failed"),
        ValueError("embedded null character"),
    ],
)
def test_default_lookup_errors_become_resolution_error(monkeypatch, error):
    getaddrinfo, _ = canned_getaddrinfo(error=error)
    monkeypatch.setattr(socket, "getaddrinfo", getaddrinfo)

    with pytest.raises(ResolutionError) as excinfo:
        asyncio.run(resolve("example.test"))
    assert excinfo.value.__cause__ is error
    assert excinfo.value.host == "example.test"


@pytest.mark.parametrize("host", ["a..b", "x" * 64 + ".example"])
def test_hostname_failing_idna_encoding_is_resolution_error(host):
    with pytest.raises(ResolutionError) as excinfo:
        asyncio.run(resolve(host))
    assert isinstance(excinfo.value.__cause__, UnicodeError)
