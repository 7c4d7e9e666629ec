from __future__ import annotations

import socket

import pytest

from harness.runtime import probe as probe_module
from harness.runtime.probe import EndpointError, ProbeError, SocketConnectionProbe, parse_endpoint


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        ("127.0.0.1:9000", ("127.0.0.1", 9000)),
        (" localhost :65535", ("localhost", 65535)),
    ],
)
def test_parse_endpoint_accepts_host_port(endpoint, expected):
    assert parse_endpoint(endpoint) == expected


@pytest.mark.parametrize(
    ("endpoint", "message"),
    [
        ("", "empty"),
        (None, "empty"),
        ("localhost", "format"),
        ("a:b:c", "format"),
        (":9000", "host is empty"),
        ("localhost:port", "port is invalid"),
        ("localhost:0", "port is invalid"),
        ("localhost:70000", "port is invalid"),
    ],
)
def test_parse_endpoint_rejects_malformed_values(endpoint, message):
    with pytest.raises(EndpointError, match=message):
        parse_endpoint(endpoint)


def test_probe_succeeds_against_listening_socket():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        port = server.getsockname()[1]

        SocketConnectionProbe(timeout_ms=1000).probe(f"127.0.0.1:{port}")


def test_probe_reports_refused_connection():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as placeholder:
        placeholder.bind(("127.0.0.1", 0))
        port = placeholder.getsockname()[1]

    with pytest.raises(ProbeError, match=f"Failed to connect to 127.0.0.1:{port}"):
        SocketConnectionProbe(timeout_ms=1000).probe(f"127.0.0.1:{port}")


def test_probe_reports_timeout(monkeypatch):
    calls = []

    def fake_create_connection(address, timeout):
        calls.append((address, timeout))
        raise TimeoutError("timed out")

    monkeypatch.setattr(probe_module.socket, "create_connection", fake_create_connection)

    with pytest.raises(ProbeError, match="within 250 ms"):
        SocketConnectionProbe(timeout_ms=250).probe("10.0.0.1:9000")
    assert calls == [(("10.0.0.1", 9000), 0.25)]


def test_probe_rejects_malformed_endpoint_as_probe_error():
    with pytest.raises(ProbeError, match="format"):
        SocketConnectionProbe().probe("no-port")


def test_non_positive_timeout_uses_default():
    assert SocketConnectionProbe(timeout_ms=0).timeout_ms == 3000
