from __future__ import annotations

import logging
import socket

DEFAULT_TIMEOUT_MS = 3000

logger = logging.getLogger("maze_harness.probe")


class EndpointError(ValueError):
    pass


class ProbeError(ConnectionError):
    pass


def parse_endpoint(endpoint: str | None) -> tuple[str, int]:
    """Split a '<host>:<port>' brain endpoint."""
    if endpoint is None or not endpoint.strip():
        raise EndpointError("socketAddress is empty.")

    parts = endpoint.split(":")
    if len(parts) != 2:
        raise EndpointError("socketAddress must be in '<host>:<port>' format.")

    host = parts[0].strip()
    if not host:
        raise EndpointError("socketAddress host is empty.")

    try:
        port = int(parts[1])
    except ValueError as exc:
        raise EndpointError("socketAddress port is invalid.") from exc
    if not 0 < port <= 65535:
        raise EndpointError("socketAddress port is invalid.")

    return host, port


class SocketConnectionProbe:
    """Pre-run TCP reachability check of the brain endpoint."""

    def __init__(self, *, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms if timeout_ms > 0 else DEFAULT_TIMEOUT_MS

    def probe(self, endpoint: str) -> None:
        try:
            host, port = parse_endpoint(endpoint)
        except EndpointError as exc:
            raise ProbeError(str(exc)) from exc

        try:
            with socket.create_connection((host, port), timeout=self.timeout_ms / 1000):
                pass
        except TimeoutError as exc:
            raise ProbeError(
                f"Failed to connect to {host}:{port} within {self.timeout_ms} ms."
            ) from exc
        except OSError as exc:
            raise ProbeError(f"Failed to connect to {host}:{port}. {exc}") from exc

        logger.debug("Brain endpoint %s:%s is reachable", host, port)
