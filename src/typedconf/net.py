"""
Socket address parsing used by the socket-address accessor.
"""

from typing import NamedTuple
from urllib.parse import urlsplit


class SocketAddress(NamedTuple):
    """A (host, port) pair accepted by ``socket.bind`` and ``socket.connect``."""
    host: str
    port: int

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


def create_socket_address(target: str, default_port: int = -1) -> SocketAddress:
    """
    Create a socket address from ``host:port``, ``[v6addr]:port`` or a URI.

    Host names are not resolved here; the socket layer resolves them at
    bind/connect time.

    Args:
        target: Address text
        default_port: Port used when the target has none, -1 for no default

    Raises:
        ValueError: If the target has no host or no valid port
    """
    if target is None:
        raise ValueError("Target address cannot be None")

    text = target.strip()
    has_scheme = "://" in text
    parts = urlsplit(text if has_scheme else f"dummyscheme://{text}")

    host = parts.hostname
    port = parts.port if parts.port is not None else default_port
    if not host or port < 0 or (not has_scheme and parts.path):
        raise ValueError(f"Does not contain a valid host:port authority: {target}")

    return SocketAddress(host, port)
