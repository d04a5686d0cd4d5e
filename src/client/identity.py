"""Resolution of the caller name sent as the key authentication domain."""

import os
import platform
import socket
from typing import Callable

HostIdentity = Callable[[], str]

FALLBACK_DOMAIN = "localhost"


def default_host_identity() -> str:
    """Return the request-context server name if one is set, else the local hostname."""
    server_name = os.environ.get("SERVER_NAME", "").strip()
    if server_name:
        return server_name
    try:
        hostname = socket.gethostname()
    except OSError:
        hostname = ""
    return hostname or platform.node() or FALLBACK_DOMAIN


def static_identity(name: str) -> HostIdentity:
    """Return a provider that always answers ``name``."""
    def _identity() -> str:
        return name
    return _identity
